from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QHBoxLayout, QLabel, QLineEdit, QToolButton, QWidget

from modules.management.mappers import VARIANT_COLORS, alert_title

_ALERT_VARIANTS = {
    "success": "success",
    "error": "danger",
    "warning": "warning",
    "info": "info",
}


class SearchLineEdit(QLineEdit):
    """Line edit with placeholder and Ctrl+F focus shortcut for search/filter."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setPlaceholderText("Search…")
        self.setClearButtonEnabled(True)
        self._shortcut = QShortcut(QKeySequence.Find, parent or self)
        self._shortcut.activated.connect(self.setFocus)


class AlertBanner(QWidget):
    """Dismissable one-line message shown above the table."""

    closed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 4, 4)
        self.label = QLabel()
        self.label.setWordWrap(True)
        self.label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        layout.addWidget(self.label, 1)
        self.close_button = QToolButton()
        self.close_button.setText("×")
        self.close_button.setAutoRaise(True)
        self.close_button.clicked.connect(self.dismiss)
        layout.addWidget(self.close_button)
        self.alert_type = ""
        self.hide()

    def show_message(self, alert_type: str, message: str) -> None:
        self.alert_type = alert_type
        color = VARIANT_COLORS.get(_ALERT_VARIANTS.get(alert_type, "secondary"), VARIANT_COLORS["secondary"])
        self.label.setText(f"<b>{alert_title(alert_type)}</b>: {message}")
        self.setStyleSheet(f"color: {color}; border: 1px solid {color}; border-radius: 3px;")
        self.show()

    def dismiss(self) -> None:
        self.alert_type = ""
        self.label.clear()
        self.hide()
        self.closed.emit()
