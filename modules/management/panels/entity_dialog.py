from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QVBoxLayout,
    QWidget,
)

from models.records import PostRecord, Record, RecordKind
from modules.management.form_binder import FormBinder
from modules.management.kinds import profile_for


class EntityDialog(QDialog):
    """Create/edit form for one record.

    The dialog does not persist anything itself: Save emits ``submitted``
    with the serialized form and the owner calls :meth:`finish` on success
    or :meth:`show_error` on failure, in which case the input is kept so the
    user can retry.
    """

    submitted = Signal(dict)

    def __init__(self, kind: RecordKind, record: Optional[Record] = None, parent: QWidget | None = None):
        super().__init__(parent)
        self._profile = profile_for(kind)
        self._binder = FormBinder(kind)
        self._record = record
        self._widgets: dict[str, QWidget] = {}

        if record is None:
            self.setWindowTitle(f"New {self._profile.label.lower()}")
        else:
            self.setWindowTitle(f"Edit {self._profile.label.lower()}")
        self.setModal(True)
        self._build_ui()

        if record is None:
            self._write_widgets(self._binder.reset())
        else:
            self._write_widgets(self._binder.populate(record))

    # ------------------------------------------------------------------ UI
    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        self.info_label = QLabel()
        if self._record is not None:
            info = f"ID: {self._record.id} | Created: {self._record.created_at}"
            if isinstance(self._record, PostRecord):
                info += f" | Views: {self._record.views or 0:,}"
            self.info_label.setText(info)
        else:
            self.info_label.hide()
        layout.addWidget(self.info_label)

        form = QFormLayout()
        for name in self._profile.form_fields:
            widget = self._make_widget(name)
            self._widgets[name] = widget
            label = self._profile.field_labels.get(name, name)
            if self._binder.is_required(name):
                label += " *"
            form.addRow(label, widget)
        layout.addLayout(form)

        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #b91c1c;")
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self._on_submit)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

    def _make_widget(self, name: str) -> QWidget:
        choices = self._profile.choices.get(name)
        if choices:
            combo = QComboBox()
            for value, label in choices:
                combo.addItem(label, value)
            return combo
        if name in self._profile.multiline:
            edit = QPlainTextEdit()
            edit.setMinimumHeight(120)
            return edit
        edit = QLineEdit()
        edit.setPlaceholderText(f"Enter {self._profile.field_labels.get(name, name).lower()}")
        return edit

    # ------------------------------------------------------------------ binding
    def _write_widgets(self, state: dict[str, str]) -> None:
        for name, value in state.items():
            widget = self._widgets[name]
            if isinstance(widget, QComboBox):
                idx = widget.findData(value)
                if idx < 0:
                    # Unknown server value: keep it selectable instead of dropping it.
                    widget.addItem(value, value)
                    idx = widget.count() - 1
                widget.setCurrentIndex(idx)
            elif isinstance(widget, QPlainTextEdit):
                widget.setPlainText(value)
            else:
                widget.setText(value)

    def _read_widgets(self) -> None:
        for name, widget in self._widgets.items():
            if isinstance(widget, QComboBox):
                self._binder.set(name, widget.currentData())
            elif isinstance(widget, QPlainTextEdit):
                self._binder.set(name, widget.toPlainText())
            else:
                self._binder.set(name, widget.text())

    @property
    def binder(self) -> FormBinder:
        return self._binder

    @property
    def record(self) -> Optional[Record]:
        return self._record

    def form_state(self) -> dict[str, str]:
        self._read_widgets()
        return self._binder.state

    # ------------------------------------------------------------------ actions
    def _on_submit(self) -> None:
        self._read_widgets()
        self.error_label.hide()
        self.set_busy(True)
        self.submitted.emit(self._binder.serialize())

    def set_busy(self, busy: bool) -> None:
        self.buttons.button(QDialogButtonBox.Save).setEnabled(not busy)

    def show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()
        self.set_busy(False)

    def finish(self) -> None:
        self._binder.reset()
        self.accept()

    def reject(self) -> None:
        self._binder.reset()
        super().reject()
