from __future__ import annotations

from typing import Any, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtGui import QColor

from models.records import Record
from modules.management.kinds import ColumnSpec
from modules.management.mappers import VARIANT_COLORS, cell_display
from modules.management.table_engine import ASC


class RecordTableModel(QAbstractTableModel):
    """Table model over the visible page of records.

    The model holds whatever rows the table engine hands it; it never sorts
    or filters on its own.
    """

    RecordRole = Qt.UserRole + 1

    def __init__(self, columns: Sequence[ColumnSpec] = (), parent=None):
        super().__init__(parent)
        self._columns: list[ColumnSpec] = list(columns)
        self._rows: list[Record] = []
        self._sort_column: Optional[str] = None
        self._sort_direction = ASC

    # Qt model interface -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # pragma: no cover - trivial
        return 0 if parent and parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex | None = None) -> int:  # pragma: no cover - trivial
        return 0 if parent and parent.isValid() else len(self._columns)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        record = self._rows[index.row()]
        if role == self.RecordRole:
            return record
        column = self._columns[index.column()]
        text, badge = cell_display(record, column.key)
        if role in (Qt.DisplayRole, Qt.EditRole):
            return text
        if role == Qt.ForegroundRole and badge is not None:
            return QColor(VARIANT_COLORS.get(badge.variant, VARIANT_COLORS["secondary"]))
        if role == Qt.TextAlignmentRole and column.key in ("id", "views"):
            return Qt.AlignRight | Qt.AlignVCenter
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            column = self._columns[section]
            if column.key == self._sort_column:
                arrow = "↑" if self._sort_direction == ASC else "↓"
                return f"{column.header} {arrow}"
            return column.header
        return None

    # helpers ------------------------------------------------------------
    @property
    def columns(self) -> list[ColumnSpec]:
        return list(self._columns)

    def set_columns(self, columns: Sequence[ColumnSpec]) -> None:
        self.beginResetModel()
        self._columns = list(columns)
        self._rows = []
        self._sort_column = None
        self._sort_direction = ASC
        self.endResetModel()

    def set_rows(self, rows: Sequence[Record]) -> None:
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def set_sort_indicator(self, column: Optional[str], direction: str) -> None:
        self._sort_column = column
        self._sort_direction = direction
        if self._columns:
            self.headerDataChanged.emit(Qt.Horizontal, 0, len(self._columns) - 1)

    def row(self, index: int) -> Record:
        return self._rows[index]

    def column_key(self, section: int) -> str:
        return self._columns[section].key
