from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMessageBox,
    QPushButton,
    QTabBar,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from models.records import Record, RecordKind
from modules.management.context import EntityContext
from modules.management.kinds import profile_for
from modules.management.panels.entity_dialog import EntityDialog
from modules.management.panels.table_model import RecordTableModel
from modules.management.panels.widgets import AlertBanner, SearchLineEdit
from modules.management.stats import compute_stats
from modules.management.table_engine import TableEngine
from modules.management.workflow import ACTION_DONE, ACTION_LABELS, PostAction, available_actions
from services.entity_manager import CollectionState, EntityManager
from services.errors import error_message

logger = logging.getLogger(__name__)

_TAB_KINDS = (RecordKind.POST, RecordKind.USER)


class ManagementPanel(QWidget):
    """Users/posts management view: tabs, stats, searchable table, pager.

    All persistence goes through the context's :class:`EntityManager`; the
    panel only renders ``manager.state`` through a :class:`TableEngine` and
    schedules the manager's coroutines on the running asyncio loop.
    """

    def __init__(self, context: EntityContext, *, page_size: int = 10, parent: QWidget | None = None):
        super().__init__(parent)
        self._context = context
        self._page_size = page_size
        self._manager: Optional[EntityManager] = None
        self._engine = TableEngine(page_size=page_size)
        self._dialog: Optional[EntityDialog] = None
        self._closed = False

        self._build_ui()
        self._attach(context.manager)

    # ------------------------------------------------------------------ UI
    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)

        title = QLabel("<h2>Management</h2>")
        layout.addWidget(title)
        subtitle = QLabel("Manage users and posts")
        subtitle.setStyleSheet("color: #6b7280;")
        layout.addWidget(subtitle)

        top = QHBoxLayout()
        self.tabs = QTabBar()
        for kind in _TAB_KINDS:
            self.tabs.addTab(profile_for(kind).plural)
        self.tabs.setCurrentIndex(_TAB_KINDS.index(self._context.kind))
        self.tabs.currentChanged.connect(self._on_tab_changed)
        top.addWidget(self.tabs)
        top.addStretch(1)
        self.new_button = QPushButton("New")
        self.new_button.clicked.connect(self._on_new)
        top.addWidget(self.new_button)
        layout.addLayout(top)

        self.banner = AlertBanner(self)
        layout.addWidget(self.banner)

        self.stats_layout = QHBoxLayout()
        layout.addLayout(self.stats_layout)

        self.search = SearchLineEdit(self)
        self.search.textChanged.connect(self._on_search)
        layout.addWidget(self.search)

        self.model = RecordTableModel(parent=self)
        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionsClickable(True)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        self.table.doubleClicked.connect(self._on_double_clicked)
        layout.addWidget(self.table, 1)

        pager = QHBoxLayout()
        pager.addStretch(1)
        self.prev_button = QPushButton("Previous")
        self.prev_button.clicked.connect(self._on_previous)
        pager.addWidget(self.prev_button)
        self.page_label = QLabel("1 / 1")
        self.page_label.setAlignment(Qt.AlignCenter)
        pager.addWidget(self.page_label)
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(self._on_next)
        pager.addWidget(self.next_button)
        pager.addStretch(1)
        layout.addLayout(pager)

    # ------------------------------------------------------------------ manager wiring
    @property
    def manager(self) -> EntityManager:
        assert self._manager is not None
        return self._manager

    @property
    def engine(self) -> TableEngine:
        return self._engine

    def _attach(self, manager: EntityManager) -> None:
        if self._manager is not None:
            self._manager.unsubscribe(self._on_state)
        self._manager = manager
        manager.subscribe(self._on_state)
        self._engine = TableEngine(page_size=self._page_size)
        self.search.blockSignals(True)
        self.search.clear()
        self.search.blockSignals(False)
        self.model.set_columns(profile_for(manager.kind).columns)
        self.refresh_view()

    def _on_state(self, state: CollectionState) -> None:
        if not self._closed:
            self.refresh_view()

    def refresh_view(self) -> None:
        """Re-derive the visible page, stats and control states from the manager."""

        state = self.manager.state
        self._engine.set_items(state.items)
        self.model.set_sort_indicator(self._engine.sort_column, self._engine.sort_direction)
        self.model.set_rows(self._engine.visible_rows)
        self._install_row_actions(state.loading)
        self._render_stats(state)

        self.page_label.setText(self._engine.page_label)
        for widget in (self.prev_button, self.page_label, self.next_button):
            widget.setVisible(self._engine.has_pager)
        self.prev_button.setEnabled(not state.loading and self._engine.current_page > 1)
        self.next_button.setEnabled(not state.loading and self._engine.current_page < self._engine.page_count)
        self.new_button.setEnabled(not state.loading)
        self.tabs.setEnabled(not state.loading)

    def _render_stats(self, state: CollectionState) -> None:
        while self.stats_layout.count():
            item = self.stats_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        stats = compute_stats(state.kind, state.items)
        self.stats_layout.addWidget(QLabel(f"<b>Total</b><br>{stats.total:,}"))
        for entry in stats.entries:
            self.stats_layout.addWidget(QLabel(f"<b>{entry.label}</b><br>{entry.value:,}"))
        self.stats_layout.addStretch(1)

    def _install_row_actions(self, loading: bool) -> None:
        columns = self.model.columns
        keys = [c.key for c in columns]
        if "actions" not in keys:
            return
        section = keys.index("actions")
        for row in range(self.model.rowCount()):
            record = self.model.row(row)
            cell = QWidget()
            hl = QHBoxLayout(cell)
            hl.setContentsMargins(2, 0, 2, 0)
            for label, handler in self._row_actions(record):
                button = QPushButton(label)
                button.setEnabled(not loading)
                button.clicked.connect(lambda _checked=False, h=handler, r=record: h(r))
                hl.addWidget(button)
            self.table.setIndexWidget(self.model.index(row, section), cell)

    def _row_actions(self, record: Record) -> list[tuple[str, Callable[[Record], None]]]:
        actions: list[tuple[str, Callable[[Record], None]]] = [("Edit", self.open_edit)]
        if profile_for(self.manager.kind).supports_workflow:
            for action in available_actions(record.status):
                actions.append((ACTION_LABELS[action], partial(self.run_transition, action=action)))
        actions.append(("Delete", self.delete_record))
        return actions

    # ------------------------------------------------------------------ async plumbing
    def start(self) -> asyncio.Future:
        """Load the active collection (needs a running asyncio loop)."""

        return self._schedule(self.manager.load())

    def _schedule(
        self,
        coro: Awaitable[Any],
        *,
        success_message: Optional[str] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ) -> asyncio.Future:
        task = asyncio.ensure_future(coro)
        task.add_done_callback(
            partial(
                self._on_task_done,
                manager=self._manager,
                success_message=success_message,
                on_success=on_success,
                on_error=on_error,
            )
        )
        return task

    def _on_task_done(
        self,
        task: asyncio.Future,
        *,
        manager: Optional[EntityManager],
        success_message: Optional[str],
        on_success: Optional[Callable[[Any], None]],
        on_error: Optional[Callable[[str], None]],
    ) -> None:
        if self._closed or task.cancelled():
            return
        # Banners belong to the tab that started the operation.
        current = manager is self._manager
        exc = task.exception()
        if exc is not None:
            message = error_message(exc)
            logger.warning("[management] operation failed: %s", message)
            if current:
                self.show_alert("error", message)
            if on_error is not None:
                on_error(message)
            return
        result = task.result()
        if on_success is not None:
            on_success(result)
        if current and success_message and result is not False:
            self.show_alert("success", success_message)

    def show_alert(self, alert_type: str, message: str) -> None:
        self.banner.show_message(alert_type, message)

    # ------------------------------------------------------------------ actions
    def _on_tab_changed(self, index: int) -> None:
        kind = _TAB_KINDS[index]
        if kind is self.manager.kind:
            return
        self.banner.dismiss()
        self._attach(self._context.select_kind(kind))
        self.start()

    def _on_search(self, text: str) -> None:
        self._engine.set_search(text)
        self.refresh_view()

    def _on_header_clicked(self, section: int) -> None:
        column = self.model.columns[section]
        if not column.sortable:
            return
        self._engine.toggle_sort(column.key)
        self.refresh_view()

    def _on_previous(self) -> None:
        self._engine.previous_page()
        self.refresh_view()

    def _on_next(self) -> None:
        self._engine.next_page()
        self.refresh_view()

    def _on_double_clicked(self, index) -> None:
        if index.isValid() and not self.manager.loading:
            self.open_edit(self.model.row(index.row()))

    def _on_new(self) -> None:
        self._open_dialog(None)

    def open_edit(self, record: Record) -> None:
        self._open_dialog(record)

    def _open_dialog(self, record: Optional[Record]) -> None:
        dialog = EntityDialog(self.manager.kind, record, self)
        dialog.submitted.connect(lambda fields, d=dialog: self._on_dialog_submitted(d, fields))
        self._dialog = dialog
        dialog.open()

    def _on_dialog_submitted(self, dialog: EntityDialog, fields: dict) -> None:
        label = profile_for(self.manager.kind).label
        if dialog.record is None:
            coro = self.manager.create(fields)
            message = f"{label} created"
        else:
            coro = self.manager.update(dialog.record.id, fields)
            message = f"{label} updated"
        self._schedule(
            coro,
            success_message=message,
            on_success=lambda _result: dialog.finish(),
            on_error=dialog.show_error,
        )

    def delete_record(self, record: Record) -> None:
        label = profile_for(self.manager.kind).label.lower()
        answer = QMessageBox.question(
            self,
            "Delete",
            f"Delete {label} #{record.id}? This cannot be undone.",
        )
        accepted = answer == QMessageBox.StandardButton.Yes
        self._schedule(
            self.manager.delete(record.id, lambda: accepted),
            success_message=f"{profile_for(self.manager.kind).label} deleted",
        )

    def run_transition(self, record: Record, action: PostAction) -> None:
        self._schedule(
            self.manager.transition(record.id, action),
            success_message=f"Post {ACTION_DONE[action]}",
        )

    def closeEvent(self, event):  # pragma: no cover - requires GUI
        self._closed = True
        self._context.close()
        super().closeEvent(event)
