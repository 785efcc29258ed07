from __future__ import annotations

import asyncio
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QApplication, QDialogButtonBox, QMessageBox, QPushButton
except ImportError as exc:  # pragma: no cover - environment-specific
    pytest.skip(f"PySide6 unavailable: {exc}", allow_module_level=True)

from models.records import PostRecord, PostStatus, RecordKind  # noqa: E402
from modules.management.context import EntityContext  # noqa: E402
from modules.management.form_binder import defaults_for  # noqa: E402
from modules.management.kinds import POST_PROFILE  # noqa: E402
from modules.management.panels import management_panel as mp  # noqa: E402
from modules.management.panels.entity_dialog import EntityDialog  # noqa: E402
from modules.management.panels.table_model import RecordTableModel  # noqa: E402
from services.errors import RemoteError  # noqa: E402
from tests.fakes import FakeAdapter, make_posts, make_users  # noqa: E402


def _ensure_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def adapters():
    return {
        RecordKind.POST: FakeAdapter(RecordKind.POST, make_posts()),
        RecordKind.USER: FakeAdapter(RecordKind.USER, make_users()),
    }


@pytest.fixture
def panel(adapters, monkeypatch):
    _ensure_app()
    context = EntityContext(adapters.__getitem__)
    asyncio.run(context.manager.load())
    widget = mp.ManagementPanel(context, page_size=2)
    scheduled = []

    def capture(coro, **kwargs):
        scheduled.append((coro, kwargs))

    monkeypatch.setattr(widget, "_schedule", capture)
    widget.scheduled = scheduled
    yield widget
    for coro, _ in scheduled:
        coro.close()
    widget.deleteLater()


def _visible_ids(panel) -> list[int]:
    return [panel.model.row(i).id for i in range(panel.model.rowCount())]


def _column(panel, key: str) -> int:
    return [c.key for c in panel.model.columns].index(key)


def test_table_model_renders_badges_and_numbers():
    _ensure_app()
    model = RecordTableModel(POST_PROFILE.columns)
    model.set_rows(make_posts())

    status = model.index(0, 4)
    views = model.index(3, 5)
    assert model.data(status, Qt.DisplayRole) == "Draft"
    assert model.data(status, Qt.ForegroundRole) is not None
    assert model.data(views, Qt.DisplayRole) == "1,200"
    assert model.data(views, Qt.ForegroundRole) is None
    assert model.data(model.index(1, 0), RecordTableModel.RecordRole).id == 2


def test_table_model_header_shows_sort_arrow():
    _ensure_app()
    model = RecordTableModel(POST_PROFILE.columns)
    model.set_sort_indicator("title", "desc")
    assert model.headerData(1, Qt.Horizontal) == "Title ↓"
    assert model.headerData(2, Qt.Horizontal) == "Author"
    model.set_columns(POST_PROFILE.columns)
    assert model.headerData(1, Qt.Horizontal) == "Title"


def test_panel_shows_first_page(panel):
    assert _visible_ids(panel) == [1, 2]
    assert panel.page_label.text() == "1 / 3"
    assert not panel.prev_button.isEnabled()
    assert panel.next_button.isEnabled()
    assert not panel.next_button.isHidden()


def test_panel_pages_forward(panel):
    panel._on_next()
    panel._on_next()
    assert _visible_ids(panel) == [5]
    assert panel.page_label.text() == "3 / 3"
    assert not panel.next_button.isEnabled()


def test_search_filters_and_hides_pager(panel):
    panel.search.setText("alice")
    assert _visible_ids(panel) == [1, 4]
    assert panel.prev_button.isHidden()
    assert panel.page_label.isHidden()


def test_header_click_sorts_numerically(panel):
    panel._on_header_clicked(_column(panel, "views"))
    assert _visible_ids(panel) == [5, 1]
    assert panel.model.headerData(_column(panel, "views"), Qt.Horizontal) == "Views ↑"


def test_actions_column_is_not_sortable(panel):
    panel._on_header_clicked(_column(panel, "actions"))
    assert panel.engine.sort_column is None


def test_row_actions_follow_workflow(panel):
    def labels(row):
        cell = panel.table.indexWidget(panel.model.index(row, _column(panel, "actions")))
        return [b.text() for b in cell.findChildren(QPushButton)]

    assert labels(0) == ["Edit", "Publish", "Delete"]
    assert labels(1) == ["Edit", "Archive", "Delete"]


def test_stats_are_rendered(panel):
    texts = []
    for i in range(panel.stats_layout.count()):
        widget = panel.stats_layout.itemAt(i).widget()
        if widget is not None:
            texts.append(widget.text())
    assert texts[0] == "<b>Total</b><br>5"
    assert "<b>Total views</b><br>1,500" in texts


def test_declined_delete_never_reaches_adapter(panel, adapters, monkeypatch):
    class DeclineBox:
        StandardButton = QMessageBox.StandardButton

        @staticmethod
        def question(*args, **kwargs):
            return QMessageBox.StandardButton.No

    monkeypatch.setattr(mp, "QMessageBox", DeclineBox)
    adapters[RecordKind.POST].calls.clear()

    panel.delete_record(panel.model.row(0))
    coro, kwargs = panel.scheduled.pop()

    assert asyncio.run(coro) is False
    assert adapters[RecordKind.POST].calls == []
    assert kwargs["success_message"] == "Post deleted"


def test_switching_tabs_loads_users(panel, adapters):
    panel.tabs.setCurrentIndex(1)

    assert panel.manager.kind is RecordKind.USER
    assert [c.key for c in panel.model.columns][1] == "username"
    coro, _ = panel.scheduled.pop()
    asyncio.run(coro)

    assert _visible_ids(panel) == [1, 2]
    assert panel.page_label.text() == "1 / 2"
    assert adapters[RecordKind.USER].calls == [("get_all",)]


def _finished(result=None, exc=None) -> asyncio.Future:
    loop = asyncio.new_event_loop()
    future = loop.create_future()
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(result)
    loop.close()
    return future


def _task_done(panel, future, manager, **kwargs):
    options = {"success_message": None, "on_success": None, "on_error": None}
    options.update(kwargs)
    panel._on_task_done(future, manager=manager, **options)


def test_finished_task_shows_banner_on_its_own_tab(panel):
    _task_done(panel, _finished(), panel.manager, success_message="Post published")
    assert panel.banner.alert_type == "success"
    assert "Post published" in panel.banner.label.text()


def test_finished_task_from_previous_tab_stays_quiet(panel):
    posts_manager = panel.manager
    panel.tabs.setCurrentIndex(1)
    errors = []

    _task_done(panel, _finished(), posts_manager, success_message="Post published")
    assert panel.banner.alert_type == ""

    _task_done(panel, _finished(exc=RemoteError("offline")), posts_manager, on_error=errors.append)
    assert panel.banner.isHidden()
    assert errors == ["offline"]


def test_alert_banner(panel):
    panel.show_alert("error", "Service unavailable")
    assert panel.banner.alert_type == "error"
    assert "Service unavailable" in panel.banner.label.text()
    panel.banner.dismiss()
    assert panel.banner.isHidden()


def test_new_dialog_starts_from_defaults():
    _ensure_app()
    dialog = EntityDialog(RecordKind.POST)
    assert dialog.form_state() == defaults_for(RecordKind.POST)
    assert dialog.info_label.isHidden()


def test_edit_dialog_keeps_unknown_status():
    _ensure_app()
    record = PostRecord(id=9, title="Later", author="amy", status="scheduled", views=3, created_at="2024-05-01")
    dialog = EntityDialog(RecordKind.POST, record)
    state = dialog.form_state()
    assert state["status"] == "scheduled"
    assert state["title"] == "Later"
    assert dialog.info_label.text() == "ID: 9 | Created: 2024-05-01 | Views: 3"


def test_dialog_submit_and_error_cycle():
    _ensure_app()
    record = PostRecord(id=1, title="Intro", author="alice", status=PostStatus.DRAFT)
    dialog = EntityDialog(RecordKind.POST, record)
    received = []
    dialog.submitted.connect(received.append)
    save = dialog.buttons.button(QDialogButtonBox.Save)

    dialog._on_submit()
    assert received[0]["title"] == "Intro"
    assert not save.isEnabled()

    dialog.show_error("Title too long")
    assert save.isEnabled()
    assert not dialog.error_label.isHidden()
    assert dialog.form_state()["title"] == "Intro"

    dialog.finish()
    assert dialog.binder.state == defaults_for(RecordKind.POST)
