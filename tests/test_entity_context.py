import asyncio

from models.records import RecordKind
from modules.management.context import EntityContext
from tests.fakes import FakeAdapter, make_posts, make_users


def _factory(created):
    def build(kind):
        rows = make_users() if kind is RecordKind.USER else make_posts()
        adapter = FakeAdapter(kind, rows)
        created.append(adapter)
        return adapter

    return build


def test_initial_kind_builds_one_manager():
    created = []
    context = EntityContext(_factory(created), initial_kind="user")
    assert context.kind is RecordKind.USER
    assert [a.kind for a in created] == [RecordKind.USER]


def test_selecting_same_kind_keeps_manager():
    created = []
    context = EntityContext(_factory(created))
    manager = context.manager
    assert context.select_kind(RecordKind.POST) is manager
    assert len(created) == 1


def test_switching_kind_disposes_old_manager():
    created = []
    context = EntityContext(_factory(created))
    posts = context.manager
    asyncio.run(posts.load())

    users = context.select_kind("user")

    assert posts.disposed
    assert users is context.manager
    assert users.kind is RecordKind.USER
    assert users.items == ()
    asyncio.run(users.load())
    assert len(users.items) == 3


def test_enforce_required_is_passed_to_managers():
    context = EntityContext(_factory([]), enforce_required=True)
    assert context.manager._enforce_required
    assert context.select_kind(RecordKind.USER)._enforce_required


def test_close_disposes_active_manager():
    context = EntityContext(_factory([]))
    context.close()
    assert context.manager.disposed
    # a closed context can be revived by selecting a kind again
    assert not context.select_kind(RecordKind.POST).disposed
