from datetime import date

import pytest

from models.records import RecordKind
from modules.management.store import RecordStore
from services.errors import InvalidTransitionError, NotFoundError, ValidationError


def _store_with_post() -> RecordStore:
    store = RecordStore()
    store.create(RecordKind.POST, {"title": "First", "author": "amy"})
    return store


def test_ids_are_assigned_per_kind():
    store = RecordStore()
    user = store.create(RecordKind.USER, {"username": "a", "email": "a@example.com"})
    post = store.create(RecordKind.POST, {"title": "t", "author": "a"})
    second = store.create(RecordKind.POST, {"title": "u", "author": "a"})
    assert (user["id"], post["id"], second["id"]) == (1, 1, 2)


def test_create_fills_server_owned_fields():
    store = RecordStore()
    user = store.create(RecordKind.USER, {"username": "a", "email": "a@example.com"})
    assert user["role"] == "user"
    assert user["status"] == "active"
    assert user["lastLogin"] is None
    assert user["createdAt"] == date.today().isoformat()


def test_list_returns_copies():
    store = _store_with_post()
    rows = store.list(RecordKind.POST)
    rows[0]["title"] = "changed"
    assert store.get(RecordKind.POST, 1)["title"] == "First"


def test_update_validates_merged_values():
    store = _store_with_post()
    with pytest.raises(ValidationError) as info:
        store.update(RecordKind.POST, 1, {"author": ""})
    assert info.value.fields == ("author",)
    assert store.get(RecordKind.POST, 1)["author"] == "amy"


def test_unknown_enum_value_is_rejected():
    store = RecordStore()
    with pytest.raises(ValidationError):
        store.create(RecordKind.POST, {"title": "t", "author": "a", "category": "poetry"})


def test_missing_record_raises_not_found():
    store = RecordStore()
    with pytest.raises(NotFoundError):
        store.delete(RecordKind.USER, 1)
    assert store.get(RecordKind.USER, 1) is None


def test_transition_follows_workflow():
    store = _store_with_post()
    assert store.transition_post(1, "publish")["status"] == "published"
    with pytest.raises(InvalidTransitionError):
        store.transition_post(1, "publish")
