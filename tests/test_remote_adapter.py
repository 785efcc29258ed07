"""Exercise the httpx adapters against the development API and mocked transports."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from models.records import PostStatus, UserRecord, UserRole, UserStatus
from modules.management.api import create_app
from modules.management.seed import seed
from modules.management.store import RecordStore
from services.errors import InvalidTransitionError, NotFoundError, RemoteError
from services.remote_adapter import PostServiceAdapter, UserServiceAdapter, build_client

BASE_URL = "http://testserver/api"


def _run(scenario, store: RecordStore | None = None):
    app = create_app(store or seed(RecordStore()))

    async def main():
        async with build_client(BASE_URL, transport=httpx.ASGITransport(app=app)) as client:
            return await scenario(client)

    return asyncio.run(main())


def _run_mocked(handler, scenario):
    async def main():
        async with build_client(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            return await scenario(client)

    return asyncio.run(main())


def test_get_all_users_converts_wire_records():
    users = _run(lambda client: UserServiceAdapter(client).get_all())

    assert len(users) == 5
    assert users[0] == UserRecord(
        id=1,
        username="admin",
        email="admin@example.com",
        role=UserRole.ADMIN,
        status=UserStatus.ACTIVE,
        last_login="2024-03-20",
        created_at="2024-01-01",
    )
    assert users[2].last_login is None


def test_create_update_delete_round_trip():
    async def scenario(client):
        adapter = PostServiceAdapter(client)
        created = await adapter.create({"title": "Fresh", "author": "erin", "category": "design"})
        updated = await adapter.update(created.id, {"title": "Fresher"})
        await adapter.delete(created.id)
        return created, updated, await adapter.get_all()

    created, updated, remaining = _run(scenario)

    assert created.id == 6
    assert created.status is PostStatus.DRAFT
    assert updated.title == "Fresher"
    assert updated.author == "erin"
    assert [p.id for p in remaining] == [1, 2, 3, 4, 5]


def test_publish_changes_status_on_server():
    async def scenario(client):
        adapter = PostServiceAdapter(client)
        await adapter.publish(3)
        return await adapter.get_all()

    posts = _run(scenario)

    assert posts[2].status is PostStatus.PUBLISHED


def test_conflicting_transition_maps_to_invalid_transition():
    with pytest.raises(InvalidTransitionError) as info:
        _run(lambda client: PostServiceAdapter(client).publish(1))

    assert info.value.message == "Cannot publish a post in status 'published'"


def test_missing_record_maps_to_not_found():
    with pytest.raises(NotFoundError) as info:
        _run(lambda client: PostServiceAdapter(client).update(99, {"title": "x"}))

    assert info.value.message == "Post 99 not found"


def test_rejected_payload_maps_to_remote_error():
    with pytest.raises(RemoteError) as info:
        _run(lambda client: UserServiceAdapter(client).create({}))

    assert info.value.status_code == 422
    assert info.value.message == "Missing required fields: username, email"


def test_unknown_action_reports_validation_detail():
    with pytest.raises(RemoteError) as info:
        _run(lambda client: PostServiceAdapter(client).transition(1, "explode"))

    assert info.value.status_code == 422
    assert info.value.message


def test_transport_failure_maps_to_remote_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteError) as info:
        _run_mocked(handler, lambda client: UserServiceAdapter(client).get_all())

    assert info.value.message == "connection refused"
    assert info.value.status_code is None


def test_server_error_uses_response_text():
    def handler(request):
        return httpx.Response(500, text="database on fire")

    with pytest.raises(RemoteError) as info:
        _run_mocked(handler, lambda client: PostServiceAdapter(client).delete(1))

    assert info.value.message == "database on fire"
    assert info.value.status_code == 500


def test_message_field_is_used_when_present():
    def handler(request):
        return httpx.Response(400, json={"message": "Title too long"})

    with pytest.raises(RemoteError) as info:
        _run_mocked(handler, lambda client: PostServiceAdapter(client).update(1, {"title": "x" * 500}))

    assert info.value.message == "Title too long"


def test_non_list_payload_is_rejected():
    def handler(request):
        return httpx.Response(200, json={"items": []})

    with pytest.raises(RemoteError):
        _run_mocked(handler, lambda client: UserServiceAdapter(client).get_all())


def test_malformed_record_is_rejected():
    def handler(request):
        return httpx.Response(200, json=[{"title": "no id"}])

    with pytest.raises(RemoteError) as info:
        _run_mocked(handler, lambda client: PostServiceAdapter(client).get_all())

    assert "Malformed posts record" in info.value.message


def test_requests_use_resource_urls():
    seen = []

    def handler(request):
        seen.append((request.method, request.url.path))
        if request.method == "GET":
            return httpx.Response(200, json=[])
        return httpx.Response(204)

    async def scenario(client):
        adapter = PostServiceAdapter(client)
        await adapter.get_all()
        await adapter.delete(4)
        await adapter.archive(2)
        await adapter.restore(3)

    _run_mocked(handler, scenario)

    assert seen == [
        ("GET", "/api/posts"),
        ("DELETE", "/api/posts/4"),
        ("POST", "/api/posts/2/archive"),
        ("POST", "/api/posts/3/restore"),
    ]
