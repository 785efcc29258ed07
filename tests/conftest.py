from __future__ import annotations

import os

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from models.records import RecordKind  # noqa: E402
from tests.fakes import FakeAdapter, make_posts, make_users  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch, tmp_path):
    """Keep developer machines' ENTITY_ADMIN_* variables out of the tests."""

    for name in list(os.environ):
        if name.startswith("ENTITY_ADMIN_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENTITY_ADMIN_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def users():
    return make_users()


@pytest.fixture
def posts():
    return make_posts()


@pytest.fixture
def user_adapter(users) -> FakeAdapter:
    return FakeAdapter(RecordKind.USER, users)


@pytest.fixture
def post_adapter(posts) -> FakeAdapter:
    return FakeAdapter(RecordKind.POST, posts)
