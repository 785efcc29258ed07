"""Sample records for the development backend."""

from models.records import RecordKind

from .store import RecordStore


def seed(store: RecordStore) -> RecordStore:
    users = [
        {"username": "admin", "email": "admin@example.com", "role": "admin", "status": "active",
         "lastLogin": "2024-03-20", "createdAt": "2024-01-01"},
        {"username": "alice", "email": "alice@example.com", "role": "moderator", "status": "active",
         "lastLogin": "2024-03-19", "createdAt": "2024-01-05"},
        {"username": "bob", "email": "bob@example.com", "role": "user", "status": "inactive",
         "createdAt": "2024-02-11"},
        {"username": "carol", "email": "carol@example.com", "role": "user", "status": "suspended",
         "lastLogin": "2024-02-28", "createdAt": "2024-02-14"},
        {"username": "dave", "email": "dave@example.com", "role": "guest", "status": "active",
         "createdAt": "2024-03-02"},
    ]
    for user in users:
        store.create(RecordKind.USER, user)

    posts = [
        {"title": "Getting started with PySide6", "content": "Widgets, layouts and signals.",
         "author": "alice", "category": "development", "status": "published", "views": 1250,
         "createdAt": "2024-01-10"},
        {"title": "Designing accessible tables", "content": "Keyboard navigation first.",
         "author": "bob", "category": "accessibility", "status": "published", "views": 890,
         "createdAt": "2024-01-22"},
        {"title": "Colour systems", "content": "Picking a palette that scales.",
         "author": "carol", "category": "design", "status": "draft", "createdAt": "2024-02-03"},
        {"title": "Async UIs with asyncio", "content": "Keeping the event loop responsive.",
         "author": "alice", "category": "development", "status": "archived", "views": 432,
         "createdAt": "2023-11-30"},
        {"title": "Release notes", "content": "What changed this quarter.",
         "author": "admin", "category": "", "status": "draft", "createdAt": "2024-03-15"},
    ]
    for post in posts:
        store.create(RecordKind.POST, post)
    return store


__all__ = ["seed"]
