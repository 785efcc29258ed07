"""Development REST backend for the users/posts records service.

Mirrors the contract the remote adapters expect, backed by an in-memory
:class:`RecordStore`.  ``main.py --dev-backend`` mounts :func:`create_app`
in-process so the window can run without a real server.
"""

from fastapi import APIRouter, Depends, FastAPI, HTTPException

from models.records import RecordKind
from models.schemas import PostCreate, PostRead, PostUpdate, UserCreate, UserRead, UserUpdate
from modules.management.seed import seed
from modules.management.store import RecordStore
from modules.management.workflow import PostAction
from services.errors import EntityError, InvalidTransitionError, NotFoundError, ValidationError

router = APIRouter()

_default_store: RecordStore | None = None


# Dependency helpers -------------------------------------------------------

def get_store() -> RecordStore:
    global _default_store
    if _default_store is None:
        _default_store = seed(RecordStore())
    return _default_store


_STATUS_CODES = (
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (ValidationError, 422),
)


def _http_error(exc: EntityError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code, exc.message)
    return HTTPException(400, exc.message)


# Routes: users ------------------------------------------------------------

@router.get("/users", response_model=list[UserRead])
def list_users(store: RecordStore = Depends(get_store)):
    return store.list(RecordKind.USER)


@router.post("/users", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, store: RecordStore = Depends(get_store)):
    try:
        return store.create(RecordKind.USER, payload.model_dump())
    except ValidationError as exc:
        raise _http_error(exc) from exc


@router.put("/users/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, store: RecordStore = Depends(get_store)):
    try:
        return store.update(RecordKind.USER, user_id, payload.model_dump(exclude_none=True))
    except (NotFoundError, ValidationError) as exc:
        raise _http_error(exc) from exc


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: int, store: RecordStore = Depends(get_store)):
    try:
        store.delete(RecordKind.USER, user_id)
    except NotFoundError as exc:
        raise _http_error(exc) from exc


# Routes: posts ------------------------------------------------------------

@router.get("/posts", response_model=list[PostRead])
def list_posts(store: RecordStore = Depends(get_store)):
    return store.list(RecordKind.POST)


@router.post("/posts", response_model=PostRead, status_code=201)
def create_post(payload: PostCreate, store: RecordStore = Depends(get_store)):
    try:
        return store.create(RecordKind.POST, payload.model_dump())
    except ValidationError as exc:
        raise _http_error(exc) from exc


@router.put("/posts/{post_id}", response_model=PostRead)
def update_post(post_id: int, payload: PostUpdate, store: RecordStore = Depends(get_store)):
    try:
        return store.update(RecordKind.POST, post_id, payload.model_dump(exclude_none=True))
    except (NotFoundError, ValidationError) as exc:
        raise _http_error(exc) from exc


@router.delete("/posts/{post_id}", status_code=204)
def delete_post(post_id: int, store: RecordStore = Depends(get_store)):
    try:
        store.delete(RecordKind.POST, post_id)
    except NotFoundError as exc:
        raise _http_error(exc) from exc


@router.post("/posts/{post_id}/{action}", response_model=PostRead)
def transition_post(post_id: int, action: PostAction, store: RecordStore = Depends(get_store)):
    try:
        return store.transition_post(post_id, action.value)
    except (NotFoundError, InvalidTransitionError) as exc:
        raise _http_error(exc) from exc


def create_app(store: RecordStore | None = None) -> FastAPI:
    app = FastAPI(title="Entity Admin development backend")
    if store is not None:
        app.dependency_overrides[get_store] = lambda: store
    app.include_router(router, prefix="/api")
    return app


__all__ = ["router", "get_store", "create_app"]
