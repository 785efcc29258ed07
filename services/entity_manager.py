"""Authoritative in-memory collection for one record kind.

The manager never patches its collection locally.  Every successful write
(create, update, delete, status change) is followed by a full reload from
the records service, so ``items`` always equals what the server returned
last.  Failures are recorded on :attr:`CollectionState.error` for passive
display and re-raised to the caller.

There is no internal lock.  The window disables its controls while
``loading`` is true; if two reloads still overlap, only the most recently
started one is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Mapping, Optional

from models.records import Record, RecordKind, plain_value
from modules.management.kinds import profile_for
from modules.management.workflow import PostAction, next_status
from services.errors import (
    EntityError,
    InvalidTransitionError,
    NotFoundError,
    RemoteError,
    ValidationError,
    error_message,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionState:
    kind: RecordKind
    items: tuple[Record, ...] = ()
    loading: bool = False
    error: Optional[str] = None


Listener = Callable[[CollectionState], None]
Confirm = Callable[[], bool]


def _as_entity_error(exc: BaseException) -> EntityError:
    if isinstance(exc, EntityError):
        return exc
    return RemoteError(error_message(exc))


class EntityManager:
    def __init__(self, kind: RecordKind | str, adapter: Any, *, enforce_required: bool = False) -> None:
        self._profile = profile_for(kind)
        self._adapter = adapter
        self._enforce_required = enforce_required
        self._state = CollectionState(kind=self._profile.kind)
        self._listeners: list[Listener] = []
        self._pending_loads = 0
        self._load_generation = 0
        self._disposed = False

    # ----- State -------------------------------------------------------
    @property
    def kind(self) -> RecordKind:
        return self._profile.kind

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def items(self) -> tuple[Record, ...]:
        return self._state.items

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def disposed(self) -> bool:
        return self._disposed

    def find(self, record_id: int) -> Optional[Record]:
        for record in self._state.items:
            if record.id == record_id:
                return record
        return None

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispose(self) -> None:
        """Stop applying results; requests still in flight are discarded."""

        logger.debug("[entities] dispose %s manager", self.kind.value)
        self._disposed = True
        self._listeners.clear()

    # ----- Operations --------------------------------------------------
    async def load(self) -> tuple[Record, ...]:
        self._load_generation += 1
        generation = self._load_generation
        self._pending_loads += 1
        self._update(loading=True, error=None)
        try:
            records = tuple(await self._adapter.get_all())
        except Exception as exc:
            failure = _as_entity_error(exc)
            self._pending_loads -= 1
            if self._is_current(generation):
                self._update(loading=self._pending_loads > 0, error=failure.message)
            else:
                self._update(loading=self._pending_loads > 0)
            logger.warning("[entities] loading %s failed: %s", self._profile.plural.lower(), failure.message)
            if failure is exc:
                raise
            raise failure from exc

        self._pending_loads -= 1
        if self._is_current(generation):
            self._update(items=records, loading=self._pending_loads > 0)
            logger.debug("[entities] loaded %d %s", len(records), self._profile.plural.lower())
        else:
            logger.debug("[entities] discarding superseded %s load", self.kind.value)
            self._update(loading=self._pending_loads > 0)
        return records

    async def create(self, fields: Mapping[str, Any]) -> None:
        payload = self._with_defaults(fields)
        if self._enforce_required:
            missing = [name for name in self._profile.required if not payload[name].strip()]
            if missing:
                self._fail(
                    ValidationError(
                        f"{self._profile.label} is missing required fields: {', '.join(missing)}",
                        tuple(missing),
                    )
                )
        await self._persist(lambda: self._adapter.create(payload))

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> None:
        self._require(record_id)
        payload = {
            name: str(plain_value(fields[name]))
            for name in self._profile.form_fields
            if name in fields and fields[name] is not None
        }
        await self._persist(lambda: self._adapter.update(record_id, payload))

    async def delete(self, record_id: int, confirm: Confirm) -> bool:
        if not confirm():
            logger.debug("[entities] delete of %s %s declined", self.kind.value, record_id)
            return False
        self._require(record_id)
        await self._persist(lambda: self._adapter.delete(record_id))
        return True

    async def transition(self, record_id: int, action: PostAction | str) -> None:
        if not self._profile.supports_workflow:
            self._fail(InvalidTransitionError(f"{self._profile.plural} have no status workflow"))
        record = self._require(record_id)
        try:
            next_status(record.status, action)
        except InvalidTransitionError as exc:
            self._fail(exc)
        act = PostAction(action)
        await self._persist(lambda: self._adapter.transition(record_id, act.value))

    async def publish(self, record_id: int) -> None:
        await self.transition(record_id, PostAction.PUBLISH)

    async def archive(self, record_id: int) -> None:
        await self.transition(record_id, PostAction.ARCHIVE)

    async def restore(self, record_id: int) -> None:
        await self.transition(record_id, PostAction.RESTORE)

    # ----- Internal utilities -----------------------------------------
    async def _persist(self, operation: Callable[[], Awaitable[Any]]) -> None:
        try:
            await operation()
        except Exception as exc:
            self._fail(exc)
        await self.load()

    def _with_defaults(self, fields: Mapping[str, Any]) -> dict[str, str]:
        defaults = self._profile.defaults
        payload: dict[str, str] = {}
        for name in self._profile.form_fields:
            value = plain_value(fields.get(name))
            payload[name] = str(value) if value else defaults[name]
        return payload

    def _require(self, record_id: int) -> Record:
        record = self.find(record_id)
        if record is None:
            self._fail(NotFoundError(f"{self._profile.label} {record_id} not found", record_id))
        return record

    def _fail(self, exc: BaseException) -> None:
        failure = _as_entity_error(exc)
        logger.warning("[entities] %s operation failed: %s", self.kind.value, failure.message)
        self._update(error=failure.message)
        if failure is exc:
            raise failure
        raise failure from exc

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._load_generation

    def _update(self, **changes: Any) -> None:
        if self._disposed:
            return
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("[entities] state listener failed")


__all__ = ["CollectionState", "EntityManager", "Listener", "Confirm"]
