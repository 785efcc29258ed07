"""Handle on the entity manager for the currently selected record kind.

The window receives one :class:`EntityContext` and asks it for the active
manager.  Switching kinds tears the old manager down (late responses are
dropped) and creates a fresh one; the caller then awaits ``manager.load()``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from models.records import RecordKind
from services.entity_manager import EntityManager

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[RecordKind], Any]


class EntityContext:
    def __init__(
        self,
        adapter_factory: AdapterFactory,
        *,
        initial_kind: RecordKind | str = RecordKind.POST,
        enforce_required: bool = False,
    ) -> None:
        self._adapter_factory = adapter_factory
        self._enforce_required = enforce_required
        self._manager = self._build(RecordKind(initial_kind))

    @property
    def kind(self) -> RecordKind:
        return self._manager.kind

    @property
    def manager(self) -> EntityManager:
        return self._manager

    def select_kind(self, kind: RecordKind | str) -> EntityManager:
        kind = RecordKind(kind)
        if kind is self._manager.kind and not self._manager.disposed:
            return self._manager
        logger.debug("[context] switching %s -> %s", self._manager.kind.value, kind.value)
        self._manager.dispose()
        self._manager = self._build(kind)
        return self._manager

    def close(self) -> None:
        self._manager.dispose()

    def _build(self, kind: RecordKind) -> EntityManager:
        return EntityManager(
            kind,
            self._adapter_factory(kind),
            enforce_required=self._enforce_required,
        )


__all__ = ["EntityContext", "AdapterFactory"]
