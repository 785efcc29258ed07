"""Editable form state for the create/edit dialog.

Form state is a flat ``{field: str}`` mapping over the kind's mutable
fields.  Conversion between records and strings only happens in
:meth:`FormBinder.populate` and :meth:`FormBinder.serialize`.
"""

from __future__ import annotations

from typing import Any

from models.records import Record, RecordKind, plain_value
from modules.management.kinds import profile_for


FormState = dict[str, str]


def defaults_for(kind: RecordKind | str) -> FormState:
    """Return a fresh copy of the zero-value form for ``kind``."""

    return dict(profile_for(kind).defaults)


class FormBinder:
    def __init__(self, kind: RecordKind | str) -> None:
        self._profile = profile_for(kind)
        self._state: FormState = defaults_for(self._profile.kind)

    @property
    def kind(self) -> RecordKind:
        return self._profile.kind

    @property
    def fields(self) -> tuple[str, ...]:
        return self._profile.form_fields

    @property
    def state(self) -> FormState:
        return dict(self._state)

    def get(self, name: str) -> str:
        self._check_field(name)
        return self._state[name]

    def set(self, name: str, value: Any) -> None:
        self._check_field(name)
        self._state[name] = "" if value is None else str(plain_value(value))

    def update(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def populate(self, record: Record | dict[str, Any]) -> FormState:
        """Overwrite the whole form from ``record`` (edit mode).

        Missing or falsy fields fall back to the kind default so no field is
        ever left unset.
        """

        defaults = self._profile.defaults
        state: FormState = {}
        for name in self.fields:
            if isinstance(record, dict):
                value = record.get(name)
            else:
                value = getattr(record, name, None)
            value = plain_value(value)
            state[name] = str(value) if value else defaults[name]
        self._state = state
        return dict(state)

    def reset(self) -> FormState:
        self._state = defaults_for(self.kind)
        return dict(self._state)

    def serialize(self) -> dict[str, str]:
        # Required fields are only advisory here; the entity manager fills
        # defaults before anything is sent.
        return dict(self._state)

    def is_required(self, name: str) -> bool:
        return name in self._profile.required

    def missing_required(self) -> list[str]:
        return [name for name in self._profile.required if not self._state.get(name, "").strip()]

    def _check_field(self, name: str) -> None:
        if name not in self._state:
            raise KeyError(f"{self._profile.label} form has no field {name!r}")


__all__ = ["FormState", "FormBinder", "defaults_for"]
