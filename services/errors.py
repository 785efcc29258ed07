"""Error types raised by the records service adapter and entity manager."""

from __future__ import annotations


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class EntityError(Exception):
    """Base class; ``message`` is the text shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EntityError):
    """A required field was empty when the record was persisted."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class NotFoundError(EntityError):
    """The record id does not exist (locally or on the server)."""

    def __init__(self, message: str, record_id: int | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class InvalidTransitionError(EntityError):
    """A post status action is not allowed from the record's current status."""


class RemoteError(EntityError):
    """Transport failure or a rejection from the records service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def error_message(error: object) -> str:
    """Return a human readable message for anything raised by an adapter."""

    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(error, BaseException):
        text = str(error)
        return text or UNKNOWN_ERROR_MESSAGE
    if isinstance(error, str):
        return error
    return UNKNOWN_ERROR_MESSAGE


__all__ = [
    "UNKNOWN_ERROR_MESSAGE",
    "EntityError",
    "ValidationError",
    "NotFoundError",
    "InvalidTransitionError",
    "RemoteError",
    "error_message",
]
