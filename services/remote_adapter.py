"""Async httpx adapters for the users/posts records service.

Each adapter wraps one resource collection of a REST-like API::

    GET    {base}/users              -> [record, ...]
    POST   {base}/users              -> record
    PUT    {base}/users/{id}         -> record
    DELETE {base}/users/{id}
    POST   {base}/posts/{id}/publish (archive, restore)

Failures are translated into :mod:`services.errors` types so callers never
have to know about httpx.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from models.records import Record
from models.schemas import (
    PostCreate,
    PostRead,
    PostUpdate,
    UserCreate,
    UserRead,
    UserUpdate,
)
from services.errors import (
    InvalidTransitionError,
    NotFoundError,
    RemoteError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)
USER_AGENT = "Entity-Admin/1.0"


def build_client(
    base_url: str,
    *,
    timeout: float | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared AsyncClient used by every adapter."""

    if timeout is None:
        client_timeout = DEFAULT_TIMEOUT
    else:
        client_timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=client_timeout,
        transport=transport,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )


def _response_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail", body.get("message"))
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, list):
            # FastAPI request validation errors
            parts = [str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail]
            if parts:
                return "; ".join(parts)
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class RecordServiceAdapter:
    """CRUD calls for one record kind."""

    resource: str = ""
    read_model: type[BaseModel]
    create_model: type[BaseModel]
    update_model: type[BaseModel]

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    # ----- Public API --------------------------------------------------
    async def get_all(self) -> list[Record]:
        response = await self._request("GET", f"/{self.resource}")
        payload = response.json()
        if not isinstance(payload, list):
            raise RemoteError(f"Expected a list of {self.resource}", response.status_code)
        return [self._to_record(item) for item in payload]

    async def create(self, fields: Mapping[str, Any]) -> Record:
        body = self._validate(self.create_model, fields).model_dump()
        response = await self._request("POST", f"/{self.resource}", json=body)
        return self._to_record(response.json())

    async def update(self, record_id: int, fields: Mapping[str, Any]) -> Record:
        body = self._validate(self.update_model, fields).model_dump(exclude_none=True)
        response = await self._request("PUT", f"/{self.resource}/{int(record_id)}", json=body)
        return self._to_record(response.json())

    async def delete(self, record_id: int) -> None:
        await self._request("DELETE", f"/{self.resource}/{int(record_id)}")

    # ----- Internal utilities -----------------------------------------
    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RemoteError(str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            return response

        message = _response_message(response)
        logger.warning("%s %s -> %s: %s", method, url, response.status_code, message)
        if response.status_code == 404:
            raise NotFoundError(message)
        if response.status_code == 409:
            raise InvalidTransitionError(message)
        raise RemoteError(message, response.status_code)

    def _validate(self, model: type[BaseModel], fields: Mapping[str, Any]) -> BaseModel:
        try:
            return model.model_validate(dict(fields))
        except SchemaError as exc:
            raise RemoteError(f"Invalid {self.resource} payload: {exc}") from exc

    def _to_record(self, item: Any) -> Record:
        try:
            return self.read_model.model_validate(item).to_record()
        except SchemaError as exc:
            raise RemoteError(f"Malformed {self.resource} record from server: {exc}") from exc


class UserServiceAdapter(RecordServiceAdapter):
    resource = "users"
    read_model = UserRead
    create_model = UserCreate
    update_model = UserUpdate


class PostServiceAdapter(RecordServiceAdapter):
    resource = "posts"
    read_model = PostRead
    create_model = PostCreate
    update_model = PostUpdate

    async def transition(self, record_id: int, action: str) -> None:
        await self._request("POST", f"/{self.resource}/{int(record_id)}/{action}")

    async def publish(self, record_id: int) -> None:
        await self.transition(record_id, "publish")

    async def archive(self, record_id: int) -> None:
        await self.transition(record_id, "archive")

    async def restore(self, record_id: int) -> None:
        await self.transition(record_id, "restore")


__all__ = [
    "DEFAULT_TIMEOUT",
    "build_client",
    "RecordServiceAdapter",
    "UserServiceAdapter",
    "PostServiceAdapter",
]
