"""Settings for the records management window.

Each value is read from an environment variable first, then from the
``[management]`` section of ``data/app.ini`` (the data directory can be
moved with ``ENTITY_ADMIN_DATA_DIR``), then falls back to a default.  Bad
values are logged and replaced by the default rather than aborting start-up.

Example INI::

    [management]
    api_url = http://localhost:8000/api
    page_size = 20
    strict = false
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from models.records import RecordKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ManagementSettings:
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 10.0
    page_size: int = 10
    initial_kind: RecordKind = RecordKind.POST
    enforce_required: bool = False
    dev_backend: bool = False


# field -> (environment variable, INI key)
_SOURCES = {
    "api_base_url": ("ENTITY_ADMIN_API_URL", "api_url"),
    "request_timeout": ("ENTITY_ADMIN_TIMEOUT", "timeout"),
    "page_size": ("ENTITY_ADMIN_PAGE_SIZE", "page_size"),
    "initial_kind": ("ENTITY_ADMIN_KIND", "initial_kind"),
    "enforce_required": ("ENTITY_ADMIN_STRICT", "strict"),
    "dev_backend": ("ENTITY_ADMIN_DEV", "dev"),
}


def data_dir(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    return Path(env.get("ENTITY_ADMIN_DATA_DIR", "data"))


def _read_ini(path: Path) -> dict[str, str]:
    """Return the ``[management]`` section of ``path`` (empty if absent)."""

    if not path.exists():
        return {}
    cp = configparser.ConfigParser()
    try:
        cp.read(path)
    except configparser.Error as exc:
        logger.warning("[settings] ignoring unreadable %s: %s", path, exc)
        return {}
    if not cp.has_section("management"):
        return {}
    return {key: value.strip() for key, value in cp.items("management")}


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_page_size(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise ValueError("page size must be at least 1")
    return value


def _parse_timeout(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError("timeout must be positive")
    return value


def _parse_url(raw: str) -> str:
    if not raw.strip():
        raise ValueError("empty url")
    return raw.strip()


_PARSERS: dict[str, Callable[[str], object]] = {
    "api_base_url": _parse_url,
    "request_timeout": _parse_timeout,
    "page_size": _parse_page_size,
    "initial_kind": lambda raw: RecordKind(raw.strip().lower()),
    "enforce_required": _parse_bool,
    "dev_backend": _parse_bool,
}


def _resolve(name: str, raw: Optional[str], default: T) -> T:
    if raw is None:
        return default
    try:
        return _PARSERS[name](raw)  # type: ignore[return-value]
    except ValueError as exc:
        logger.warning("[settings] invalid %s=%r (%s); using %r", name, raw, exc, default)
        return default


def load_settings(environ: Mapping[str, str] | None = None) -> ManagementSettings:
    env = os.environ if environ is None else environ
    ini = _read_ini(data_dir(env) / "app.ini")
    defaults = ManagementSettings()
    values = {}
    for name, (env_key, ini_key) in _SOURCES.items():
        raw = env.get(env_key)
        if raw is None:
            raw = ini.get(ini_key)
        values[name] = _resolve(name, raw, getattr(defaults, name))
    settings = ManagementSettings(**values)
    logger.debug("[settings] %s", settings)
    return settings


__all__ = ["ManagementSettings", "load_settings", "data_dir"]
