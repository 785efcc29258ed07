"""
Users/posts management module.

The core (workflow, form binder, table engine, kind profiles) is pure
Python. Qt widgets live in :mod:`modules.management.panels` and are imported
lazily, so importing this package has no Qt side effects.

Functions:
- get_management_panel(context, page_size=10, parent=None) -> QWidget
  Tabbed users/posts view bound to an EntityContext.
"""

from typing import Optional


def _ensure_qt_available() -> None:
    try:
        import PySide6  # noqa: F401
    except ImportError as exc:  # pragma: no cover - import guard
        raise ImportError("PySide6 is required for the management UI components") from exc


def get_management_panel(context, page_size: int = 10, parent: Optional[object] = None):
    _ensure_qt_available()
    from .panels import ManagementPanel

    return ManagementPanel(context, page_size=page_size, parent=parent)


__all__ = ["get_management_panel"]
