"""Qt widgets for the users/posts management window."""

from .management_panel import ManagementPanel

__all__ = ["ManagementPanel"]
