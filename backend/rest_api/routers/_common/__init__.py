"""
Common utilities shared across routers.
"""

from .base import (
    current_principal,
    get_access_gate,
    get_location_registry,
    get_permission_context,
    get_permission_registry,
    parse_location_query,
    require_any_permission,
    require_permission,
)

__all__ = [
    "current_principal",
    "get_access_gate",
    "get_location_registry",
    "get_permission_context",
    "get_permission_registry",
    "parse_location_query",
    "require_any_permission",
    "require_permission",
]
