"""
Role-based access decisions over the static route table in app.config.acl_config
"""

from typing import Any, Dict, List, Optional

from app.config.acl_config import (
    DEFAULT_ROUTE,
    PUBLIC_ROUTES,
    ROUTE_PERMISSIONS,
    SUPER_ADMIN,
    USER_ROLES,
)


def is_public_route(path: str) -> bool:
    return path in PUBLIC_ROUTES


def is_valid_role(role: Optional[str]) -> bool:
    """True only for roles that grant backoffice navigation"""
    return role is not None and role in USER_ROLES


def find_route(path: str) -> Optional[Dict[str, Any]]:
    """First table entry matching the path: exact for external URLs, prefix for internal paths."""
    for route in ROUTE_PERMISSIONS:
        if route.get("external"):
            if route["path"] == path:
                return route
        elif path.startswith(route["path"]):
            return route
    return None


def has_access(role: Optional[str], path: str) -> bool:
    """Check whether a role may open a path. Unknown or missing roles fail closed."""
    if is_public_route(path):
        return True

    if not is_valid_role(role):
        return False

    route = find_route(path)

    # Unconfigured paths are reserved to super admins
    if route is None:
        return role == SUPER_ADMIN

    return role in route["allowed_roles"]


def get_accessible_routes(role: Optional[str]) -> List[Dict[str, Any]]:
    """All table entries the role may open, in table order"""
    if not is_valid_role(role):
        return []
    return [dict(route) for route in ROUTE_PERMISSIONS if role in route["allowed_roles"]]


def get_default_route(role: Optional[str]) -> str:
    return DEFAULT_ROUTE
