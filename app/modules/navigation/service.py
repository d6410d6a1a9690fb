from typing import Dict, List, Optional

from app.core.acl import get_accessible_routes, get_default_route
from app.modules.navigation.schemas import NavItem, NavigationResponse


def _is_active(item: Dict, current_path: Optional[str]) -> bool:
    if not current_path or item.get("external"):
        return False
    if item.get("position") == "bottom":
        return current_path == item["path"]
    return current_path.startswith(item["path"])


def build_navigation(role: Optional[str], current_path: Optional[str] = None) -> NavigationResponse:
    """Sidebar for a role: accessible routes split into top and bottom groups, table order kept"""
    top: List[NavItem] = []
    bottom: List[NavItem] = []
    for route in get_accessible_routes(role):
        position = route.get("position") or "top"
        item = NavItem(
            path=route["path"],
            label=route["label"],
            icon=route.get("icon"),
            position=position,
            external=bool(route.get("external")),
            active=_is_active({**route, "position": position}, current_path),
        )
        (bottom if position == "bottom" else top).append(item)
    return NavigationResponse(
        role=role,
        default_route=get_default_route(role),
        top=top,
        bottom=bottom,
    )
