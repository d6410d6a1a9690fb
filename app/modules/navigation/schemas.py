from pydantic import BaseModel
from typing import List, Optional


class NavItem(BaseModel):
    path: str
    label: str
    icon: Optional[str] = None
    position: str = "top"
    external: bool = False
    active: bool = False


class NavigationResponse(BaseModel):
    role: Optional[str] = None
    default_route: str
    top: List[NavItem]
    bottom: List[NavItem]
