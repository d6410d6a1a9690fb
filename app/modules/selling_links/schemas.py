from pydantic import BaseModel
from typing import Optional, Union

RowId = Union[int, str]


class SellingLinkCreate(BaseModel):
    """Body of POST /selling-links: a new link, or an attachment when type == "attach" """
    type: Optional[str] = None
    # attach
    target: Optional[str] = None
    target_id: Optional[RowId] = None
    selling_link_id: Optional[RowId] = None
    # link
    name: Optional[str] = None
    link: Optional[str] = None
    descrizione: Optional[str] = None
    img_url: Optional[str] = None
    calltoaction: Optional[str] = None


class SellingLinkUpdate(BaseModel):
    id: Optional[RowId] = None
    name: Optional[str] = None
    link: Optional[str] = None
    descrizione: Optional[str] = None
    img_url: Optional[str] = None
    calltoaction: Optional[str] = None
