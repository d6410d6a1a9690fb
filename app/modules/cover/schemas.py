from pydantic import BaseModel
from typing import List, Optional, Union

RowId = Union[int, str]


class CoverCreate(BaseModel):
    product_id: Optional[RowId] = None
    name: Optional[str] = None
    image_url: Optional[str] = None
    is_public: bool = True


class CoverUpdate(BaseModel):
    id: Optional[RowId] = None
    product_id: Optional[RowId] = None
    name: Optional[str] = None
    image_url: Optional[str] = None
    is_public: Optional[bool] = None
    order: Optional[int] = None


class CoverReorder(BaseModel):
    ids: List[RowId]
