from pydantic import BaseModel
from typing import Any, List, Optional, Union

RowId = Union[int, str]


class ProductCreate(BaseModel):
    # name/price/fee_perc are checked by the service so clients get the
    # same messages whether they send strings or numbers
    name: Any = None
    description: Optional[str] = None
    price: Any = None
    price_currency: Optional[str] = None
    selling_url: Optional[str] = None
    fee_perc: Any = None


class ProductUpdate(ProductCreate):
    """Same fields as ProductCreate; only the keys actually sent are written"""


class BulkDeleteRequest(BaseModel):
    ids: List[RowId]


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    per_page: int
    has_next: bool
    has_prev: bool


class ProductPage(BaseModel):
    products: List[dict]
    pagination: Pagination
