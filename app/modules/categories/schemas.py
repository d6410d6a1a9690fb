from pydantic import BaseModel
from typing import Optional, Union, Literal

RowId = Union[int, str]


class CategoryCreate(BaseModel):
    """Body of POST /categories: a category, or a category item when type == "item" """
    type: Optional[Literal["category", "item"]] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    is_public: bool = True
    # category fields
    expert_id: Optional[RowId] = None
    category_description: Optional[str] = None
    # item fields
    category_id: Optional[RowId] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryUpdate(BaseModel):
    """Body of PUT /categories; only the keys actually sent are written"""
    id: Optional[RowId] = None
    type: Optional[Literal["category", "item"]] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    is_public: Optional[bool] = None
    expert_id: Optional[RowId] = None
    category_description: Optional[str] = None
    category_id: Optional[RowId] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryOption(BaseModel):
    id: RowId
    name: Optional[str] = None


class ExpertOption(BaseModel):
    id: RowId
    nome: Optional[str] = None
    img_url: Optional[str] = None
