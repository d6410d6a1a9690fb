from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime

RowId = Union[int, str]


class ProfileUpdate(BaseModel):
    nome: Optional[str] = None
    bio: Optional[str] = None
    img_url: Optional[str] = None


class TokenCreate(BaseModel):
    nome: Optional[str] = None


class TokenResponse(BaseModel):
    id: RowId
    nome: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenCreatedResponse(TokenResponse):
    # Only returned once, at creation
    token: str
