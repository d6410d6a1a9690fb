from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class UserCreate(BaseModel):
    email: Optional[str] = None
    nome: Optional[str] = None
    bio: Optional[str] = None
    role: Optional[str] = None
    img_url: Optional[str] = None


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    email: Optional[str] = None
    nome: Optional[str] = None
    bio: Optional[str] = None
    role: Optional[str] = None
    img_url: Optional[str] = None


class ToggleStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    banned: bool = False


class UserResetPasswordRequest(BaseModel):
    email: Optional[str] = None
