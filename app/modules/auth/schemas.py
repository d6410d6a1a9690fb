import re
from pydantic import AfterValidator, BaseModel, EmailStr, field_validator, model_validator
from typing import Annotated, Optional, Literal, Dict

PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'


def check_password_policy(password: str) -> Dict[str, bool]:
    """Each rule of the backoffice password policy and whether it holds"""
    return {
        "length": len(password) >= 8,
        "uppercase": re.search(r"[A-Z]", password) is not None,
        "lowercase": re.search(r"[a-z]", password) is not None,
        "number": re.search(r"\d", password) is not None,
        "special": any(c in PASSWORD_SPECIAL_CHARS for c in password),
    }


def _validate_password(value: str) -> str:
    failed = [rule for rule, ok in check_password_policy(value).items() if not ok]
    if failed:
        raise ValueError(f"La password non rispetta i requisiti: {', '.join(failed)}")
    return value


Password = Annotated[str, AfterValidator(_validate_password)]


class SetSessionRequest(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    user_id: str
    email: str
    role: Optional[str] = None
    redirect_to: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: Password
    confirm_password: str
    user_type: Literal["creator", "brand"]

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Le password non coincidono")
        return self


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str
    password: Optional[Password] = None
    user_type: Literal["creator", "brand"]

    @field_validator("otp")
    @classmethod
    def six_digits(cls, value: str) -> str:
        if not re.fullmatch(r"\d{6}", value or ""):
            raise ValueError("Inserisci un codice di 6 cifre")
        return value


class ResetPasswordRequest(BaseModel):
    email: EmailStr


class UpdatePasswordRequest(BaseModel):
    password: Password


class GuardResponse(BaseModel):
    path: str
    allowed: bool
    redirect_to: Optional[str] = None
    role: Optional[str] = None
