from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from wocuum.models.user import UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class PasswordResetRequest(CamelModel):
    email: EmailStr


class DeleteAccountRequest(CamelModel):
    password: str = Field(min_length=1)


class UserPublic(CamelModel):
    """Fields of a user that are safe to send to clients."""

    id: str
    email: str
    full_name: Optional[str] = None
    role: UserRole
    created_at: datetime


class UserResponse(CamelModel):
    ok: bool = True
    message: Optional[str] = None
    user: UserPublic


class MessageResponse(CamelModel):
    ok: bool = True
    message: str
