"""Pydantic schemas gating account registration, login, and profile updates."""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic_core import PydanticCustomError

from patient_records.core.security import MAX_PASSWORD_BYTES

USERNAME_PATTERN = r"^[A-Za-z0-9._]+$"


def _password_bytes_guard(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PydanticCustomError(
            "password_too_long",
            "password must be at most {max_bytes} bytes",
            {"max_bytes": MAX_PASSWORD_BYTES},
        )
    return value


def _not_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank_string", "value must not be blank")
    return value


Username = Annotated[str, Field(min_length=3, max_length=20, pattern=USERNAME_PATTERN)]
Password = Annotated[str, Field(min_length=8), AfterValidator(_password_bytes_guard)]
FullName = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_not_blank)]


class RegistrationRequest(BaseModel):
    """New account payload."""

    username: Username
    email: EmailStr
    password: Password
    full_name: FullName


class LoginRequest(BaseModel):
    """Login credentials."""

    username: Annotated[str, Field(min_length=1)]
    password: Annotated[str, Field(min_length=1)]


class AccountUpdate(BaseModel):
    """Partial profile update; omitted fields keep their stored values."""

    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    password: Optional[Password] = None
    full_name: Optional[FullName] = None

    @field_validator("username", "email", "password", "full_name", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise PydanticCustomError("null_not_allowed", "value must not be null")
        return v

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class AccountSummary(BaseModel):
    """Public account view; never carries the password hash."""

    user_id: str
    username: str
    email: str
    full_name: str

    model_config = ConfigDict(from_attributes=True)


class RegistrationResult(BaseModel):
    user_id: str


class LoginResult(BaseModel):
    token: str
