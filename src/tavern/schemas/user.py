"""User schema definitions.

This module defines the User model and the auth request/response bodies.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import pytz
from pydantic import BaseModel, Field, field_validator, model_validator


class User(BaseModel):
    user_id: str = Field(
        description="The unique identifier for the user.",
        default_factory=lambda: uuid.uuid4().hex,
    )
    email: str = Field(description="Login email, unique per user.")
    password_hash: str = Field(description="bcrypt hash of the password.")
    display_name: Optional[str] = Field(default=None)
    wallet_address: Optional[str] = Field(
        default=None,
        description="Checksummed wallet address used for mints.",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(pytz.utc),
    )

    def public_dict(self) -> Dict[str, Any]:
        """Return the user as a dict without password material."""
        data = self.model_dump(mode="json")
        data.pop("password_hash", None)
        return data


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("A valid email address is required.")
    return value


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=8)
    display_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class LoginResponse(BaseModel):
    user: Dict[str, Any]
    token: str


class CurrentUserResponse(BaseModel):
    user: Dict[str, Any]


class UpdateWalletRequest(BaseModel):
    address: str = Field(description="Wallet address; checksummed on save.")


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=8)
    confirm: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.password != self.confirm:
            raise ValueError("Passwords do not match.")
        return self
