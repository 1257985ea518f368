"""
Authentication I/O models.

Registration and password changes enforce the password policy: 8-128
characters with at least one lowercase letter, uppercase letter, digit and
special character.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel, RequestModel
from .users import UserRead

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
PASSWORD_RULES = (
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"\d"), "Password must contain at least one number"),
    (re.compile(r"[^a-zA-Z0-9]"), "Password must contain at least one special character"),
)


def validate_password_strength(value: str) -> str:
    for pattern, message in PASSWORD_RULES:
        if not pattern.search(value):
            raise ValueError(message)
    return value


class RegisterRequest(RequestModel):
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    bio: Optional[str] = Field(default=None, max_length=500)

    @field_validator("username")
    @classmethod
    def _username_rules(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, underscores, and hyphens")
        if value.isdigit():
            raise ValueError("Username cannot be only numbers")
        return value

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _password_rules(cls, value: str) -> str:
        return validate_password_strength(value)


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()


class RefreshRequest(RequestModel):
    refresh_token: Optional[str] = None


class ForgotPasswordRequest(RequestModel):
    email: EmailStr


class ResetPasswordRequest(RequestModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def _password_rules(cls, value: str) -> str:
        return validate_password_strength(value)


class ChangePasswordRequest(RequestModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)

    @field_validator("new_password")
    @classmethod
    def _password_rules(cls, value: str) -> str:
        return validate_password_strength(value)


class AuthPayload(CamelModel):
    user: UserRead
    access_token: str


class TokenPayload(CamelModel):
    access_token: str


class GoogleAuthPayload(CamelModel):
    user: UserRead
    access_token: str
    is_new_user: bool


class GoogleUrlPayload(CamelModel):
    url: str
    state: str


class GoogleCodeRequest(RequestModel):
    code: Optional[str] = None
    state: Optional[str] = None


class GoogleTokenRequest(RequestModel):
    token: Optional[str] = None
