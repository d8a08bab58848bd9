from typing import Any

from pydantic import BaseModel, EmailStr, field_validator

from .user import UserResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str
    password: str
    # Anything outside Role falls back to "user" at registration.
    role: Any = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("username", mode="before")
    @classmethod
    def check_username(cls, value):
        if not isinstance(value, str) or not 3 <= len(value.strip()) <= 30:
            raise ValueError("Username must be between 3 and 30 characters long")
        return value.strip()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        if not isinstance(value, str) or len(value) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        if not isinstance(value, str) or not value:
            raise ValueError("Password is required")
        return value


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
