"""Pydantic schemas for registration and login."""

from pydantic import BaseModel, Field, field_validator


class UserAuthRequest(BaseModel):
    """Email/password credentials."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Lower-case the email and require an @."""
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Email is invalid")
        return v


class UserRegisterResponse(BaseModel):
    id: str
    email: str


class UserLoginResponse(BaseModel):
    token: str
