"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def validate_bcrypt_password(cls, value: str) -> str:
        """Reject passwords bcrypt cannot hash faithfully."""
        if "\x00" in value:
            raise ValueError("Password must not contain NUL characters")
        # bcrypt hard limit: 72 bytes (UTF-8)
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return value


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str


class TokenResponse(BaseModel):
    """Identity token response."""

    token: str


class UserResponse(BaseModel):
    """Public user profile. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
