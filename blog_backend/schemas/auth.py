"""Authentication schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

from blog_backend.core.security import MAX_PASSWORD_BYTES, password_too_long


class UserRegister(BaseModel):
    """User registration request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str
    password_confirmation: str
    role: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password length."""
        if isinstance(v, str) and len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if isinstance(v, str) and password_too_long(v):
            raise ValueError(f"Password must not be longer than {MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize name by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        """Require the confirmation to repeat the password."""
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Password confirmation does not match")
        return v


class UserResponse(BaseModel):
    """User response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    roles: list[str]
    created_at: str


class UserLogin(BaseModel):
    """User login request schema."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class RegisterResponse(BaseModel):
    """Registration response schema with token and user info."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
