"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserSignup(BaseModel):
    """User signup request."""

    full_name: str = Field(..., max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class TokenVerify(BaseModel):
    """Token verification request."""

    token: str


class UserResponse(BaseModel):
    """Public account information; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class AccountDeletedResponse(BaseModel):
    """Account deletion confirmation."""

    message: str = "Account deleted"
    tracked_assets_removed: int
