"""Authentication schemas."""

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema
from app.schemas.user import UserRead


class GoogleAuthRequest(BaseSchema):
    """Request schema for Google OAuth login."""

    id_token: str = Field(..., description="Google OAuth id_token from frontend")


class SimpleLoginRequest(BaseSchema):
    """Request schema for the development-only name/email login."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr


class TokenResponse(BaseSchema):
    """Response schema for successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")


class SimpleLoginResponse(TokenResponse):
    """Token plus the (possibly newly created) user."""

    user: UserRead
