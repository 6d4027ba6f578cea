"""
Authentication Routes

Endpoints:
- POST /api/auth/google - Exchange Google id_token for session
- POST /api/auth/simple-login - Name/email login for development
- POST /api/auth/logout - Clear session
- GET /api/auth/me - Get current user profile

The JWT is returned in the response body and set as an HttpOnly cookie;
clients may use either.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Response, status
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.api.deps import CurrentUser, DbSession, create_access_token
from app.config import get_settings
from app.db.models import AuthIdentity, User
from app.schemas.auth import GoogleAuthRequest, SimpleLoginRequest, SimpleLoginResponse, TokenResponse
from app.schemas.user import UserRead

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

_GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def _cookie_kwargs() -> dict:
    # Cross-domain deployments need samesite="none" + secure=True
    return {
        "httponly": True,
        "secure": settings.cookie_cross_domain or settings.environment != "development",
        "samesite": "none" if settings.cookie_cross_domain else "lax",
    }


def _start_session(response: Response, user: User) -> TokenResponse:
    """Issue a JWT for the user and set it as the session cookie."""
    access_token = create_access_token(user.id)
    expires_in = settings.jwt_expire_minutes * 60
    response.set_cookie(key="access_token", value=access_token, max_age=expires_in, **_cookie_kwargs())
    return TokenResponse(access_token=access_token, expires_in=expires_in)


@router.post("/google", response_model=TokenResponse)
async def google_login(
    request: GoogleAuthRequest,
    response: Response,
    db: DbSession,
) -> TokenResponse:
    """
    Exchange Google id_token for a session JWT.

    Flow:
    1. Verify id_token with Google's public keys (signature, expiry, audience)
    2. Find or create auth_identity by (provider='google', provider_user_id=sub)
    3. Otherwise link to an existing user by verified email, or create one
    4. Return JWT
    """
    try:
        idinfo = google_id_token.verify_oauth2_token(
            request.id_token,
            google_requests.Request(),
            settings.google_client_id,
        )
        provider_user_id = idinfo["sub"]
        email = idinfo.get("email")
        name = idinfo.get("name", email or "Unknown User")

        if idinfo.get("iss") not in _GOOGLE_ISSUERS:
            raise ValueError("Invalid issuer")

        # Unverified emails must not be used for account linking
        if email and not idinfo.get("email_verified", False):
            email = None

    except ValueError as e:
        logger.info("Rejected Google id_token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid Google id_token: {e}",
        )

    result = await db.execute(
        select(AuthIdentity)
        .options(selectinload(AuthIdentity.user))
        .where(
            AuthIdentity.provider == "google",
            AuthIdentity.provider_user_id == provider_user_id,
        )
    )
    auth_identity = result.scalar_one_or_none()

    if auth_identity:
        auth_identity.last_login_at = datetime.now(timezone.utc)
        if email:
            auth_identity.email = email
        user = auth_identity.user
    else:
        user = None
        if email:
            result = await db.execute(select(User).where(User.email == email.lower()))
            user = result.scalar_one_or_none()

        if user is None:
            user = User(email=email.lower() if email else None, name=name, preferences={})
            db.add(user)
            await db.flush()
            logger.info("Created user %s from Google sign-in", user.id)

        db.add(
            AuthIdentity(
                user_id=user.id,
                provider="google",
                provider_user_id=provider_user_id,
                email=email,
            )
        )

    await db.commit()
    return _start_session(response, user)


@router.post("/simple-login", response_model=SimpleLoginResponse)
async def simple_login(
    request: SimpleLoginRequest,
    response: Response,
    db: DbSession,
) -> SimpleLoginResponse:
    """
    Log in by name and email, creating the user on first use.

    Development and testing only; returns 404 in production.
    """
    if settings.environment == "production":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not available in production")

    email = request.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(email=email, name=request.name, preferences={})
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("Created user %s via simple login", user.id)

    token = _start_session(response, user)
    return SimpleLoginResponse(**token.model_dump(), user=UserRead.model_validate(user))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the authentication cookie.

    A JWT stored elsewhere by the client stays valid until expiry.
    """
    response.delete_cookie(key="access_token", **_cookie_kwargs())


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user's profile."""
    return UserRead.model_validate(current_user)
