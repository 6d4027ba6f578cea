"""
FastAPI Dependencies for Authentication and Authorization.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. User-scoped queries: lookups filter by user_id at the SQL level
3. Paths and bodies that name a user id must name the caller (403 otherwise)

Security model:
- JWT stored in HttpOnly cookie (recommended) or Authorization header
- Smart lists are also reachable by their collaborators
- Shared-list routes authenticate by share code instead of JWT
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import ListItem, SmartList, User
from app.db.session import get_db

settings = get_settings()


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: UUID) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains:
    - sub: user_id as string (standard JWT subject claim)
    - exp: expiration timestamp
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """
    Extract JWT token from request.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token'
    2. Authorization header: 'Bearer <token>' (mobile shells, tests)
    """
    if access_token:
        return access_token

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Validate JWT and return the current authenticated user.

    Raises 401 if the token is missing, invalid or expired, or the user
    no longer exists.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


def require_same_user(user_id: UUID, current_user: User) -> None:
    """
    Verify a user id taken from the path or body is the caller's.

    Routes like GET /reminders/{userId} keep the id in the URL for client
    compatibility; it must always match the authenticated user.
    """
    if user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this resource",
        )


def can_access_list(smart_list: SmartList, user_id: UUID) -> bool:
    """Owner or collaborator."""
    return smart_list.user_id == user_id or str(user_id) in (smart_list.collaborators or [])


# =============================================================================
# QUERY HELPERS (enforce user scoping at query level)
# =============================================================================


async def get_user_resource_or_404(
    db: AsyncSession,
    model: type,
    resource_id: UUID,
    user_id: UUID,
):
    """
    Fetch a user-owned resource by ID.

    Usage:
        reminder = await get_user_resource_or_404(db, Reminder, reminder_id, user.id)

    Not-found and not-owned both return 404.
    """
    result = await db.execute(
        select(model).where(model.id == resource_id, model.user_id == user_id)
    )
    resource = result.scalar_one_or_none()

    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    return resource


async def get_accessible_list_or_404(
    db: AsyncSession,
    list_id: UUID,
    user_id: UUID,
    *,
    owner_only: bool = False,
) -> SmartList:
    """
    Fetch a smart list the user owns or collaborates on.

    With owner_only, collaborators are refused too (sharing, deleting).
    """
    result = await db.execute(select(SmartList).where(SmartList.id == list_id))
    smart_list = result.scalar_one_or_none()

    allowed = smart_list is not None and (
        smart_list.user_id == user_id if owner_only else can_access_list(smart_list, user_id)
    )
    if not allowed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="List not found")

    return smart_list


async def get_accessible_item_or_404(
    db: AsyncSession, item_id: UUID, user_id: UUID
) -> ListItem:
    """Fetch a list item whose list the user can access."""
    result = await db.execute(
        select(ListItem, SmartList)
        .join(SmartList, ListItem.list_id == SmartList.id)
        .where(ListItem.id == item_id)
    )
    row = result.one_or_none()

    if row is None or not can_access_list(row.SmartList, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    return row.ListItem
