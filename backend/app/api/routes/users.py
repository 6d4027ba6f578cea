"""User profile routes."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import EmailStr
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, require_same_user
from app.db.models import User
from app.schemas.user import UserRead, UserSummary, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

# Non-nullable columns; an explicit null in a PATCH leaves them unchanged
_REQUIRED_FIELDS = {"name", "timezone", "onboarding_completed"}


@router.get("/search", response_model=UserSummary)
async def search_user(
    current_user: CurrentUser,
    db: DbSession,
    email: EmailStr = Query(...),
) -> UserSummary:
    """Find a user by exact email (used when adding collaborators). Returns only public fields."""
    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserSummary.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: UUID,
    current_user: CurrentUser,
) -> UserRead:
    """Get the caller's own profile."""
    require_same_user(user_id, current_user)
    return UserRead.model_validate(current_user)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> UserRead:
    """
    Update the caller's profile.

    `preferences`, when given, replaces the stored preference document.
    """
    require_same_user(user_id, current_user)
    updates = data.model_dump(exclude_unset=True)
    if "preferences" in updates:
        preferences = data.preferences
        updates["preferences"] = preferences.model_dump(mode="json") if preferences else {}
    for key, value in updates.items():
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(current_user, key, value)
    await db.commit()
    await db.refresh(current_user)
    return UserRead.model_validate(current_user)
