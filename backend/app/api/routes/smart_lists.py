"""Smart list routes: CRUD, sharing and collaborators."""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, get_accessible_list_or_404, require_same_user
from app.db.models import SmartList, User
from app.schemas.lists import (
    AddCollaboratorRequest,
    JoinListRequest,
    ShareResponse,
    SmartListCreate,
    SmartListRead,
    SmartListUpdate,
    SmartListWithItems,
)
from app.services import smart_lists as lists_service
from app.services.list_types import get_list_template

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/smart-lists", tags=["smart-lists"])


@router.post("", response_model=SmartListRead, status_code=status.HTTP_201_CREATED)
async def create_smart_list(
    data: SmartListCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> SmartListRead:
    """Create a list. Without categories, the type's template taxonomy is used."""
    values = data.model_dump()
    if not values.get("categories"):
        values["categories"] = list(get_list_template(data.type).categories)
    smart_list = SmartList(user_id=current_user.id, collaborators=[], **values)
    db.add(smart_list)
    await db.commit()
    await db.refresh(smart_list)
    return SmartListRead.model_validate(smart_list)


@router.post("/join", response_model=SmartListWithItems)
async def join_smart_list(
    data: JoinListRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> SmartListWithItems:
    """Become a collaborator on a shared list. Joining twice is a no-op."""
    smart_list = await lists_service.get_list_by_share_code(db, data.share_code)
    if smart_list is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared list not found")

    if lists_service.add_collaborator(smart_list, current_user.id):
        await db.commit()
        logger.info("User %s joined list %s", current_user.id, smart_list.id)

    smart_list = await lists_service.get_list_with_items(db, smart_list.id)
    return SmartListWithItems.model_validate(smart_list)


@router.get("/{user_id}", response_model=list[SmartListWithItems])
async def list_smart_lists(
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[SmartListWithItems]:
    """Lists the user owns or collaborates on, each with its items."""
    require_same_user(user_id, current_user)
    lists = await lists_service.get_visible_lists(db, current_user.id)
    return [SmartListWithItems.model_validate(sl) for sl in lists]


@router.patch("/{list_id}", response_model=SmartListRead)
async def update_smart_list(
    list_id: UUID,
    data: SmartListUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> SmartListRead:
    """
    Update list fields. Collaborators may edit too.

    `isShared: false` stops sharing and revokes the share code.
    """
    smart_list = await get_accessible_list_or_404(db, list_id, current_user.id)
    updates = data.model_dump(exclude_unset=True)

    if "is_shared" in updates:
        if updates.pop("is_shared") is False:
            smart_list.is_shared = False
            smart_list.share_code = None
    for key, value in updates.items():
        if value is None and key in ("name", "type", "sort_by", "categories"):
            continue
        setattr(smart_list, key, value)

    await db.commit()
    await db.refresh(smart_list)
    return SmartListRead.model_validate(smart_list)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_smart_list(
    list_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete a list and all of its items. Owner only."""
    smart_list = await get_accessible_list_or_404(db, list_id, current_user.id, owner_only=True)
    await lists_service.delete_list(db, smart_list)


@router.post("/{list_id}/share", response_model=ShareResponse)
async def share_smart_list(
    list_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> ShareResponse:
    """Turn on sharing and return the list's share code. Repeated calls return the same code."""
    smart_list = await get_accessible_list_or_404(db, list_id, current_user.id, owner_only=True)
    if not smart_list.is_shared or not smart_list.share_code:
        smart_list.share_code = lists_service.generate_share_code()
        smart_list.is_shared = True
        await db.commit()
        logger.info("Shared list %s", smart_list.id)
    return ShareResponse(share_code=smart_list.share_code)


@router.post("/{list_id}/collaborators", response_model=SmartListRead)
async def add_list_collaborator(
    list_id: UUID,
    data: AddCollaboratorRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> SmartListRead:
    """Add a registered user, found by email, as a collaborator. Owner only."""
    smart_list = await get_accessible_list_or_404(db, list_id, current_user.id, owner_only=True)

    result = await db.execute(select(User).where(User.email == data.email.lower()))
    collaborator = result.scalar_one_or_none()
    if collaborator is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found with this email")
    if collaborator.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already own this list")

    if lists_service.add_collaborator(smart_list, collaborator.id):
        await db.commit()
        await db.refresh(smart_list)
    return SmartListRead.model_validate(smart_list)
