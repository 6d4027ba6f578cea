"""
Share-link routes.

Anyone holding a list's share code can read it, add items and toggle
items; no login is required. Revoking the share (PATCH isShared=false)
invalidates the code.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from app.api.deps import DbSession
from app.db.models import ListItem, SmartList
from app.schemas.lists import ListItemRead, SharedListItemCreate, SmartListWithItems
from app.services import smart_lists as lists_service

router = APIRouter(prefix="/shared", tags=["shared"])


async def _shared_list_or_404(db, share_code: str) -> SmartList:
    smart_list = await lists_service.get_list_by_share_code(db, share_code)
    if smart_list is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared list not found")
    return smart_list


@router.get("/{share_code}", response_model=SmartListWithItems)
async def get_shared_list(share_code: str, db: DbSession) -> SmartListWithItems:
    """Read a shared list and its items."""
    smart_list = await _shared_list_or_404(db, share_code)
    return SmartListWithItems.model_validate(smart_list)


@router.post("/{share_code}/items", response_model=ListItemRead, status_code=status.HTTP_201_CREATED)
async def add_shared_item(
    share_code: str,
    data: SharedListItemCreate,
    db: DbSession,
) -> ListItemRead:
    """Add an item through a share link."""
    smart_list = await _shared_list_or_404(db, share_code)
    item = await lists_service.add_item(db, smart_list, data, added_by="share link")
    return ListItemRead.model_validate(item)


@router.patch("/{share_code}/items/{item_id}/toggle", response_model=ListItemRead)
async def toggle_shared_item(
    share_code: str,
    item_id: UUID,
    db: DbSession,
) -> ListItemRead:
    """Flip an item's completed flag through a share link."""
    smart_list = await _shared_list_or_404(db, share_code)
    result = await db.execute(
        select(ListItem).where(ListItem.id == item_id, ListItem.list_id == smart_list.id)
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    item.completed = not item.completed
    await db.commit()
    await db.refresh(item)
    return ListItemRead.model_validate(item)
