"""List item routes. Owners and collaborators of the parent list may use them."""

from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import (
    CurrentUser,
    DbSession,
    get_accessible_item_or_404,
    get_accessible_list_or_404,
)
from app.schemas.lists import ListItemCreate, ListItemRead, ListItemUpdate
from app.services import smart_lists as lists_service

router = APIRouter(prefix="/list-items", tags=["list-items"])

# Non-nullable columns; an explicit null in a PATCH leaves them unchanged
_REQUIRED_FIELDS = {"name", "priority", "completed", "position"}


@router.post("", response_model=ListItemRead, status_code=status.HTTP_201_CREATED)
async def create_list_item(
    data: ListItemCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ListItemRead:
    """Add an item to a list. The category is inferred when omitted."""
    smart_list = await get_accessible_list_or_404(db, data.list_id, current_user.id)
    item = await lists_service.add_item(db, smart_list, data, added_by=current_user.name)
    return ListItemRead.model_validate(item)


@router.patch("/{item_id}", response_model=ListItemRead)
async def update_list_item(
    item_id: UUID,
    data: ListItemUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ListItemRead:
    """Update an item."""
    item = await get_accessible_item_or_404(db, item_id, current_user.id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(item, key, value)
    await db.commit()
    await db.refresh(item)
    return ListItemRead.model_validate(item)


@router.patch("/{item_id}/toggle", response_model=ListItemRead)
async def toggle_list_item(
    item_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> ListItemRead:
    """Flip an item's completed flag."""
    item = await get_accessible_item_or_404(db, item_id, current_user.id)
    item.completed = not item.completed
    await db.commit()
    await db.refresh(item)
    return ListItemRead.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list_item(
    item_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete an item."""
    item = await get_accessible_item_or_404(db, item_id, current_user.id)
    await db.delete(item)
    await db.commit()
