"""Smart list queries and item creation shared by the list, sharing and chat paths."""

import logging
import secrets
from uuid import UUID

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models import ListItem, SmartList
from app.schemas.lists import ListItemFields
from app.services.categorizer import categorize_with_fallback

logger = logging.getLogger(__name__)

SHARE_CODE_BYTES = 9


def generate_share_code() -> str:
    """Random URL-safe share code (12 characters)."""
    return secrets.token_urlsafe(SHARE_CODE_BYTES)


async def get_visible_lists(db: AsyncSession, user_id: UUID) -> list[SmartList]:
    """
    Lists the user owns or collaborates on, with items, oldest first.

    The collaborator match on the JSON column is a coarse text filter;
    membership is confirmed in Python.
    """
    uid = str(user_id)
    result = await db.execute(
        select(SmartList)
        .options(selectinload(SmartList.items))
        .where(
            or_(
                SmartList.user_id == user_id,
                cast(SmartList.collaborators, String).contains(uid),
            )
        )
        .order_by(SmartList.created_at.asc())
        .execution_options(populate_existing=True)
    )
    return [
        sl
        for sl in result.scalars().unique()
        if sl.user_id == user_id or uid in (sl.collaborators or [])
    ]


async def get_list_with_items(db: AsyncSession, list_id: UUID) -> SmartList | None:
    result = await db.execute(
        select(SmartList)
        .options(selectinload(SmartList.items))
        .where(SmartList.id == list_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_list_by_share_code(db: AsyncSession, share_code: str) -> SmartList | None:
    """A currently shared list by its code, with items."""
    result = await db.execute(
        select(SmartList)
        .options(selectinload(SmartList.items))
        .where(SmartList.share_code == share_code, SmartList.is_shared.is_(True))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def next_position(db: AsyncSession, list_id: UUID) -> int:
    """Position after the last item of a list."""
    result = await db.execute(select(func.max(ListItem.position)).where(ListItem.list_id == list_id))
    last = result.scalar()
    return 0 if last is None else last + 1


async def add_item(
    db: AsyncSession,
    smart_list: SmartList,
    fields: ListItemFields,
    *,
    added_by: str | None = None,
) -> ListItem:
    """
    Create and commit a list item.

    A missing category is filled in by the categorizer (never fails); a
    missing position appends to the end of the list.
    """
    data = fields.model_dump(exclude={"list_id"})
    if not data.get("category"):
        data["category"] = await categorize_with_fallback(data["name"], smart_list.type)
    if "position" not in fields.model_fields_set:
        data["position"] = await next_position(db, smart_list.id)
    if added_by is not None and not data.get("added_by"):
        data["added_by"] = added_by

    item = ListItem(list_id=smart_list.id, **data)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    logger.info("Added %r (%s) to list %s", item.name, item.category, smart_list.id)
    return item


async def delete_list(db: AsyncSession, smart_list: SmartList) -> None:
    """Delete a list and its items. Items go first; list_items.list_id is not cascaded."""
    await db.execute(delete(ListItem).where(ListItem.list_id == smart_list.id))
    await db.delete(smart_list)
    await db.commit()


def add_collaborator(smart_list: SmartList, user_id: UUID) -> bool:
    """
    Add a collaborator id. Returns False when nothing changed.

    The owner is never a collaborator and ids are not duplicated. The list is
    reassigned so the JSON column is flagged dirty.
    """
    uid = str(user_id)
    current = list(smart_list.collaborators or [])
    if smart_list.user_id == user_id or uid in current:
        return False
    smart_list.collaborators = current + [uid]
    return True
