"""Pick (or create) the smart list that new items should go to."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import ListType, SmartList
from app.services.list_types import (
    APPOINTMENT_ITEM_KEYWORDS,
    LIST_NAME_HINTS,
    PUNCH_ITEM_KEYWORDS,
    PURCHASE_VERBS,
    SHOPPING_ITEM_KEYWORDS,
    WAITING_ITEM_KEYWORDS,
    get_list_template,
)

logger = logging.getLogger(__name__)

# Pseudo list type: the item reads like an appointment and becomes a reminder
APPOINTMENT = "appointment"


@dataclass
class ListResolution:
    """Target list for new items, or a signal to create reminders instead."""

    smart_list: SmartList | None
    route_to_reminder: bool = False
    created: bool = False


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def infer_list_type(item_name: str) -> str:
    """
    Guess a list type from an item name.

    Precedence: appointment, shopping, punch list, waiting list, purchase
    verbs, then todo. Returns APPOINTMENT when the item belongs on the calendar.
    """
    name = item_name.lower()
    if _contains_any(name, APPOINTMENT_ITEM_KEYWORDS):
        return APPOINTMENT
    if _contains_any(name, SHOPPING_ITEM_KEYWORDS):
        return ListType.SHOPPING.value
    if _contains_any(name, PUNCH_ITEM_KEYWORDS):
        return ListType.PUNCH_LIST.value
    if _contains_any(name, WAITING_ITEM_KEYWORDS):
        return ListType.WAITING_LIST.value
    if _contains_any(name, PURCHASE_VERBS):
        return ListType.SHOPPING.value
    return ListType.TODO.value


def pick_existing_list(lists: list[SmartList], list_type: str) -> SmartList | None:
    """First list of the type, preferring one whose name hints at the type."""
    candidates = [sl for sl in lists if sl.type == list_type]
    hints = LIST_NAME_HINTS.get(list_type, ())
    for candidate in candidates:
        if _contains_any(candidate.name.lower(), hints):
            return candidate
    return candidates[0] if candidates else None


async def get_user_lists(db: AsyncSession, user_id: UUID) -> list[SmartList]:
    """Lists owned by the user, oldest first."""
    result = await db.execute(
        select(SmartList)
        .where(SmartList.user_id == user_id)
        .order_by(SmartList.created_at.asc())
    )
    return list(result.scalars().all())


async def create_list_from_template(db: AsyncSession, user_id: UUID, list_type: str) -> SmartList:
    """Create and commit a new list using the type's name and taxonomy."""
    template = get_list_template(list_type)
    smart_list = SmartList(
        user_id=user_id,
        name=template.name,
        type=template.type,
        categories=list(template.categories),
        collaborators=[],
    )
    db.add(smart_list)
    await db.commit()
    await db.refresh(smart_list)
    logger.info("Created %s list %s for user %s", template.type, smart_list.id, user_id)
    return smart_list


async def resolve_target_list(
    db: AsyncSession,
    user_id: UUID,
    requested_type: str | None,
    item_name: str,
) -> ListResolution:
    """
    Select or create the list an item should be added to.

    With a requested type, an existing list of that type is reused. Without
    one, the type is inferred from the item name; appointment-like items are
    routed to reminders and no list is touched. When no list matches, one is
    created from the type's template and committed before returning.
    """
    list_type = requested_type or infer_list_type(item_name)
    if list_type == APPOINTMENT:
        return ListResolution(smart_list=None, route_to_reminder=True)

    lists = await get_user_lists(db, user_id)
    existing = pick_existing_list(lists, list_type)
    if existing is None:
        # Unknown types are served by the template type they fall back to
        template_type = get_list_template(list_type).type
        if template_type != list_type:
            existing = pick_existing_list(lists, template_type)
    if existing is not None:
        logger.debug("Resolved %r to existing list %s (%s)", item_name, existing.id, existing.type)
        return ListResolution(smart_list=existing)

    # TODO: guard against duplicate creation when two requests race here
    # (needs a unique (user_id, type) constraint or a row lock).
    created = await create_list_from_template(db, user_id, list_type)
    return ListResolution(smart_list=created, created=True)
