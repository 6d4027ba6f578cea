"""Execute the structured actions attached to an assistant reply."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import sanitize_error
from app.db.models import Contact, ContactSource, ListItem, Reminder, ReminderCategory, SmartList
from app.errors import InvalidActionError
from app.schemas.actions import (
    ActionOutcome,
    AddToListAction,
    AssistantAction,
    CreateAlarmAction,
    CreateAppointmentAction,
    CreateContactAction,
    assistant_action_adapter,
)
from app.services.categorizer import categorize_with_fallback
from app.services.list_resolver import resolve_target_list
from app.services.list_types import get_list_template
from app.services.smart_lists import next_position
from app.services.timeutils import DEFAULT_DUE_DELAY, resolve_due_date, utcnow

logger = logging.getLogger(__name__)


def parse_action(raw: Any) -> AssistantAction:
    """Validate one raw action. Raises InvalidActionError for unknown or malformed shapes."""
    if not isinstance(raw, dict):
        raise InvalidActionError(f"Action must be an object, got {type(raw).__name__}")
    try:
        return assistant_action_adapter.validate_python(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidActionError(f"{location}: {first['msg']}" if location else first["msg"]) from e


def match_taxonomy(category: str | None, taxonomy: list[str]) -> str | None:
    """The taxonomy entry equal to `category` ignoring case, if any."""
    if not category:
        return None
    wanted = category.strip().lower()
    for entry in taxonomy:
        if entry.lower() == wanted:
            return entry
    return None


class ActionDispatcher:
    """Runs actions sequentially and reports a per-action outcome."""

    async def dispatch(
        self,
        db: AsyncSession,
        user_id: UUID,
        tz: ZoneInfo,
        raw_actions: list[Any],
        *,
        now: datetime | None = None,
    ) -> list[ActionOutcome]:
        """
        Validate and execute each action in order.

        A rejected or failed action is logged and recorded in its outcome;
        it never stops the remaining actions. Each successful action is
        committed on its own, a failed one is rolled back.

        Args:
            db: Database session
            user_id: Owner of everything the actions create
            tz: User's timezone, used for naive dates
            raw_actions: Actions exactly as the LLM returned them
            now: Reference time for default due dates

        Returns:
            One ActionOutcome per input action, in input order
        """
        now = now or utcnow()
        outcomes: list[ActionOutcome] = []

        for index, raw in enumerate(raw_actions):
            raw_type = raw.get("type") if isinstance(raw, dict) else None
            raw_type = raw_type if isinstance(raw_type, str) else None

            try:
                action = parse_action(raw)
            except InvalidActionError as e:
                logger.warning("Rejected action #%d (type=%r): %s", index, raw_type, e.message)
                outcomes.append(
                    ActionOutcome(index=index, type=raw_type, status="rejected", detail=e.message)
                )
                continue

            try:
                created_ids = await self._execute(db, user_id, tz, action, now)
            except Exception as e:
                logger.exception("Action #%d (%s) failed for user %s", index, action.type, user_id)
                await db.rollback()
                outcomes.append(
                    ActionOutcome(
                        index=index,
                        type=action.type,
                        status="failed",
                        detail=sanitize_error(e, generic_message="Action could not be completed."),
                    )
                )
                continue

            outcomes.append(
                ActionOutcome(index=index, type=action.type, status="succeeded", created_ids=created_ids)
            )

        return outcomes

    async def _execute(
        self,
        db: AsyncSession,
        user_id: UUID,
        tz: ZoneInfo,
        action: AssistantAction,
        now: datetime,
    ) -> list[UUID]:
        if isinstance(action, AddToListAction):
            return await self._add_to_list(db, user_id, action, now)
        if isinstance(action, CreateAppointmentAction):
            return await self._create_appointment(db, user_id, tz, action, now)
        if isinstance(action, CreateAlarmAction):
            return await self._create_alarm(db, user_id, tz, action, now)
        if isinstance(action, CreateContactAction):
            return await self._create_contact(db, user_id, action, now)
        raise InvalidActionError(f"No handler for action type {action.type!r}")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _add_to_list(
        self, db: AsyncSession, user_id: UUID, action: AddToListAction, now: datetime
    ) -> list[UUID]:
        items = action.data.items
        resolution = await resolve_target_list(db, user_id, action.data.list_type, items[0].name)

        if resolution.route_to_reminder:
            reminders = [
                Reminder(
                    user_id=user_id,
                    title=item.name,
                    description=f"Appointment: {item.name}",
                    due_date=now + DEFAULT_DUE_DELAY,
                    category=ReminderCategory.APPOINTMENT.value,
                )
                for item in items
            ]
            db.add_all(reminders)
            await db.commit()
            logger.info("Routed %d appointment-like item(s) to reminders for user %s", len(reminders), user_id)
            return [r.id for r in reminders]

        smart_list: SmartList = resolution.smart_list
        list_id, list_type = smart_list.id, smart_list.type
        taxonomy = list(smart_list.categories or get_list_template(list_type).categories)

        position = await next_position(db, list_id)

        created: list[ListItem] = []
        for item in items:
            category = match_taxonomy(item.category, taxonomy)
            if category is None:
                category = await categorize_with_fallback(item.name, list_type)
            list_item = ListItem(
                list_id=list_id,
                name=item.name,
                category=category,
                quantity=item.quantity,
                unit=item.unit,
                notes=item.notes,
                assigned_to=item.assigned_to,
                added_by="assistant",
                position=position,
            )
            position += 1
            db.add(list_item)
            created.append(list_item)
            logger.info("Adding %r (%s) to list %s", item.name, category, list_id)

        await db.commit()
        return [i.id for i in created]

    async def _create_appointment(
        self,
        db: AsyncSession,
        user_id: UUID,
        tz: ZoneInfo,
        action: CreateAppointmentAction,
        now: datetime,
    ) -> list[UUID]:
        appointment = action.data.appointment
        due_date = resolve_due_date(appointment.date, tz, now)
        reminder = Reminder(
            user_id=user_id,
            title=appointment.title,
            description=appointment.description or f"Appointment: {appointment.title}",
            due_date=due_date,
            category=ReminderCategory.APPOINTMENT.value,
        )
        db.add(reminder)
        await db.commit()
        logger.info("Created appointment %s due %s", reminder.id, due_date.isoformat())
        return [reminder.id]

    async def _create_alarm(
        self,
        db: AsyncSession,
        user_id: UUID,
        tz: ZoneInfo,
        action: CreateAlarmAction,
        now: datetime,
    ) -> list[UUID]:
        alarm = action.data.alarm
        title = alarm.title or "Voice Alarm"
        reminder = Reminder(
            user_id=user_id,
            title=title,
            description=f"ALARM: {alarm.description or title}",
            due_date=resolve_due_date(alarm.date, tz, now),
            category=ReminderCategory.ALARM.value,
        )
        db.add(reminder)
        await db.commit()
        return [reminder.id]

    async def _create_contact(
        self, db: AsyncSession, user_id: UUID, action: CreateContactAction, now: datetime
    ) -> list[UUID]:
        contact = Contact(
            user_id=user_id,
            **action.data.contact.model_dump(),
            source=ContactSource.BUSINESS_CARD.value,
        )
        db.add(contact)
        created: list[UUID | None] = []

        follow_up = action.data.reminder
        reminder = None
        if follow_up is not None:
            reminder = Reminder(
                user_id=user_id,
                title=follow_up.title,
                description=follow_up.description,
                due_date=now + DEFAULT_DUE_DELAY,
                category=follow_up.category or ReminderCategory.FOLLOW_UP.value,
            )
            db.add(reminder)

        await db.commit()
        logger.info("Created contact %s %s", contact.first_name or "", contact.last_name or "")
        created.append(contact.id)
        if reminder is not None:
            created.append(reminder.id)
        return created


# Singleton instance
action_dispatcher = ActionDispatcher()
