"""Reminder CRUD routes."""

from uuid import UUID

from fastapi import APIRouter, status
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, get_user_resource_or_404, require_same_user
from app.db.models import Reminder
from app.schemas.reminders import ReminderCreate, ReminderRead, ReminderUpdate
from app.services.timeutils import utcnow

router = APIRouter(prefix="/reminders", tags=["reminders"])

_REQUIRED_FIELDS = {"title", "due_date", "completed"}


@router.get("/{user_id}", response_model=list[ReminderRead])
async def list_reminders(
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
    completed: bool | None = None,
) -> list[ReminderRead]:
    """List the user's reminders by due date, optionally filtered by completion."""
    require_same_user(user_id, current_user)
    query = select(Reminder).where(Reminder.user_id == current_user.id)
    if completed is not None:
        query = query.where(Reminder.completed == completed)
    query = query.order_by(Reminder.due_date.asc())

    result = await db.execute(query)
    return [ReminderRead.model_validate(r) for r in result.scalars()]


@router.post("", response_model=ReminderRead, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    data: ReminderCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ReminderRead:
    """Create a reminder. A missing due date means now."""
    values = data.model_dump()
    values["due_date"] = values["due_date"] or utcnow()
    reminder = Reminder(user_id=current_user.id, **values)
    db.add(reminder)
    await db.commit()
    await db.refresh(reminder)
    return ReminderRead.model_validate(reminder)


@router.patch("/{reminder_id}", response_model=ReminderRead)
async def update_reminder(
    reminder_id: UUID,
    data: ReminderUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ReminderRead:
    """Update a reminder."""
    reminder = await get_user_resource_or_404(db, Reminder, reminder_id, current_user.id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(reminder, key, value)
    await db.commit()
    await db.refresh(reminder)
    return ReminderRead.model_validate(reminder)


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(
    reminder_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete a reminder."""
    reminder = await get_user_resource_or_404(db, Reminder, reminder_id, current_user.id)
    await db.delete(reminder)
    await db.commit()
