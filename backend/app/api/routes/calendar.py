"""Calendar export routes (.ics)."""

from uuid import UUID

from fastapi import APIRouter, Response
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, get_user_resource_or_404, require_same_user
from app.db.models import Reminder
from app.services.calendar_export import export_calendar, export_event, ics_filename

router = APIRouter(prefix="/calendar", tags=["calendar"])

ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"


def _ics_response(body: bytes, filename: str) -> Response:
    return Response(
        content=body,
        media_type=ICS_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/{user_id}")
async def export_user_calendar(
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    """All of the user's reminders as one .ics calendar."""
    require_same_user(user_id, current_user)
    result = await db.execute(
        select(Reminder)
        .where(Reminder.user_id == current_user.id)
        .order_by(Reminder.due_date.asc())
    )
    reminders = list(result.scalars())
    return _ics_response(
        export_calendar(current_user, reminders),
        ics_filename(f"calendar-{current_user.name or 'user'}"),
    )


@router.get("/event/{reminder_id}")
async def export_single_event(
    reminder_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    """One reminder as a single-event .ics file."""
    reminder = await get_user_resource_or_404(db, Reminder, reminder_id, current_user.id)
    return _ics_response(export_event(current_user, reminder), ics_filename(reminder.title))
