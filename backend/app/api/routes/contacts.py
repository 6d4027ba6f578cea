"""Contact routes, including business-card parsing and vCard export."""

import logging
from uuid import UUID

from fastapi import APIRouter, Response, status
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, get_user_resource_or_404, require_same_user
from app.db.models import Contact, ContactSource, Reminder, ReminderCategory
from app.schemas.contacts import ContactCreate, ContactFromTextRequest, ContactFromTextResponse, ContactRead
from app.schemas.reminders import ReminderRead
from app.services.timeutils import DEFAULT_DUE_DELAY, utcnow
from app.services.vcard import extract_contact_from_text, follow_up_title, generate_vcard, vcard_filename

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: ContactCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ContactRead:
    """Create a contact."""
    contact = Contact(user_id=current_user.id, **data.model_dump())
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return ContactRead.model_validate(contact)


@router.post("/from-text", response_model=ContactFromTextResponse, status_code=status.HTTP_201_CREATED)
async def create_contact_from_text(
    data: ContactFromTextRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> ContactFromTextResponse:
    """
    Turn business-card text (e.g. OCR output) into a contact.

    Also creates a follow-up reminder due in 24 hours that carries the
    original text.
    """
    fields = extract_contact_from_text(data.text)
    contact = Contact(
        user_id=current_user.id,
        **fields.model_dump(),
        source=ContactSource.BUSINESS_CARD.value,
        original_ocr_text=data.text,
    )
    reminder = Reminder(
        user_id=current_user.id,
        title=follow_up_title(fields),
        description=f"Contact info from business card:\n{data.text}",
        due_date=utcnow() + DEFAULT_DUE_DELAY,
        category=ReminderCategory.FOLLOW_UP.value,
    )
    db.add_all([contact, reminder])
    await db.commit()
    await db.refresh(contact)
    await db.refresh(reminder)
    logger.info("Created contact %s from business card text", contact.id)

    return ContactFromTextResponse(
        contact=ContactRead.model_validate(contact),
        follow_up=ReminderRead.model_validate(reminder),
        message=f"Contact saved and follow-up reminder created for {fields.first_name or 'contact'}",
    )


@router.get("/{user_id}", response_model=list[ContactRead])
async def list_contacts(
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[ContactRead]:
    """List the user's contacts, newest first."""
    require_same_user(user_id, current_user)
    result = await db.execute(
        select(Contact)
        .where(Contact.user_id == current_user.id)
        .order_by(Contact.created_at.desc())
    )
    return [ContactRead.model_validate(c) for c in result.scalars()]


@router.get("/{contact_id}/vcard")
async def download_vcard(
    contact_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    """Download a contact as a vCard 3.0 file."""
    contact = await get_user_resource_or_404(db, Contact, contact_id, current_user.id)
    return Response(
        content=generate_vcard(contact),
        media_type="text/vcard; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{vcard_filename(contact)}"'},
    )
