"""Contact schemas."""

from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin
from app.schemas.reminders import ReminderRead


class ContactFields(BaseSchema):
    """Free-text contact fields, typically extracted from a business card."""

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    job_title: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address: str | None = None
    notes: str | None = None


class ContactCreate(ContactFields):
    """Schema for creating a contact manually."""

    source: str = "manual"
    original_ocr_text: str | None = None


class ContactFromTextRequest(BaseSchema):
    """Raw business-card text (e.g. OCR output) to turn into a contact."""

    text: str = Field(..., min_length=1)


class ContactRead(ContactFields, IDMixin, TimestampMixin):
    """Schema for reading contact data."""

    user_id: UUID
    source: str
    original_ocr_text: str | None = None


class ContactFromTextResponse(BaseSchema):
    """Created contact and its follow-up reminder."""

    contact: ContactRead
    follow_up: ReminderRead
    message: str
