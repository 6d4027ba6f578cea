"""
Assistant action schemas.

The LLM attaches structured actions to its replies. They are modelled as a
closed tagged union on `type` and validated one at a time, so a malformed
action is rejected on its own without affecting its siblings.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import Field, TypeAdapter, field_validator

from app.schemas.base import BaseSchema
from app.schemas.contacts import ContactFields

logger = logging.getLogger(__name__)

# List item quantities are stored as NUMERIC(10, 2)
MAX_QUANTITY = Decimal("1e8")


# =============================================================================
# PAYLOADS
# =============================================================================


class ActionListItem(BaseSchema):
    """
    An item to add. The LLM sometimes sends bare strings; those become names.

    Only the name is strict. A malformed optional field is dropped so the
    item, and the rest of the action, still goes through.
    """

    name: str = Field(..., min_length=1)
    category: str | None = None
    quantity: Decimal | None = None
    unit: str | None = None
    notes: str | None = None
    assigned_to: str | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _lenient_quantity(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return None
        try:
            quantity = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            logger.info("Ignoring unparseable item quantity %r", value)
            return None
        if not quantity.is_finite() or abs(quantity) >= MAX_QUANTITY:
            logger.info("Ignoring out-of-range item quantity %r", value)
            return None
        return quantity

    @field_validator("category", "unit", "notes", "assigned_to", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        logger.info("Ignoring non-text item field %r", value)
        return None


class AddToListData(BaseSchema):
    list_type: str | None = None
    items: list[ActionListItem] = Field(..., min_length=1)

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_bare_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"name": v} if isinstance(v, str) else v for v in value]
        return value


class ScheduledEntry(BaseSchema):
    """
    Title, optional description and optional date of a reminder.

    The date is usually ISO-8601 but is kept as sent; `resolve_due_date`
    interprets it and defaults anything unusable.
    """

    title: str | None = None
    description: str | None = None
    date: Any = None


class AppointmentEntry(ScheduledEntry):
    title: str = Field(..., min_length=1)


class CreateAppointmentData(BaseSchema):
    appointment: AppointmentEntry


class CreateAlarmData(BaseSchema):
    alarm: ScheduledEntry


class FollowUpReminder(BaseSchema):
    title: str = Field(..., min_length=1)
    description: str | None = None
    category: str | None = None


class CreateContactData(BaseSchema):
    contact: ContactFields
    reminder: FollowUpReminder | None = None


# =============================================================================
# ACTIONS
# =============================================================================


class AddToListAction(BaseSchema):
    type: Literal["add_to_list"]
    data: AddToListData


class CreateAppointmentAction(BaseSchema):
    type: Literal["create_appointment"]
    data: CreateAppointmentData


class CreateAlarmAction(BaseSchema):
    type: Literal["create_alarm"]
    data: CreateAlarmData


class CreateContactAction(BaseSchema):
    type: Literal["create_contact"]
    data: CreateContactData


AssistantAction = Annotated[
    Union[AddToListAction, CreateAppointmentAction, CreateAlarmAction, CreateContactAction],
    Field(discriminator="type"),
]

assistant_action_adapter: TypeAdapter[AssistantAction] = TypeAdapter(AssistantAction)


# =============================================================================
# OUTCOMES
# =============================================================================

ActionStatus = Literal["succeeded", "failed", "rejected"]


class ActionOutcome(BaseSchema):
    """What happened to one action of a reply."""

    index: int
    type: str | None = None
    status: ActionStatus
    detail: str | None = None
    created_ids: list[UUID] = Field(default_factory=list)
