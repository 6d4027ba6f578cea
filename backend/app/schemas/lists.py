"""Smart list and list item schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, ensure_utc

SortBy = Literal["category", "priority", "date_added", "custom"]


# =============================================================================
# LIST ITEMS
# =============================================================================


class ListItemFields(BaseSchema):
    """Editable list item fields shared by create and read schemas."""

    name: str = Field(..., min_length=1)
    category: str | None = None
    priority: int = Field(1, ge=1, le=5)
    completed: bool = False
    notes: str | None = None
    assigned_to: str | None = None
    added_by: str | None = None
    due_date: datetime | None = None
    position: int = 0
    amount: Decimal | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    quantity: Decimal | None = Field(None, ge=0)
    unit: str | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class ListItemCreate(ListItemFields):
    """Schema for creating a list item. Category is inferred when omitted."""

    list_id: UUID


class SharedListItemCreate(ListItemFields):
    """Schema for adding an item through a share link."""

    pass


class ListItemUpdate(BaseSchema):
    """Schema for updating a list item. All fields optional."""

    name: str | None = Field(None, min_length=1)
    category: str | None = None
    priority: int | None = Field(None, ge=1, le=5)
    completed: bool | None = None
    notes: str | None = None
    assigned_to: str | None = None
    due_date: datetime | None = None
    position: int | None = None
    amount: Decimal | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    quantity: Decimal | None = Field(None, ge=0)
    unit: str | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class ListItemRead(ListItemFields, IDMixin, TimestampMixin):
    """Schema for reading list item data."""

    list_id: UUID


# =============================================================================
# SMART LISTS
# =============================================================================


class SmartListCreate(BaseSchema):
    """Schema for creating a smart list. Categories default to the type's taxonomy."""

    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field("shopping", min_length=1, max_length=50)
    description: str | None = None
    sort_by: SortBy = "category"
    categories: list[str] | None = None


class SmartListUpdate(BaseSchema):
    """
    Schema for updating a smart list. All fields optional.

    Sharing state is changed through the share endpoint; setting
    is_shared to false here revokes the share code.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    type: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    sort_by: SortBy | None = None
    categories: list[str] | None = None
    is_shared: Literal[False] | None = None


class SmartListRead(BaseSchema, IDMixin, TimestampMixin):
    """Schema for reading smart list data."""

    user_id: UUID
    name: str
    type: str
    description: str | None
    is_shared: bool
    share_code: str | None
    collaborators: list[str]
    sort_by: str
    categories: list[str]


class SmartListWithItems(SmartListRead):
    """Smart list with its items."""

    items: list[ListItemRead] = Field(default_factory=list)


class ShareResponse(BaseSchema):
    """Share code for a list."""

    share_code: str


class JoinListRequest(BaseSchema):
    """Join a shared list by its code."""

    share_code: str = Field(..., min_length=1)


class AddCollaboratorRequest(BaseSchema):
    """Add a collaborator by email."""

    email: EmailStr


# =============================================================================
# CATEGORIZATION
# =============================================================================


class CategorizeRequest(BaseSchema):
    """Request to categorize a free-text item name."""

    item_name: str = Field(..., min_length=1)
    list_type: str = Field("shopping", min_length=1)


class CategorizeResponse(BaseSchema):
    """Category assigned to an item."""

    category: str
