"""Pydantic schemas for API request/response validation."""

from app.schemas.user import UserCreate, UserPreferences, UserRead, UserSummary, UserUpdate
from app.schemas.auth import GoogleAuthRequest, SimpleLoginRequest, SimpleLoginResponse, TokenResponse
from app.schemas.chat import ChatRequest, ChatResponse, ConversationResponse, MessageResponse
from app.schemas.actions import ActionOutcome, AssistantAction
from app.schemas.lists import (
    ListItemCreate,
    ListItemRead,
    ListItemUpdate,
    SmartListCreate,
    SmartListRead,
    SmartListUpdate,
    SmartListWithItems,
)
from app.schemas.reminders import ReminderCreate, ReminderRead, ReminderUpdate
from app.schemas.contacts import ContactCreate, ContactRead

__all__ = [
    # User
    "UserCreate",
    "UserPreferences",
    "UserRead",
    "UserSummary",
    "UserUpdate",
    # Auth
    "GoogleAuthRequest",
    "SimpleLoginRequest",
    "SimpleLoginResponse",
    "TokenResponse",
    # Chat
    "ChatRequest",
    "ChatResponse",
    "ConversationResponse",
    "MessageResponse",
    # Actions
    "ActionOutcome",
    "AssistantAction",
    # Smart lists
    "ListItemCreate",
    "ListItemRead",
    "ListItemUpdate",
    "SmartListCreate",
    "SmartListRead",
    "SmartListUpdate",
    "SmartListWithItems",
    # Reminders
    "ReminderCreate",
    "ReminderRead",
    "ReminderUpdate",
    # Contacts
    "ContactCreate",
    "ContactRead",
]
