"""API routes package."""

from app.api.routes import (
    auth,
    calendar,
    categorize,
    chat,
    contacts,
    conversations,
    list_items,
    reminders,
    shared,
    smart_lists,
    users,
)

__all__ = [
    "auth",
    "calendar",
    "categorize",
    "chat",
    "contacts",
    "conversations",
    "list_items",
    "reminders",
    "shared",
    "smart_lists",
    "users",
]
