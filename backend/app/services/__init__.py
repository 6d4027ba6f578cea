"""Services for the assistant: LLM access, categorization, list routing and actions."""

from app.services.llm_client import llm_client
from app.services.action_dispatcher import action_dispatcher
from app.services.chat_service import chat_service

__all__ = ["llm_client", "action_dispatcher", "chat_service"]
