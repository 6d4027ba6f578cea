"""Conversation and message history routes."""

from uuid import UUID

from fastapi import APIRouter, status
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, get_user_resource_or_404, require_same_user
from app.db.models import Conversation, Message
from app.schemas.chat import (
    ConversationCreateRequest,
    ConversationResponse,
    MessageCreateRequest,
    MessageResponse,
)

router = APIRouter(tags=["conversations"])


@router.get("/conversations/{user_id}", response_model=list[ConversationResponse])
async def list_conversations(
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[ConversationResponse]:
    """List the user's conversations, most recently updated first."""
    require_same_user(user_id, current_user)
    result = await db.execute(
        select(Conversation)
        .where(Conversation.user_id == current_user.id)
        .order_by(Conversation.updated_at.desc())
    )
    return [ConversationResponse.model_validate(c) for c in result.scalars()]


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    data: ConversationCreateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> ConversationResponse:
    """Create an empty conversation. POST /chat also creates one on demand."""
    conversation = Conversation(user_id=current_user.id, title=data.title)
    db.add(conversation)
    await db.commit()
    await db.refresh(conversation)
    return ConversationResponse.model_validate(conversation)


@router.get("/messages/{conversation_id}", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[MessageResponse]:
    """All messages of one of the user's conversations, oldest first."""
    await get_user_resource_or_404(db, Conversation, conversation_id, current_user.id)
    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
    )
    return [MessageResponse.model_validate(m) for m in result.scalars()]


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(
    data: MessageCreateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    """Store a message in one of the user's conversations without calling the assistant."""
    await get_user_resource_or_404(db, Conversation, data.conversation_id, current_user.id)
    message = Message(conversation_id=data.conversation_id, role=data.role, content=data.content)
    db.add(message)
    await db.commit()
    await db.refresh(message)
    return MessageResponse.model_validate(message)
