"""Chat route: one user message in, assistant reply plus executed actions out."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, DbSession, require_same_user
from app.schemas.chat import ChatRequest, ChatResponse
from app.services import chat_service

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> ChatResponse:
    """
    Send a message to the assistant.

    Creates the conversation when `conversationId` is omitted. Actions in the
    reply are executed before returning; their outcomes are listed in
    `actionResults` and never change the response status.

    Errors:
    - 403 if `userId` is not the caller
    - 404 if the conversation is not the caller's
    - 500 if the LLM call fails (the user message stays stored)
    """
    require_same_user(request.user_id, current_user)
    return await chat_service.handle_chat_turn(
        db,
        current_user,
        request.message,
        request.conversation_id,
    )
