"""Conversation turns: personalized prompting, reply parsing and action dispatch."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.models import ChatRole, Conversation, Message, User
from app.errors import NotFoundError
from app.schemas.chat import ChatResponse, MessageResponse
from app.schemas.user import UserPreferences
from app.services.action_dispatcher import action_dispatcher
from app.services.llm_client import extract_json_object, llm_client
from app.services.timeutils import user_zoneinfo, utcnow

logger = logging.getLogger(__name__)
settings = get_settings()

FALLBACK_REPLY = "I'm here to help! How can I assist you today?"
TITLE_LENGTH = 50

_NOT_PROVIDED = "Not provided"
_NOT_SPECIFIED = "Not specified"

# (profession keywords, guidance block)
_PROFESSION_GUIDANCE: list[tuple[tuple[str, ...], str]] = [
    (
        ("contractor", "construction", "builder", "electrician", "plumber"),
        """PROFESSION-SPECIFIC LISTS FOR CONTRACTORS:
- Use "punch_list" type for construction/repair tasks
- Categories for punch lists: "Electrical", "Plumbing", "Painting", "Flooring", "HVAC", "Roofing", "General"
- When the user mentions repairs, fixes, installations, or construction work, use punch_list type""",
    ),
    (
        ("realtor", "real estate", "broker"),
        """PROFESSION-SPECIFIC LISTS FOR REAL ESTATE:
- Use "closing_list" type for property closing tasks
- Categories for closing lists: "Inspection", "Financing", "Legal", "Insurance", "Documentation", "Final Walkthrough"
- When the user mentions closing tasks, property inspections, or mortgage items, use closing_list type""",
    ),
    (
        ("doctor", "physician", "nurse", "medical"),
        """PROFESSION-SPECIFIC LISTS FOR MEDICAL:
- Use "patient_list" type for patient care tasks
- Categories for patient lists: "Appointments", "Follow-ups", "Prescriptions", "Tests", "Consultations"
- When the user mentions patient care, prescriptions, or test results, use patient_list type""",
    ),
    (
        ("lawyer", "attorney", "legal"),
        """PROFESSION-SPECIFIC LISTS FOR LEGAL:
- Use "case_list" type for legal case management
- Categories for case lists: "Research", "Documentation", "Court Dates", "Client Meetings", "Filing"
- When the user mentions legal work, cases, or court dates, use case_list type""",
    ),
    (
        ("teacher", "educator", "professor"),
        """PROFESSION-SPECIFIC LISTS FOR EDUCATORS:
- Use "lesson_list" type for teaching tasks
- Categories for lesson lists: "Lesson Plans", "Grading", "Parent Meetings", "Supplies", "Field Trips"
- When the user mentions lesson plans, grading, or parent meetings, use lesson_list type""",
    ),
    (
        ("restaurant", "chef", "cook", "food service"),
        """PROFESSION-SPECIFIC LISTS FOR FOOD SERVICE:
- Use "menu_list" type for restaurant/kitchen tasks
- Categories for menu lists: "Ingredients", "Equipment", "Staff", "Menu Items", "Supplies", "Vendors"
- When the user mentions kitchen tasks, ingredients, or menu items, use menu_list type""",
    ),
]

_GENERAL_GUIDANCE = """GENERAL PROFESSION SUPPORT:
- Detect work-related tasks and create appropriate specialized lists
- Use context clues from the user's language to determine list type"""

_RESPONSE_FORMAT = """Always respond with a single JSON object:
{
  "content": "Your spoken reply to the user",
  "suggestions": ["optional short follow-up prompts"],
  "actions": [ ...zero or more actions... ]
}

Action shapes:
- {"type": "add_to_list", "data": {"listType": "shopping|todo|punch_list|waiting_list|closing_list|patient_list|case_list|lesson_list|menu_list", "items": [{"name": "item name", "category": "category"}]}}
- {"type": "create_appointment", "data": {"appointment": {"title": "...", "description": "optional", "date": "YYYY-MM-DDTHH:MM:SS"}}}
- {"type": "create_alarm", "data": {"alarm": {"title": "...", "description": "optional", "date": "YYYY-MM-DDTHH:MM:SS"}}}
- {"type": "create_contact", "data": {"contact": {"firstName": "...", "lastName": "...", "company": "...", "email": "...", "phone": "..."}, "reminder": {"title": "Follow up with ...", "description": "optional"}}}

Choosing actions:
- Food and shopping items (chocolate, milk, "buy bread") -> add_to_list with "shopping" listType
- Home repairs and contractor work -> add_to_list with "punch_list" listType
- Restaurant reservations and waiting -> add_to_list with "waiting_list" listType
- Appointments, meetings, doctor visits, "remind me to ..." at a time -> create_appointment
- Alarms and wake-up calls ("set an alarm", "wake me up at") -> create_alarm, not an appointment
- General tasks (finish report, email the team) -> add_to_list with "todo" listType
When asked to add items you MUST include the add_to_list action."""


def profession_guidance(profession: str | None) -> str:
    """List guidance block for the user's profession."""
    prof = (profession or "").lower()
    for keywords, guidance in _PROFESSION_GUIDANCE:
        if any(keyword in prof for keyword in keywords):
            return guidance
    return _GENERAL_GUIDANCE


def load_preferences(user: User) -> UserPreferences:
    """Stored preferences as a UserPreferences; invalid documents fall back to defaults."""
    try:
        return UserPreferences.model_validate(user.preferences or {})
    except ValidationError:
        logger.warning("Stored preferences for user %s are invalid, ignoring them", user.id)
        return UserPreferences()


def build_system_prompt(user: User, now: datetime | None = None) -> str:
    """
    Personalized system prompt for one chat turn.

    Includes the user's profile, typed preferences, profession-specific list
    guidance, the current local date/time in the user's timezone and the JSON
    reply format.
    """
    prefs = load_preferences(user)
    tz = user_zoneinfo(user.timezone)
    local_now = (now or utcnow()).astimezone(tz)
    sleep = (
        f"Bedtime: {prefs.sleep_schedule.bedtime}, Wake: {prefs.sleep_schedule.wakeup}"
        if prefs.sleep_schedule
        else _NOT_SPECIFIED
    )

    return f"""You are GabAi, a personal voice assistant for {user.name or "the user"}. You have a warm, helpful personality and remember the user's preferences.

User Profile:
- Name: {user.name or _NOT_PROVIDED}
- Age: {user.age or _NOT_PROVIDED}
- Location: {user.location or _NOT_PROVIDED}
- Profession: {user.profession or _NOT_PROVIDED}
- Religious beliefs: {prefs.religious or _NOT_SPECIFIED}
- Dietary restrictions: {", ".join(prefs.dietary) or "None specified"}
- Sleep schedule: {sleep}
- Communication style: {prefs.communication_style or _NOT_SPECIFIED}
- Interests: {", ".join(prefs.interests) or _NOT_SPECIFIED}
- Family details: {prefs.family_details or _NOT_SPECIFIED}

{profession_guidance(user.profession)}

Guidelines:
1. Respond in a conversational, friendly tone suited to being read aloud
2. Reference the user's preferences when relevant (e.g. suggest alternatives that fit dietary restrictions)
3. Respect their religious beliefs, dietary restrictions and sleep schedule
4. Adapt to their preferred communication style

CURRENT DATE: {local_now.strftime("%Y-%m-%d")} (TODAY, {local_now.strftime("%A")})
CURRENT TIME: {local_now.strftime("%H:%M")}
TIMEZONE: {tz.key} (UTC offset {local_now.strftime("%z")})

TIME RULES:
- Give action dates as local times in the user's timezone, without an offset
- Use today's date unless the user says otherwise; "tomorrow" is the day after {local_now.strftime("%Y-%m-%d")}
- Times like "1:40" without AM/PM between 1:00 and 5:59 are PM

{_RESPONSE_FORMAT}"""


@dataclass
class AssistantReply:
    """Parsed LLM reply."""

    content: str
    suggestions: list[str] = field(default_factory=list)
    actions: list[Any] = field(default_factory=list)


def parse_reply(text: str) -> AssistantReply:
    """
    Interpret raw LLM output.

    A JSON object supplies content, suggestions and actions; anything else is
    treated as plain reply text with no actions.
    """
    payload = extract_json_object(text)
    if payload is None:
        logger.info("LLM reply is not JSON, using it as plain content")
        return AssistantReply(content=text.strip() or FALLBACK_REPLY)

    content = payload.get("content")
    if not isinstance(content, str) or not content.strip():
        content = FALLBACK_REPLY

    suggestions = payload.get("suggestions") or []
    if not isinstance(suggestions, list):
        suggestions = []
    actions = payload.get("actions") or []
    if not isinstance(actions, list):
        logger.warning("LLM returned non-list actions (%s), ignoring them", type(actions).__name__)
        actions = []

    return AssistantReply(
        content=content,
        suggestions=[s for s in suggestions if isinstance(s, str)],
        actions=actions,
    )


def _llm_history(messages: list[Message]) -> list[dict]:
    history = [{"role": m.role, "content": m.content} for m in messages]
    # The Messages API expects the conversation to open with a user turn
    while history and history[0]["role"] != ChatRole.USER.value:
        history.pop(0)
    return history


class ChatService:
    """Runs one chat turn end to end."""

    async def generate_reply(
        self,
        user: User,
        history: list[dict],
        message: str,
        *,
        now: datetime | None = None,
    ) -> AssistantReply:
        """
        Ask the LLM for a reply to `message`.

        Raises:
            UpstreamServiceError: the LLM call failed (not retried)
        """
        text = await llm_client.complete(
            build_system_prompt(user, now),
            history + [{"role": ChatRole.USER.value, "content": message}],
        )
        return parse_reply(text)

    async def get_or_create_conversation(
        self,
        db: AsyncSession,
        user_id: UUID,
        conversation_id: UUID | None,
        message: str,
    ) -> Conversation:
        if conversation_id is not None:
            result = await db.execute(
                select(Conversation).where(
                    Conversation.id == conversation_id, Conversation.user_id == user_id
                )
            )
            conversation = result.scalar_one_or_none()
            if conversation is None:
                raise NotFoundError(f"Conversation {conversation_id} not found")
            return conversation

        conversation = Conversation(user_id=user_id, title=message[:TITLE_LENGTH])
        db.add(conversation)
        # Flushed only; committed together with the first message
        await db.flush()
        logger.info("Started conversation %s for user %s", conversation.id, user_id)
        return conversation

    async def get_recent_messages(
        self, db: AsyncSession, conversation_id: UUID, limit: int
    ) -> list[Message]:
        """Last `limit` messages of a conversation, oldest first."""
        result = await db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))

    async def handle_chat_turn(
        self,
        db: AsyncSession,
        user: User,
        message: str,
        conversation_id: UUID | None = None,
        *,
        now: datetime | None = None,
    ) -> ChatResponse:
        """
        Process one user message.

        A new conversation and the user message are committed together before
        the LLM is called, so both stay stored when the call fails. Action
        failures are reported in `action_results` and never fail the turn.

        Raises:
            NotFoundError: conversation_id is not one of the user's conversations
            UpstreamServiceError: the LLM call failed
        """
        user_id = user.id
        tz = user_zoneinfo(user.timezone)

        conversation = await self.get_or_create_conversation(db, user_id, conversation_id, message)
        conversation_id = conversation.id
        prior = await self.get_recent_messages(db, conversation_id, settings.chat_history_window)

        user_message = Message(
            conversation_id=conversation_id, role=ChatRole.USER.value, content=message
        )
        db.add(user_message)
        await db.commit()
        await db.refresh(user_message)

        reply = await self.generate_reply(user, _llm_history(prior), message, now=now)

        assistant_message = Message(
            conversation_id=conversation_id, role=ChatRole.ASSISTANT.value, content=reply.content
        )
        db.add(assistant_message)
        await db.commit()
        await db.refresh(assistant_message)

        # Serialize before dispatching; a failed action rolls back and expires ORM state
        user_message_out = MessageResponse.model_validate(user_message)
        assistant_message_out = MessageResponse.model_validate(assistant_message)

        outcomes = await action_dispatcher.dispatch(db, user_id, tz, reply.actions, now=now)
        if reply.actions:
            succeeded = sum(1 for o in outcomes if o.status == "succeeded")
            logger.info(
                "Conversation %s: %d/%d action(s) succeeded", conversation_id, succeeded, len(outcomes)
            )

        return ChatResponse(
            user_message=user_message_out,
            message=assistant_message_out,
            conversation_id=conversation_id,
            suggestions=reply.suggestions,
            actions=[a for a in reply.actions if isinstance(a, dict)],
            action_results=outcomes,
        )


# Singleton instance
chat_service = ChatService()
