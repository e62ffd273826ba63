"""AI coaching chat with stored history."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from calorie_vita.domain.coaching import ChatMessage, ChatRole, ChatSession, CoachReply
from calorie_vita.domain.goals import UserGoals
from calorie_vita.services.goals import GoalsService

COACH_INSTRUCTIONS = (
    "You are a friendly and knowledgeable fitness and nutrition coach. "
    "Give short, practical answers and encourage healthy habits."
)
TITLE_MAX_LENGTH = 60

_logger = logging.getLogger(__name__)


class ChatHistoryRepository(Protocol):
    """Persistence interface for coaching conversations."""

    def create_session(
        self, user_id: UUID, title: str, created_at: datetime
    ) -> ChatSession:
        """Create a session and return it."""

    def get_session(self, session_id: UUID) -> ChatSession | None:
        """Return a session by id, if present."""

    def list_sessions(self, user_id: UUID, limit: int) -> list[ChatSession]:
        """Return a user's sessions, newest first."""

    def add_message(
        self, session_id: UUID, role: ChatRole, text: str, created_at: datetime
    ) -> ChatMessage:
        """Store a message and return it."""

    def list_messages(self, session_id: UUID, limit: int) -> list[ChatMessage]:
        """Return the latest ``limit`` messages of a session, oldest first."""

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session and its messages."""

    def delete_sessions(self, user_id: UUID) -> None:
        """Delete every session of a user."""


class CoachClient(Protocol):
    """Interface for the language model behind the coach."""

    async def reply(
        self,
        *,
        model: str,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
        max_output_tokens: int,
    ) -> str:
        """Return the assistant's answer to a conversation."""


@dataclass
class CoachingService:
    """Answers user questions and keeps the conversation history."""

    repository: ChatHistoryRepository
    client: CoachClient
    goals_service: GoalsService
    model: str
    store: bool = False
    history_limit: int = 10
    max_output_tokens: int = 300

    async def send_message(
        self, user_id: UUID, text: str, session_id: UUID | None = None
    ) -> CoachReply | None:
        """Ask the coach a question.

        Starts a new session when ``session_id`` is omitted. Returns None when
        the session does not exist or belongs to another user. The user's
        message is stored only after the model has answered.
        """
        text = text.strip()
        if not text:
            raise ValueError("Message is empty")

        if session_id is None:
            session = None
            history: list[ChatMessage] = []
        else:
            session = self.get_session(user_id, session_id)
            if session is None:
                return None
            history = self.repository.list_messages(session.id, self.history_limit)

        messages = [
            {"role": message.role.value, "content": message.text} for message in history
        ]
        messages.append({"role": ChatRole.USER.value, "content": text})
        answer = await self.client.reply(
            model=self.model,
            store=self.store,
            instructions=_instructions_for(self.goals_service.get_goals(user_id)),
            messages=messages,
            max_output_tokens=self.max_output_tokens,
        )

        now = datetime.now(tz=UTC)
        if session is None:
            session = self.repository.create_session(user_id, _title_for(text), now)
            _logger.info("Started coaching session %s for user %s", session.id, user_id)
        self.repository.add_message(session.id, ChatRole.USER, text, now)
        reply = self.repository.add_message(
            session.id, ChatRole.ASSISTANT, answer.strip(), datetime.now(tz=UTC)
        )
        return CoachReply(session=session, message=reply)

    def get_session(self, user_id: UUID, session_id: UUID) -> ChatSession | None:
        """Return a session owned by ``user_id``."""
        session = self.repository.get_session(session_id)
        if session is None or session.user_id != user_id:
            return None
        return session

    def list_sessions(self, user_id: UUID, limit: int = 20) -> list[ChatSession]:
        return self.repository.list_sessions(user_id, limit)

    def list_messages(
        self, user_id: UUID, session_id: UUID, limit: int = 100
    ) -> list[ChatMessage] | None:
        """Return a session's messages, or None when it is not the user's."""
        if self.get_session(user_id, session_id) is None:
            return None
        return self.repository.list_messages(session_id, limit)

    def delete_session(self, user_id: UUID, session_id: UUID) -> bool:
        """Delete one session; False when it is not the user's."""
        if self.get_session(user_id, session_id) is None:
            return False
        self.repository.delete_session(session_id)
        return True

    def clear_history(self, user_id: UUID) -> None:
        self.repository.delete_sessions(user_id)
        _logger.info("Cleared coaching history for user %s", user_id)


def _title_for(text: str) -> str:
    first_line = text.splitlines()[0]
    if len(first_line) <= TITLE_MAX_LENGTH:
        return first_line
    return first_line[: TITLE_MAX_LENGTH - 3].rstrip() + "..."


def _instructions_for(goals: UserGoals) -> str:
    context = f" The user's daily calorie goal is {goals.calorie_goal} kcal."
    macros = goals.macro_goals
    if macros is not None:
        context += (
            f" Macro targets: {macros.carbs_calories} kcal carbs, "
            f"{macros.protein_calories} kcal protein, {macros.fat_calories} kcal fat."
        )
    return COACH_INSTRUCTIONS + context
