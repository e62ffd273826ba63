"""Coaching chat models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ChatRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatSession:
    """A conversation between a user and the coach."""

    id: UUID
    user_id: UUID
    title: str
    created_at: datetime


@dataclass(frozen=True)
class ChatMessage:
    id: UUID
    session_id: UUID
    role: ChatRole
    text: str
    created_at: datetime


@dataclass(frozen=True)
class CoachReply:
    """The coach's answer and the session it belongs to."""

    session: ChatSession
    message: ChatMessage
