"""Supabase repository for coaching chat history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_vita.domain.coaching import ChatMessage, ChatRole, ChatSession
from calorie_vita.services.coaching import ChatHistoryRepository

_SESSION_COLUMNS = "id, user_id, title, created_at"
_MESSAGE_COLUMNS = "id, session_id, role, content, created_at"


@dataclass
class SupabaseChatRepository(ChatHistoryRepository):
    """Stores sessions in ``chat_sessions`` and messages in ``chat_messages``."""

    client: Client

    def create_session(
        self, user_id: UUID, title: str, created_at: datetime
    ) -> ChatSession:
        response = (
            self.client.table("chat_sessions")
            .insert(
                {
                    "user_id": str(user_id),
                    "title": title,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create chat session in Supabase")
        return _row_to_session(response.data[0])

    def get_session(self, session_id: UUID) -> ChatSession | None:
        response = (
            self.client.table("chat_sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_session(response.data[0])

    def list_sessions(self, user_id: UUID, limit: int) -> list[ChatSession]:
        response = (
            self.client.table("chat_sessions")
            .select(_SESSION_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_session(row) for row in response.data or []]

    def add_message(
        self, session_id: UUID, role: ChatRole, text: str, created_at: datetime
    ) -> ChatMessage:
        response = (
            self.client.table("chat_messages")
            .insert(
                {
                    "session_id": str(session_id),
                    "role": role.value,
                    "content": text,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store chat message in Supabase")
        return _row_to_message(response.data[0])

    def list_messages(self, session_id: UUID, limit: int) -> list[ChatMessage]:
        """Fetch newest first so ``limit`` keeps the latest, then restore order."""
        response = (
            self.client.table("chat_messages")
            .select(_MESSAGE_COLUMNS)
            .eq("session_id", str(session_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_row_to_message(row) for row in reversed(response.data or [])]

    def delete_session(self, session_id: UUID) -> None:
        self.client.table("chat_messages").delete().eq(
            "session_id", str(session_id)
        ).execute()
        self.client.table("chat_sessions").delete().eq("id", str(session_id)).execute()

    def delete_sessions(self, user_id: UUID) -> None:
        response = (
            self.client.table("chat_sessions")
            .select("id")
            .eq("user_id", str(user_id))
            .execute()
        )
        session_ids = [str(row["id"]) for row in response.data or []]
        if session_ids:
            self.client.table("chat_messages").delete().in_(
                "session_id", session_ids
            ).execute()
        self.client.table("chat_sessions").delete().eq("user_id", str(user_id)).execute()


def _row_to_session(row: dict[str, object]) -> ChatSession:
    return ChatSession(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=str(row.get("title") or ""),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def _row_to_message(row: dict[str, object]) -> ChatMessage:
    return ChatMessage(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        role=ChatRole(str(row["role"])),
        text=str(row.get("content") or ""),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
