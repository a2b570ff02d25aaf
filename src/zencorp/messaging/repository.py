from __future__ import annotations

from typing import Protocol, Sequence

from .model import Message


class MessageRepository(Protocol):
    def create(self, message: Message) -> None:
        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[Message]:
        """Messages sent or received by ``user_id``, oldest first."""
        raise NotImplementedError

    def mark_read(self, *, to_id: str, from_id: str) -> int:
        raise NotImplementedError

    def unread_counts(self, to_id: str) -> dict[str, int]:
        """Unread message count per sender."""
        raise NotImplementedError
