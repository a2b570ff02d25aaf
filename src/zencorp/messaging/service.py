from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from .model import Message
from .repository import MessageRepository


def _now_ms() -> int:
    return to_epoch_ms(now_local())


class MessageService:
    def __init__(self, messages: MessageRepository, *, clock: Callable[[], int] = _now_ms):
        self._messages = messages
        self._clock = clock

    def send(self, *, from_id: str, to_id: str, text: str) -> Message:
        text = require_non_empty(text, "Message")
        to_id = require_non_empty(to_id, "Recipient")
        if to_id == from_id:
            raise ValidationError("You cannot message yourself")

        message = Message(
            message_id=new_id("msg"),
            from_id=from_id,
            to_id=to_id,
            text=text,
            sent_at=self._clock(),
        )
        self._messages.create(message)
        return message

    def conversation(self, *, user_id: str, contact_id: Optional[str] = None) -> Sequence[Message]:
        messages = self._messages.list_for_user(user_id)
        if contact_id:
            messages = [m for m in messages if contact_id in (m.from_id, m.to_id)]
        return messages

    def mark_read(self, *, user_id: str, contact_id: str) -> int:
        return self._messages.mark_read(to_id=user_id, from_id=contact_id)

    def unread_counts(self, *, user_id: str) -> dict[str, int]:
        return self._messages.unread_counts(user_id)
