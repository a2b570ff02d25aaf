from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    message_id: str
    from_id: str
    to_id: str
    text: str
    sent_at: int
    read: bool = False

    def as_dict(self) -> dict:
        return {
            "id": self.message_id,
            "fromId": self.from_id,
            "toId": self.to_id,
            "text": self.text,
            "timestamp": self.sent_at,
            "read": self.read,
        }
