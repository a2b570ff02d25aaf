from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Suggestion:
    suggestion_id: str
    author_id: str
    author_name: str
    text: str
    created_at: int

    def as_dict(self) -> dict:
        return {
            "id": self.suggestion_id,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "text": self.text,
            "date": self.created_at,
        }
