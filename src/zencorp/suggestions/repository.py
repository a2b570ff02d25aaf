from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Suggestion


class SuggestionRepository(Protocol):
    def create(self, suggestion: Suggestion) -> None:
        raise NotImplementedError

    def get_by_id(self, suggestion_id: str) -> Optional[Suggestion]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Suggestion]:
        raise NotImplementedError

    def delete(self, suggestion_id: str) -> bool:
        raise NotImplementedError
