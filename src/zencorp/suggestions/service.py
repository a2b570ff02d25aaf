from __future__ import annotations

import logging
from typing import Callable, Sequence

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.constants import SUGGESTION_REPLY_PREFIX
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..messaging.model import Message
from ..messaging.service import MessageService
from .model import Suggestion
from .repository import SuggestionRepository

logger = logging.getLogger(__name__)

_READERS = frozenset({Role.DIRECTOR, Role.HR_HEAD})


def _now_ms() -> int:
    return to_epoch_ms(now_local())


class SuggestionService:
    """Suggestion box. Replies are delivered as direct messages."""

    def __init__(
        self,
        suggestions: SuggestionRepository,
        messages: MessageService,
        *,
        clock: Callable[[], int] = _now_ms,
    ):
        self._suggestions = suggestions
        self._messages = messages
        self._clock = clock

    def submit(self, *, author_id: str, author_name: str, text: str) -> Suggestion:
        suggestion = Suggestion(
            suggestion_id=new_id("sug"),
            author_id=author_id,
            author_name=author_name,
            text=require_non_empty(text, "Suggestion"),
            created_at=self._clock(),
        )
        self._suggestions.create(suggestion)
        logger.info("New suggestion %s from %s", suggestion.suggestion_id, author_id)
        return suggestion

    def list_suggestions(self, *, current_role: Role) -> Sequence[Suggestion]:
        if current_role not in _READERS:
            raise AuthorizationError("Only the director and HR can read suggestions")
        return self._suggestions.list_all()

    def delete(self, *, current_role: Role, suggestion_id: str) -> None:
        if current_role != Role.DIRECTOR:
            raise AuthorizationError("Only the director can delete suggestions")
        if not self._suggestions.delete(suggestion_id):
            raise NotFoundError("Suggestion not found")

    def reply(self, *, current_role: Role, from_id: str, suggestion_id: str, text: str) -> Message:
        if current_role not in _READERS:
            raise AuthorizationError("Only the director and HR can reply to suggestions")

        text = require_non_empty(text, "Reply")
        suggestion = self._suggestions.get_by_id(suggestion_id)
        if not suggestion:
            raise NotFoundError("Suggestion not found")

        return self._messages.send(
            from_id=from_id,
            to_id=suggestion.author_id,
            text=f"{SUGGESTION_REPLY_PREFIX}{text}",
        )
