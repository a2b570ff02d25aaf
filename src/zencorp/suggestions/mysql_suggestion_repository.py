from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Suggestion
from .repository import SuggestionRepository


def _to_suggestion(r: dict) -> Suggestion:
    return Suggestion(
        suggestion_id=r["id"],
        author_id=r["author_id"],
        author_name=r.get("author_name") or "",
        text=r["text"],
        created_at=int(r["created_at"]),
    )


class MySQLSuggestionRepository(SuggestionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, suggestion: Suggestion) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO suggestions(id, author_id, author_name, text, created_at) VALUES(%s,%s,%s,%s,%s)",
                (
                    suggestion.suggestion_id,
                    suggestion.author_id,
                    suggestion.author_name,
                    suggestion.text,
                    suggestion.created_at,
                ),
            )

    def get_by_id(self, suggestion_id: str) -> Optional[Suggestion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, author_id, author_name, text, created_at FROM suggestions WHERE id=%s",
                (suggestion_id,),
            )
            r = fetchone(cur)
            return _to_suggestion(r) if r else None

    def list_all(self) -> Sequence[Suggestion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, author_id, author_name, text, created_at FROM suggestions ORDER BY created_at DESC")
            return [_to_suggestion(r) for r in fetchall(cur)]

    def delete(self, suggestion_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM suggestions WHERE id=%s", (suggestion_id,))
            return cur.rowcount > 0
