from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Message
from .repository import MessageRepository


def _to_message(r: dict) -> Message:
    return Message(
        message_id=r["id"],
        from_id=r["from_id"],
        to_id=r["to_id"],
        text=r["text"],
        sent_at=int(r["sent_at"]),
        read=bool(r.get("is_read")),
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, message: Message) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO messages(id, from_id, to_id, text, sent_at, is_read) VALUES(%s,%s,%s,%s,%s,%s)",
                (message.message_id, message.from_id, message.to_id, message.text, message.sent_at, 1 if message.read else 0),
            )

    def list_for_user(self, user_id: str) -> Sequence[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, from_id, to_id, text, sent_at, is_read
                FROM messages
                WHERE from_id=%s OR to_id=%s
                ORDER BY sent_at, id
                """,
                (user_id, user_id),
            )
            return [_to_message(r) for r in fetchall(cur)]

    def mark_read(self, *, to_id: str, from_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE messages SET is_read=1 WHERE to_id=%s AND from_id=%s AND is_read=0",
                (to_id, from_id),
            )
            return int(cur.rowcount)

    def unread_counts(self, to_id: str) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT from_id, COUNT(*) AS n FROM messages WHERE to_id=%s AND is_read=0 GROUP BY from_id",
                (to_id,),
            )
            return {r["from_id"]: int(r["n"]) for r in fetchall(cur)}
