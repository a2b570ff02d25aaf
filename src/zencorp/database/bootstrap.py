from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# (account id, full name, username, password, role, employee id)
DEMO_ACCOUNTS = (
    ("dir-1", "Director", "director", "director123", "director", None),
    ("u-1", "John Manager", "admin", "manager123", "manager", None),
    ("emp-hr-1", "Sarah Hale", "hr_boss", "hr12345", "hr_head", "emp-hr-1"),
    ("emp-it-1", "Aziz Karimov", "aziz", "worker123", "unit_lead", "emp-it-1"),
    ("emp-it-2", "Lena Orlova", "lena", "worker123", "employee", "emp-it-2"),
)


@contextmanager
def _connect(db_config: dict, *, with_database: bool = True) -> Iterator:
    target = DBConfig.from_dict(db_config)
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
        elif ch == "\\":
            buf.append(ch)
            escape = True
        elif ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
        elif ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
        elif ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
        else:
            buf.append(ch)
        prev = ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with _connect(db_config) as conn:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _connect(db_config, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;")
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)


def ensure_demo_accounts(db_config: dict) -> None:
    """Create or refresh the demo login for every role."""
    with _connect(db_config) as conn:
        cur = conn.cursor(dictionary=True)
        for account_id, full_name, username, password, role, employee_id in DEMO_ACCOUNTS:
            _upsert_account(
                cur,
                account_id=account_id,
                full_name=full_name,
                username=username,
                password_hash=generate_password_hash(password),
                role=role,
                employee_id=employee_id,
            )
        conn.commit()


def _upsert_account(
    cur,
    *,
    account_id: str,
    full_name: str,
    username: str,
    password_hash: str,
    role: str,
    employee_id: Optional[str],
) -> None:
    cur.execute("SELECT id FROM users WHERE username=%s", (username,))
    if cur.fetchone():
        cur.execute(
            """
            UPDATE users
            SET full_name=%s, password_hash=%s, role=%s, employee_id=%s, is_active=1
            WHERE username=%s
            """,
            (full_name, password_hash, role, employee_id, username),
        )
    else:
        cur.execute(
            """
            INSERT INTO users (id, username, password_hash, role, full_name, employee_id)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (account_id, username, password_hash, role, full_name, employee_id),
        )


def list_tables(db_config: dict) -> list[str]:
    with _connect(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
