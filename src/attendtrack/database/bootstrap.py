from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

DEMO_PASSWORD = "attend123"
DEMO_ACCOUNTS = (
    # email, full name, roles
    ("admin@attendtrack.edu", "Admin Demo", ("admin", "professor")),
    ("professor@attendtrack.edu", "Professor Demo", ("professor",)),
    ("student@attendtrack.edu", "Student Demo", ("student",)),
)
DEMO_COURSE = ("Introduction to Computer Science", "CS101", "Fall", 2024)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied to %s", DBConfig.from_dict(db_config).describe())


def ensure_demo_data(db_config: dict) -> None:
    """Create demo accounts (one per role) and a sample course owned by the professor."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_account(email: str, full_name: str, roles: tuple[str, ...]) -> str:
            password_hash = generate_password_hash(DEMO_PASSWORD)
            cur.execute("SELECT id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                user_id = existing["id"]
                cur.execute("UPDATE users SET password_hash=%s WHERE id=%s", (password_hash, user_id))
                cur.execute("UPDATE profiles SET full_name=%s WHERE id=%s", (full_name, user_id))
            else:
                user_id = str(uuid.uuid4())
                cur.execute(
                    "INSERT INTO users (id, email, password_hash) VALUES (%s, %s, %s)",
                    (user_id, email, password_hash),
                )
                cur.execute(
                    "INSERT INTO profiles (id, email, full_name) VALUES (%s, %s, %s)",
                    (user_id, email, full_name),
                )
            for role in roles:
                cur.execute(
                    "INSERT IGNORE INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
                    (str(uuid.uuid4()), user_id, role),
                )
            return user_id

        professor_id = None
        for email, full_name, roles in DEMO_ACCOUNTS:
            user_id = upsert_account(email, full_name, roles)
            if email.startswith("professor@"):
                professor_id = user_id

        name, code, semester, year = DEMO_COURSE
        cur.execute("SELECT id FROM courses WHERE professor_id=%s AND code=%s", (professor_id, code))
        if not cur.fetchone():
            cur.execute(
                """
                INSERT INTO courses (id, name, code, professor_id, semester, year)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (str(uuid.uuid4()), name, code, professor_id, semester, year),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo accounts ready (password=%s)", DEMO_PASSWORD)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
