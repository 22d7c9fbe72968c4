from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..users.provisioning import UserProvisioningPolicy
from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")

DEMO_ACCOUNTS = (
    (Role.ADMIN, {"employee_id": "ADMIN-001", "first_name": "Lab", "last_name": "Administrator"}),
    (Role.TEACHER, {"employee_id": "EMP-1001", "first_name": "Maria", "last_name": "Santos", "gender": "Female"}),
    (
        Role.WORKING_STUDENT,
        {
            "student_id": "WS-2024-001",
            "first_name": "Jose",
            "last_name": "Reyes",
            "gender": "Male",
            "year_level": "3rd Year",
            "section": "A",
        },
    ),
    (Role.STUDENT, {"student_id": "2024-00001", "first_name": "Ana", "last_name": "Cruz", "gender": "Female"}),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal splitter for schema files: ';' ends a statement unless quoted.
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    ensure_database_exists(conn_factory)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Schema applied to %s", conn_factory.config.database)


def ensure_demo_users(db_config: dict, *, policy: Optional[UserProvisioningPolicy] = None) -> int:
    """Insert demo accounts that are missing. Returns how many were created."""
    policy = policy or UserProvisioningPolicy()
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    created = 0

    with db_cursor(conn_factory) as (_, cur):
        for role, fields in DEMO_ACCOUNTS:
            result = policy.validate(role, fields)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (result.login_name,))
            if fetchone(cur):
                continue

            values = dict(result.fields)
            cur.execute(
                """
                INSERT INTO users(
                    username, password_hash, role, first_name, middle_name, last_name,
                    gender, email, employee_id, student_id, year_level, section
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    result.login_name,
                    generate_password_hash(policy.default_password(role, fields)),
                    role.value,
                    values["first_name"],
                    values["middle_name"],
                    values["last_name"],
                    values["gender"],
                    values["email"],
                    values["employee_id"],
                    values["student_id"],
                    values["year_level"],
                    values["section"],
                ),
            )
            created += 1

    logger.info("Demo accounts ready (%d created)", created)
    return created


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
