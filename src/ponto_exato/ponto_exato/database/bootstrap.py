from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_COMPANY_CODE = "DEMO01"
DEMO_ADMIN_EMAIL = "admin@pontoexato.com"
DEMO_ADMIN_PASSWORD = "admin123"
DEMO_EMPLOYEES = (
    ("Ana Souza", "1001", "1234", "Analista de RH", "08:00 - 18:00"),
    ("Bruno Lima", "1002", "1234", "Operador", "08:00 - 18:00"),
)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quotes."""

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
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("seed applied from %s", seed_path)


def ensure_demo_company(db_config: dict) -> None:
    """Give the demo company and its employees working password hashes."""

    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT company_id FROM companies WHERE company_id=%s", (DEMO_COMPANY_CODE,))
        if not cur.fetchone():
            raise RuntimeError(f"Missing demo company {DEMO_COMPANY_CODE}; apply seed.sql first")

        cur.execute(
            "UPDATE companies SET admin_email=%s, admin_password_hash=%s WHERE company_id=%s",
            (DEMO_ADMIN_EMAIL, generate_password_hash(DEMO_ADMIN_PASSWORD), DEMO_COMPANY_CODE),
        )

        for name, matricula, password, role_function, work_shift in DEMO_EMPLOYEES:
            password_hash = generate_password_hash(password)
            cur.execute(
                "SELECT employee_id FROM employees WHERE company_code=%s AND matricula=%s",
                (DEMO_COMPANY_CODE, matricula),
            )
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET name=%s, password_hash=%s, role_function=%s, work_shift=%s, status='active'
                    WHERE company_code=%s AND matricula=%s
                    """,
                    (name, password_hash, role_function, work_shift, DEMO_COMPANY_CODE, matricula),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (employee_id, company_code, name, matricula, password_hash,
                                           role_function, work_shift, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, 'active')
                    """,
                    (uuid.uuid4().hex[:20], DEMO_COMPANY_CODE, name, matricula, password_hash, role_function, work_shift),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
