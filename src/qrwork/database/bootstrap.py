from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql independent of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


# quoted literals are consumed whole, so a ';' inside them never splits
_SQL_TOKEN = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|;|[^'\";]+|.", re.S)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file into single statements."""
    parts: List[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token != ";":
            parts.append(token)
            continue
        stmt = "".join(parts).strip()
        parts = []
        if stmt:
            yield stmt

    tail = "".join(parts).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
        cur.close()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    ensure_database_exists(conn_factory)

    path = Path(schema_path) if schema_path else SCHEMA_PATH
    sql = _strip_line_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        cur.close()
    finally:
        conn.close()
    logger.info("Applied %d schema statements from %s", count, path.name)


def list_tables(db_config: dict) -> List[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        tables = [str(row[0]) for row in cur.fetchall()]
        cur.close()
        return tables
    finally:
        conn.close()
