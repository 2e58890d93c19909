"""
One-off SQLite → PostgreSQL (Supabase) data migration.

Copies rows table by table, parents first, with no transformation. Each batch
is upserted on the primary key, so re-running the migration is safe: existing
rows are overwritten with the SQLite values instead of duplicated.

Usage:
    counts = await migrate_sqlite_to_supabase("data/encore.db", supabase_client)
    # {"properties": 3, "rooms": 12, ...}
"""

import shutil
import sqlite3
import time
from pathlib import Path
from typing import Any

import structlog
from supabase._async.client import AsyncClient as AsyncSupabaseClient

from eventav.constants import MIGRATION_TABLES

logger = structlog.get_logger(__name__)


def _sqlite_table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    ).fetchone()
    return row is not None


def read_sqlite_rows(conn: sqlite3.Connection, table: str) -> list[dict[str, Any]]:
    """All rows of a known table as plain dicts, in primary-key order."""
    if table not in MIGRATION_TABLES:
        raise ValueError(f"Refusing to read unknown table: {table}")
    cursor = conn.execute(f"SELECT * FROM {table} ORDER BY rowid")
    columns = [c[0] for c in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


async def migrate_table(
    conn: sqlite3.Connection,
    client: AsyncSupabaseClient,
    table: str,
    batch_size: int = 500,
) -> int:
    """Upsert every row of one SQLite table into the same-named Postgres table."""
    rows = read_sqlite_rows(conn, table)
    for start in range(0, len(rows), batch_size):
        batch = rows[start : start + batch_size]
        await client.table(table).upsert(batch, on_conflict="id").execute()
    logger.info("migration_table_copied", table=table, rows=len(rows))
    return len(rows)


async def migrate_sqlite_to_supabase(
    sqlite_path: str,
    client: AsyncSupabaseClient,
    tables: tuple[str, ...] = MIGRATION_TABLES,
    batch_size: int = 500,
    backup: bool = True,
) -> dict[str, int]:
    """
    Copy the given tables from a SQLite file into Supabase.

    A missing SQLite file means there is nothing to migrate. Tables absent
    from the SQLite file are skipped. After a successful run the SQLite file
    is copied to <path>.backup.<unix time>.

    Returns:
        Rows copied per table.
    """
    path = Path(sqlite_path)
    if not path.exists():
        logger.info("migration_no_sqlite_database", path=str(path))
        return {}

    counts: dict[str, int] = {}
    conn = sqlite3.connect(path)
    try:
        for table in tables:
            if not _sqlite_table_exists(conn, table):
                logger.warning("migration_table_missing", table=table)
                continue
            counts[table] = await migrate_table(conn, client, table, batch_size)
    finally:
        conn.close()

    if backup:
        backup_path = path.with_name(f"{path.name}.backup.{int(time.time())}")
        shutil.copy2(path, backup_path)
        logger.info("migration_sqlite_backed_up", backup_path=str(backup_path))

    logger.info("migration_completed", tables=len(counts), rows=sum(counts.values()))
    return counts
