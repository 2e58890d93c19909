"""
Copy the legacy SQLite database into the Supabase PostgreSQL store.

Run with:
    python scripts/migrate_sqlite.py --sqlite-path data/encore.db
    python scripts/migrate_sqlite.py --tables properties rooms --no-backup

Requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (read from .env).
The target schema must already exist.
"""

import argparse
import asyncio
import sys

import structlog
from supabase import acreate_client

from eventav.config import get_settings
from eventav.constants import MIGRATION_TABLES
from eventav.logging_config import setup_logging
from eventav.services.migration import migrate_sqlite_to_supabase

logger = structlog.get_logger("migrate_sqlite")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("--sqlite-path", default=settings.migration.sqlite_path)
    parser.add_argument(
        "--tables",
        nargs="+",
        choices=MIGRATION_TABLES,
        default=list(MIGRATION_TABLES),
        help="Tables to copy, in order (default: all)",
    )
    parser.add_argument("--batch-size", type=int, default=settings.migration.batch_size)
    parser.add_argument("--no-backup", action="store_true", help="Skip the SQLite backup copy")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    setup_logging(settings.debug)
    args = parse_args(argv)

    if not (settings.supabase_url and settings.supabase_service_role_key):
        logger.error("migration_supabase_not_configured")
        return 1

    client = await acreate_client(settings.supabase_url, settings.supabase_service_role_key)
    try:
        await migrate_sqlite_to_supabase(
            args.sqlite_path,
            client,
            tables=tuple(args.tables),
            batch_size=args.batch_size,
            backup=not args.no_backup,
        )
    except Exception:
        logger.exception("migration_failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
