"""
Apply the raw SQL migrations in ``migrations/`` to the pricing database.

Files run in sorted order (001_create_properties.sql,
002_create_reservations.sql, ...).  Applied filenames are recorded in
``_migrations_applied`` so re-running only applies new files.

Usage::

    python -m scripts.migrate            # apply pending files
    python -m scripts.migrate --status   # list pending files only
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

# Make ``src`` importable when run as a plain script
_ROOT_DIR = Path(__file__).resolve().parent.parent
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from src.core.config import settings  # noqa: E402

MIGRATIONS_DIR = _ROOT_DIR / "migrations"

_CREATE_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS _migrations_applied (
    filename   TEXT PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


async def _applied_filenames(conn: AsyncConnection) -> set[str]:
    result = await conn.execute(text("SELECT filename FROM _migrations_applied"))
    return {row[0] for row in result}


async def _execute_script(conn: AsyncConnection, sql: str) -> None:
    # asyncpg only runs multi-statement scripts through the simple query
    # protocol, which text() does not use.
    raw_conn = await conn.get_raw_connection()
    await raw_conn.dbapi_connection._connection.execute(sql)


async def run_migrations(status_only: bool = False) -> list[str]:
    """Apply (or with ``status_only`` just list) pending migration files.

    Returns:
        Filenames that were pending when the run started.
    """
    sql_files = sorted(MIGRATIONS_DIR.glob("*.sql"))
    if not sql_files:
        print(f"No SQL files found in {MIGRATIONS_DIR}")  # noqa: T201
        return []

    engine = create_async_engine(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.execute(text(_CREATE_TRACKING_TABLE))
            applied = await _applied_filenames(conn)
            pending = [path for path in sql_files if path.name not in applied]

            for path in pending:
                if status_only:
                    print(f"  PENDING {path.name}")  # noqa: T201
                    continue
                print(f"  APPLY   {path.name} ...")  # noqa: T201
                await _execute_script(conn, path.read_text(encoding="utf-8"))
                await conn.execute(
                    text("INSERT INTO _migrations_applied (filename) VALUES (:filename)"),
                    {"filename": path.name},
                )
    finally:
        await engine.dispose()

    print(  # noqa: T201
        f"\nDone. Pending: {len(pending)}, already applied: {len(sql_files) - len(pending)}"
    )
    return [path.name for path in pending]


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--status", action="store_true", help="list pending files only")
    args = parser.parse_args()
    asyncio.run(run_migrations(status_only=args.status))
