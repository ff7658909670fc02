"""
Database Migration Runner

Runs Alembic migrations on application startup.

On PostgreSQL a session-level advisory lock is held on one connection for the
whole upgrade, so only one instance of a multi-instance deployment migrates
at a time while the others wait. SQLite has a single writer and no advisory
locks, so the upgrade runs directly.

Usage:
    Set RUN_MIGRATIONS_ON_STARTUP=true in environment variables.
    Migrations will run automatically during app startup.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from alembic import command
from alembic.config import Config
from alembic.util.exc import CommandError

from app.config.settings import settings
from app.core.logging import logger
from app.db.session import engine

# Advisory lock ID for migrations (arbitrary unique number)
MIGRATION_LOCK_ID = 727172001

# Seconds to wait for another instance to finish migrating
MIGRATION_LOCK_WAIT_SECONDS = 30


def get_alembic_config() -> Config:
    """Get Alembic configuration.

    Returns:
        Alembic Config object pointing to the project's alembic.ini
    """
    # app/db/migrations.py → project root is three levels up
    project_root = Path(__file__).parent.parent.parent
    alembic_ini = project_root / "alembic.ini"

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(project_root / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    return config


def _run_alembic_upgrade_sync() -> None:
    """Run alembic upgrade head synchronously.

    alembic/env.py calls asyncio.run(), which cannot run inside the
    application's event loop, so this runs on a worker thread.
    """
    command.upgrade(get_alembic_config(), "head")


async def run_alembic_upgrade() -> None:
    """Run alembic upgrade head in a thread pool."""
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=1) as executor:
        await loop.run_in_executor(executor, _run_alembic_upgrade_sync)


async def _try_lock(conn: AsyncConnection) -> bool:
    result = await conn.execute(
        text("SELECT pg_try_advisory_lock(:lock_id)"),
        {"lock_id": MIGRATION_LOCK_ID},
    )
    return bool(result.scalar())


async def _unlock(conn: AsyncConnection) -> None:
    await conn.execute(
        text("SELECT pg_advisory_unlock(:lock_id)"),
        {"lock_id": MIGRATION_LOCK_ID},
    )


async def _run_with_advisory_lock() -> None:
    """Hold the advisory lock on one connection while upgrading."""
    async with engine.connect() as conn:
        for attempt in range(1, MIGRATION_LOCK_WAIT_SECONDS + 1):
            if await _try_lock(conn):
                logger.info("Migration lock acquired, running migrations")
                try:
                    await run_alembic_upgrade()
                finally:
                    await _unlock(conn)
                    logger.debug("Migration lock released")
                logger.info("Database migrations completed successfully")
                return

            logger.info(
                "Migration lock held by another instance, waiting",
                attempt=attempt,
                max_attempts=MIGRATION_LOCK_WAIT_SECONDS,
            )
            await asyncio.sleep(1)

    logger.warning(
        "Could not acquire migration lock; assuming another instance migrated"
    )


async def run_migrations() -> None:
    """Run database migrations when RUN_MIGRATIONS_ON_STARTUP is set.

    Raises:
        SQLAlchemyError, CommandError, OSError: If the upgrade fails
    """
    if not settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.debug("RUN_MIGRATIONS_ON_STARTUP is disabled, skipping migrations")
        return

    logger.info("Running database migrations")
    try:
        if settings.is_sqlite:
            await run_alembic_upgrade()
            logger.info("Database migrations completed successfully")
        else:
            await _run_with_advisory_lock()
    except (SQLAlchemyError, CommandError, OSError) as e:
        logger.error("Migration failed", error=str(e))
        raise
