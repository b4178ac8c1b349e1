# remindme - Discord Reminder Bot
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Database Bootstrap

Connection pool creation and forward-only SQL migrations.
"""

import logging
from pathlib import Path

import asyncpg

from config import BotConfig

logger = logging.getLogger("remindme.database")


async def create_pool(config: BotConfig) -> asyncpg.Pool:
    """Open the asyncpg pool used by the reminder store."""
    pool = await asyncpg.create_pool(
        config.database_url,
        min_size=config.pool_min_size,
        max_size=config.pool_max_size,
    )
    logger.info(
        f"Database pool ready (min={config.pool_min_size}, max={config.pool_max_size})"
    )
    return pool


async def run_migrations(pool: asyncpg.Pool, directory: Path) -> list[str]:
    """
    Apply pending migrations from a directory.

    Files are applied in lexical order. Each file runs in its own
    transaction together with its row in schema_migrations, so a failed
    file leaves no partial record behind.

    Args:
        pool: asyncpg connection pool
        directory: Directory containing *.sql files

    Returns:
        Names of the files applied by this call

    Raises:
        FileNotFoundError: If the directory is missing or holds no *.sql files
    """
    files = sorted(Path(directory).glob("*.sql"))
    if not files:
        raise FileNotFoundError(f"No migrations found in {directory}")

    applied = []
    async with pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP NOT NULL DEFAULT NOW()
            )
            """
        )
        rows = await conn.fetch("SELECT name FROM schema_migrations")
        done = {row["name"] for row in rows}

        for path in files:
            if path.name in done:
                continue
            async with conn.transaction():
                await conn.execute(path.read_text(encoding="utf-8"))
                await conn.execute(
                    "INSERT INTO schema_migrations (name) VALUES ($1)",
                    path.name,
                )
            applied.append(path.name)
            logger.info(f"Applied migration {path.name}")

    if not applied:
        logger.info("Database schema up to date")
    return applied
