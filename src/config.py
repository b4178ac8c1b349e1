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
Bot Configuration

Process-level settings read from environment variables. The Discord token
and database URL are required; everything else has a default.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reminders.time_parser import validate_timezone

logger = logging.getLogger("remindme.config")

# Shipped as package data next to the reminders package
DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parent / "reminders" / "migrations"


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""

    pass


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} environment variable not set")
    return value


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class BotConfig:
    """Configuration for the reminder bot."""

    discord_token: str
    database_url: str

    # Scheduler cadence
    sweep_interval_seconds: int = 60

    # Reference wall clock (None = host local time)
    timezone: Optional[str] = None

    # asyncpg pool bounds
    pool_min_size: int = 1
    pool_max_size: int = 5

    log_level: str = "INFO"
    migrations_dir: Path = DEFAULT_MIGRATIONS_DIR

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Create config from environment variables with defaults."""
        timezone = os.getenv("REMINDER_TIMEZONE", "").strip() or None
        if timezone and not validate_timezone(timezone):
            logger.warning(
                f"Invalid REMINDER_TIMEZONE '{timezone}', falling back to local time"
            )
            timezone = None

        pool_min_size = _int_env("DB_POOL_MIN_SIZE", 1)
        pool_max_size = _int_env("DB_POOL_MAX_SIZE", 5)
        if pool_max_size < pool_min_size:
            raise ConfigError(
                f"DB_POOL_MAX_SIZE ({pool_max_size}) is smaller than "
                f"DB_POOL_MIN_SIZE ({pool_min_size})"
            )

        migrations_dir = os.getenv("MIGRATIONS_DIR", "").strip()

        return cls(
            discord_token=_require("DISCORD_BOT_TOKEN"),
            database_url=_require("DATABASE_URL"),
            sweep_interval_seconds=_int_env("REMINDER_SWEEP_SECONDS", 60),
            timezone=timezone,
            pool_min_size=pool_min_size,
            pool_max_size=pool_max_size,
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            migrations_dir=Path(migrations_dir) if migrations_dir else DEFAULT_MIGRATIONS_DIR,
        )
