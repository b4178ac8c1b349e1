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

"""Tests for bot configuration and database bootstrap."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import DEFAULT_MIGRATIONS_DIR, BotConfig, ConfigError
from database import run_migrations
import reminders

REQUIRED = {
    "DISCORD_BOT_TOKEN": "token",
    "DATABASE_URL": "postgresql://localhost/remindme",
}


class TestBotConfig:
    """Test configuration loading."""

    def test_defaults(self):
        with patch.dict("os.environ", REQUIRED, clear=True):
            config = BotConfig.from_env()
        assert config.discord_token == "token"
        assert config.database_url == "postgresql://localhost/remindme"
        assert config.sweep_interval_seconds == 60
        assert config.timezone is None
        assert config.pool_min_size == 1
        assert config.pool_max_size == 5
        assert config.log_level == "INFO"
        assert config.migrations_dir == DEFAULT_MIGRATIONS_DIR

    @pytest.mark.parametrize("missing", ["DISCORD_BOT_TOKEN", "DATABASE_URL"])
    def test_required_missing(self, missing):
        env = {k: v for k, v in REQUIRED.items() if k != missing}
        with patch.dict("os.environ", env, clear=True):
            with pytest.raises(ConfigError, match=missing):
                BotConfig.from_env()

    def test_required_blank(self):
        with patch.dict("os.environ", {**REQUIRED, "DATABASE_URL": "   "}, clear=True):
            with pytest.raises(ConfigError):
                BotConfig.from_env()

    def test_custom_values(self):
        with patch.dict("os.environ", {
            **REQUIRED,
            "REMINDER_SWEEP_SECONDS": "30",
            "REMINDER_TIMEZONE": "Europe/Berlin",
            "DB_POOL_MIN_SIZE": "2",
            "DB_POOL_MAX_SIZE": "10",
            "LOG_LEVEL": "debug",
            "MIGRATIONS_DIR": "/srv/migrations",
        }, clear=True):
            config = BotConfig.from_env()
        assert config.sweep_interval_seconds == 30
        assert config.timezone == "Europe/Berlin"
        assert config.pool_min_size == 2
        assert config.pool_max_size == 10
        assert config.log_level == "DEBUG"
        assert config.migrations_dir == Path("/srv/migrations")

    def test_invalid_timezone_falls_back(self):
        with patch.dict("os.environ", {**REQUIRED, "REMINDER_TIMEZONE": "Nowhere/Land"}, clear=True):
            config = BotConfig.from_env()
        assert config.timezone is None

    @pytest.mark.parametrize("value", ["abc", "0", "-5", "1.5"])
    def test_bad_interval(self, value):
        with patch.dict("os.environ", {**REQUIRED, "REMINDER_SWEEP_SECONDS": value}, clear=True):
            with pytest.raises(ConfigError, match="REMINDER_SWEEP_SECONDS"):
                BotConfig.from_env()

    def test_pool_bounds_inverted(self):
        with patch.dict("os.environ", {
            **REQUIRED, "DB_POOL_MIN_SIZE": "5", "DB_POOL_MAX_SIZE": "2",
        }, clear=True):
            with pytest.raises(ConfigError):
                BotConfig.from_env()


def make_pool(applied_names):
    conn = MagicMock()
    conn.execute = AsyncMock()
    conn.fetch = AsyncMock(return_value=[{"name": n} for n in applied_names])
    conn.transaction = MagicMock()

    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


class TestRunMigrations:
    """Test forward-only migrations."""

    @pytest.mark.asyncio
    async def test_applies_pending_in_order(self, tmp_path):
        (tmp_path / "002_second.sql").write_text("SELECT 2;")
        (tmp_path / "001_first.sql").write_text("SELECT 1;")
        pool, conn = make_pool([])

        applied = await run_migrations(pool, tmp_path)

        assert applied == ["001_first.sql", "002_second.sql"]
        statements = [c.args[0] for c in conn.execute.call_args_list]
        assert "CREATE TABLE IF NOT EXISTS schema_migrations" in statements[0]
        assert statements[1] == "SELECT 1;"
        assert statements[3] == "SELECT 2;"
        assert conn.transaction.call_count == 2

    @pytest.mark.asyncio
    async def test_skips_applied(self, tmp_path):
        (tmp_path / "001_first.sql").write_text("SELECT 1;")
        (tmp_path / "002_second.sql").write_text("SELECT 2;")
        pool, conn = make_pool(["001_first.sql"])

        applied = await run_migrations(pool, tmp_path)

        assert applied == ["002_second.sql"]

    @pytest.mark.asyncio
    async def test_empty_directory_is_fatal(self, tmp_path):
        pool, conn = make_pool([])
        with pytest.raises(FileNotFoundError):
            await run_migrations(pool, tmp_path)
        pool.acquire.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_directory_is_fatal(self, tmp_path):
        pool, conn = make_pool([])
        with pytest.raises(FileNotFoundError):
            await run_migrations(pool, tmp_path / "nowhere")

    def test_migrations_ship_inside_reminders_package(self):
        assert DEFAULT_MIGRATIONS_DIR == Path(reminders.__file__).resolve().parent / "migrations"
        assert sorted(DEFAULT_MIGRATIONS_DIR.glob("*.sql"))

    def test_repository_migration_creates_reminders(self):
        sql = (DEFAULT_MIGRATIONS_DIR / "001_create_reminders.sql").read_text()
        assert "CREATE TABLE IF NOT EXISTS reminders" in sql
        for column in ("user_id", "channel_id", "message_id", "message_content", "trigger_time"):
            assert column in sql
