"""
remindme Discord Bot

Maintains the Discord connection, stores `!remindme` requests in PostgreSQL
and delivers them from a background sweep once they are due.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

import asyncpg
import discord
from discord.ext import commands
from dotenv import load_dotenv

from commands.reminder_commands import setup as setup_reminder_commands
from config import BotConfig, ConfigError
from database import create_pool, run_migrations
from reminders import (
    DiscordNotifier,
    ReminderEngine,
    ReminderManager,
    ReminderScheduler,
    local_now,
)

load_dotenv()

logger = logging.getLogger("remindme")


class ReminderBot(commands.Bot):
    """Discord bot that sets and delivers reminders."""

    def __init__(self, config: BotConfig):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.messages = True

        super().__init__(command_prefix="!", intents=intents, help_command=None)

        self.config = config
        self.db_pool: Optional[asyncpg.Pool] = None
        self.reminder_engine: Optional[ReminderEngine] = None
        self.reminder_scheduler: Optional[ReminderScheduler] = None

    async def setup_hook(self):
        """Called when the bot is starting up. Any failure here is fatal."""
        logger.info(f"Setup: REMINDER_TIMEZONE={self.config.timezone or 'local'}")
        logger.info(f"Setup: REMINDER_SWEEP_SECONDS={self.config.sweep_interval_seconds}")

        self.db_pool = await create_pool(self.config)
        await run_migrations(self.db_pool, self.config.migrations_dir)

        timezone = self.config.timezone
        self.reminder_engine = ReminderEngine(
            store=ReminderManager(self.db_pool),
            sink=DiscordNotifier(self),
            clock=lambda: local_now(timezone),
        )
        await setup_reminder_commands(self, self.reminder_engine)

        self.reminder_scheduler = ReminderScheduler(
            self,
            self.reminder_engine,
            interval_seconds=self.config.sweep_interval_seconds,
        )
        self.reminder_scheduler.start()

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        """Reminders are parsed by a listener, so unknown `!` commands are expected."""
        if isinstance(error, commands.CommandNotFound):
            return
        await super().on_command_error(ctx, error)

    async def on_ready(self):
        """Called when the bot has connected to Discord."""
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")

    async def close(self):
        """Clean up resources on shutdown."""
        if self.reminder_scheduler:
            self.reminder_scheduler.stop()
        await super().close()
        if self.db_pool:
            await self.db_pool.close()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def main() -> int:
    """Run the bot. Returns the process exit status."""
    configure_logging(os.getenv("LOG_LEVEL", "INFO").strip().upper())

    try:
        config = BotConfig.from_env()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Please set it in your .env file")
        return 1

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    bot = ReminderBot(config)
    try:
        async with bot:
            await bot.start(config.discord_token)
    except (OSError, asyncpg.PostgresError, discord.LoginFailure) as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        return 1

    return 0


def run() -> None:
    """Console entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
