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
Reminder Scheduler Module

Background task loop that runs the due sweep and then the cleanup sweep.
Uses discord.ext.tasks for reliable scheduling.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from discord.ext import tasks

from .engine import ReminderEngine

if TYPE_CHECKING:
    from discord.ext import commands

logger = logging.getLogger("remindme.reminders.scheduler")


@dataclass
class SweepStats:
    """Result of one scheduler tick. None means the sweep failed."""

    delivered: Optional[int] = None
    deleted: Optional[int] = None


class ReminderScheduler:
    """
    Background scheduler for reminder sweeps.

    Runs a loop every `interval_seconds` (60 by default). Each tick runs
    the due sweep, then the cleanup sweep; a failure in one is logged and
    does not skip the other.
    """

    def __init__(
        self,
        bot: "commands.Bot",
        engine: ReminderEngine,
        interval_seconds: int = 60,
    ):
        """
        Initialize the reminder scheduler.

        Args:
            bot: Discord bot instance
            engine: Reminder engine the sweeps run on
            interval_seconds: Delay between ticks
        """
        self.bot = bot
        self.engine = engine
        self.interval_seconds = interval_seconds
        self._started = False
        self._tick_lock = asyncio.Lock()

    def start(self) -> None:
        """Start the scheduler loop."""
        if not self._started:
            self._sweep_loop.change_interval(seconds=self.interval_seconds)
            self._sweep_loop.start()
            self._started = True
            logger.info(f"Reminder scheduler started (every {self.interval_seconds}s)")

    def stop(self) -> None:
        """Stop the scheduler loop."""
        if self._started:
            self._sweep_loop.cancel()
            self._started = False
            logger.info("Reminder scheduler stopped")

    @tasks.loop(seconds=60)
    async def _sweep_loop(self) -> None:
        """Run one tick."""
        await self.run_once()

    @_sweep_loop.before_loop
    async def _before_sweep(self) -> None:
        """Wait for the bot to be ready before starting the loop."""
        await self.bot.wait_until_ready()
        logger.info("Reminder scheduler ready, starting loop")

    async def run_once(self) -> SweepStats:
        """
        Run the due sweep, then the cleanup sweep.

        Ticks never overlap: a call made while another tick is running
        waits for it to finish.

        Returns:
            Counts from both sweeps
        """
        async with self._tick_lock:
            stats = SweepStats()

            try:
                stats.delivered = await self.engine.sweep_due()
            except Exception as e:
                logger.error(f"Error in due reminder sweep: {e}", exc_info=True)

            try:
                stats.deleted = await self.engine.sweep_expired()
            except Exception as e:
                logger.error(f"Error in reminder cleanup sweep: {e}", exc_info=True)

            return stats
