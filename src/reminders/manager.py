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
Reminder Manager Module

Handles database operations for reminders. Identity assignment and
isolation are left to PostgreSQL (SERIAL ids, one statement per call).
"""

import dataclasses
import logging
from datetime import datetime

import asyncpg

from .models import Reminder

logger = logging.getLogger("remindme.reminders.manager")

# Errors that mean "the store could not do it", as opposed to programming errors
STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class ReminderStoreError(Exception):
    """Raised when a reminder could not be read from or written to the store."""

    pass


class ReminderManager:
    """
    Manages database operations for reminders.

    A reminder is inserted once, read by every due sweep, and deleted by
    the cleanup sweep. Rows are never updated.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        """
        Initialize the reminder manager.

        Args:
            db_pool: asyncpg connection pool
        """
        self.db = db_pool

    async def create_reminder(self, reminder: Reminder) -> Reminder:
        """
        Persist a new reminder.

        Args:
            reminder: Reminder without an id

        Returns:
            The same reminder with its assigned id

        Raises:
            ReminderStoreError: If the insert failed
        """
        try:
            row = await self.db.fetchrow(
                """
                INSERT INTO reminders (
                    user_id, channel_id, message_id, message_content, trigger_time
                ) VALUES ($1, $2, $3, $4, $5)
                RETURNING id
                """,
                reminder.requester_id,
                reminder.channel_id,
                reminder.message_id,
                reminder.content,
                reminder.trigger_time,
            )
        except STORE_ERRORS as e:
            raise ReminderStoreError(f"Failed to create reminder: {e}") from e

        created = dataclasses.replace(reminder, id=row["id"])
        logger.info(
            f"Created reminder {created.id} for user {created.requester_id}: "
            f"trigger={created.trigger_time}"
        )
        return created

    async def get_due_reminders(self, now: datetime) -> list[Reminder]:
        """
        Get all reminders whose trigger time is strictly before now.

        Args:
            now: Evaluation time (naive, reference wall clock)

        Returns:
            Due reminders, oldest trigger time first
        """
        try:
            rows = await self.db.fetch(
                """
                SELECT id, user_id, channel_id, message_id, message_content, trigger_time
                FROM reminders
                WHERE trigger_time < $1
                ORDER BY trigger_time ASC, id ASC
                """,
                now,
            )
        except STORE_ERRORS as e:
            raise ReminderStoreError(f"Failed to fetch due reminders: {e}") from e

        return [Reminder.from_row(row) for row in rows]

    async def delete_due_reminders(self, now: datetime) -> int:
        """
        Delete every reminder whose trigger time is strictly before now.

        Uses the same predicate as get_due_reminders, so with the same `now`
        and no concurrent inserts it removes exactly what was found.

        Args:
            now: Evaluation time (naive, reference wall clock)

        Returns:
            Number of reminders removed
        """
        try:
            result = await self.db.execute(
                "DELETE FROM reminders WHERE trigger_time < $1",
                now,
            )
        except STORE_ERRORS as e:
            raise ReminderStoreError(f"Failed to delete due reminders: {e}") from e

        # asyncpg returns the command tag, e.g. "DELETE 3"
        try:
            deleted = int(result.split()[-1])
        except (AttributeError, IndexError, ValueError):
            deleted = 0

        if deleted:
            logger.info(f"Deleted {deleted} due reminder(s)")
        return deleted
