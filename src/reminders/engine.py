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
Reminder Engine Module

Creates reminders from inbound commands, dispatches due reminders and
purges them afterwards.

Delivery is attempted once per due sweep. A failed delivery is logged
and the reminder is still removed by the next cleanup sweep.
"""

import enum
import logging
from datetime import datetime
from typing import Callable, Optional

from .manager import ReminderManager, ReminderStoreError
from .models import InboundMessage, Reminder
from .notifier import NotificationSink, ReminderDeliveryError
from .time_parser import (
    TimeParseError,
    local_now,
    parse_date_expression,
    parse_reminder_command,
)

logger = logging.getLogger("remindme.reminders.engine")

INVALID_DATE_MESSAGE = "Invalid date format"
CREATE_FAILED_MESSAGE = "Sorry, I couldn't set that reminder. Please try again later."


class CommandOutcome(enum.Enum):
    """What happened to one inbound message."""

    IGNORED = "ignored"  # not a !remindme command
    REJECTED = "rejected"  # malformed date expression
    CREATED = "created"
    FAILED = "failed"  # store error


class ReminderEngine:
    """
    Reminder lifecycle: absent -> pending (create) -> gone (cleanup sweep).

    Dispatch is layered on top and never changes a reminder's state.
    """

    def __init__(
        self,
        store: ReminderManager,
        sink: NotificationSink,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Reminder store
            sink: Where notifications and replies go
            clock: Returns the current reference time (defaults to local_now)
        """
        self.store = store
        self.sink = sink
        self.clock = clock or local_now

    async def _reply(self, channel_id: str, content: str) -> None:
        try:
            await self.sink.send(channel_id, content)
        except Exception as e:
            logger.warning(f"Failed to reply in channel {channel_id}: {e}")

    async def handle_message(self, message: InboundMessage) -> CommandOutcome:
        """
        Handle one inbound message.

        Args:
            message: Message as received from the transport

        Returns:
            The outcome, mainly for logging and tests
        """
        command = parse_reminder_command(message.content)
        if command is None:
            return CommandOutcome.IGNORED

        try:
            trigger_time = parse_date_expression(command.date_expression, now=self.clock())
        except TimeParseError as e:
            logger.info(f"Rejected reminder from user {message.author_id}: {e}")
            await self._reply(message.channel_id, INVALID_DATE_MESSAGE)
            return CommandOutcome.REJECTED

        candidate = Reminder(
            requester_id=message.author_id,
            channel_id=message.channel_id,
            message_id=message.message_id,
            content=command.text,
            trigger_time=trigger_time,
        )

        try:
            reminder = await self.store.create_reminder(candidate)
        except ReminderStoreError as e:
            logger.error(f"Error setting reminder for user {message.author_id}: {e}")
            await self._reply(message.channel_id, CREATE_FAILED_MESSAGE)
            return CommandOutcome.FAILED

        await self._reply(
            message.channel_id,
            f"Reminder set for {reminder.trigger_time:%Y-%m-%d %H:%M}",
        )
        return CommandOutcome.CREATED

    async def sweep_due(self, now: Optional[datetime] = None) -> int:
        """
        Deliver every due reminder, one attempt each.

        Args:
            now: Evaluation time (defaults to the engine clock)

        Returns:
            Number of reminders delivered successfully

        Raises:
            ReminderStoreError: If the due reminders could not be fetched
        """
        now = now or self.clock()
        due = await self.store.get_due_reminders(now)
        if due:
            logger.info(f"Processing {len(due)} due reminder(s)")

        delivered = 0
        for reminder in due:
            try:
                await self.sink.deliver(reminder)
                delivered += 1
            except ReminderDeliveryError as e:
                logger.warning(f"Failed to deliver reminder {reminder.id}: {e.reason}")
            except Exception as e:
                logger.error(f"Failed to deliver reminder {reminder.id}: {e}", exc_info=True)

        return delivered

    async def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """
        Remove every due reminder, delivered or not.

        Args:
            now: Evaluation time (defaults to the engine clock)

        Returns:
            Number of reminders removed

        Raises:
            ReminderStoreError: If the delete failed
        """
        return await self.store.delete_due_reminders(now or self.clock())
