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
Reminders Package

One-shot `!remindme` reminders: parsing, storage, delivery and cleanup.
"""

from .time_parser import (
    COMMAND_TOKEN,
    ReminderCommand,
    TimeParseError,
    local_now,
    parse_date_expression,
    parse_reminder_command,
    validate_timezone,
)
from .models import InboundMessage, Reminder
from .manager import ReminderManager, ReminderStoreError
from .notifier import DiscordNotifier, NotificationSink, ReminderDeliveryError
from .engine import CommandOutcome, ReminderEngine
from .scheduler import ReminderScheduler, SweepStats

__all__ = [
    "COMMAND_TOKEN",
    "ReminderCommand",
    "TimeParseError",
    "local_now",
    "parse_date_expression",
    "parse_reminder_command",
    "validate_timezone",
    "InboundMessage",
    "Reminder",
    "ReminderManager",
    "ReminderStoreError",
    "DiscordNotifier",
    "NotificationSink",
    "ReminderDeliveryError",
    "CommandOutcome",
    "ReminderEngine",
    "ReminderScheduler",
    "SweepStats",
]
