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

"""Reminder data types."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Reminder:
    """
    A scheduled reminder.

    There is no status column: a reminder is pending while its row exists
    and finished once the cleanup sweep deletes it.
    """

    requester_id: str
    channel_id: str
    message_id: str
    content: str
    trigger_time: datetime  # naive, reference wall clock
    id: Optional[int] = None  # assigned by the store

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Reminder":
        return cls(
            id=row["id"],
            requester_id=row["user_id"],
            channel_id=row["channel_id"],
            message_id=row["message_id"],
            content=row["message_content"],
            trigger_time=row["trigger_time"],
        )

    def is_due(self, now: datetime) -> bool:
        return self.trigger_time < now


@dataclass(frozen=True)
class InboundMessage:
    """A chat message as handed over by the transport."""

    author_id: str
    channel_id: str
    message_id: str
    content: str
