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
Reminder Notifier Module

Sends reminder notifications and command replies over Discord.
"""

import logging
from typing import TYPE_CHECKING, Protocol

import discord

from .models import Reminder

if TYPE_CHECKING:
    from discord.ext import commands

logger = logging.getLogger("remindme.reminders.notifier")

# Discord message length limit
DISCORD_MAX_LENGTH = 2000


class ReminderDeliveryError(Exception):
    """Raised when a reminder notification could not be delivered."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotificationSink(Protocol):
    """Where the engine sends notifications and replies."""

    async def deliver(self, reminder: Reminder) -> None:
        ...

    async def send(self, channel_id: str, content: str) -> None:
        ...


def render_notification(mention: str, content: str, link: str) -> str:
    """
    Build the reminder message text.

    The reminder text is shortened if needed so the mention and the link
    always survive Discord's length limit.
    """
    prefix = f"Hey {mention}, you asked me to remind you about this: "
    suffix = f" reference message: {link}"
    room = DISCORD_MAX_LENGTH - len(prefix) - len(suffix)
    if len(content) > room:
        content = content[: max(room - 3, 0)] + "..."
    return f"{prefix}{content}{suffix}"


def _snowflake(value: str, kind: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ReminderDeliveryError(f"Invalid {kind} id: {value!r}")


class DiscordNotifier:
    """
    Notification sink backed by a discord.py client.

    Resolution goes cache first, then the REST API. Anything Discord
    refuses is turned into a ReminderDeliveryError with a short reason.
    """

    def __init__(self, bot: "commands.Bot"):
        self.bot = bot

    async def _resolve_user(self, user_id: int) -> discord.User:
        user = self.bot.get_user(user_id)
        if user is not None:
            return user
        try:
            return await self.bot.fetch_user(user_id)
        except discord.NotFound:
            raise ReminderDeliveryError("User not found")
        except discord.HTTPException as e:
            raise ReminderDeliveryError(f"Failed to fetch user: {e}")

    async def _resolve_channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = self.bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.bot.fetch_channel(channel_id)
        except discord.NotFound:
            raise ReminderDeliveryError("Channel not found (deleted)")
        except discord.Forbidden:
            raise ReminderDeliveryError("No access to channel")
        except discord.HTTPException as e:
            raise ReminderDeliveryError(f"Failed to fetch channel: {e}")

    async def deliver(self, reminder: Reminder) -> None:
        """
        Notify the requester in the channel the reminder was set from.

        Args:
            reminder: Due reminder

        Raises:
            ReminderDeliveryError: If the user, channel or original message
                can no longer be resolved, or the send fails
        """
        user = await self._resolve_user(_snowflake(reminder.requester_id, "user"))
        channel = await self._resolve_channel(_snowflake(reminder.channel_id, "channel"))

        try:
            origin = await channel.fetch_message(_snowflake(reminder.message_id, "message"))
        except discord.NotFound:
            raise ReminderDeliveryError("Original message not found (deleted)")
        except discord.Forbidden:
            raise ReminderDeliveryError("No access to original message")
        except discord.HTTPException as e:
            raise ReminderDeliveryError(f"Failed to fetch original message: {e}")

        text = render_notification(user.mention, reminder.content, origin.jump_url)
        try:
            await channel.send(text)
        except discord.HTTPException as e:
            raise ReminderDeliveryError(f"Failed to send reminder: {e}")

        logger.info(f"Delivered reminder {reminder.id} to channel {reminder.channel_id}")

    async def send(self, channel_id: str, content: str) -> None:
        """Send a plain reply to a channel."""
        channel = await self._resolve_channel(_snowflake(channel_id, "channel"))
        try:
            await channel.send(content[:DISCORD_MAX_LENGTH])
        except discord.HTTPException as e:
            raise ReminderDeliveryError(f"Failed to send message: {e}")
