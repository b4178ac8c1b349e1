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
Reminder Text Commands

Message listener for `!remindme` and `!help`.
"""

import logging

import discord
from discord.ext import commands

from reminders import COMMAND_TOKEN, InboundMessage, ReminderEngine

logger = logging.getLogger("remindme.commands.reminder")

HELP_TOKEN = "!help"

HELP_MESSAGE = (
    "I can remind you about something in the future. "
    f"To set a reminder, use the `{COMMAND_TOKEN}` command followed by a date and time. "
    f"For example, `{COMMAND_TOKEN} 2021-01-01-12-00` or `{COMMAND_TOKEN} 1d` "
    "You can also add a message to the reminder, like this: "
    f"`{COMMAND_TOKEN} 2021-01-01-12-00 don't forget to call mom`"
)


class ReminderCommands(commands.Cog):
    """
    Text commands for reminders.

    Commands:
    - !remindme <YYYY-MM-DD-HH-MM | <n>m/h/d/y> [message] - Set a reminder
    - !help - Show usage
    """

    def __init__(self, bot: commands.Bot, engine: ReminderEngine):
        self.bot = bot
        self.engine = engine

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Route a message to the help text or the reminder engine."""
        if message.author.bot:
            return

        if message.content == HELP_TOKEN:
            try:
                await message.channel.send(HELP_MESSAGE)
            except discord.HTTPException as e:
                logger.warning(f"Failed to send help message: {e}")
            return

        inbound = InboundMessage(
            author_id=str(message.author.id),
            channel_id=str(message.channel.id),
            message_id=str(message.id),
            content=message.content,
        )

        try:
            outcome = await self.engine.handle_message(inbound)
        except Exception as e:
            logger.error(f"Error handling message {message.id}: {e}", exc_info=True)
            return

        logger.debug(f"Message {message.id}: {outcome.value}")


async def setup(bot: commands.Bot, engine: ReminderEngine):
    """Register the reminder commands cog."""
    await bot.add_cog(ReminderCommands(bot, engine))
