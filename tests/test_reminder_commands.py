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

"""Tests for the reminder message listener."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from commands.reminder_commands import HELP_MESSAGE, ReminderCommands, setup
from reminders.engine import CommandOutcome
from reminders.models import InboundMessage


def make_message(content, bot_author=False):
    message = MagicMock()
    message.content = content
    message.id = 333
    message.author.id = 111
    message.author.bot = bot_author
    message.channel.id = 222
    message.channel.send = AsyncMock()
    return message


@pytest.fixture
def engine():
    engine = MagicMock()
    engine.handle_message = AsyncMock(return_value=CommandOutcome.CREATED)
    return engine


class TestOnMessage:
    """Test message routing."""

    @pytest.mark.asyncio
    async def test_forwards_to_engine(self, engine):
        cog = ReminderCommands(MagicMock(), engine)

        await cog.on_message(make_message("!remindme 1m test message"))

        engine.handle_message.assert_awaited_once_with(
            InboundMessage(
                author_id="111",
                channel_id="222",
                message_id="333",
                content="!remindme 1m test message",
            )
        )

    @pytest.mark.asyncio
    async def test_ignores_bots(self, engine):
        cog = ReminderCommands(MagicMock(), engine)
        message = make_message("!remindme 1m", bot_author=True)

        await cog.on_message(message)

        engine.handle_message.assert_not_called()
        message.channel.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_help(self, engine):
        cog = ReminderCommands(MagicMock(), engine)
        message = make_message("!help")

        await cog.on_message(message)

        message.channel.send.assert_awaited_once_with(HELP_MESSAGE)
        engine.handle_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_help_must_match_exactly(self, engine):
        cog = ReminderCommands(MagicMock(), engine)
        message = make_message("!help me")

        await cog.on_message(message)

        message.channel.send.assert_not_called()
        engine.handle_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_engine_error_contained(self, engine):
        engine.handle_message.side_effect = RuntimeError("boom")
        cog = ReminderCommands(MagicMock(), engine)

        # Must not raise
        await cog.on_message(make_message("!remindme 1m"))


class TestSetup:
    """Test cog registration."""

    @pytest.mark.asyncio
    async def test_setup_adds_cog(self, engine):
        bot = MagicMock()
        bot.add_cog = AsyncMock()

        await setup(bot, engine)

        cog = bot.add_cog.call_args.args[0]
        assert isinstance(cog, ReminderCommands)
        assert cog.engine is engine
