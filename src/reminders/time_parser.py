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
Time Parser Module

Parses `!remindme` commands and their date expressions. Two grammars are
accepted, tried in order:

- Absolute: YYYY-MM-DD-HH-MM ("2021-01-01-12-00"), local wall clock
- Relative: <amount><unit> with unit m/h/d/y ("30m", "2d", "1y")

A year is exactly 365 days. Leap days are not accounted for, so "1y"
issued on 2024-01-01 lands on 2024-12-31.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import pytz

COMMAND_TOKEN = "!remindme"

COMMAND_PATTERN = re.compile(
    re.escape(COMMAND_TOKEN) + r"\s+(\S+)(?:\s+(.+))?", re.DOTALL
)
ABSOLUTE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})-(\d{2})-(\d{2})", re.ASCII)
RELATIVE_PATTERN = re.compile(r"(\d+)([mhdy])", re.ASCII)

# Amounts must fit a signed 64-bit integer
MAX_AMOUNT = 2**63 - 1

UNIT_DELTAS = {
    "m": lambda n: timedelta(minutes=n),
    "h": lambda n: timedelta(hours=n),
    "d": lambda n: timedelta(days=n),
    "y": lambda n: timedelta(days=n * 365),
}


@dataclass
class ReminderCommand:
    """A `!remindme` invocation split into its parts."""

    date_expression: str
    text: str = ""


class TimeParseError(Exception):
    """Raised when a date expression matches neither grammar."""

    pass


def validate_timezone(tz_name: str) -> bool:
    """
    Validate that a timezone name is valid.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.UnknownTimeZoneError:
        return False


def local_now(timezone: Optional[str] = None) -> datetime:
    """
    Current reference wall-clock time, without tzinfo.

    Args:
        timezone: IANA name pinning the wall clock; None uses the host clock

    Returns:
        Naive datetime, matching the TIMESTAMP column it is compared against
    """
    if timezone:
        return datetime.now(pytz.timezone(timezone)).replace(tzinfo=None)
    return datetime.now()


def parse_reminder_command(message: str) -> Optional[ReminderCommand]:
    """
    Extract the date expression and text from a message.

    Returns None when the message carries no `!remindme` command. That is
    not an error; the caller just ignores the message.
    """
    match = COMMAND_PATTERN.search(message)
    if not match:
        return None
    return ReminderCommand(
        date_expression=match.group(1),
        text=(match.group(2) or "").strip(),
    )


def _parse_absolute(match: re.Match) -> datetime:
    year, month, day, hour, minute = (int(g) for g in match.groups())
    try:
        # datetime() rejects month 13, Feb 30, hour 24 and so on
        return datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise TimeParseError(f"Invalid date '{match.group(0)}': {e}")


def _parse_relative(match: re.Match, now: datetime) -> datetime:
    # Length check first: int() refuses very long digit strings outright
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > len(str(MAX_AMOUNT)) or int(digits) > MAX_AMOUNT:
        raise TimeParseError(f"Amount too large: {match.group(1)[:20]}...")
    amount = int(digits)
    unit = match.group(2)
    try:
        return now + UNIT_DELTAS[unit](amount)
    except OverflowError:
        raise TimeParseError(f"Duration out of range: {match.group(0)}")


def parse_date_expression(expr: str, now: Optional[datetime] = None) -> datetime:
    """
    Turn a date expression into an absolute trigger time.

    Args:
        expr: Absolute ("2021-01-01-12-00") or relative ("2d") expression
        now: Reference time for relative expressions (defaults to local_now())

    Returns:
        Naive trigger time with zero seconds for absolute expressions

    Raises:
        TimeParseError: If the expression matches neither grammar or names
            a date that does not exist
    """
    match = ABSOLUTE_PATTERN.fullmatch(expr)
    if match:
        return _parse_absolute(match)

    match = RELATIVE_PATTERN.fullmatch(expr)
    if match:
        return _parse_relative(match, now if now is not None else local_now())

    raise TimeParseError(
        f"Could not parse date expression: '{expr}'. "
        "Use YYYY-MM-DD-HH-MM or a duration like 30m, 2h, 1d, 1y."
    )
