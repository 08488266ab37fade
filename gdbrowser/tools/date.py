# flake8: compatible

# Copyright(C) 2024 gdbrowser project
#
# This file is part of gdbrowser.
#
# gdbrowser is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# gdbrowser is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with gdbrowser. If not, see <http://www.gnu.org/licenses/>.

"""
Dates as the server gives them.

The official servers only tell how long ago something happened, e.g.
``5 hours`` or ``1 month``. Some private servers send real dates instead.
"""

import datetime
import re
import typing as t

from dateutil import parser, tz
from dateutil.relativedelta import relativedelta

__all__ = ['now_as_utc', 'parse_date', 'parse_relative_date']

RELATIVE_DATE_RE = re.compile(
    r'^\s*(?P<count>\d+)\s+(?P<unit>second|minute|hour|day|week|month|year)s?(\s+ago)?\s*$',
    re.IGNORECASE,
)


def now_as_utc() -> datetime.datetime:
    return datetime.datetime.now(tz.tzutc())


def parse_relative_date(
    text: str,
    now: t.Optional[datetime.datetime] = None,
) -> t.Optional[datetime.datetime]:
    """Turn a ``<count> <unit>`` duration into the date it refers to.

    >>> now = datetime.datetime(2024, 3, 31, 12)
    >>> parse_relative_date('1 month', now=now)
    datetime.datetime(2024, 2, 29, 12, 0)
    """
    match = RELATIVE_DATE_RE.match(text)
    if not match:
        return None

    if now is None:
        now = now_as_utc()

    unit = match.group('unit').lower() + 's'
    return now - relativedelta(**{unit: int(match.group('count'))})


def parse_date(
    text: str,
    now: t.Optional[datetime.datetime] = None,
) -> t.Optional[datetime.datetime]:
    """Parse a server date, relative or absolute.

    The result is an approximation for relative dates. Returns None if the
    text is neither.
    """
    if not text:
        return None

    date = parse_relative_date(text, now=now)
    if date is not None:
        return date

    try:
        return parser.parse(text)
    except (ValueError, OverflowError):
        return None
