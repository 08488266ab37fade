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

from datetime import datetime

from dateutil import tz

from gdbrowser.tools.date import now_as_utc, parse_date, parse_relative_date


NOW = datetime(2024, 3, 31, 12, tzinfo=tz.tzutc())


def test_relative():
    assert parse_relative_date('5 hours', now=NOW) == datetime(2024, 3, 31, 7, tzinfo=tz.tzutc())
    assert parse_relative_date('1 day', now=NOW) == datetime(2024, 3, 30, 12, tzinfo=tz.tzutc())
    assert parse_relative_date('2 weeks', now=NOW) == datetime(2024, 3, 17, 12, tzinfo=tz.tzutc())
    assert parse_relative_date('1 month', now=NOW) == datetime(2024, 2, 29, 12, tzinfo=tz.tzutc())
    assert parse_relative_date('1 year', now=NOW) == datetime(2023, 3, 31, 12, tzinfo=tz.tzutc())
    assert parse_relative_date('0 seconds', now=NOW) == NOW


def test_relative_variants():
    assert parse_relative_date('3 Minutes ago', now=NOW) == datetime(2024, 3, 31, 11, 57, tzinfo=tz.tzutc())
    assert parse_relative_date(' 1 hour ', now=NOW) == datetime(2024, 3, 31, 11, tzinfo=tz.tzutc())
    assert parse_relative_date('yesterday', now=NOW) is None
    assert parse_relative_date('5 fortnights', now=NOW) is None


def test_relative_default_now():
    date = parse_relative_date('1 second')
    assert date.tzinfo is not None
    assert date < now_as_utc()


def test_parse_date():
    assert parse_date('5 hours', now=NOW) == datetime(2024, 3, 31, 7, tzinfo=tz.tzutc())
    assert parse_date('2024-01-02 03:04:05') == datetime(2024, 1, 2, 3, 4, 5)
    assert parse_date('') is None
    assert parse_date('not a date') is None
