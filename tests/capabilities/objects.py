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

import datetime
import warnings

import pytest

from gdbrowser.capabilities.base import (
    BaseObject, ConversionWarning, Enum, EnumField, IntField, NotAvailable,
    NotLoaded, StringField, empty,
)
from gdbrowser.capabilities.gamedb import (
    DemonDifficulty, Difficulty, Level, LevelLength, Song, User, difficulty_name,
)


class Color(Enum):
    RED = 1
    GREEN = 2


class Icon(BaseObject):
    """Icon of a player."""

    name = StringField('Name')
    number = IntField('Number')
    color = EnumField('Color', Color)


def test_fields():
    icon = Icon('1')
    assert icon.name is NotLoaded
    assert not icon.__iscomplete__()

    icon.name = 'cube'
    icon.number = 4
    icon.color = Color.RED
    icon.url = NotAvailable
    assert icon.__iscomplete__()
    assert list(icon.iter_fields()) == [
        ('id', '1'), ('url', NotAvailable), ('name', 'cube'), ('number', 4), ('color', 1),
    ]


def test_conversion():
    icon = Icon('1')
    with pytest.warns(ConversionWarning):
        icon.number = '12'
    assert icon.number == 12

    with pytest.raises(ValueError):
        icon.number = 'twelve'

    icon.number = NotAvailable
    assert icon.number is NotAvailable


def test_non_field_attribute():
    icon = Icon('1')
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        icon._cached = True
    assert icon._cached


def test_copy():
    user = User('71')
    user.username = 'RobTop'
    other = user.copy()
    other.username = 'Player'
    assert user.username == 'RobTop'
    assert other == user


def test_enum():
    assert list(Color) == [1, 2]
    assert 2 in Color
    assert 3 not in Color
    assert Color['GREEN'] == 2
    assert len(LevelLength) == 5

    with pytest.raises(ValueError):
        Color()


def test_empty():
    assert empty(None)
    assert empty(NotLoaded)
    assert empty(NotAvailable)
    assert not empty(0)
    assert not empty('')
    assert not NotAvailable


def test_difficulty_name():
    level = Level('128')
    level.demon = False
    level.difficulty = Difficulty.NA
    assert level.difficulty_name == 'N/A'

    level.demon = True
    level.demon_difficulty = DemonDifficulty.HARD
    assert level.difficulty_name == 'Hard Demon'

    assert difficulty_name(42) == 'N/A'
    assert difficulty_name(42, demon=True) == 'Demon'


def test_nested_objects():
    level = Level('128')
    level.song = Song('1')
    level.uploaded = datetime.datetime(2013, 8, 13)

    with pytest.raises(ValueError):
        level.song = User('71')
