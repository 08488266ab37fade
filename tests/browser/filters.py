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

import pytest

from gdbrowser.browser.filters.base import Env, FilterError, ItemNotFound
from gdbrowser.browser.filters.record import Base64Text, Flag, Key, Unquote
from gdbrowser.browser.filters.standard import CleanText, DateTime, Eval, Map, Type
from gdbrowser.capabilities.base import NotAvailable


RECORD = {
    '1': '128',
    '2': 'Bloodbath',
    '3': 'SGVsbG8gd29ybGQ=',
    '10': '',
    '17': '1',
    '25': '0',
    '28': '5 years',
    'song': {'10': 'https%3A%2F%2Fexample.org%2Fsong.mp3'},
    'levels': [{'2': 'Stereo Madness'}, {'2': 'Back On Track'}],
}


class Element:
    def __init__(self, el, env=None):
        self.el = el
        self.env = env or {}


def test_Key():
    assert Key('2')(RECORD) == 'Bloodbath'
    assert Key('song/10')(RECORD) == 'https%3A%2F%2Fexample.org%2Fsong.mp3'
    assert Key('levels/1/2')(RECORD) == 'Back On Track'
    assert Key(None)(RECORD) is RECORD
    assert Key('')(RECORD) is RECORD

    with pytest.raises(ItemNotFound):
        Key('45')(RECORD)
    with pytest.raises(ItemNotFound):
        Key('levels/2/2')(RECORD)
    with pytest.raises(ItemNotFound):
        Key('2/x')(RECORD)

    assert Key('45', default=None)(RECORD) is None
    assert (Key('45') | NotAvailable)(RECORD) is NotAvailable


def test_Key_on_element():
    assert Key('1')(Element(RECORD)) == '128'


def test_Base64Text():
    assert Base64Text(Key('3'))(RECORD) == 'Hello world'
    # service alphabet, without padding
    assert Base64Text(None)('SGk_') == 'Hi?'
    assert Base64Text(None)('SGk') == 'Hi'

    with pytest.raises(FilterError):
        Base64Text(None)('A')
    assert Base64Text(None, default='')('A') == ''
    assert Base64Text(Key('45'), default='')(RECORD) == ''


def test_Flag():
    assert Flag(Key('17'))(RECORD) is True
    assert Flag(Key('25'))(RECORD) is False
    assert Flag(Key('10'))(RECORD) is False
    assert Flag(None)('2') is True
    assert Flag(None)(None) is False
    assert Flag(Key('45'), default=False)(RECORD) is False


def test_Unquote():
    assert Unquote(Key('song/10'))(RECORD) == 'https://example.org/song.mp3'
    assert Unquote(None)('Bloodbath') == 'Bloodbath'


def test_CleanText():
    assert CleanText(None)('  coucou  \n\t  les   gens ') == 'coucou les gens'
    assert CleanText(None, replace=[(' ', '_')])(' Sonic  Wave ') == 'Sonic_Wave'
    assert CleanText(None)(42) == '42'
    assert CleanText(Key('45'), default='')(RECORD) == ''

    with pytest.raises(FilterError):
        CleanText(None)(None)


def test_Type():
    assert Type(Key('1'), type=int)(RECORD) == 128
    assert Type(Key('10'), type=int, default=NotAvailable)(RECORD) is NotAvailable
    assert Type(Key('2'), type=int, default=0)(RECORD) == 0
    assert Type(None, type=float)('1.5') == 1.5

    with pytest.raises(FilterError):
        Type(Key('2'), type=int)(RECORD)
    with pytest.raises(FilterError):
        Type(Key('1'), type=int, minlen=3)(RECORD)


def test_Map():
    roles = {'0': 'user', '1': 'moderator', '2': 'elder'}
    assert Map(Key('17'), roles)(RECORD) == 'moderator'
    assert Map(Key('1'), roles, default='user')(RECORD) == 'user'

    with pytest.raises(ItemNotFound):
        Map(Key('1'), roles)(RECORD)


def test_Eval():
    assert Eval(lambda x, y: int(x) + int(y), Key('1'), Key('17'))(RECORD) == 129
    assert Eval(lambda x: x * 2, 3)(RECORD) == 6


def test_DateTime():
    now = datetime.datetime.now(datetime.timezone.utc)
    date = DateTime(Key('28'))(RECORD)
    assert now.year - 6 <= date.year <= now.year - 5

    assert DateTime(None)('2024-03-01 12:00') == datetime.datetime(2024, 3, 1, 12)
    assert DateTime(Key('10'), default=None)(RECORD) is None

    with pytest.raises(FilterError):
        DateTime(None)('')
    with pytest.raises(FilterError):
        DateTime(None)('not a date at all')


def test_Env():
    element = Element(RECORD, env={'id': '128'})
    assert Env('id')(element) == '128'
    assert Env('page', default=0)(element) == 0

    with pytest.raises(ItemNotFound):
        Env('page')(element)
