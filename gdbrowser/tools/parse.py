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
Parsers for the delimited text grammar of server responses.

Records are flat ``key<sep>value<sep>key<sep>value`` strings. Records are
joined with ``|`` into sections, and sections with ``#`` into a response.
These functions only handle well-formed payloads: failure sentinels such as
``-1`` must be checked by the caller first.
"""

import math
import typing as t

from gdbrowser.exceptions import ParseError

__all__ = [
    'CommentResult', 'CreatorRecord', 'LevelString', 'LoginResult',
    'PageInfo', 'SearchResult', 'parse', 'parse_comment', 'parse_login',
    'parse_level_string', 'parse_numeric', 'parse_records', 'parse_search',
    'split_records', 'split_sections',
]

Record = t.Dict[str, str]
NumericRecord = t.Dict[t.Union[int, str], t.Union[int, float, str]]

COLOR_TABLE_KEY = 'kS38'


class LoginResult(t.NamedTuple):
    account_id: int
    user_id: int


class CreatorRecord(t.NamedTuple):
    user_id: str
    username: str
    account_id: str


class PageInfo(t.NamedTuple):
    total: int
    offset: int
    size: int


class SearchResult(t.NamedTuple):
    levels: t.List[Record]
    creators: t.Dict[str, CreatorRecord]
    songs: t.Dict[str, Record]
    page: t.Optional[PageInfo]


class CommentResult(t.NamedTuple):
    comment: Record
    author: Record


class LevelString(t.NamedTuple):
    header: Record
    colors: t.List[Record]
    objects: t.List[NumericRecord]
    raw: str


def parse(data: str, separator: str = ':') -> Record:
    """Pair alternating tokens of ``data`` into a dictionary.

    An unpaired trailing token is dropped.

    >>> parse('a:1:b:2')
    {'a': '1', 'b': '2'}
    >>> parse('a:1:b')
    {'a': '1'}
    """
    tokens = data.split(separator)
    return dict(zip(tokens[::2], tokens[1::2]))


def _coerce(value: str) -> t.Union[int, float, str]:
    try:
        return int(value)
    except ValueError:
        pass

    try:
        number = float(value)
    except ValueError:
        return value

    # 'nan' and 'inf' are accepted by float() but are not numbers here.
    if not math.isfinite(number):
        return value
    return number


def parse_numeric(data: str) -> NumericRecord:
    """Parse a comma separated level object, coercing numbers.

    Keys which are integers become :class:`int`. Values become :class:`int`
    or :class:`float` when they are numbers, and stay strings otherwise.

    >>> parse_numeric('1,5,2,x')
    {1: 5, 2: 'x'}
    """
    record: NumericRecord = {}
    for key, value in parse(data, ',').items():
        try:
            key = int(key)
        except ValueError:
            pass
        record[key] = _coerce(value)
    return record


def split_sections(data: str) -> t.List[str]:
    return data.split('#')


def split_records(section: str, separator: str = '|') -> t.List[str]:
    return [record for record in section.split(separator) if record]


def parse_records(data: str, separator: str = ':') -> t.List[Record]:
    """Parse the records of the first section of a list response."""
    section, _, _ = data.partition('#')
    return [parse(record, separator) for record in split_records(section)]


def parse_login(data: str) -> LoginResult:
    """Parse the ``accountID,userID`` pair returned by a successful login."""
    try:
        account_id, user_id = data.strip().split(',')[:2]
        return LoginResult(int(account_id), int(user_id))
    except ValueError as exc:
        raise ParseError('Unexpected login response %r' % data) from exc


def _parse_page_info(section: str) -> t.Optional[PageInfo]:
    values = section.split(':')
    if len(values) != 3:
        return None
    try:
        return PageInfo(*(int(value) for value in values))
    except ValueError:
        return None


def parse_search(data: str) -> SearchResult:
    """Parse a level search response.

    Sections are levels, creators, songs and paging information. Creators
    are ``userID:name:accountID`` triples, songs are separated by ``~:~`` and
    use ``~|~`` between their keys and values.
    """
    sections = split_sections(data)
    sections += [''] * (4 - len(sections))
    levels_section, creators_section, songs_section, page_section = sections[:4]

    levels = [parse(record) for record in split_records(levels_section)]

    creators = {}
    for record in split_records(creators_section):
        fields = record.split(':')
        if len(fields) < 3:
            continue
        creator = CreatorRecord(*fields[:3])
        creators[creator.user_id] = creator

    songs = {}
    for record in split_records(songs_section, '~:~'):
        song = parse(record, '~|~')
        if '1' in song:
            songs[song['1']] = song

    return SearchResult(levels, creators, songs, _parse_page_info(page_section))


def parse_comment(data: str) -> CommentResult:
    """Parse a comment record, with its author when there is one.

    Level comments are ``comment:author`` where both parts use ``~``
    separators; profile comments have no author part.
    """
    comment, _, author = data.partition(':')
    return CommentResult(parse(comment, '~'), parse(author, '~'))


def parse_level_string(raw: str) -> LevelString:
    """Parse a decompressed level string.

    The first ``;`` separated part is the level header, the others are
    objects. The header keeps its raw colour table under ``kS38``, which is
    also given parsed in :attr:`LevelString.colors`.
    """
    header_data, *objects_data = raw.split(';')
    header = parse(header_data, ',')
    colors = [
        parse(color, '_')
        for color in header.get(COLOR_TABLE_KEY, '').split('|')
        if color
    ]
    objects = [parse_numeric(data) for data in objects_data if data]
    return LevelString(header, colors, objects, raw)
