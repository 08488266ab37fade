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

from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from gdbrowser.tools.crypto import decode_text

from .base import _NO_DEFAULT, _NOT_FOUND, Filter, FilterError, ItemNotFound, debug, select_path


__all__ = ['Key', 'Base64Text', 'Unquote', 'Flag']


class Key(Filter):
    """Filter to find a value in a parsed record, or in nested records.

    The selector is a ``/`` separated path of keys. A selector defined as
    None or an empty string selects the whole record.

    >>> record = {'2': 'Bloodbath', '18': '10'}
    >>> Key('2')(record)
    'Bloodbath'
    >>> Key('45')(record)
    Traceback (most recent call last):
        ...
    gdbrowser.browser.filters.base.ItemNotFound: Element ['45'] not found
    >>> Key('45', default=None)(record)
    """

    def __init__(self, selector: str | None = None, default: Any = _NO_DEFAULT):
        super().__init__(default=default)
        if selector is None or selector == '':
            self.selector = []
        else:
            self.selector = selector.split('/')

    def __call__(self, item: Any) -> Any:
        content = item if isinstance(item, (dict, list)) else item.el
        return self.filter(select_path(self.selector, content))

    @debug()
    def filter(self, value: Any) -> Any:
        if value is _NOT_FOUND:
            return self.default_or_raise(ItemNotFound('Element %r not found' % self.selector))
        return value


class Base64Text(Filter):
    """Decode a text field sent in the service Base64 flavour.

    >>> Base64Text(None)('SGVsbG8gd29ybGQ=')
    'Hello world'
    """

    @debug()
    def filter(self, value: Any) -> str:
        if value is None:
            return self.default_or_raise(FilterError('Nothing to decode'))
        try:
            return decode_text(value)
        except ValueError as e:
            return self.default_or_raise(FilterError('Invalid Base64 %r: %s' % (value, e)))


class Unquote(Filter):
    """URL-unquote a value, as song download links are."""

    @debug()
    def filter(self, value: Any) -> str:
        return unquote(str(value))


class Flag(Filter):
    """True when the value is a non-zero number.

    Flags are sent as ``0``/``1``, sometimes empty. Anything which is not a
    number is false.

    >>> Flag(None)('1'), Flag(None)('0'), Flag(None)('')
    (True, False, False)
    """

    @debug()
    def filter(self, value: Any) -> bool:
        try:
            return int(value) != 0
        except (TypeError, ValueError):
            return False
