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

import re
from typing import Any, Callable, Dict

from gdbrowser.capabilities.base import empty
from gdbrowser.tools.date import parse_date

from .base import _Filter, _NO_DEFAULT, Filter, FilterError, ItemNotFound, debug


__all__ = [
    'CleanText', 'Type', 'Field', 'Map', 'MultiFilter', 'Eval', 'DateTime',
]


class CleanText(Filter):
    """
    Get a cleaned text from a record value.

    Whitespaces are collapsed and trimmed.

    :param replace: list of tuples of patterns to replace after cleaning
    """

    def __init__(self, selector=None, replace=(), default=_NO_DEFAULT):
        super().__init__(selector, default=default)
        self.replace = list(replace)

    @debug()
    def filter(self, txt: Any) -> str:
        if txt is None:
            return self.default_or_raise(FilterError('Empty text'))
        return self.clean(txt, self.replace)

    @classmethod
    def clean(cls, txt: Any, replace=()) -> str:
        txt = re.sub(r'\s+', ' ', str(txt)).strip()
        for before, after in replace:
            txt = txt.replace(before, after)
        return txt


class Type(Filter):
    """
    Get a cleaned value of a specific type from a record value.

    :param type: Type of the returned value
    :param minlen: Minimal length of the input before returning the default value
    """

    def __init__(self, selector=None, type=None, minlen=0, default=_NO_DEFAULT):
        super().__init__(selector, default=default)
        self.type_func = type
        self.minlen = minlen

    @debug()
    def filter(self, txt: Any) -> Any:
        if isinstance(txt, str) and len(txt) <= self.minlen:
            return self.default_or_raise(FilterError('Value %r is too short' % txt))
        try:
            return self.type_func(txt)
        except (ValueError, TypeError) as e:
            return self.default_or_raise(FilterError('Unable to parse %r: %s' % (txt, e)))


class Field(_Filter):
    """
    Get the attribute of object.

    Useful for a value that depends on another one already parsed.
    """

    def __init__(self, name: str):
        super().__init__()
        self.name = name

    def __call__(self, item: Any) -> Any:
        return item.use_selector(getattr(item, 'obj_%s' % self.name), key=self._key)


class Map(Filter):
    """
    Map the value to another one, from a dictionary.

    >>> Map(None, {'0': 'user', '1': 'moderator'})('1')
    'moderator'
    """

    def __init__(self, selector, map_dict: Dict, default=_NO_DEFAULT):
        super().__init__(selector, default=default)
        self.map_dict = map_dict

    @debug()
    def filter(self, txt: Any) -> Any:
        try:
            return self.map_dict[txt]
        except (KeyError, TypeError):
            return self.default_or_raise(ItemNotFound('Unable to handle %r on %r' % (txt, self.map_dict)))


class MultiFilter(Filter):
    def __init__(self, *args, **kwargs):
        default = kwargs.pop('default', _NO_DEFAULT)
        super().__init__(args, default)

    def __call__(self, item: Any) -> Any:
        values = [self.select(selector, item, obj=self._obj, key=self._key) for selector in self.selector]
        return self.filter(tuple(values))

    def filter(self, values: Any) -> Any:
        raise NotImplementedError()


class Eval(MultiFilter):
    """
    Evaluate a function with given 'deferred' arguments.

    >>> Eval(lambda x, y: x * y + 1, 3, 4)(None)
    13
    """

    def __init__(self, func: Callable, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.func = func

    @debug()
    def filter(self, values: Any) -> Any:
        return self.func(*values)


class DateTime(Filter):
    """
    Parse a date as the server gives it, relative (``5 hours``) or absolute.
    """

    @debug()
    def filter(self, txt: Any):
        if empty(txt) or txt == '':
            return self.default_or_raise(FilterError('Date is empty'))

        value = parse_date(str(txt))
        if value is None:
            return self.default_or_raise(FilterError('Unable to parse date %r' % txt))
        return value
