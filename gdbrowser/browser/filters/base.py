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

from functools import wraps
from typing import Any, Callable

from gdbrowser.exceptions import ParseError
from gdbrowser.tools.log import getLogger, DEBUG_FILTERS


__all__ = [
    'FilterError', 'ItemNotFound', 'Filter', 'Env', 'debug',
    'select_path',
]


class NoDefault:
    def __repr__(self):
        return 'NO_DEFAULT'


_NO_DEFAULT = NoDefault()


class _NotFound:
    def __repr__(self):
        return 'NOT_FOUND'


_NOT_FOUND = _NotFound()


class FilterError(ParseError):
    pass


class ItemNotFound(FilterError):
    pass


class _Filter:
    _creation_counter = 0

    def __init__(self, default: Any = _NO_DEFAULT):
        self._key = None
        self._obj = None
        self.default = default
        self._creation_counter = _Filter._creation_counter
        _Filter._creation_counter += 1

    def __or__(self, o):
        self.default = o
        return self

    def __and__(self, o):
        if isinstance(o, type) and issubclass(o, _Filter):
            o = o()
        o.selector = self
        return o

    def default_or_raise(self, exception: Exception) -> Any:
        if self.default is not _NO_DEFAULT:
            return self.default
        raise exception

    def __str__(self):
        return self.__class__.__name__


def debug(*args):
    """
    A decorator function to provide some debug information
    in Filters.
    It prints by default the name of the Filter and the input value.
    """
    def decorator(function):
        @wraps(function)
        def print_debug(self, value):
            logger = getLogger('b2filters')
            result = ''
            if self._obj is not None:
                result += '%s' % self._obj._random_id
            if self._key is not None:
                result += '.%s' % self._key
            result += ' %s(%r' % (self, value)
            for arg in self.__dict__:
                if arg.startswith('_') or arg == 'selector':
                    continue
                if arg == 'default' and getattr(self, arg) is _NO_DEFAULT:
                    continue
                result += ', %s=%r' % (arg, getattr(self, arg))
            result += ')'
            logger.log(DEBUG_FILTERS, result)
            return function(self, value)
        return print_debug
    return decorator


def select_path(path, content: Any) -> Any:
    """
    Walk ``content`` along the keys of ``path``.

    Integer keys index lists. :data:`_NOT_FOUND` is returned when an
    element of the path is missing.

    >>> select_path(['levels', '0', '2'], {'levels': [{'2': 'Bloodbath'}]})
    'Bloodbath'
    >>> select_path(['9'], {'2': 'text'})
    NOT_FOUND
    """
    for key in path:
        try:
            if isinstance(content, list):
                content = content[int(key)]
            else:
                content = content[key]
        except (KeyError, IndexError, TypeError, ValueError):
            return _NOT_FOUND
    return content


class Filter(_Filter):
    """
    Class used to filter on a record.

    You can chain filters with the '&' operator.

    Used at the end of a chain, the '|' operator can be used to set a
    default value if the chain raises an exception.
    """

    def __init__(self, selector: str | _Filter | Callable | Any | None = None, default: Any = _NO_DEFAULT):
        super().__init__(default=default)
        self.selector = selector

    @classmethod
    def select(cls, selector: Any, item: Any, obj: Any = None, key: str | None = None) -> Any:
        if selector is None:
            ret = getattr(item, 'el', item)
        elif isinstance(selector, str):
            el = getattr(item, 'el', item)
            ret = select_path(selector.split('/'), el)
            if ret is _NOT_FOUND:
                raise ItemNotFound('Element %r not found' % selector)
        elif isinstance(selector, _Filter):
            selector._key = key
            selector._obj = obj
            ret = selector(item)
        elif callable(selector):
            ret = selector(item)
        else:
            ret = selector

        return ret

    def __call__(self, item: Any) -> Any:
        try:
            value = self.select(self.selector, item, key=self._key, obj=self._obj)
        except ItemNotFound as exc:
            return self.default_or_raise(exc)
        return self.filter(value)

    @debug()
    def filter(self, value: Any) -> Any:
        """
        This method has to be overridden by children classes.
        """
        raise NotImplementedError()


class Env(_Filter):
    """
    Filter to get environment value of the item.

    It is used for example to get page parameters, or when there is a parse()
    method on ItemElement.
    """

    def __init__(self, name: str, default: Any = _NO_DEFAULT):
        super().__init__(default)
        self.name = name

    def __call__(self, item: Any) -> Any:
        try:
            return item.env[self.name]
        except KeyError:
            return self.default_or_raise(ItemNotFound('Environment variable %s not found' % self.name))
