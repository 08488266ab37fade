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

from collections import OrderedDict
import re
from typing import Any, Dict, Iterable

from .misc import to_unicode


__all__ = ['ValuesDict', 'Value', 'ValueBackendPassword', 'ValueInt', 'ValueBool', 'dump_values']


class ValuesDict(OrderedDict):
    """
    Ordered dictionary which can take values in constructor.
    """

    def __init__(self, *values: Value):
        super().__init__()
        for v in values:
            self[v.id] = v

    def with_values(self, *values: Value) -> ValuesDict:
        """Get a copy of the object, with new values.

        Values of the same name are replaced, others are added at the end.
        """
        new_obj = self.__class__()
        new_obj.update(self)
        for value in values:
            new_obj[value.id] = value
        return new_obj

    def without_values(self, *names: str) -> ValuesDict:
        """Get a copy of the object without the given values."""
        new_obj = self.__class__()
        for key, value in self.items():
            if key not in names:
                new_obj[key] = value
        return new_obj


class Value:
    """
    Value.

    :param label: human readable description of a value
    :type label: str
    :param required: if ``True``, the backend can't load if the key isn't found in its configuration
    :type required: bool
    :param default: an optional default value, used when the key is not in config. If there is no default value and the key
                    is not found in configuration, the **required** parameter is implicitly set
    :param masked: if ``True``, the value is masked. It is useful for applications to know if this key is a password
    :type masked: bool
    :param regexp: if specified, on load the specified value is checked against this regexp, and an error is raised if it doesn't match
    :type regexp: str
    :param choices: if this parameter is set, the value must be in the list
    :param transient: this value is not persistent (asked only if needed)
    :type transient: bool
    """

    def __init__(self, *args, **kwargs):
        self.id = args[0] if args else ''
        self.label = kwargs.get('label', kwargs.get('description', None))
        self.description = kwargs.get('description', kwargs.get('label', None))
        self.default = kwargs.get('default', None)
        if isinstance(self.default, str):
            self.default = to_unicode(self.default)
        self.regexp = kwargs.get('regexp', None)
        self.choices = kwargs.get('choices', None)
        if isinstance(self.choices, (list, tuple)):
            self.choices = OrderedDict(((v, v) for v in self.choices))
        self.transient = kwargs.get('transient', False)
        self.masked = kwargs.get('masked', False)
        self.required = kwargs.get('required', self.default is None)
        self._value = kwargs.get('value', None)

    def __repr__(self) -> str:
        return '<%s %r>' % (self.__class__.__name__, self.id)

    def show_value(self, v: Any) -> str:
        if self.masked:
            return ''
        return v

    def check_valid(self, v: Any):
        """
        Check if the given value is valid.

        :raises: ValueError
        """
        if self.default is not None and v == self.default:
            return
        if v == '' and self.default != '' and (self.choices is None or v not in self.choices):
            raise ValueError('Value can\'t be empty')
        if self.regexp is not None and not re.match(self.regexp + '$', str(v) if v is not None else ''):
            raise ValueError('Value "%s" does not match regexp "%s"' % (self.show_value(v), self.regexp))
        if self.choices is not None and v not in self.choices:
            raise ValueError('Value "%s" is not in list: %s' % (
                self.show_value(v), ', '.join(str(s) for s in self.choices)))

    def load(self, domain: str, v: Any):
        """
        Load value.

        :param domain: what is the domain of this value
        :type domain: str
        :param v: value to load
        """
        return self.set(v)

    def set(self, v: Any):
        """
        Set a value.
        """
        if isinstance(v, (str, bytes)):
            v = to_unicode(v)
        self.check_valid(v)
        self._value = v

    def dump(self) -> Any:
        """
        Dump value to be stored.
        """
        return self.get()

    def get(self) -> Any:
        """
        Get the value.
        """
        return self._value


class ValueBackendPassword(Value):
    """
    Credential of a backend.

    Masked by default, and never dumped unless ``stored`` is set.
    """

    def __init__(self, *args, **kwargs):
        kwargs['masked'] = kwargs.pop('masked', True)
        self._stored = kwargs.pop('stored', False)
        super().__init__(*args, **kwargs)
        self.default = kwargs.get('default', '')
        self.required = kwargs.get('required', False)

    def check_valid(self, passwd: Any):
        if passwd == '':
            # always allow empty passwords, the login will tell
            return True
        return super().check_valid(passwd)

    def dump(self) -> Any:
        if self._stored:
            return self._value
        return ''


class ValueInt(Value):
    def __init__(self, *args, **kwargs):
        kwargs['regexp'] = '^-?[0-9]+$'
        super().__init__(*args, **kwargs)
        self.default = kwargs.get('default', 0)

    def get(self) -> int:
        return int(self._value)


class ValueBool(Value):
    TRUE_STRINGS: Iterable[str] = ('y', 'yes', '1', 'true', 'on')
    FALSE_STRINGS: Iterable[str] = ('n', 'no', '0', 'false', 'off')

    def __init__(self, *args, **kwargs):
        kwargs['choices'] = {'y': 'True', 'n': 'False'}
        super().__init__(*args, **kwargs)

    def check_valid(self, v: Any):
        if isinstance(v, bool):
            return
        if str(v).lower() not in (*self.TRUE_STRINGS, *self.FALSE_STRINGS):
            raise ValueError('Value "%s" is not a boolean (y/n)' % v)

    def get(self) -> bool:
        if isinstance(self._value, bool):
            return self._value
        return str(self._value).lower() in self.TRUE_STRINGS


def dump_values(values: Dict[str, Value]) -> Dict[str, Any]:
    """Dump persistent values of a dictionary of values."""
    return {name: value.dump() for name, value in values.items() if not value.transient}
