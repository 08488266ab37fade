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

import typing as t

__all__ = ['to_unicode']


def to_unicode(text: t.Any) -> str:
    """Get a :class:`str` from any value.

    Bytes are decoded as UTF-8, falling back on single byte encodings.
    """
    if isinstance(text, str):
        return text
    if not isinstance(text, (bytes, bytearray)):
        return str(text)

    try:
        return text.decode('utf-8')
    except UnicodeError:
        pass

    try:
        return text.decode('iso-8859-15')
    except UnicodeError:
        pass

    return text.decode('windows-1252', 'replace')
