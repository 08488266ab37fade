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

from typing import List


__all__ = [
    'BrowserIncorrectPassword',
    'InvalidCredentials',
    'BrowserUserBanned',
    'BrowserUnavailable',
    'BrowserHTTPSDowngrade',
    'ParseError',
    'DecompressionError',
]


class BrowserIncorrectPassword(Exception):
    """The server signals to us our credentials are invalid.

    :type message: str
    :param message: compatibility message for the user (mostly when bad_fields is not given)
    :type bad_fields: list[str]
    :param bad_fields: list of config field names which are incorrect, if it is known
    """

    def __init__(
        self,
        message: str = "",
        bad_fields: List[str] | None = None
    ):
        super().__init__(*filter(None, [message]))
        self.bad_fields = bad_fields


class InvalidCredentials(BrowserIncorrectPassword):
    """The login endpoint refused the username/password pair.

    The browser stays anonymous when this is raised.
    """

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, bad_fields=['login', 'password'])


class BrowserUserBanned(BrowserIncorrectPassword):
    """The server signals to us the account we are logging in as is banned."""


class BrowserUnavailable(Exception):
    """The server is either momentarily unavailable, or in maintenance."""


class BrowserHTTPSDowngrade(Exception):
    """An HTTPS base URL ended on a plain HTTP response."""


class ParseError(Exception):
    """A response could not be decoded."""


class DecompressionError(ParseError):
    """A compressed payload is corrupt or truncated.

    There is no partial result: the whole payload is rejected.
    """

