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
from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import urlencode

__all__ = ['DEFAULT_PARAMS', 'SECRETS', 'RequestParams', 'SessionToken']

ParamValue = t.Union[str, int, float]

SECRETS: t.Mapping[str, str] = MappingProxyType({
    'db': 'Wmfd2893gb7',
    'account': 'Wmfv3899gc9',
    'moderator': 'Wmfp3879gc3',
})
"""Shared secrets of the game client, per class of endpoint."""

DEFAULT_PARAMS: t.Mapping[str, ParamValue] = MappingProxyType({
    'gdw': 0,
    'gameVersion': 21,
    'binaryVersion': 35,
})
"""Protocol version fields sent with every request."""


class SessionToken(t.NamedTuple):
    """Authenticated session, as obtained from a login.

    It holds the obfuscated password (``gjp``), never the password itself.
    """

    account_id: int
    gjp: str
    user_id: t.Optional[int] = None
    username: t.Optional[str] = None


class RequestParams(Mapping):
    """Form fields of a request to the game database.

    Protocol version fields are set first, then overridden by the given
    fields if they collide. Keys keep their insertion order when serialized.

    >>> params = RequestParams(levelID=128)
    >>> params.authorize('db')
    >>> params.serialize()
    'gdw=0&gameVersion=21&binaryVersion=35&levelID=128&secret=Wmfd2893gb7'
    """

    def __init__(
        self,
        fields: t.Optional[t.Mapping[str, ParamValue]] = None,
        **kwargs: ParamValue,
    ):
        self._data: t.Dict[str, ParamValue] = dict(DEFAULT_PARAMS)
        self.insert(fields, **kwargs)

    def __getitem__(self, key: str) -> ParamValue:
        return self._data[key]

    def __iter__(self) -> t.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return '<%s %r>' % (type(self).__name__, self._data)

    def insert(
        self,
        fields: t.Optional[t.Mapping[str, ParamValue]] = None,
        **kwargs: ParamValue,
    ) -> t.Dict[str, ParamValue]:
        """Merge fields, overwriting existing keys.

        :returns: a copy of the merged fields
        """
        if fields:
            self._data.update(fields)
        self._data.update(kwargs)
        return dict(self._data)

    def authorize(self, kind: str = 'db') -> None:
        """Set the shared secret of an endpoint class.

        :param kind: one of ``db``, ``account`` or ``moderator``
        :raises: :class:`KeyError` for an unknown class
        """
        try:
            self._data['secret'] = SECRETS[kind]
        except KeyError:
            raise KeyError('Unknown secret kind %r' % kind) from None

    def login(self, username: str, password: str) -> None:
        """Set plain credentials, only sent to the login endpoint."""
        self.insert(userName=username, password=password)

    def session(self, token: SessionToken) -> None:
        """Set the fields identifying an authenticated session."""
        self.insert(accountID=token.account_id, gjp=token.gjp)

    def copy(self) -> 'RequestParams':
        params = type(self)()
        params._data = dict(self._data)
        return params

    def serialize(self) -> str:
        """URL-encode the fields as a form body."""
        return urlencode([
            (key, str(int(value) if isinstance(value, bool) else value))
            for key, value in self._data.items()
        ])
