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

from requests.exceptions import HTTPError


__all__ = ['HTTPNotFound', 'ClientError', 'ServerError']


class HTTPNotFound(HTTPError):
    pass


class ClientError(HTTPError):
    pass


class ServerError(HTTPError):
    pass
