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

import requests


__all__ = ['HTTPAdapter']


class HTTPAdapter(requests.adapters.HTTPAdapter):
    """
    Custom Adapter class with extra features.

    :param proxy_headers: headers to send to proxy (if any)
    :type proxy_headers: dict
    """
    def __init__(self, *args, **kwargs):
        self._proxy_headers = kwargs.pop('proxy_headers', {})
        super().__init__(*args, **kwargs)

    def proxy_headers(self, proxy):
        headers = super().proxy_headers(proxy)
        headers.update(self._proxy_headers)
        return headers
