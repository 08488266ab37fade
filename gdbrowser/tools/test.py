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
Offline transport for tests.

Set :class:`FakeAdapter` as the ``HTTP_ADAPTER_CLASS`` of a browser and
give it the bodies to answer, keyed by endpoint::

    class Browser(GeometryDashBrowser):
        HTTP_ADAPTER_CLASS = FakeAdapter

    browser = Browser(None, None)
    adapter = FakeAdapter.of(browser)
    adapter.add('getGJUserInfo20.php', '1:RobTop:2:16:16:71')
"""

from __future__ import annotations

from http.client import responses as REASONS
from threading import Lock
from typing import Callable, Dict, List, Tuple, Union
from urllib.parse import parse_qsl, urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from gdbrowser.browser.adapters import HTTPAdapter


__all__ = ['FakeAdapter', 'form_of']


Body = Union[str, bytes, Callable[[requests.PreparedRequest], Union[str, bytes]]]


def form_of(request: requests.PreparedRequest) -> Dict[str, str]:
    """Form fields sent in the body of a request."""
    body = request.body or ''
    if isinstance(body, bytes):
        body = body.decode('utf-8')
    return dict(parse_qsl(body, keep_blank_values=True))


class FakeAdapter(HTTPAdapter):
    """
    Transport adapter answering canned bodies instead of reaching a server.

    Bodies of an endpoint are answered in order, the last one is answered
    again for any further request. A body may be a callable taking the
    prepared request. Endpoints without bodies get a 404.

    Every request sent is kept in :attr:`requests`.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.responses: Dict[str, List[Tuple[int, Body]]] = {}
        self.requests: List[requests.PreparedRequest] = []
        self._lock = Lock()

    @classmethod
    def of(cls, browser) -> FakeAdapter:
        """Get the fake adapter mounted on a browser."""
        adapter = browser.session.get_adapter(browser.BASEURL)
        assert isinstance(adapter, cls), 'browser does not use %s' % cls.__name__
        return adapter

    def add(self, endpoint: str, *bodies: Body, status: int = 200):
        """Queue bodies to answer for an endpoint, like ``getGJLevels21.php``."""
        with self._lock:
            self.responses.setdefault(endpoint, []).extend((status, body) for body in bodies)

    def sent(self, endpoint: str) -> List[Dict[str, str]]:
        """Form fields of the requests sent to an endpoint."""
        return [form_of(request) for request in self.requests if self.endpoint(request) == endpoint]

    @staticmethod
    def endpoint(request: requests.PreparedRequest) -> str:
        return urlsplit(request.url).path.rsplit('/', 1)[-1]

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        endpoint = self.endpoint(request)
        with self._lock:
            self.requests.append(request)
            queue = self.responses.get(endpoint)
            if not queue:
                status, body = 404, ''
            elif len(queue) > 1:
                status, body = queue.pop(0)
            else:
                status, body = queue[0]

        if callable(body):
            body = body(request)
        return self.build_fake_response(request, status, body)

    def build_fake_response(self, request, status: int, body: str | bytes) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response.reason = REASONS.get(status, '')
        response._content = body.encode('utf-8') if isinstance(body, str) else body
        response.encoding = 'utf-8'
        response.headers = CaseInsensitiveDict({'Content-Type': 'text/html; charset=UTF-8'})
        response.url = request.url
        response.request = request
        response.connection = self
        return response
