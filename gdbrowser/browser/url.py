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
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote

import requests

from gdbrowser.browser.pages import Page

if TYPE_CHECKING:
    from gdbrowser.browser.browsers import Browser

ABSOLUTE_URL_PATTERN_RE = re.compile(r'^[\w\?]+://[^/].*')

_GROUP_RE = re.compile(r'\(\?P<(?P<name>\w+)>[^)]*\)')
_ESCAPE_RE = re.compile(r'\\(.)')


__all__ = ['URL', 'UrlNotResolvable', 'normalize']


class UrlNotResolvable(Exception):
    """
    Raised when trying to locate on an URL instance which url pattern is not resolvable as a real url.
    """


def normalize(pattern: str) -> Tuple[str, List[str]]:
    r"""
    Turn an URL regexp into a format string and the list of its parameters.

    Only named groups and escaped characters are supported, which is all
    the database endpoints need.

    >>> normalize(r'getGJLevels21\.php')
    ('getGJLevels21.php', [])
    >>> normalize(r'levels/(?P<id>\d+)\.txt$')
    ('levels/%(id)s.txt', ['id'])
    """
    names = [m.group('name') for m in _GROUP_RE.finditer(pattern)]
    parts = []
    for i, chunk in enumerate(_GROUP_RE.split(pattern)):
        # re.split() interleaves the captured group name
        if i % 2:
            parts.append('%%(%s)s' % chunk)
        else:
            parts.append(_ESCAPE_RE.sub(r'\1', chunk.lstrip('^').rstrip('$')))
    return ''.join(parts), names


class URL:
    """
    A description of an URL on the PagesBrowser website.

    It takes one or several regexps to match urls, and an optional Page
    class which is instancied by PagesBrowser.open if the page matches a regex.

    :param base: The name of the browser's property containing the base URL.
    :param headers: Headers to include on requests using this URL.
    :param timeout: Timeout to use for this URL in particular.
    :param methods: Request HTTP methods to match the response.
    :param content_type: MIME type of the content to match the response with.
    """
    _creation_counter = 0

    def __init__(
        self, *args,
        base: str = 'BASEURL',
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        methods: Tuple[str, ...] = (),
        content_type: Optional[str] = None,
    ):
        if content_type is not None and ';' in content_type:
            raise ValueError(
                'Content-Type matching is only based on the MIME type, '
                + 'not additional properties such as encoding or version',
            )

        self.urls = []
        self.klass = None
        self.browser = None
        for arg in args:
            if isinstance(arg, str):
                self.urls.append(arg)
            if isinstance(arg, type):
                self.klass = arg

        self._base = base
        self._headers = headers
        self._timeout = timeout
        self._methods = tuple(methods)
        self._content_type = content_type
        self._creation_counter = URL._creation_counter
        URL._creation_counter += 1

    def __repr__(self) -> str:
        return '<URL %s>' % ' | '.join(self.urls)

    def is_here(self, **kwargs) -> bool:
        """
        Returns True if the current page of browser matches this URL.
        If arguments are provided, and only then, they are checked against the arguments
        that were used to build the current page URL.
        """
        assert self.klass is not None, "You can use this method only if there is a Page class handler."
        assert self.browser is not None

        if self.browser.page is None:
            return False

        if len(kwargs):
            m = self.match(self.build(**kwargs))
            assert m is not None
            params = m.groupdict()
        else:
            params = None

        if not isinstance(self.browser.page, self.klass):
            return False

        if self._methods:
            method = self.browser.response.request.method
            if method not in self._methods:
                return False

        # XXX use unquote on current params values because if there are spaces
        # or special characters in them, it is encoded only in but not in kwargs.
        return (
            params is None or
            params == {k: unquote(v) for k, v in self.browser.page.params.items()}
        )

    def _headers_for(self, headers: Dict[str, str] | None) -> Dict[str, str]:
        headers = dict(headers or {})
        if self._headers:
            headers.update(self._headers)
        return headers

    def go(
        self,
        *,
        params: Dict | None = None,
        data: str | Dict | None = None,
        method: str | None = None,
        headers: Dict[str, str] | None = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> requests.Response | Page:
        """
        Request to go on this url.

        Arguments are optional parameters for url.
        """
        assert self.browser is not None

        if timeout is None:
            timeout = self._timeout

        r = self.browser.location(
            self.build(**kwargs),
            params=params,
            data=data,
            method=method,
            headers=self._headers_for(headers),
            timeout=timeout,
        )
        return r.page or r

    def open(
        self,
        *,
        params: Dict | None = None,
        data: Dict | str | None = None,
        method: str | None = None,
        headers: Dict[str, str] | None = None,
        timeout: float | None = None,
        is_async: bool = False,
        callback: Callable[[requests.Response], requests.Response] = lambda response: response,
        **kwargs
    ) -> requests.Response | Page:
        """
        Request to open on this url.

        Arguments are optional parameters for url. With ``is_async``, a
        :class:`concurrent.futures.Future` of the response is returned.
        """
        assert self.browser is not None

        if timeout is None:
            timeout = self._timeout

        r = self.browser.open(
            self.build(**kwargs),
            params=params,
            data=data,
            method=method,
            headers=self._headers_for(headers),
            timeout=timeout,
            is_async=is_async,
            callback=callback,
        )

        if getattr(r, 'page', None):
            return r.page
        return r

    def get_base_url(
        self,
        browser: Browser | None = None,
        for_pattern: str | None = None
    ) -> str:
        """
        Get the browser's base URL for the instance.
        """
        browser = browser or self.browser
        if browser is None:
            raise ValueError('URL browser is not set')

        value = getattr(browser, self._base, None)
        if not isinstance(value, str):
            msg = f'Browser {self._base} property is None or not defined'
            if for_pattern:
                msg += f', URL {for_pattern} should be defined as absolute'
            raise ValueError(msg)

        return value

    def build(self, **kwargs) -> str:
        """
        Build an url with the given arguments from URL's regexps.

        :param param: Query string parameters

        :rtype: :class:`str`
        :raises: :class:`UrlNotResolvable` if unable to resolve a correct url with the given arguments.
        """
        browser = kwargs.pop('browser', self.browser)

        assert browser is not None

        params = kwargs.pop('params', None)
        patterns = [normalize(url) for url in self.urls]

        for pattern, names in patterns:
            # only patterns using exactly the given arguments
            if set(names) != set(kwargs):
                continue

            url = pattern % {key: str(value) for key, value in kwargs.items()}

            if not ABSOLUTE_URL_PATTERN_RE.match(url):
                base = self.get_base_url(browser=browser, for_pattern=url)
                url = browser.absurl(url, base=base)

            if params:
                p = requests.models.PreparedRequest()
                p.prepare_url(url, params)
                assert p.url is not None
                url = p.url
            return url

        raise UrlNotResolvable('Unable to resolve URL with %r. Available are %s' % (
            kwargs, ', '.join([pattern for pattern, _ in patterns])))

    def match(
        self, url: str,
        base: str | None = None
    ) -> re.Match | None:
        """
        Check if the given url match this object.

        Returns ``None`` if none matches.
        """
        for regex in self.urls:
            if not ABSOLUTE_URL_PATTERN_RE.match(regex):
                if not base:
                    base = self.get_base_url(browser=None, for_pattern=regex)

                regex = re.escape(base).rstrip('/') + '/' + regex.lstrip('/')

            m = re.match(regex, url)
            if m:
                return m

        return None

    def handle(self, response: requests.Response) -> Page | None:
        """
        Handle a HTTP response to get an instance of the klass if it matches.
        """
        assert self.browser is not None

        if self.klass is None:
            return None
        if response.request.method == 'HEAD':
            return None
        if self._methods and response.request.method not in self._methods:
            return None
        if self._content_type is not None:
            content_type = response.headers.get('Content-Type')
            if content_type is None:
                return None

            content_type, _, _ = content_type.partition(';')
            if content_type.strip() != self._content_type:
                return None

        m = self.match(response.url)
        if m:
            page = self.klass(self.browser, response, m.groupdict())
            is_here = getattr(page, 'is_here', None)
            if is_here is None or is_here is True:
                return page
            elif is_here is False:
                return None  # no page!
            elif callable(is_here) and is_here():
                return page

        return None
