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
import re
from typing import Any, Callable, Dict

import requests

from gdbrowser.tools.log import getLogger


__all__ = ['NextPage', 'Page', 'TextPage', 'LoggedPage', 'pagination']


class NextPage(Exception):
    """
    Exception raised by a page method to tell the :func:`pagination` decorator
    to go on the next page.
    """

    def __init__(self, request: str | requests.Request):
        super().__init__()
        self.request = request


def pagination(func: Callable) -> Callable:
    r"""
    This helper decorator can be used to handle pagination pages easily.

    When the called function raises an exception :class:`NextPage`, it goes
    on the wanted page and recall the function.

    :class:`NextPage` constructor can take an url or a Request object.

    >>> class Page(TextPage):
    ...     @pagination
    ...     def iter_values(self):
    ...         yield from self.doc.split()
    ...         raise NextPage('page2.txt')
    ...
    """

    @wraps(func)
    def inner(page, *args, **kwargs):
        while True:
            try:
                for r in func(page, *args, **kwargs):
                    yield r
            except NextPage as e:
                result = page.browser.location(e.request)
                page = result.page
            else:
                return

    return inner


class Page:
    """
    Represents a page.

    Encoding can be forced by setting the :attr:`ENCODING` class-wide
    attribute, or by passing an `encoding` keyword argument, which overrides
    :attr:`ENCODING`. Finally, it can be manually changed by assigning a new
    value to :attr:`encoding` instance attribute. A unicode version of the
    response content is accessible in :attr:`text`, decoded with specified
    :attr:`encoding`.

    :param browser: browser used to go on the page
    :type browser: :class:`gdbrowser.browser.browsers.Browser`
    :param response: response object
    :type response: :class:`requests.Response`
    :param params: optional dictionary containing parameters given to the page (see :class:`gdbrowser.browser.url.URL`)
    :type params: :class:`dict`
    :param encoding: optional parameter to force the encoding of the page, overrides :attr:`ENCODING`
    :type encoding: :class:`str`
    """

    ENCODING: str | None = None
    """
    Force a page encoding.
    It is recommended to use None for autodetection.
    """

    logged = False
    """
    If True, the page is in a restricted area of the website. Useful with
    :class:`LoginBrowser` and the :func:`need_login` decorator.
    """

    def __init__(
        self,
        browser,
        response: requests.Response,
        params: Dict[str, Any] | None = None,
        encoding: str | None = None
    ):
        self.browser = browser
        self.logger = getLogger(self.__class__.__name__.lower(), browser.logger)
        self.response = response
        self.url = self.response.url
        self.params = params or {}

        # Setup encoding and build document
        self.forced_encoding = encoding or self.ENCODING
        if self.forced_encoding:
            self.response.encoding = self.forced_encoding
        self.doc = self.build_doc(self.data)

    @property
    def encoding(self) -> str | None:
        return self.response.encoding

    @encoding.setter
    def encoding(self, value: str):
        self.forced_encoding = value
        self.response.encoding = value
        self.doc = self.build_doc(self.data)

    @property
    def data(self) -> Any:
        """
        Data passed to :meth:`build_doc`.
        """
        return self.response.content

    @property
    def text(self) -> str:
        """
        Content of the response, in str, decoded with :attr:`encoding`.
        """
        return self.response.text

    def on_load(self):
        """
        Event called when browser loads this page.
        """

    def on_leave(self):
        """
        Event called when browser leaves this page.
        """

    def build_doc(self, content: Any) -> Any:
        """
        Abstract method to be implemented by subclasses to build structured
        data (HTML, Json, CSV...) from :attr:`data` property. It also can be
        overriden in modules pages to preprocess or postprocess data. It must
        return an object -- that will be assigned to :attr:`doc`.
        """
        raise NotImplementedError()

    def absurl(self, url: str) -> str:
        """
        Get an absolute URL from an a partial URL, relative to the Page URL
        """
        return self.browser.absurl(url, base=self.url)


class TextPage(Page):
    """
    Page where the "doc" attribute is the text of the response.

    Bodies which are only a negative number are failure sentinels. They are
    kept in :attr:`sentinel`, and :meth:`build_sentinel_doc` gives the
    document instead of :meth:`parse_text`.
    """

    ENCODING = 'utf-8'

    SENTINEL_RE = re.compile(r'^-\d+$')

    sentinel: int | None = None

    @property
    def data(self) -> str:
        return self.response.text

    def build_doc(self, text: str) -> Any:
        text = text.strip()
        if self.SENTINEL_RE.match(text):
            self.sentinel = int(text)
            return self.build_sentinel_doc(self.sentinel)
        return self.parse_text(text)

    def parse_text(self, text: str) -> Any:
        return text

    def build_sentinel_doc(self, code: int) -> Any:
        return None


class LoggedPage:
    """
    A page that only logged users can reach. If we did not get a redirection
    for this page, we are sure that the login is still active.

    Do not use this class for page with mixed content (logged/anonymous) or for
    pages with a login form.
    """
    logged = True
