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
from copy import copy, deepcopy
from functools import wraps
import json
from logging import Logger
import os
import re
import tempfile
from threading import Lock
from typing import Any, Callable, ClassVar, Dict, Tuple, Type
from urllib.parse import urljoin

import requests
import urllib3

from gdbrowser.exceptions import BrowserHTTPSDowngrade
from gdbrowser.tools.log import getLogger

from .adapters import HTTPAdapter
from .exceptions import HTTPNotFound, ClientError, ServerError
from .profiles import GameClient, Profile
from .sessions import FuturesSession
from .url import URL


__all__ = [
    'Browser', 'DomainBrowser', 'LoginBrowser', 'PagesBrowser',
    'need_login',
]


class Browser:
    """
    Simple browser class.
    Acts like a browser, and doesn't try to do too much.

    :param logger: parent logger (optional)
    :type logger: :py:class:`logging.Logger`
    :param proxy: use a proxy (dictionary with http/https as key and URI as value) (optional)
    :type proxy: dict
    :param responses_dirname: save responses to this directory (optional)
    :type responses_dirname: str
    :param proxy_headers: headers to supply to proxy (optional)
    :type proxy_headers: dict
    :param verify: either a boolean, in which case it controls whether we verify the server's
        TLS certificate, or a string, in which case it must be a path to a CA bundle to use.
        Defaults will use the :attr:`Browser.VERIFY` attribute.
    :type verify: `None`, `bool` or `str`
    """

    PROFILE: ClassVar[Profile] = GameClient()
    """
    Default profile used by browser to talk to servers.
    """

    TIMEOUT: ClassVar[float] = 10.0
    """
    Default timeout during requests.
    """

    VERIFY: ClassVar[bool | str] = True
    """
    Check SSL certificates.

    If this is a string, path to the certificate or the CA bundle.
    """

    MAX_RETRIES: ClassVar[int] = 2
    """
    Maximum retries on failed requests.
    """

    MAX_WORKERS: ClassVar[int] = 10
    """
    Maximum of threads for asynchronous requests.
    """

    HTTP_ADAPTER_CLASS: ClassVar[Type[HTTPAdapter]] = HTTPAdapter
    """
    Adapter class to use.
    """

    def __init__(
        self,
        logger: Logger | None = None,
        proxy: Dict[str, str] | None = None,
        responses_dirname: str | None = None,
        proxy_headers: Dict[str, str] | None = None,
        *,
        verify: bool | str | None = None,
    ):
        if logger:
            self.logger = getLogger('browser', logger)
        else:
            self.logger = getLogger('browser')

        self.responses_dirname = responses_dirname or self.logger.settings['save_responses']
        self.responses_count = 0
        self.responses_lock = Lock()

        if self.logger.settings['ssl_insecure']:
            self.verify = False
        elif verify is not None:
            self.verify = verify
        else:
            self.verify = self.VERIFY

        self.PROXIES = proxy or {}
        self.proxy_headers = proxy_headers or {}
        self._setup_session(self.PROFILE)
        self.url: str | None = None
        self.response: requests.Response | None = None

    def deinit(self):
        """
        Deinitialisation of the browser.

        Call it when you stop to use the browser and you don't use it in a
        context manager.
        """
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.deinit()

    def save_response(self, response: requests.Response, warning: bool = False, **kwargs):
        """
        Save the body of a response in :attr:`responses_dirname`.

        Request bodies carry credentials and are never saved.

        :param response: the response to save
        :type response: :class:`requests.Response`
        :param warning: if True, display the saving logs as warnings (default to False)
        :type warning: bool
        """
        if self.responses_dirname is True:
            self.responses_dirname = tempfile.mkdtemp(prefix='gdbrowser_session_')
            self.logger.info('Debug data will be saved in this directory: %s', self.responses_dirname)
        elif not os.path.isdir(self.responses_dirname):
            os.makedirs(self.responses_dirname)

        with self.responses_lock:
            counter = self.responses_count
            self.responses_count += 1

        endpoint = response.url.rstrip('/').rsplit('/', 1)[-1].split('?')[0]
        filename = '%02d-%d-%s.txt' % (counter, response.status_code, endpoint)
        response_filepath = os.path.join(self.responses_dirname, filename)
        with open(response_filepath, 'wb') as f:
            f.write(response.content)

        msg = 'Response saved to %s'
        if warning:
            self.logger.warning(msg, response_filepath)
        else:
            self.logger.info(msg, response_filepath)

    def _create_session(self) -> requests.Session:
        return FuturesSession(
            max_workers=self.MAX_WORKERS, max_retries=self.MAX_RETRIES,
            adapter_class=self.HTTP_ADAPTER_CLASS,
        )

    def _setup_session(self, profile: Profile):
        """
        Set up a python3-requests session for our usage.
        """
        session = self._create_session()

        session.proxies = self.PROXIES

        session.verify = self.verify

        if not session.verify:
            urllib3.disable_warnings()

        adapter_kwargs: Dict[str, Any] = {}

        # defines a max_retries. It's mandatory in case a server is not
        # handling keep alive correctly.
        adapter_kwargs['max_retries'] = self.MAX_RETRIES

        adapter_kwargs['proxy_headers'] = self.proxy_headers

        # set connection pool size equal to MAX_WORKERS if needed
        if self.MAX_WORKERS > requests.adapters.DEFAULT_POOLSIZE:
            adapter_kwargs['pool_connections'] = self.MAX_WORKERS
            adapter_kwargs['pool_maxsize'] = self.MAX_WORKERS

        session.mount('http://', self.HTTP_ADAPTER_CLASS(**adapter_kwargs))
        session.mount('https://', self.HTTP_ADAPTER_CLASS(**adapter_kwargs))

        # only the browser provides proxy options
        session.trust_env = False

        profile.setup_session(session)

        if self.responses_dirname is not None:
            session.hooks['response'].append(self.save_response)

        self.session = session

    def location(self, url: str | requests.Request, **kwargs) -> requests.Response:
        """
        Like :meth:`open()` but also changes the current URL and response.

        Other than that, has the exact same behavior of :meth:`open()`.
        """
        assert not kwargs.get('is_async'), "Please use open() instead of location() to make asynchronous requests."
        response = self.open(url, **kwargs)
        self.response = response
        self.url = self.response.url
        return response

    def open(
        self,
        url: str | requests.Request,
        *,
        allow_redirects: bool = True,
        stream: bool | None = None,
        timeout: float | None = None,
        verify: str | bool | None = None,
        cert: str | Tuple[str, str] | None = None,
        proxies: Dict | None = None,
        is_async: bool = False,
        callback: Callable[[requests.Response], requests.Response] | None = None,
        **kwargs
    ) -> requests.Response:
        """
        Make an HTTP request.

        Unless a ``method`` is explicitly provided, it makes a GET request,
        or a POST if data is not None.
        An empty ``data`` (like ``''`` or ``{}``, not ``None``) *will* make a POST.

        It is a wrapper around session.request().
        All ``session.request()`` options are available.

        When ``is_async`` is ``True``, :meth:`open()` returns a :py:class:`~concurrent.futures.Future` object (see
        :py:mod:`concurrent.futures` for more details), which can be evaluated with its
        :py:meth:`~concurrent.futures.Future.result()` method. If any exception is raised while processing request,
        it is caught and re-raised when calling :py:meth:`~concurrent.futures.Future.result()`.

        :param url: URL
        :param params: (optional) Dictionary, list of tuples or bytes to send
            in the query string
        :param data: (optional) Dictionary, list of tuples, bytes, or file-like
            object to send in the body
        :param headers: (optional) Dictionary of HTTP Headers to send
        :param allow_redirects: (optional) if ``True``, follow HTTP redirects (default: ``True``)
        :type allow_redirects: bool
        :param timeout: (optional) How many seconds to wait for the server to send data
                        before giving up, as a float, or a tuple.
        :type timeout: float or tuple
        :param is_async: (optional) Process request in a non-blocking way (default: ``False``)
        :type is_async: bool
        :param callback: (optional) Callback to be called when request has finished,
                         with response as its first and only argument
        :type callback: callable

        :return: :class:`requests.Response <Response>` object
        :rtype: :class:`requests.Response`
        """
        req = self.build_request(url, **kwargs)
        preq = self.prepare_request(req)

        if proxies is None:
            proxies = self.PROXIES

        if verify is None:
            verify = self.verify

        if timeout is None:
            timeout = self.TIMEOUT
        if callback is None:
            callback = lambda response: response

        # We define an inner_callback here in order to execute the same code
        # regardless of is_async param.
        def inner_callback(session, response):
            self.raise_for_status(response)
            return callback(response)

        self.logger.debug('%s %s', preq.method, preq.url)

        return self.session.send(preq,
                                 allow_redirects=allow_redirects,
                                 stream=stream,
                                 timeout=timeout,
                                 verify=verify,
                                 cert=cert,
                                 proxies=proxies,
                                 callback=inner_callback,
                                 is_async=is_async)

    def raise_for_status(self, response: requests.Response):
        """
        Like :meth:`requests.Response.raise_for_status()` but will use other
        exception specific classes:

        * :class:`~gdbrowser.browser.exceptions.HTTPNotFound` for 404
        * :class:`~gdbrowser.browser.exceptions.ClientError` for 4xx errors
        * :class:`~gdbrowser.browser.exceptions.ServerError` for 5xx errors
        """
        if 400 <= response.status_code < 500:
            http_error_msg = '%s Client Error: %s' % (response.status_code, response.reason)
            if response.status_code == 404:
                raise HTTPNotFound(http_error_msg, response=response)
            raise ClientError(http_error_msg, response=response)
        elif 500 <= response.status_code < 600:
            http_error_msg = '%s Server Error: %s' % (response.status_code, response.reason)
            raise ServerError(http_error_msg, response=response)

        # in case we did not catch something that should be
        response.raise_for_status()

    def build_request(self, url: str | requests.Request, **kwargs) -> requests.Request:
        """
        Does the same job as :meth:`open()`, but returns a :class:`~requests.Request` without
        submitting it.
        This allows further customization to the :class:`~requests.Request`.
        """
        if isinstance(url, requests.Request):
            req = url
        elif isinstance(url, str):
            req = requests.Request(url=url, **kwargs)
        else:
            raise TypeError('"url" must be a string or a requests.Request object.')

        # guess method
        if req.method is None:
            if req.data or kwargs.get('data') is not None:
                req.method = 'POST'
            else:
                req.method = 'GET'

        return req

    def prepare_request(self, req: requests.Request) -> requests.PreparedRequest:
        """
        Get a prepared request from a :class:`~requests.Request` object.

        This method aims to be overloaded by children classes.
        """
        return self.session.prepare_request(req)

    def export_session(self) -> dict:
        """
        Export session into a dict.

        Default format is::

            {
                'url': last_url,
            }

        Subclasses add the state identifying their session.
        """
        return {'url': self.url}


class DomainBrowser(Browser):
    """
    A browser that handles relative URLs and can have a base URL (usually a domain).

    For instance ``self.location('getGJLevels21.php')`` will get
    http://www.boomlings.com/database/getGJLevels21.php if :attr:`BASEURL`
    is ``'http://www.boomlings.com/database/'``.
    """

    BASEURL: str | None = None
    """
    Base URL, e.g. ``'http://www.boomlings.com/database/'``.

    See :meth:`absurl()`.
    """

    def __init__(
        self,
        baseurl: str | None = None,
        *args,
        **kwargs
    ):
        super().__init__(*args, **kwargs)
        if baseurl is not None:
            self.BASEURL = baseurl

    def absurl(self, uri: str, base: str | bool | None = None) -> str:
        """
        Get the absolute URL, relative to a base URL.
        If base is ``None``, it will try to use the current URL.
        If there is no current URL, it will try to use :attr:`BASEURL`.

        If base is ``False``, it will always try to use the current URL.
        If base is ``True``, it will always try to use BASEURL.

        :param uri: URI to make absolute. It can be already absolute.
        :type uri: str

        :param base: Base absolute URL.
        :type base: str or None or False or True

        :rtype: str
        """
        if not base:
            base = self.url
        if base is None or base is True:
            base = self.BASEURL

        return urljoin(base, uri)

    def open(self, url: requests.Request | str, *args, **kwargs) -> requests.Response:
        """
        Like :meth:`Browser.open` but handles urls without domains, using
        the :attr:`BASEURL` attribute.
        """
        if isinstance(url, requests.Request):
            req = url
            req_url = req.url
        else:
            req = None
            req_url = url

        abs_url = self.absurl(req_url)

        if req:
            req.url = abs_url
            url = req
        else:
            url = abs_url
        return super().open(url, *args, **kwargs)


class PagesBrowser(DomainBrowser):
    r"""
    A browser which works pages and keep state of navigation.

    To use it, you have to derive it and to create :class:`~gdbrowser.browser.url.URL` objects as class attributes. When
    :meth:`open()` or :meth:`location()` are called, if the url matches one of :class:`~gdbrowser.browser.url.URL` objects, it returns a
    :class:`~gdbrowser.browser.pages.Page` object. In case of :meth:`location()`, it stores it in ``self.page``.

    Example::

        class LevelsPage(TextPage):
            def iter_names(self):
                for record in self.doc.split('|'):
                    yield parse(record)['2']

        class MyBrowser(PagesBrowser):
            BASEURL = 'http://www.boomlings.com/database/'
            levels = URL(r'getGJLevels21\.php', LevelsPage)

        b = MyBrowser()
        b.levels.go(data=RequestParams(str='bloodbath').serialize())
        list(b.page.iter_names())
    """

    _urls = None

    def __init__(self, *args, **kwargs):
        self._urls = OrderedDict()
        super().__init__(*args, **kwargs)

        self.page = None

        # exclude properties because they can access other fields not yet defined
        def is_property(attr):
            v = getattr(type(self), attr, None)
            return hasattr(v, '__get__') or hasattr(v, '__set__')

        attrs = [(attr, getattr(self, attr)) for attr in dir(self) if not is_property(attr)]
        attrs = [v for v in attrs if isinstance(v[1], URL)]
        attrs.sort(key=lambda v: v[1]._creation_counter)
        for k, v in deepcopy(attrs):
            self._urls[k] = v
            setattr(self, k, v)
        for url in self._urls.values():
            url.browser = self

    def __setattr__(self, key, value):
        if isinstance(self._urls, OrderedDict):
            # _urls is instanciated, we can now feed it accordingly.
            if isinstance(value, URL):
                # We want to either replace in-place, or add to the URLs.
                if key in self._urls:
                    # We want to actually make the old URL unusable.
                    self._urls[key].browser = None

                value = copy(value)
                value.browser = self
                self._urls[key] = value
            elif key in self._urls:
                # We want to remove the URL from our mapping only.
                url = self._urls.pop(key)
                url.browser = None

        super().__setattr__(key, value)

    def __delattr__(self, key):
        if isinstance(self._urls, OrderedDict):
            if key in self._urls:
                del self._urls[key]

        super().__delattr__(key)

    def open(self, *args, **kwargs) -> requests.Response:
        """
        Same method than
        :meth:`~gdbrowser.browser.browsers.DomainBrowser.open`, but the
        response contains an attribute ``page`` if the url matches any
        :class:`~gdbrowser.browser.url.URL` object.
        """

        callback = kwargs.pop('callback', lambda response: response)
        page_class = kwargs.pop('page', None)

        # Have to define a callback to seamlessly process synchronous and
        # asynchronous requests, see :meth:`Browser.open` and its `is_async`
        # and `callback` params.
        def internal_callback(response):
            # Try to handle the response page with an URL instance.
            response.page = None
            if page_class:
                response.page = page_class(self, response)
                return callback(response)

            for url in self._urls.values():
                response.page = url.handle(response)
                if response.page is not None:
                    self.logger.debug('Handle %s with %s', response.url, response.page.__class__.__name__)
                    break

            if response.page is None:
                regexp = r'^(?P<proto>\w+)://.*'

                proto_response = re.match(regexp, response.url)
                if proto_response and self.BASEURL:
                    proto_response = proto_response.group('proto')
                    proto_base = re.match(regexp, self.BASEURL).group('proto')

                    if proto_base == 'https' and proto_response != 'https':
                        raise BrowserHTTPSDowngrade()

                self.logger.debug('Unable to handle %s', response.url)

            return callback(response)

        return super().open(callback=internal_callback, *args, **kwargs)

    def location(self, *args, **kwargs) -> requests.Response:
        """
        Same method than :meth:`~gdbrowser.browser.browsers.Browser.location`, but
        if the url matches any :class:`~gdbrowser.browser.url.URL` object, an
        attribute ``page`` is added to response, and the attribute :attr:`page`
        is set on the browser.
        """
        if self.page is not None:
            # Call leave hook.
            self.page.on_leave()

        response = self.open(*args, **kwargs)

        self.response = response
        self.page = response.page
        self.url = response.url

        if self.page is not None:
            # Call load hook.
            self.page.on_load()

        # Returns self.response in case on_load recalls location()
        return self.response


def need_login(func):
    """
    Decorator used to require to be logged to access to this function.

    This decorator can be used on any method whose first argument is a
    browser (typically a :class:`LoginBrowser`). It checks for the
    ``logged`` attribute in the current browser, then in its current page:
    when this attribute is set to ``True`` (e.g., when the page inherits
    :class:`~gdbrowser.browser.pages.LoggedPage`), then nothing special happens.

    In all other cases, the :meth:`LoginBrowser.do_login` method of the
    browser is called before calling :`func`.
    """

    @wraps(func)
    def inner(browser: LoginBrowser, *args, **kwargs):
        if (
            not getattr(browser, 'logged', False)
            and (
                getattr(browser, 'page', None) is None
                or not browser.page.logged
            )
        ):
            browser.do_login()
            if browser.logger.settings.get('export_session'):
                browser.logger.debug('logged in with session: %s', json.dumps(browser.export_session()))
        return func(browser, *args, **kwargs)

    return inner


class LoginBrowser(PagesBrowser):
    """
    A browser which supports login.
    """

    def __init__(self, username: str, password: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.username = username
        self.password = password

    def do_login(self):
        """
        Abstract method to implement to login on website.

        It is called when a login is needed.
        """
        raise NotImplementedError()

    def do_logout(self):
        """
        Logout from website.

        By default, simply clears the cookies.
        """
        self.session.cookies.clear()
