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

# flake8: compatible

import pytest
import requests

from gdbrowser.browser import URL, Browser, DomainBrowser, LoginBrowser, PagesBrowser, need_login
from gdbrowser.browser.exceptions import ClientError, HTTPNotFound, ServerError
from gdbrowser.browser.pages import NextPage, TextPage, pagination
from gdbrowser.exceptions import BrowserHTTPSDowngrade
from gdbrowser.tools.test import FakeAdapter, form_of


BASEURL = 'http://gd.example/database/'


class NamesPage(TextPage):
    def parse_text(self, text):
        return text.split(',')

    def build_sentinel_doc(self, code):
        return []

    @pagination
    def iter_names(self):
        yield from self.doc
        if len(self.doc) == 2:
            page = int(form_of(self.response.request)['page'])
            raise NextPage(requests.Request('POST', self.url, data={'page': page + 1}))


class FakeBrowser(PagesBrowser):
    HTTP_ADAPTER_CLASS = FakeAdapter
    BASEURL = BASEURL

    names = URL(r'getNames\.php', NamesPage)
    other = URL(r'getOther\.php')


@pytest.fixture
def browser():
    browser = FakeBrowser()
    yield browser
    browser.deinit()


@pytest.fixture
def adapter(browser):
    return FakeAdapter.of(browser)


def test_profile(browser, adapter):
    adapter.add('getOther.php', 'ok')
    browser.open('getOther.php')
    headers = adapter.requests[0].headers
    assert headers['User-Agent'] == ''
    assert headers['Accept'] == '*/*'


def test_open_relative(browser, adapter):
    adapter.add('getOther.php', 'ok')
    response = browser.open('getOther.php', data={'a': '1'})

    assert response.text == 'ok'
    assert response.page is None
    assert adapter.requests[0].url == BASEURL + 'getOther.php'
    assert adapter.requests[0].method == 'POST'
    assert browser.url is None


@pytest.mark.parametrize('status, exception', [
    (404, HTTPNotFound),
    (403, ClientError),
    (500, ServerError),
    (503, ServerError),
])
def test_raise_for_status(browser, adapter, status, exception):
    adapter.add('getOther.php', 'error', status=status)
    with pytest.raises(exception):
        browser.open('getOther.php')


def test_page_handling(browser, adapter):
    adapter.add('getNames.php', 'a,b,c')

    page = browser.names.go(data={'page': 0})

    assert isinstance(page, NamesPage)
    assert page.doc == ['a', 'b', 'c']
    assert page.sentinel is None
    assert browser.page is page
    assert browser.url == BASEURL + 'getNames.php'
    assert browser.names.is_here()


def test_open_keeps_location(browser, adapter):
    adapter.add('getNames.php', 'a')
    page = browser.names.open()
    assert isinstance(page, NamesPage)
    assert browser.page is None


def test_sentinel(browser, adapter):
    adapter.add('getNames.php', '-1', ' -2\n')

    page = browser.names.open()

    assert page.sentinel == -1
    assert page.doc == []

    assert browser.names.open().sentinel == -2


def test_pagination(browser, adapter):
    adapter.add('getNames.php', 'a,b', 'c,d', 'e')

    names = list(browser.names.go(data={'page': 0}).iter_names())

    assert names == ['a', 'b', 'c', 'd', 'e']
    assert [sent['page'] for sent in adapter.sent('getNames.php')] == ['0', '1', '2']
    assert browser.page.doc == ['e']


def test_async_open(browser, adapter):
    adapter.add('getNames.php', lambda request: form_of(request)['n'])

    futures = [browser.names.open(data={'n': str(n)}, is_async=True) for n in range(5)]

    assert [future.result().page.doc for future in futures] == [[str(n)] for n in range(5)]
    assert browser.page is None


def test_async_errors(browser, adapter):
    future = browser.names.open(is_async=True)
    with pytest.raises(HTTPNotFound):
        future.result()


def test_https_downgrade():
    class SecureBrowser(FakeBrowser):
        BASEURL = 'https://gd.example/database/'

    browser = SecureBrowser()
    browser.session.get_adapter('http://gd.example/').add('other.php', 'ok')
    with pytest.raises(BrowserHTTPSDowngrade):
        browser.open('http://gd.example/other.php')


def test_absurl():
    browser = DomainBrowser(baseurl=BASEURL)
    assert browser.absurl('getNames.php') == BASEURL + 'getNames.php'
    assert browser.absurl('/other') == 'http://gd.example/other'
    assert browser.absurl('https://a.example/b') == 'https://a.example/b'
    browser.url = BASEURL + 'accounts/login.php'
    assert browser.absurl('x.php') == BASEURL + 'accounts/x.php'
    assert browser.absurl('x.php', base=True) == BASEURL + 'x.php'


def test_save_responses(tmp_path):
    browser = FakeBrowser(responses_dirname=str(tmp_path / 'responses'))
    FakeAdapter.of(browser).add('getNames.php', 'a,b')

    browser.open('getNames.php', data={'password': 'hunter2'})

    saved, = (tmp_path / 'responses').iterdir()
    assert saved.name == '00-200-getNames.php.txt'
    assert saved.read_bytes() == b'a,b'


class FakeLoginBrowser(LoginBrowser):
    HTTP_ADAPTER_CLASS = FakeAdapter
    BASEURL = BASEURL

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.logged = False
        self.logins = 0

    def do_login(self):
        self.logins += 1
        self.logged = True

    @need_login
    def private(self):
        return self.username


def test_need_login():
    browser = FakeLoginBrowser('Player', 'hunter2')

    assert browser.private() == 'Player'
    assert browser.private() == 'Player'
    assert browser.logins == 1

    browser.logged = False
    browser.private()
    assert browser.logins == 2


def test_logout_clears_cookies():
    browser = FakeLoginBrowser('Player', 'hunter2')
    browser.session.cookies.set('gd', '1')
    browser.do_logout()
    assert len(browser.session.cookies) == 0


def test_export_session():
    browser = Browser()
    assert browser.export_session() == {'url': None}


def test_context_manager():
    with FakeBrowser() as browser:
        assert browser.session is not None
