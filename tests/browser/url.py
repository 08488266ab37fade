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

import pytest

from gdbrowser.browser import PagesBrowser, URL
from gdbrowser.browser.pages import Page, TextPage
from gdbrowser.browser.url import UrlNotResolvable, normalize
from gdbrowser.tools.test import FakeAdapter


class MyMockPage(TextPage):
    pass


@pytest.fixture()
def my_browser():
    class MyMockBrowser(PagesBrowser):
        HTTP_ADAPTER_CLASS = FakeAdapter
        BASEURL = 'http://www.boomlings.com/database/'

        levels = URL(r'getGJLevels21\.php', MyMockPage)
        level = URL(r'levels/(?P<id>\d+)\.txt', MyMockPage)
        songs = URL(r'https://songs.example/(?P<id>\d+)/(?P<name>.+)')
        either = URL(
            r'https://songs.example/(?P<id>\d+)',
            r'https://songs.example/\?id=(?P<id>\d+)&name=(?P<name>.+)',
        )
        posted = URL(r'uploadGJLevel21\.php', MyMockPage, methods=('POST',))
        typed = URL(r'getGJTyped\.php', MyMockPage, content_type='text/plain')
        no_page = URL(r'getGJRewards\.php')

    return MyMockBrowser()


@pytest.fixture()
def my_browser_without_browser():
    class MyMockBrowserWithoutBrowser:
        BASEURL = 'http://www.boomlings.com/database/'
        absolute_url = URL(r'https://example.org/absolute-url')
        relative_url = URL(r'relative-url')

    return MyMockBrowserWithoutBrowser()


def test_normalize():
    assert normalize(r'getGJLevels21\.php') == ('getGJLevels21.php', [])
    assert normalize(r'^levels/(?P<id>\d+)/(?P<part>\w+)$') == ('levels/%(id)s/%(part)s', ['id', 'part'])


def test_match_base_none_browser_none(my_browser_without_browser):
    """Check that an error is raised if both base and browser are None."""
    with pytest.raises(ValueError):
        my_browser_without_browser.relative_url.match('http://www.boomlings.com/database/')


def test_match_base_none_browser_none_absolute(my_browser_without_browser):
    assert my_browser_without_browser.absolute_url.match('https://example.org/absolute-url')


def test_match_base_not_none_browser_none(my_browser_without_browser):
    assert my_browser_without_browser.relative_url.match(
        'http://www.boomlings.com/database/relative-url',
        base='http://www.boomlings.com/database/',
    )


def test_match_relative(my_browser):
    assert my_browser.levels.match('http://www.boomlings.com/database/getGJLevels21.php')
    assert not my_browser.levels.match('http://www.boomlings.com/getGJLevels21.php')
    assert not my_browser.levels.match('http://www.boomlings.com/database/getGJLevels21xphp')


def test_match_groups(my_browser):
    m = my_browser.level.match('http://www.boomlings.com/database/levels/128.txt')
    assert m.groupdict() == {'id': '128'}


def test_build_relative(my_browser):
    assert my_browser.levels.build() == 'http://www.boomlings.com/database/getGJLevels21.php'
    assert my_browser.level.build(id=128) == 'http://www.boomlings.com/database/levels/128.txt'


def test_build_absolute(my_browser):
    assert my_browser.songs.build(id=1, name='Spectre') == 'https://songs.example/1/Spectre'


def test_build_picks_pattern(my_browser):
    """The pattern using exactly the given parameters is used."""
    assert my_browser.either.build(id=2) == 'https://songs.example/2'
    assert my_browser.either.build(id=2, name='x') == 'https://songs.example/?id=2&name=x'


def test_build_query_params(my_browser):
    url = my_browser.levels.build(params={'str': 'a b'})
    assert url == 'http://www.boomlings.com/database/getGJLevels21.php?str=a+b'


def test_build_missing_params(my_browser):
    with pytest.raises(UrlNotResolvable):
        my_browser.songs.build(id=2)


def test_build_extra_params(my_browser):
    with pytest.raises(UrlNotResolvable):
        my_browser.level.build(id=2, name='x')


def test_is_here_without_page(my_browser):
    with pytest.raises(AssertionError, match='You can use this method only if there is a Page class handler.'):
        my_browser.no_page.is_here()


def test_is_here(my_browser):
    FakeAdapter.of(my_browser).add('128.txt', 'data')

    assert not my_browser.level.is_here()
    my_browser.level.go(id=128)

    assert my_browser.level.is_here()
    assert my_browser.level.is_here(id=128)
    assert not my_browser.level.is_here(id=129)


def test_handle_methods(my_browser):
    adapter = FakeAdapter.of(my_browser)
    adapter.add('uploadGJLevel21.php', '1')

    assert my_browser.posted.open() is not None
    assert isinstance(my_browser.posted.open(data={'a': 1}), MyMockPage)
    assert not isinstance(my_browser.posted.open(method='GET'), Page)


def test_handle_content_type(my_browser):
    adapter = FakeAdapter.of(my_browser)
    adapter.add('getGJTyped.php', 'ok')
    # FakeAdapter answers text/html
    assert not isinstance(my_browser.typed.open(), Page)

    with pytest.raises(ValueError):
        URL(r'x', content_type='text/plain; charset=utf-8')


def test_custom_baseurl():
    class MyBrowser(PagesBrowser):
        BASEURL = 'http://www.boomlings.com/database/'
        RELAY_BASEURL = 'https://relay.example/database/'

        my_url = URL(r'getGJLevels21\.php')
        my_other_url = URL(r'getGJLevels21\.php', base='RELAY_BASEURL')

    browser = MyBrowser()
    assert browser.my_url.build() == 'http://www.boomlings.com/database/getGJLevels21.php'
    assert browser.my_other_url.build() == 'https://relay.example/database/getGJLevels21.php'

    assert browser.my_url.match('http://www.boomlings.com/database/getGJLevels21.php')
    assert not browser.my_url.match('https://relay.example/database/getGJLevels21.php')
    assert browser.my_other_url.match('https://relay.example/database/getGJLevels21.php')


def test_urls_are_bound(my_browser):
    assert my_browser.levels.browser is my_browser
    assert list(my_browser._urls)[:2] == ['levels', 'level']

    my_browser.levels = URL(r'getGJLevels22\.php', MyMockPage)
    assert my_browser.levels.browser is my_browser
    assert my_browser._urls['levels'].urls == [r'getGJLevels22\.php']
