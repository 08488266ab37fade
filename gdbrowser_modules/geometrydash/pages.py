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

from __future__ import annotations

from urllib.parse import parse_qsl

import requests

from gdbrowser.browser.elements import DictElement, ItemElement, ListElement, method
from gdbrowser.browser.filters.base import Env, Filter
from gdbrowser.browser.filters.record import Base64Text, Flag, Key, Unquote
from gdbrowser.browser.filters.standard import CleanText, DateTime, Eval, Map, Type
from gdbrowser.browser.pages import TextPage, pagination
from gdbrowser.capabilities.base import NotAvailable, NotLoaded
from gdbrowser.capabilities.gamedb import (
    DEFAULT_SONGS, ORBS, Award, Comment, DemonDifficulty, Difficulty,
    FriendRequest, Level, LevelData, LevelLength, Message, Permission, Song,
    User,
)
from gdbrowser.exceptions import (
    BrowserUnavailable, BrowserUserBanned, InvalidCredentials, ParseError,
)
from gdbrowser.tools.compress import decompress
from gdbrowser.tools.crypto import XorKey, decrypt
from gdbrowser.tools.params import RequestParams
from gdbrowser.tools.parse import (
    parse, parse_comment, parse_level_string, parse_login, parse_records,
    parse_search, split_records,
)


FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'

PAGE_SIZE = 10
"""Records per page of list endpoints. A shorter page is the last one."""

BYTES_PER_MEGABYTE = 1048576

SOCIAL_URLS = {
    'youtube': 'https://youtube.com/channel/',
    'twitter': 'https://twitter.com/',
    'twitch': 'https://twitch.tv/',
}

ICON_KEYS = {
    'cube': '21',
    'ship': '22',
    'ball': '23',
    'ufo': '24',
    'wave': '25',
    'robot': '26',
    'glow': '28',
    'spider': '43',
    'explosion': '47',
}


class Int(Type):
    """Integer value, NotAvailable when missing or empty."""

    def __init__(self, selector=None, default=NotAvailable):
        super().__init__(selector, type=int, default=default)


class Link(Filter):
    """Profile URL from a handle, NotAvailable without a handle."""

    def __init__(self, selector, prefix):
        super().__init__(selector, default=NotAvailable)
        self.prefix = prefix

    def filter(self, handle):
        if not handle:
            return self.default
        return self.prefix + handle


def nonzero(value):
    return value or NotAvailable


def official_song(index: int) -> Song:
    # the table starts with the menu song, at index -1
    position = index + 1
    song = Song(str(position))
    if 0 <= position < len(DEFAULT_SONGS):
        song.name, song.artist = DEFAULT_SONGS[position]
    else:
        song.name = song.artist = NotAvailable
    song.artist_id = song.size = NotAvailable
    song.url = NotAvailable
    song.custom = False
    return song


class RecordPage(TextPage):
    """Response made of one record."""

    SEPARATOR = ':'

    def parse_text(self, text):
        return parse(text, self.SEPARATOR)


class PagedPage(TextPage):
    """
    Page of a list endpoint, which is asked again with the next ``page``
    field as long as it is full.
    """

    @property
    def records(self):
        raise NotImplementedError()

    def next_request(self):
        """
        Request of the next page, or None when this page is the last one.
        """
        if len(self.records) < PAGE_SIZE:
            return None

        request = self.response.request
        body = request.body
        if isinstance(body, bytes):
            body = body.decode('utf-8')
        params = RequestParams(dict(parse_qsl(body or '', keep_blank_values=True)))
        params.insert(page=int(params.get('page', 0)) + 1)
        return requests.Request(
            'POST', request.url, data=params.serialize(),
            headers={'Content-Type': FORM_CONTENT_TYPE},
        )


class RecordsPage(PagedPage):
    """
    Response made of records joined with ``|``.

    Only the first ``#`` section holds records, the others are paging
    information. Sentinels are empty lists.
    """

    SEPARATOR = ':'

    def parse_text(self, text):
        return parse_records(text, self.SEPARATOR)

    def build_sentinel_doc(self, code):
        return []

    @property
    def records(self):
        return self.doc


class ResultPage(TextPage):
    """Answer of an action: ``1`` on success, or the id of what was created."""

    @property
    def succeeded(self):
        return self.sentinel is None and self.doc == '1'

    def get_id(self):
        if self.sentinel is not None:
            return None
        try:
            return int(self.doc)
        except ValueError as e:
            raise ParseError('Unexpected answer %r' % self.doc) from e


class LoginPage(TextPage):
    def get_login(self):
        if self.sentinel == -1:
            raise InvalidCredentials()
        if self.sentinel == -12:
            raise BrowserUserBanned('This account is disabled', bad_fields=['login'])
        if self.sentinel is not None:
            raise BrowserUnavailable('Login failed with code %d' % self.sentinel)
        return parse_login(self.doc)


class ListedUser(ItemElement):
    """Names, ids and icon of a user, as in friend and block lists."""

    klass = User

    obj_id = CleanText(Key('16'))
    obj_username = CleanText(Key('1'), default=NotAvailable)
    obj_account_id = Int(Key('16'))
    obj_user_id = Eval(nonzero, Int(Key('2')))
    obj_icon = Int(Key('9'))
    obj_icon_type = Int(Key('14'))
    obj_color1 = Int(Key('10'))
    obj_color2 = Int(Key('11'))


class SearchedUser(ListedUser):
    """User with statistics, as in searches and leaderboards."""

    obj_user_id = Int(Key('2'))
    obj_stars = Int(Key('3'))
    obj_demons = Int(Key('4'))
    obj_coins = Int(Key('13'))
    obj_user_coins = Int(Key('17'))
    obj_creator_points = Int(Key('8'))
    obj_diamonds = Int(Key('46'))


class Profile(SearchedUser):
    obj_rank = Int(Key('30'))
    obj_youtube = Link(Key('20', default=''), SOCIAL_URLS['youtube'])
    obj_twitter = Link(Key('44', default=''), SOCIAL_URLS['twitter'])
    obj_twitch = Link(Key('45', default=''), SOCIAL_URLS['twitch'])
    obj_permission = Map(Key('49'), {
        '0': Permission.USER,
        '1': Permission.MODERATOR,
        '2': Permission.ELDER_MODERATOR,
    }, default=Permission.USER)

    def obj_icons(self):
        icons = {}
        for name, key in ICON_KEYS.items():
            value = Int(Key(key), default=None)(self)
            if value is not None:
                icons[name] = value
        return icons


class UserPage(RecordPage):
    @method
    class get_user(Profile):
        def condition(self):
            return self.page.sentinel is None


class UsersPage(RecordsPage):
    @pagination
    @method
    class iter_users(DictElement):
        class item(SearchedUser):
            pass

        def next_page(self):
            return self.page.next_request()


class UserListPage(RecordsPage):
    @method
    class iter_users(DictElement):
        class item(ListedUser):
            pass


class ScoresPage(RecordsPage):
    @method
    class iter_users(DictElement):
        ignore_duplicate = True

        class item(SearchedUser):
            pass


class SongElement(ItemElement):
    klass = Song

    obj_id = CleanText(Key('1'))
    obj_name = CleanText(Key('2'), default=NotAvailable)
    obj_artist_id = Int(Key('3'))
    obj_artist = CleanText(Key('4'), default=NotAvailable)
    obj_url = Unquote(Key('10'), default=NotAvailable)
    obj_custom = True

    def obj_size(self):
        size = Type(Key('5'), type=float, default=None)(self)
        if size is None:
            return NotAvailable
        return int(size * BYTES_PER_MEGABYTE)


class LevelElement(ItemElement):
    """
    Level as found in searches.

    The creators and songs sections of a search are given in the
    ``creators`` and ``songs`` environment.
    """

    klass = Level

    obj_id = CleanText(Key('1'))
    obj_name = CleanText(Key('2'), default=NotAvailable)
    obj_description = Base64Text(Key('3'), default='')
    obj_version = Int(Key('5'))
    obj_downloads = Int(Key('10'))
    obj_game_version = Int(Key('13'))
    obj_likes = Int(Key('14'))
    obj_length = Map(Key('15'), {str(value): value for value in LevelLength}, default=NotAvailable)
    obj_demon = Flag(Key('17', default='0'))
    obj_auto = Flag(Key('25', default='0'))
    obj_stars = Int(Key('18'), default=0)
    obj_featured_position = Int(Key('19'), default=0)
    obj_original = Eval(nonzero, Int(Key('30')))
    obj_coins = Int(Key('37'))
    obj_verified_coins = Flag(Key('38', default='0'))
    obj_requested_stars = Int(Key('39'))
    obj_objects = Int(Key('45'))

    def obj_difficulty(self):
        if self.obj.auto:
            return Difficulty.AUTO
        numerator = Int(Key('9'), default=0)(self)
        if numerator == 0:
            return Difficulty.NA
        return numerator // 10

    def obj_demon_difficulty(self):
        if self.obj.demon and self.obj.difficulty in DemonDifficulty:
            return self.obj.difficulty
        return NotAvailable

    def obj_award(self):
        if self.obj.featured_position > 0:
            return Award.EPIC if Flag(Key('42', default='0'))(self) else Award.FEATURE
        if self.obj.stars > 0:
            return Award.STAR
        return Award.NONE

    def obj_orbs(self):
        if 0 <= self.obj.stars < len(ORBS):
            return ORBS[self.obj.stars]
        return 0

    def obj_diamonds(self):
        if self.obj.stars < 2:
            return 0
        return self.obj.stars + 2

    def obj_creator(self):
        user = User()
        user.user_id = Int(Key('6'))(self)
        creator = self.env.get('creators', {}).get(CleanText(Key('6'), default='')(self))
        if creator is not None:
            user.id = creator.account_id
            user.username = creator.username
            user.account_id = Int(None)(creator.account_id)
        return user

    def obj_song(self):
        song_id = CleanText(Key('35'), default='0')(self)
        if song_id == '0':
            return official_song(Int(Key('12'), default=0)(self))

        record = self.env.get('songs', {}).get(song_id)
        if record is None:
            song = Song(song_id)
            song.custom = True
            return song
        return SongElement(self.page, self, record)()


class DownloadedLevel(LevelElement):
    """Level as downloaded, with its password, data and dates."""

    obj_uploaded = DateTime(Key('28'), default=NotAvailable)
    obj_updated = DateTime(Key('29'), default=NotAvailable)

    def condition(self):
        return self.page.sentinel is None

    def parse(self, el):
        password = decrypt(Key('27', default='')(self), XorKey.LEVEL_PASSWORD)
        self.env['copyable'] = password not in ('', '0')
        if self.env['copyable'] and password != '1':
            digits = password[1:]
            self.env['password'] = str(int(digits)).zfill(4) if digits.isdigit() else digits
        else:
            self.env['password'] = NotAvailable

    obj_copyable = Env('copyable')
    obj_password = Env('password')

    def obj_data(self):
        raw = Key('4', default='')(self)
        if not raw:
            return NotAvailable

        threshold = self.env.get('worker_threshold', 0)
        level_string = parse_level_string(
            decompress(raw, worker=bool(threshold) and len(raw) > threshold)
        )
        data = LevelData(self.obj.id)
        data.raw = level_string.raw
        data.header = level_string.header
        data.colors = level_string.colors
        data.objects = level_string.objects
        return data


class LevelsPage(PagedPage):
    def parse_text(self, text):
        return parse_search(text)

    def build_sentinel_doc(self, code):
        return parse_search('')

    @property
    def records(self):
        return self.doc.levels

    @pagination
    @method
    class iter_levels(ListElement):
        def parse(self, el):
            self.env['creators'] = el.creators
            self.env['songs'] = el.songs

        def find_elements(self):
            yield from self.el.levels

        class item(LevelElement):
            pass

        def next_page(self):
            return self.page.next_request()


class LevelPage(RecordPage):
    def parse_text(self, text):
        section, _, _ = text.partition('#')
        return parse(section)

    @method
    class get_level(DownloadedLevel):
        pass


class CommentElement(ItemElement):
    klass = Comment

    obj_id = CleanText(Key('6'))
    obj_text = Base64Text(Key('2'), default='')
    obj_likes = Int(Key('4'))
    obj_spam = Flag(Key('7', default='0'))
    obj_date = DateTime(Key('9'), default=NotAvailable)
    obj_level_id = Int(Key('1'))
    obj_percent = Eval(nonzero, Int(Key('10')))


class AccountComment(CommentElement):
    """Profile comment, written by the ``author`` of the environment."""

    obj_author = Env('author', default=NotAvailable)


class AccountCommentsPage(RecordsPage):
    SEPARATOR = '~'

    @pagination
    @method
    class iter_comments(DictElement):
        class item(AccountComment):
            pass

        def next_page(self):
            return self.page.next_request()


class CommentsPage(RecordsPage):
    """Comments joined with their author, as ``comment:author``."""

    def parse_text(self, text):
        section, _, _ = text.partition('#')
        records = []
        for record in split_records(section):
            comment, author = parse_comment(record)
            records.append(dict(comment, author=author))
        return records

    @pagination
    @method
    class iter_comments(DictElement):
        class item(CommentElement):
            class obj_author(ItemElement):
                klass = User

                obj_id = CleanText(Key('author/16'))
                obj_username = CleanText(Key('author/1'), default=NotAvailable)
                obj_account_id = Int(Key('author/16'))
                obj_user_id = Int(Key('3'))
                obj_icon = Int(Key('author/9'))
                obj_icon_type = Int(Key('author/14'))
                obj_color1 = Int(Key('author/10'))
                obj_color2 = Int(Key('author/11'))

        def next_page(self):
            return self.page.next_request()


class FriendRequestsPage(RecordsPage):
    @pagination
    @method
    class iter_requests(DictElement):
        class item(ItemElement):
            klass = FriendRequest

            obj_id = CleanText(Key('32'))
            obj_user = ListedUser
            obj_message = Base64Text(Key('35'), default='')
            obj_read = Eval(lambda unread: not unread, Flag(Key('41', default='0')))
            obj_outgoing = Env('outgoing', default=False)
            obj_date = DateTime(Key('37'), default=NotAvailable)

        def next_page(self):
            return self.page.next_request()


class MessageElement(ItemElement):
    klass = Message

    obj_id = CleanText(Key('1'))
    obj_subject = Base64Text(Key('4'), default='')
    obj_body = Base64Text(Key('5'), default=NotLoaded)
    obj_date = DateTime(Key('7'), default=NotAvailable)
    obj_read = Eval(lambda unread: not unread, Flag(Key('8', default='0')))
    obj_outgoing = Flag(Key('9', default='0'))

    class obj_user(ItemElement):
        klass = User

        obj_id = CleanText(Key('2'))
        obj_account_id = Int(Key('2'))
        obj_user_id = Int(Key('3'))
        obj_username = CleanText(Key('6'), default=NotAvailable)


class MessagesPage(RecordsPage):
    @pagination
    @method
    class iter_messages(DictElement):
        class item(MessageElement):
            pass

        def next_page(self):
            return self.page.next_request()


class MessagePage(RecordPage):
    @method
    class get_message(MessageElement):
        def condition(self):
            return self.page.sentinel is None
