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

from itertools import islice

from gdbrowser.browser import URL, LoginBrowser, need_login
from gdbrowser.browser.url import ABSOLUTE_URL_PATTERN_RE
from gdbrowser.capabilities.base import NotAvailable
from gdbrowser.capabilities.gamedb import (
    LeaderboardType, LikeType, SearchOrder, User,
)
from gdbrowser.exceptions import InvalidCredentials
from gdbrowser.tools.crypto import (
    XorKey, comment_checksum, encode_text, encrypt, generate_udid,
    like_checksum, random_string,
)
from gdbrowser.tools.params import RequestParams, SessionToken
from gdbrowser.tools.parse import parse

from .pages import (
    FORM_CONTENT_TYPE, AccountComment, AccountCommentsPage, CommentsPage,
    FriendRequestsPage, LevelPage, LevelsPage, LoginPage, MessagePage,
    MessagesPage, ResultPage, ScoresPage, UserListPage, UserPage, UsersPage,
)


__all__ = ['GeometryDashBrowser']


def encode_difficulty(difficulty=None, demon=None):
    """
    Value of the ``diff`` field of a level search, with the ``demonFilter``
    field when there is one.

    >>> encode_difficulty([1, 2])
    ('1,2', None)
    >>> encode_difficulty(0)
    ('-3', None)
    >>> encode_difficulty(demon=5)
    ('-2', 5)
    """
    if demon is not None:
        return '-2', demon or None
    if difficulty is None:
        return '-', None
    if isinstance(difficulty, (list, tuple, set)):
        return ','.join(encode_difficulty(value)[0] for value in difficulty), None
    if difficulty == -1:
        return '0', None
    if difficulty == 0:
        return '-3', None
    return str(difficulty), None


def encode_lengths(length=None):
    """
    >>> encode_lengths([0, 4])
    '0,4'
    """
    if length is None:
        return '-'
    if isinstance(length, (list, tuple, set)):
        return ','.join(str(value) for value in length)
    return str(length)


class GeometryDashBrowser(LoginBrowser):
    BASEURL = 'http://www.boomlings.com/database/'

    login_page = URL(r'accounts/loginGJAccount\.php', LoginPage)
    user_info = URL(r'getGJUserInfo20\.php', UserPage)
    users = URL(r'getGJUsers20\.php', UsersPage)
    user_list = URL(r'getGJUserList20\.php', UserListPage)
    scores = URL(r'getGJScores20\.php', ScoresPage)

    levels = URL(r'getGJLevels21\.php', LevelsPage)
    level = URL(r'downloadGJLevel22\.php', LevelPage)
    level_description = URL(r'updateGJDesc20\.php', ResultPage)

    account_comments = URL(r'getGJAccountComments20\.php', AccountCommentsPage)
    level_comments = URL(r'getGJComments21\.php', CommentsPage)
    comment_history = URL(r'getGJCommentHistory\.php', CommentsPage)
    post_account_comment_page = URL(r'uploadGJAccComment20\.php', ResultPage)
    post_level_comment_page = URL(r'uploadGJComment21\.php', ResultPage)
    delete_account_comment_page = URL(r'deleteGJAccComment20\.php', ResultPage)
    delete_level_comment_page = URL(r'deleteGJComment20\.php', ResultPage)
    like_page = URL(r'likeGJItem211\.php', ResultPage)

    friend_request_post = URL(r'uploadFriendRequest20\.php', ResultPage)
    friend_requests = URL(r'getGJFriendRequests20\.php', FriendRequestsPage)
    friend_request_read = URL(r'readGJFriendRequest20\.php', ResultPage)
    friend_request_accept = URL(r'acceptGJFriendRequest20\.php', ResultPage)
    friend_request_delete = URL(r'deleteGJFriendRequests20\.php', ResultPage)
    unfriend_page = URL(r'removeGJFriend20\.php', ResultPage)
    block_page = URL(r'blockGJUser20\.php', ResultPage)
    unblock_page = URL(r'unblockGJUser20\.php', ResultPage)

    message_post = URL(r'uploadGJMessage20\.php', ResultPage)
    messages = URL(r'getGJMessages20\.php', MessagesPage)
    message = URL(r'downloadGJMessage20\.php', MessagePage)
    message_delete = URL(r'deleteGJMessages20\.php', ResultPage)

    def __init__(self, username, password, *args, **kwargs):
        """
        :param relay_url: prefix of every request URL, to go through a relay
        :param worker_threshold: size of level data from which it is
                                 decompressed in another process, 0 to never
                                 do it
        """
        relay_url = kwargs.pop('relay_url', '') or ''
        self.relay_url = relay_url
        baseurl = kwargs.pop('baseurl', None) or self.BASEURL
        self.worker_threshold = kwargs.pop('worker_threshold', 0)
        super().__init__(username, password, *args, baseurl=relay_url + baseurl, **kwargs)

        self.udid = generate_udid()
        self.uuid = self.udid
        self.token = None

    def absurl(self, uri, base=None):
        # urljoin squashes the double slash of the URL embedded after a relay
        if self.relay_url and not ABSOLUTE_URL_PATTERN_RE.match(uri):
            return self.BASEURL + uri.lstrip('/')
        return super().absurl(uri, base)

    @property
    def logged(self):
        return self.token is not None

    def request(self, url, params, kind='db', **kwargs):
        """
        POST form fields to an endpoint, signed with the secret of ``kind``.
        """
        params.authorize(kind)
        return url.open(
            data=params.serialize(),
            headers={'Content-Type': FORM_CONTENT_TYPE},
            **kwargs
        )

    def locate(self, url, params, kind='db'):
        """
        Like :meth:`request`, but the page becomes the current one, which
        is needed to follow paginated lists.
        """
        params.authorize(kind)
        return url.go(
            data=params.serialize(),
            headers={'Content-Type': FORM_CONTENT_TYPE},
        )

    def authenticated(self, **fields):
        """
        Fields of a request made on behalf of the logged account.

        Endpoints showing the name of the author also need ``userName``.
        """
        params = RequestParams(fields)
        params.session(self.token)
        return params

    def do_login(self):
        if not self.username or not self.password:
            raise InvalidCredentials('Credentials are missing')

        params = RequestParams(udid=self.udid)
        params.login(self.username, self.password)
        result = self.request(self.login_page, params, kind='account').get_login()

        self.use_session(SessionToken(
            result.account_id,
            encrypt(self.password, XorKey.ACCOUNT_PASSWORD),
            result.user_id,
            self.username,
        ))

    def use_session(self, token):
        """
        Authenticate with an already known session, checking the account
        exists.

        :type token: :class:`gdbrowser.tools.params.SessionToken`
        :raises: :class:`InvalidCredentials` when the account is unknown
        """
        user = self.get_user(token.account_id)
        if user is None:
            raise InvalidCredentials('Unknown account %s' % token.account_id)

        self.token = token._replace(
            user_id=token.user_id or user.user_id or None,
            username=token.username or user.username or None,
        )
        self.logger.debug('logged in as account %s', token.account_id)
        return user

    def do_logout(self):
        self.token = None
        super().do_logout()

    def export_session(self):
        session = super().export_session()
        if self.token is not None:
            session['account_id'] = self.token.account_id
            session['user_id'] = self.token.user_id
        return session

    def get_user(self, account_id):
        return self.request(self.user_info, RequestParams(targetAccountID=account_id)).get_user()

    def search_users(self, pattern, count=10):
        params = RequestParams(str=pattern, page=0, total=0)
        return islice(self.locate(self.users, params).iter_users(), count)

    def get_user_by_name(self, username):
        for user in self.search_users(username, count=10):
            if user.username and user.username.lower() == username.lower():
                return self.get_user(user.account_id)
        return None

    def search_levels(
        self, pattern='', count=10, difficulty=None, demon=None, length=None,
        order=SearchOrder.LIKES, featured=False, epic=False, original=False,
        two_player=False, coins=False,
    ):
        diff, demon_filter = encode_difficulty(difficulty, demon)
        params = RequestParams(
            str=pattern, diff=diff, len=encode_lengths(length), type=order,
            page=0, total=0,
        )
        if demon_filter is not None:
            params.insert(demonFilter=demon_filter)
        if original:
            params.insert(original=1)
        if two_player:
            params.insert(twoPlayer=1)
        if coins:
            params.insert(coins=1)
        if epic:
            params.insert(epic=1, featured=1)
        elif featured:
            params.insert(featured=1)
        return islice(self.locate(self.levels, params).iter_levels(), count)

    def level_params(self, level_id):
        return RequestParams(levelID=level_id, inc=1, extras=0)

    def get_level(self, level_id):
        page = self.request(self.level, self.level_params(level_id))
        return page.get_level(worker_threshold=self.worker_threshold)

    def download_levels(self, level_ids):
        futures = [
            self.request(self.level, self.level_params(level_id), is_async=True)
            for level_id in level_ids
        ]
        for future in futures:
            yield future.result().page.get_level(worker_threshold=self.worker_threshold)

    @need_login
    def update_level_description(self, level_id, description):
        params = self.authenticated(
            userName=self.token.username,
            levelID=level_id,
            levelDesc=encode_text(description),
        )
        return self.request(self.level_description, params).succeeded

    def iter_account_comments(self, account_id, count=10):
        author = User(str(account_id))
        author.account_id = account_id
        params = RequestParams(accountID=account_id, page=0, total=0)
        comments = self.locate(self.account_comments, params).iter_comments(author=author)
        return islice(comments, count)

    def iter_level_comments(self, level_id, count=10, by_likes=False):
        params = RequestParams(levelID=level_id, page=0, total=0, mode=int(by_likes))
        return islice(self.locate(self.level_comments, params).iter_comments(), count)

    def iter_comment_history(self, user_id, count=10, by_likes=False):
        params = RequestParams(userID=user_id, count=count, mode=int(by_likes), page=0, total=0)
        return islice(self.locate(self.comment_history, params).iter_comments(), count)

    @need_login
    def post_account_comment(self, text):
        content = encode_text(text)
        params = self.authenticated(userName=self.token.username, comment=content, cType=1)
        page = self.request(self.post_account_comment_page, params)
        comment_id = page.get_id()
        if comment_id is None:
            return None
        return self.build_comment(page, '2~%s~9~0 seconds~6~%d~4~0~7~0' % (content, comment_id))

    @need_login
    def post_level_comment(self, level_id, text, percent=0):
        content = encode_text(text)
        params = self.authenticated(
            userName=self.token.username,
            comment=content,
            levelID=level_id,
            percent=percent,
            chk=comment_checksum(self.token.username, content, level_id, percent),
        )
        page = self.request(self.post_level_comment_page, params)
        comment_id = page.get_id()
        if comment_id is None:
            return None
        return self.build_comment(
            page, '2~%s~9~0 seconds~6~%d~4~0~7~0~1~%s~10~%s' % (content, comment_id, level_id, percent),
        )

    def build_comment(self, page, record):
        """
        Comment just posted by the logged account, made from the record the
        server would send for it.
        """
        author = User(str(self.token.account_id))
        author.account_id = self.token.account_id
        author.user_id = self.token.user_id or NotAvailable
        author.username = self.token.username or NotAvailable
        return AccountComment(page, None, parse(record, '~'))(author=author)

    @need_login
    def delete_account_comment(self, comment_id):
        params = self.authenticated(commentID=comment_id)
        return self.request(self.delete_account_comment_page, params).succeeded

    @need_login
    def delete_level_comment(self, comment_id, level_id):
        params = self.authenticated(commentID=comment_id, levelID=level_id)
        return self.request(self.delete_level_comment_page, params).succeeded

    @need_login
    def like(self, item_id, like_type=LikeType.LEVEL, special=0, like=True):
        rs = random_string()
        like = int(like)
        params = self.authenticated(
            type=like_type,
            special=special,
            itemID=item_id,
            like=like,
            udid=self.udid,
            uuid=self.uuid,
            rs=rs,
            chk=like_checksum(
                special, item_id, like, like_type, rs, self.token.account_id,
                self.udid, self.uuid,
            ),
        )
        return self.request(self.like_page, params).succeeded

    @need_login
    def send_friend_request(self, account_id, message=''):
        params = self.authenticated(toAccountID=account_id, comment=encode_text(message))
        return self.request(self.friend_request_post, params).succeeded

    @need_login
    def iter_friend_requests(self, count=10, outgoing=False):
        params = self.authenticated(page=0, getSent=int(outgoing), total=0)
        requests = self.locate(self.friend_requests, params).iter_requests(outgoing=outgoing)
        return islice(requests, count)

    @need_login
    def read_friend_request(self, request):
        params = self.authenticated(requestID=request.id)
        return self.request(self.friend_request_read, params).succeeded

    @need_login
    def accept_friend_request(self, request):
        params = self.authenticated(requestID=request.id, targetAccountID=request.user.account_id)
        return self.request(self.friend_request_accept, params).succeeded

    @need_login
    def reject_friend_request(self, request):
        params = self.authenticated(targetAccountID=request.user.account_id, isSender=0)
        return self.request(self.friend_request_delete, params).succeeded

    @need_login
    def cancel_friend_request(self, request):
        params = self.authenticated(targetAccountID=request.user.account_id, isSender=1)
        return self.request(self.friend_request_delete, params).succeeded

    @need_login
    def unfriend(self, account_id):
        params = self.authenticated(targetAccountID=account_id)
        return self.request(self.unfriend_page, params).succeeded

    @need_login
    def block(self, account_id):
        params = self.authenticated(targetAccountID=account_id)
        return self.request(self.block_page, params).succeeded

    @need_login
    def unblock(self, account_id):
        params = self.authenticated(targetAccountID=account_id)
        return self.request(self.unblock_page, params).succeeded

    @need_login
    def iter_friends(self):
        return self.request(self.user_list, self.authenticated(type=0)).iter_users()

    @need_login
    def iter_blocked(self):
        return self.request(self.user_list, self.authenticated(type=1)).iter_users()

    def get_leaderboard(self, kind=LeaderboardType.TOP, count=100):
        if kind == LeaderboardType.FRIENDS:
            return self.get_friends_leaderboard(count)

        params = RequestParams(count=count, type=kind, page=0, total=0)
        return list(self.request(self.scores, params).iter_users())[:count]

    @need_login
    def get_friends_leaderboard(self, count=100):
        params = self.authenticated(count=count, type=LeaderboardType.FRIENDS, page=0, total=0)
        leaderboard = list(self.request(self.scores, params).iter_users())
        if not leaderboard:
            return leaderboard

        # the logged account comes last, whatever its stars
        me = leaderboard.pop()
        index = next(
            (i for i, user in enumerate(leaderboard) if user.stars <= me.stars),
            len(leaderboard),
        )
        leaderboard.insert(index, me)
        return leaderboard

    @need_login
    def send_message(self, account_id, subject, body):
        params = self.authenticated(
            toAccountID=account_id,
            subject=encode_text(subject),
            body=encode_text(body),
        )
        return self.request(self.message_post, params).succeeded

    @need_login
    def iter_messages(self, count=10, outgoing=False):
        params = self.authenticated(page=0, getSent=int(outgoing), total=0)
        return islice(self.locate(self.messages, params).iter_messages(), count)

    @need_login
    def get_message(self, message_id, outgoing=False):
        params = self.authenticated(messageID=message_id, isSender=int(outgoing))
        return self.request(self.message, params).get_message()

    @need_login
    def delete_message(self, message_id, outgoing=False):
        params = self.authenticated(messageID=message_id, isSender=int(outgoing))
        return self.request(self.message_delete, params).succeeded
