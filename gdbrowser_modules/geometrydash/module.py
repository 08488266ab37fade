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

from gdbrowser.capabilities.gamedb import CapGameDatabase, LeaderboardType, LikeType
from gdbrowser.tools.backend import BackendConfig, Module
from gdbrowser.tools.params import SessionToken
from gdbrowser.tools.value import Value, ValueBackendPassword, ValueInt

from .browser import GeometryDashBrowser


__all__ = ['GeometryDashModule']


class GeometryDashModule(Module, CapGameDatabase):
    NAME = 'geometrydash'
    DESCRIPTION = 'Geometry Dash game database'
    MAINTAINER = 'gdbrowser project'
    EMAIL = '<unspecified>'
    LICENSE = 'LGPLv3+'

    BROWSER = GeometryDashBrowser

    CONFIG = BackendConfig(
        ValueBackendPassword('login', label='Username', masked=False),
        ValueBackendPassword('password', label='Password'),
        Value('url', label='URL of the database', default=GeometryDashBrowser.BASEURL),
        Value('relay_url', label='Prefix of every request URL, to go through a relay', default=''),
        ValueInt('worker_threshold', label='Size of level data inflated in another process (0 to never)', default=0),
    )

    def create_default_browser(self):
        return self.create_browser(
            self.config['login'].get(),
            self.config['password'].get(),
            baseurl=self.config['url'].get(),
            relay_url=self.config['relay_url'].get(),
            worker_threshold=self.config['worker_threshold'].get(),
        )

    def use_session(self, account_id, gjp):
        """
        Authenticate with a stored session instead of the password.
        """
        return self.browser.use_session(SessionToken(int(account_id), gjp))

    def get_user(self, account_id):
        return self.browser.get_user(account_id)

    def get_user_by_name(self, username):
        return self.browser.get_user_by_name(username)

    def search_users(self, pattern, count=10):
        return self.browser.search_users(pattern, count)

    def search_levels(self, pattern='', count=10, **filters):
        return self.browser.search_levels(pattern, count, **filters)

    def get_level(self, level_id):
        return self.browser.get_level(level_id)

    def download_levels(self, level_ids):
        return self.browser.download_levels(level_ids)

    def update_level_description(self, level_id, description):
        return self.browser.update_level_description(level_id, description)

    def iter_account_comments(self, account_id, count=10):
        return self.browser.iter_account_comments(account_id, count)

    def iter_level_comments(self, level_id, count=10, by_likes=False):
        return self.browser.iter_level_comments(level_id, count, by_likes)

    def iter_comment_history(self, user_id, count=10, by_likes=False):
        return self.browser.iter_comment_history(user_id, count, by_likes)

    def post_account_comment(self, text):
        return self.browser.post_account_comment(text)

    def post_level_comment(self, level_id, text, percent=0):
        return self.browser.post_level_comment(level_id, text, percent)

    def delete_account_comment(self, comment_id):
        return self.browser.delete_account_comment(comment_id)

    def delete_level_comment(self, comment_id, level_id):
        return self.browser.delete_level_comment(comment_id, level_id)

    def like(self, item_id, like_type=LikeType.LEVEL, special=0, like=True):
        return self.browser.like(item_id, like_type, special, like)

    def send_friend_request(self, account_id, message=''):
        return self.browser.send_friend_request(account_id, message)

    def iter_friend_requests(self, count=10, outgoing=False):
        return self.browser.iter_friend_requests(count, outgoing)

    def read_friend_request(self, request):
        if request.read:
            return True
        return self.browser.read_friend_request(request)

    def accept_friend_request(self, request):
        return self.browser.accept_friend_request(request)

    def reject_friend_request(self, request):
        return self.browser.reject_friend_request(request)

    def cancel_friend_request(self, request):
        return self.browser.cancel_friend_request(request)

    def unfriend(self, account_id):
        return self.browser.unfriend(account_id)

    def block(self, account_id):
        return self.browser.block(account_id)

    def unblock(self, account_id):
        return self.browser.unblock(account_id)

    def iter_friends(self):
        return self.browser.iter_friends()

    def iter_blocked(self):
        return self.browser.iter_blocked()

    def get_leaderboard(self, kind=LeaderboardType.TOP, count=100):
        return self.browser.get_leaderboard(kind, count)

    def send_message(self, account_id, subject, body):
        return self.browser.send_message(account_id, subject, body)

    def iter_messages(self, count=10, outgoing=False):
        return self.browser.iter_messages(count, outgoing)

    def get_message(self, message_id, outgoing=False):
        return self.browser.get_message(message_id, outgoing)

    def delete_message(self, message_id, outgoing=False):
        return self.browser.delete_message(message_id, outgoing)
