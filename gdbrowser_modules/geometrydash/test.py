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

from datetime import datetime, timedelta

import pytest
from dateutil import tz

from gdbrowser.browser.exceptions import HTTPNotFound
from gdbrowser.capabilities.base import NotAvailable, NotLoaded
from gdbrowser.capabilities.gamedb import (
    Award, DemonDifficulty, Difficulty, LeaderboardType, LevelLength, LikeType,
    Permission, SearchOrder,
)
from gdbrowser.exceptions import BrowserUnavailable, BrowserUserBanned, InvalidCredentials
from gdbrowser.tools.backend import Module
from gdbrowser.tools.compress import CompressionType, compress
from gdbrowser.tools.crypto import encode_base64
from gdbrowser.tools.params import SessionToken
from gdbrowser.tools.test import FakeAdapter, form_of

from .browser import GeometryDashBrowser, encode_difficulty, encode_lengths
from .module import GeometryDashModule


PROFILE = (
    '1:RobTop:2:16:13:149:17:226:10:12:11:3:3:1234:46:5000:4:10:8:20:'
    '30:999:20:UCz_yk8mDSAnxJq0ar66L4sw:44:RobTopGames:45::49:2:16:71:21:5:22:3'
)

LEVELS = '|'.join([
    '1:128:2:1st level:3:VGhpcyBpcyBhIGxldmVs:5:1:6:4:8:10:9:30:10:5000:12:0:13:21:'
    '14:100:17:0:25::18:4:19:12:42:0:45:1500:15:2:30:0:37:1:38:1:39:5:35:546561',
    '1:10565740:2:Bloodbath:3::5:3:6:503085:8:10:9:50:10:30000000:12:5:13:21:'
    '14:1000000:17:1:25::18:10:19:0:42:1:45:20000:15:3:30:0:37:0:38:0:39:10:35:0',
    '1:3:2:Auto:3::5:1:6:404:8:10:9:10:10:20:12:1:13:21:'
    '14:-3:17:0:25:1:18:0:19:0:42:0:45:12:15:0:30:128:37:0:38:0:39:1:35:0',
])

SEARCH = '#'.join([
    LEVELS,
    '4:Player:16|503085:Riot:37415',
    '1~|~546561~|~2~|~Spectre~|~3~|~38~|~4~|~Noisestorm~|~5~|~9.52~|~10~|~'
    'http%3A%2F%2Faudio.ngfiles.com%2F546000%2F546561_Spectre.mp3',
    '9999:0:10',
    'hash',
])

LEVEL_STRING = (
    'kS38,1_40_2_125_3_255_6_1000|1_0_2_102_3_255_6_1001|,kA2,0;'
    '1,1,2,15,3,15;1,8,2,45,3,15;'
)


def level_download(level_id, password='AwYDBgQGBA==', name='1st level'):
    data = encode_base64(compress(LEVEL_STRING, CompressionType.GZIP))
    return (
        '1:%s:2:%s:3:VGhpcyBpcyBhIGxldmVs:4:%s:5:1:6:4:8:10:9:30:10:5000:12:0:13:21:'
        '14:100:17:0:25::18:4:19:12:42:0:45:1500:15:2:30:0:37:1:38:1:39:5:35:0:'
        '27:%s:28:5 years:29:1 year#hash#hash2' % (level_id, name, data, password)
    )


class FakeBrowser(GeometryDashBrowser):
    HTTP_ADAPTER_CLASS = FakeAdapter


@pytest.fixture
def browser():
    browser = FakeBrowser('Player', 'hunter2')
    browser.udid = browser.uuid = 'udid0000000000'
    yield browser
    browser.deinit()


@pytest.fixture
def logged_browser(browser):
    browser.token = SessionToken(16, 'W0JbRlNBBQ==', 4, 'Player')
    return browser


@pytest.fixture
def adapter(browser):
    return FakeAdapter.of(browser)


def test_login(browser, adapter):
    adapter.add('loginGJAccount.php', '71,16')
    adapter.add('getGJUserInfo20.php', PROFILE)

    browser.do_login()

    assert browser.logged
    assert browser.token == SessionToken(71, 'W0JbRlNBBQ==', 16, 'Player')
    assert adapter.sent('loginGJAccount.php') == [{
        'gdw': '0',
        'gameVersion': '21',
        'binaryVersion': '35',
        'udid': 'udid0000000000',
        'userName': 'Player',
        'password': 'hunter2',
        'secret': 'Wmfv3899gc9',
    }]
    assert adapter.sent('getGJUserInfo20.php')[0]['targetAccountID'] == '71'
    assert browser.export_session()['account_id'] == 71


@pytest.mark.parametrize('code, exception', [
    ('-1', InvalidCredentials),
    ('-12', BrowserUserBanned),
    ('-8', BrowserUnavailable),
])
def test_login_refused(browser, adapter, code, exception):
    adapter.add('loginGJAccount.php', code)

    with pytest.raises(exception):
        browser.do_login()
    assert not browser.logged
    assert adapter.sent('getGJUserInfo20.php') == []


def test_login_unknown_account(browser, adapter):
    adapter.add('loginGJAccount.php', '71,16')
    adapter.add('getGJUserInfo20.php', '-1')

    with pytest.raises(InvalidCredentials):
        browser.do_login()
    assert not browser.logged


def test_login_without_credentials():
    browser = FakeBrowser('', '')
    with pytest.raises(InvalidCredentials):
        browser.post_account_comment('Hello')
    assert FakeAdapter.of(browser).requests == []


def test_need_login(browser, adapter):
    adapter.add('loginGJAccount.php', '71,16')
    adapter.add('getGJUserInfo20.php', PROFILE)
    adapter.add('uploadGJAccComment20.php', '777')

    comment = browser.post_account_comment('Hello')

    assert [adapter.endpoint(request) for request in adapter.requests] == [
        'loginGJAccount.php', 'getGJUserInfo20.php', 'uploadGJAccComment20.php',
    ]
    sent = adapter.sent('uploadGJAccComment20.php')[0]
    assert sent['accountID'] == '71'
    assert sent['gjp'] == 'W0JbRlNBBQ=='
    assert sent['userName'] == 'Player'
    assert sent['comment'] == 'SGVsbG8='
    assert sent['secret'] == 'Wmfd2893gb7'
    assert 'password' not in sent

    assert comment.id == '777'
    assert comment.text == 'Hello'
    assert comment.likes == 0
    assert comment.spam is False
    assert comment.author.account_id == 71
    assert comment.level_id is NotAvailable
    assert datetime.now(tz.tzutc()) - comment.date < timedelta(minutes=1)


def test_use_session(browser, adapter):
    adapter.add('getGJUserInfo20.php', PROFILE)

    user = browser.use_session(SessionToken(71, 'W0JbRlNBBQ=='))

    assert user.username == 'RobTop'
    assert browser.token == SessionToken(71, 'W0JbRlNBBQ==', 16, 'RobTop')
    assert adapter.sent('loginGJAccount.php') == []


def test_post_account_comment_refused(logged_browser, adapter):
    adapter.add('uploadGJAccComment20.php', '-1')
    assert logged_browser.post_account_comment('Hello') is None


def test_post_level_comment(logged_browser, adapter):
    adapter.add('uploadGJComment21.php', '888')

    comment = logged_browser.post_level_comment(128, 'Hello', percent=5)

    sent = adapter.sent('uploadGJComment21.php')[0]
    assert sent['chk'] == 'CgtWXAUFAQYMAFNfUFlXCgAGDglUCw0KBVEMVQFQBw9RCFIBCwcKAA=='
    assert sent['levelID'] == '128'
    assert sent['percent'] == '5'
    assert comment.id == '888'
    assert comment.level_id == 128
    assert comment.percent == 5


def test_post_level_comment_without_percent(logged_browser, adapter):
    adapter.add('uploadGJComment21.php', '889')

    comment = logged_browser.post_level_comment(128, 'Hello')

    assert adapter.sent('uploadGJComment21.php')[0]['chk'] == \
        'Ag1QXAgCCAcOCAdaAQhSAgxWC1UACgIMAFYLAFoCUwAED1MHDVIPAQ=='
    assert comment.percent is NotAvailable


def test_like(logged_browser, adapter, monkeypatch):
    monkeypatch.setattr(
        'gdbrowser_modules.geometrydash.browser.random_string',
        lambda: 'abcdefghij',
    )
    adapter.add('likeGJItem211.php', '1')

    assert logged_browser.like(128, LikeType.LEVEL)

    sent = adapter.sent('likeGJItem211.php')[0]
    assert sent['chk'] == 'AQ5XWVRRCABbBQMJBQoBBw4ED1IMAAVaUgENAQAGUAECAARUXAUIAQ=='
    assert sent['rs'] == 'abcdefghij'
    assert sent['udid'] == sent['uuid'] == 'udid0000000000'
    assert (sent['itemID'], sent['like'], sent['type'], sent['special']) == ('128', '1', '1', '0')


def test_get_user(browser, adapter):
    adapter.add('getGJUserInfo20.php', PROFILE)

    user = browser.get_user(71)

    assert user.id == '71'
    assert user.username == 'RobTop'
    assert (user.user_id, user.account_id) == (16, 71)
    assert (user.stars, user.diamonds, user.demons, user.rank) == (1234, 5000, 10, 999)
    assert (user.coins, user.user_coins, user.creator_points) == (149, 226, 20)
    assert user.youtube == 'https://youtube.com/channel/UCz_yk8mDSAnxJq0ar66L4sw'
    assert user.twitter == 'https://twitter.com/RobTopGames'
    assert user.twitch is NotAvailable
    assert user.permission == Permission.ELDER_MODERATOR
    assert (user.color1, user.color2) == (12, 3)
    assert user.icons == {'cube': 5, 'ship': 3}


def test_get_user_unknown(browser, adapter):
    adapter.add('getGJUserInfo20.php', '-1')
    assert browser.get_user(1) is None


def users_page(first, size):
    return '|'.join(
        '1:User%d:2:%d:16:%d:3:%d:4:0:13:0:17:0:8:0' % (i, i + 1000, i, i)
        for i in range(first, first + size)
    ) + '#9999:%d:10' % first


def test_search_users_pages(browser, adapter):
    adapter.add('getGJUsers20.php', users_page(0, 10), users_page(10, 2))

    users = list(browser.search_users('User', count=20))

    assert len(users) == 12
    assert users[11].username == 'User11'
    assert [sent['page'] for sent in adapter.sent('getGJUsers20.php')] == ['0', '1']
    assert adapter.sent('getGJUsers20.php')[1]['str'] == 'User'


def test_search_users_count(browser, adapter):
    adapter.add('getGJUsers20.php', users_page(0, 10))

    assert len(list(browser.search_users('User', count=3))) == 3
    assert len(adapter.sent('getGJUsers20.php')) == 1


def test_search_users_nothing(browser, adapter):
    adapter.add('getGJUsers20.php', '-1')
    assert list(browser.search_users('nobody')) == []


def test_get_user_by_name(browser, adapter):
    adapter.add('getGJUsers20.php', '1:RobTopFan:2:5:16:6|1:robtop:2:16:16:71#2:0:10')
    adapter.add('getGJUserInfo20.php', PROFILE)

    user = browser.get_user_by_name('ROBTOP')

    assert user.username == 'RobTop'
    assert adapter.sent('getGJUserInfo20.php')[0]['targetAccountID'] == '71'


def test_get_user_by_name_not_found(browser, adapter):
    adapter.add('getGJUsers20.php', '1:RobTopFan:2:5:16:6#1:0:10')
    assert browser.get_user_by_name('RobTop') is None


def test_search_levels(browser, adapter):
    adapter.add('getGJLevels21.php', SEARCH)

    first, bloodbath, auto = browser.search_levels('level')

    assert first.id == '128'
    assert first.name == '1st level'
    assert first.description == 'This is a level'
    assert first.difficulty == Difficulty.HARD
    assert first.difficulty_name == 'Hard'
    assert first.demon is False
    assert first.demon_difficulty is NotAvailable
    assert first.award == Award.FEATURE
    assert first.featured_position == 12
    assert (first.stars, first.orbs, first.diamonds) == (4, 125, 6)
    assert first.length == LevelLength.MEDIUM
    assert first.coins == 1
    assert first.verified_coins is True
    assert first.original is NotAvailable
    assert first.creator.username == 'Player'
    assert first.creator.account_id == 16
    assert first.song.id == '546561'
    assert first.song.name == 'Spectre'
    assert first.song.artist == 'Noisestorm'
    assert first.song.size == 9982443
    assert first.song.url == 'http://audio.ngfiles.com/546000/546561_Spectre.mp3'
    assert first.song.custom is True

    assert bloodbath.demon is True
    assert bloodbath.demon_difficulty == DemonDifficulty.EXTREME
    assert bloodbath.difficulty_name == 'Extreme Demon'
    assert bloodbath.award == Award.STAR
    assert (bloodbath.orbs, bloodbath.diamonds) == (500, 12)
    assert bloodbath.description == ''
    assert bloodbath.creator.username == 'Riot'
    assert bloodbath.song.id == '6'
    assert bloodbath.song.name == "Can't Let Go"
    assert bloodbath.song.custom is False

    assert auto.difficulty == Difficulty.AUTO
    assert auto.difficulty_name == 'Auto'
    assert auto.award == Award.NONE
    assert auto.original == 128
    assert auto.creator.user_id == 404
    assert auto.creator.username is NotLoaded

    sent = adapter.sent('getGJLevels21.php')[0]
    assert (sent['str'], sent['diff'], sent['len'], sent['type'], sent['page']) == ('level', '-', '-', '0', '0')
    assert 'featured' not in sent


def test_search_levels_filters(browser, adapter):
    adapter.add('getGJLevels21.php', '-1')

    levels = browser.search_levels(
        difficulty=[1, 2], length=[0, 4], order=SearchOrder.AWARDED,
        epic=True, original=True, two_player=True, coins=True,
    )

    assert list(levels) == []
    sent = adapter.sent('getGJLevels21.php')[0]
    assert sent['diff'] == '1,2'
    assert sent['len'] == '0,4'
    assert sent['type'] == '11'
    assert (sent['epic'], sent['featured'], sent['original'], sent['twoPlayer'], sent['coins']) == ('1',) * 5
    assert 'demonFilter' not in sent


def test_search_demons(browser, adapter):
    adapter.add('getGJLevels21.php', '-1')
    list(browser.search_levels(demon=4))

    sent = adapter.sent('getGJLevels21.php')[0]
    assert (sent['diff'], sent['demonFilter']) == ('-2', '4')


@pytest.mark.parametrize('difficulty, demon, expected', [
    (None, None, ('-', None)),
    (-1, None, ('0', None)),
    (0, None, ('-3', None)),
    (3, None, ('3', None)),
    ([-1, 0, 5], None, ('0,-3,5', None)),
    (None, 0, ('-2', None)),
    (None, 2, ('-2', 2)),
])
def test_encode_difficulty(difficulty, demon, expected):
    assert encode_difficulty(difficulty, demon) == expected


def test_encode_lengths():
    assert encode_lengths() == '-'
    assert encode_lengths(3) == '3'
    assert encode_lengths((1, 2)) == '1,2'


def test_get_level(browser, adapter):
    adapter.add('downloadGJLevel22.php', level_download(128))

    level = browser.get_level(128)

    assert level.id == '128'
    assert level.copyable is True
    assert level.password == '0042'
    assert level.uploaded < level.updated
    assert level.data.id == '128'
    assert level.data.raw == LEVEL_STRING
    assert level.data.header['kA2'] == '0'
    assert level.data.colors == [
        {'1': '40', '2': '125', '3': '255', '6': '1000'},
        {'1': '0', '2': '102', '3': '255', '6': '1001'},
    ]
    assert level.data.objects == [{1: 1, 2: 15, 3: 15}, {1: 8, 2: 45, 3: 15}]

    sent = adapter.sent('downloadGJLevel22.php')[0]
    assert (sent['levelID'], sent['inc'], sent['extras']) == ('128', '1', '0')


@pytest.mark.parametrize('password, copyable, expected', [
    ('Aw==', True, NotAvailable),
    ('Ag==', False, NotAvailable),
    # sent unencrypted by some servers
    ('0', False, NotAvailable),
    ('', False, NotAvailable),
])
def test_get_level_copy(browser, adapter, password, copyable, expected):
    adapter.add('downloadGJLevel22.php', level_download(128, password=password))

    level = browser.get_level(128)

    assert level.copyable is copyable
    assert level.password is expected


def test_get_level_missing(browser, adapter):
    adapter.add('downloadGJLevel22.php', '-1')
    assert browser.get_level(1) is None


def test_download_levels(browser, adapter):
    adapter.add('downloadGJLevel22.php', lambda request: (
        '-1' if form_of(request)['levelID'] == '3'
        else level_download(form_of(request)['levelID'], name='Level %s' % form_of(request)['levelID'])
    ))

    levels = list(browser.download_levels([1, 2, 3, 4]))

    assert [level.name if level else None for level in levels] == ['Level 1', 'Level 2', None, 'Level 4']


def test_update_level_description(logged_browser, adapter):
    adapter.add('updateGJDesc20.php', '1')

    assert logged_browser.update_level_description(128, 'Updated')

    sent = adapter.sent('updateGJDesc20.php')[0]
    assert (sent['levelDesc'], sent['levelID'], sent['userName']) == ('VXBkYXRlZA==', '128', 'Player')


def test_account_comments(browser, adapter):
    adapter.add(
        'getGJAccountComments20.php',
        '2~SGkgdGhlcmU=~4~3~9~1 hour~6~777|2~TmljZSBsZXZlbA==~4~-2~7~1~9~2 days~6~778#2:0:10',
    )

    comments = list(browser.iter_account_comments(71))

    assert [comment.text for comment in comments] == ['Hi there', 'Nice level']
    assert comments[0].likes == 3
    assert comments[1].spam is True
    assert comments[0].author.account_id == 71
    assert comments[0].date > comments[1].date
    assert adapter.sent('getGJAccountComments20.php')[0]['accountID'] == '71'


def test_level_comments(browser, adapter):
    adapter.add(
        'getGJComments21.php',
        '2~TmljZSBsZXZlbA==~3~4~4~12~7~0~10~87~9~2 days~6~555:1~Player~9~1~10~3~11~4~14~0~15~2~16~16'
        '|2~SGkgdGhlcmU=~3~20~4~0~7~0~10~0~9~1 day~6~556:1~Friend~9~1~10~3~11~4~14~0~15~2~16~21'
        '#2:0:10',
    )

    comments = list(browser.iter_level_comments(128, by_likes=True))

    assert comments[0].text == 'Nice level'
    assert comments[0].percent == 87
    assert comments[0].author.username == 'Player'
    assert (comments[0].author.user_id, comments[0].author.account_id) == (4, 16)
    assert comments[1].percent is NotAvailable
    assert comments[1].author.id == '21'

    sent = adapter.sent('getGJComments21.php')[0]
    assert (sent['levelID'], sent['mode']) == ('128', '1')


def test_comment_history(browser, adapter):
    adapter.add(
        'getGJCommentHistory.php',
        '2~TmljZSBsZXZlbA==~1~128~3~4~4~12~7~0~10~0~9~2 days~6~555:1~Player~9~1~10~3~11~4~14~0~15~2~16~16#1:0:10',
    )

    comment, = browser.iter_comment_history(4, count=5)

    assert comment.level_id == 128
    assert adapter.sent('getGJCommentHistory.php')[0]['count'] == '5'


def test_delete_comments(logged_browser, adapter):
    adapter.add('deleteGJAccComment20.php', '1')
    adapter.add('deleteGJComment20.php', '-1')

    assert logged_browser.delete_account_comment(777) is True
    assert logged_browser.delete_level_comment(555, 128) is False
    assert adapter.sent('deleteGJComment20.php')[0]['levelID'] == '128'


def test_friend_requests(logged_browser, adapter):
    adapter.add(
        'getGJFriendRequests20.php',
        '1:Friend:2:20:9:1:10:3:11:4:14:0:15:0:16:21:32:9001:35:RnJpZW5kIG1l:37:3 days:41:1#1:0:10',
    )
    adapter.add('readGJFriendRequest20.php', '1')
    adapter.add('acceptGJFriendRequest20.php', '1')

    request, = logged_browser.iter_friend_requests()

    assert request.id == '9001'
    assert request.message == 'Friend me'
    assert request.read is False
    assert request.outgoing is False
    assert request.user.username == 'Friend'
    assert request.user.account_id == 21

    assert logged_browser.read_friend_request(request)
    assert logged_browser.accept_friend_request(request)
    assert adapter.sent('acceptGJFriendRequest20.php')[0]['targetAccountID'] == '21'
    assert adapter.sent('readGJFriendRequest20.php')[0]['requestID'] == '9001'


@pytest.mark.parametrize('code', ['-1', '-2'])
def test_friend_requests_empty(logged_browser, adapter, code):
    adapter.add('getGJFriendRequests20.php', code)
    assert list(logged_browser.iter_friend_requests(outgoing=True)) == []
    assert adapter.sent('getGJFriendRequests20.php')[0]['getSent'] == '1'


def test_reject_and_cancel_friend_request(logged_browser, adapter):
    adapter.add('getGJFriendRequests20.php', '1:Friend:2:20:16:21:32:9001:35::41:0#1:0:10')
    adapter.add('deleteGJFriendRequests20.php', '1')

    request, = logged_browser.iter_friend_requests()
    assert request.read is True
    assert request.message == ''

    assert logged_browser.reject_friend_request(request)
    assert logged_browser.cancel_friend_request(request)
    assert [sent['isSender'] for sent in adapter.sent('deleteGJFriendRequests20.php')] == ['0', '1']


def test_send_friend_request(logged_browser, adapter):
    adapter.add('uploadFriendRequest20.php', '1')

    assert logged_browser.send_friend_request(21, 'Friend me')

    sent = adapter.sent('uploadFriendRequest20.php')[0]
    assert (sent['toAccountID'], sent['comment']) == ('21', 'RnJpZW5kIG1l')


def test_user_lists(logged_browser, adapter):
    adapter.add('getGJUserList20.php', '1:Friend:2:20:9:1:10:3:11:4:14:0:15:0:16:21|1:Other:2:0:16:22', '-1')

    friends = list(logged_browser.iter_friends())
    blocked = list(logged_browser.iter_blocked())

    assert [friend.username for friend in friends] == ['Friend', 'Other']
    assert friends[1].user_id is NotAvailable
    assert blocked == []
    assert [sent['type'] for sent in adapter.sent('getGJUserList20.php')] == ['0', '1']


def test_relationships(logged_browser, adapter):
    adapter.add('removeGJFriend20.php', '1')
    adapter.add('blockGJUser20.php', '1')
    adapter.add('unblockGJUser20.php', '-1')

    assert logged_browser.unfriend(21)
    assert logged_browser.block(21)
    assert not logged_browser.unblock(21)
    assert adapter.sent('blockGJUser20.php')[0]['targetAccountID'] == '21'


def test_leaderboard(browser, adapter):
    adapter.add('getGJScores20.php', '1:A:2:1:16:1:3:500|1:B:2:2:16:2:3:100#')

    users = browser.get_leaderboard(LeaderboardType.CREATORS, count=1)

    assert [user.username for user in users] == ['A']
    sent = adapter.sent('getGJScores20.php')[0]
    assert (sent['type'], sent['count']) == ('creators', '1')
    assert 'gjp' not in sent


def test_friends_leaderboard(logged_browser, adapter):
    adapter.add('getGJScores20.php', '1:A:2:1:16:1:3:500|1:B:2:2:16:2:3:100|1:Player:2:4:16:16:3:300')

    users = logged_browser.get_leaderboard(LeaderboardType.FRIENDS)

    assert [user.username for user in users] == ['A', 'Player', 'B']
    assert adapter.sent('getGJScores20.php')[0]['gjp'] == 'W0JbRlNBBQ=='


def test_friends_leaderboard_last(logged_browser, adapter):
    adapter.add('getGJScores20.php', '1:A:2:1:16:1:3:500|1:Player:2:4:16:16:3:30')
    users = logged_browser.get_leaderboard(LeaderboardType.FRIENDS)
    assert [user.username for user in users] == ['A', 'Player']


def test_messages(logged_browser, adapter):
    adapter.add('getGJMessages20.php', '6:Friend:3:20:2:21:1:4242:4:U3ViamVjdA==:8:1:9:0:7:4 hours#1:0:10')
    adapter.add(
        'downloadGJMessage20.php',
        '6:Friend:3:20:2:21:1:4242:4:U3ViamVjdA==:5:Qm9keSB0ZXh0:8:0:9:1:7:4 hours',
    )

    message, = logged_browser.iter_messages()
    assert message.id == '4242'
    assert message.subject == 'Subject'
    assert message.read is False
    assert message.outgoing is False
    assert message.body is NotLoaded
    assert message.user.username == 'Friend'
    assert (message.user.account_id, message.user.user_id) == (21, 20)

    message = logged_browser.get_message(4242, outgoing=True)
    assert message.body == 'Body text'
    assert message.read is True
    assert message.outgoing is True
    assert adapter.sent('downloadGJMessage20.php')[0]['isSender'] == '1'


def test_message_missing(logged_browser, adapter):
    adapter.add('downloadGJMessage20.php', '-1')
    assert logged_browser.get_message(1) is None


def test_send_and_delete_message(logged_browser, adapter):
    adapter.add('uploadGJMessage20.php', '1')
    adapter.add('deleteGJMessages20.php', '1')

    assert logged_browser.send_message(21, 'Subject', 'Body text')
    assert logged_browser.delete_message(4242)

    sent = adapter.sent('uploadGJMessage20.php')[0]
    assert (sent['subject'], sent['body'], sent['toAccountID']) == ('U3ViamVjdA==', 'Qm9keSB0ZXh0', '21')
    assert adapter.sent('deleteGJMessages20.php')[0]['isSender'] == '0'


def test_http_error(browser, adapter):
    # nothing queued: 404
    with pytest.raises(HTTPNotFound):
        browser.get_user(71)


def test_relay_url():
    browser = FakeBrowser('', '', relay_url='https://relay.example/')
    adapter = FakeAdapter.of(browser)
    adapter.add('getGJUserInfo20.php', PROFILE)

    assert browser.BASEURL == 'https://relay.example/http://www.boomlings.com/database/'
    assert browser.get_user(71).username == 'RobTop'
    assert adapter.requests[0].url == 'https://relay.example/http://www.boomlings.com/database/getGJUserInfo20.php'
    assert browser.page is None

    adapter.add('getGJUsers20.php', users_page(0, 10), users_page(10, 2))
    assert len(list(browser.search_users('User', count=20))) == 12
    assert adapter.requests[-1].url == 'https://relay.example/http://www.boomlings.com/database/getGJUsers20.php'


class FakeModule(GeometryDashModule):
    BROWSER = FakeBrowser


def test_module_config():
    module = FakeModule(config={
        'login': 'Player',
        'password': 'hunter2',
        'worker_threshold': '4096',
    })

    assert module.browser.username == 'Player'
    assert module.browser.worker_threshold == 4096
    assert module.browser.BASEURL == 'http://www.boomlings.com/database/'
    assert module.dump_config()['password'] == ''
    assert module.has_caps('CapGameDatabase')


def test_module_bad_config():
    with pytest.raises(Module.ConfigError) as exc:
        FakeModule(config={'worker_threshold': 'many'})
    assert exc.value.bad_fields == ['worker_threshold']


def test_module_read_friend_request():
    module = FakeModule(config={})
    request = type('Request', (), {'read': True})()
    assert module.read_friend_request(request) is True
    assert FakeAdapter.of(module.browser).requests == []
