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

from typing import Iterable, Iterator

from .base import (
    BaseObject, BoolField, Capability, DateField, Enum, EnumField, Field,
    IntField, StringField,
)


__all__ = [
    'Award', 'CapGameDatabase', 'Comment', 'DemonDifficulty', 'Difficulty',
    'FriendRequest', 'LeaderboardType', 'Level', 'LevelData',
    'LevelLength', 'LikeType', 'Message', 'Permission', 'SearchOrder',
    'Song', 'User', 'difficulty_name', 'DEFAULT_SONGS',
    'ORBS',
]


class Difficulty(Enum):
    NA = -1
    AUTO = 0
    EASY = 1
    NORMAL = 2
    HARD = 3
    HARDER = 4
    INSANE = 5


class DemonDifficulty(Enum):
    EASY = 1
    MEDIUM = 2
    HARD = 3
    INSANE = 4
    EXTREME = 5


DIFFICULTY_NAMES = {
    Difficulty.NA: 'N/A',
    Difficulty.AUTO: 'Auto',
    Difficulty.EASY: 'Easy',
    Difficulty.NORMAL: 'Normal',
    Difficulty.HARD: 'Hard',
    Difficulty.HARDER: 'Harder',
    Difficulty.INSANE: 'Insane',
}

DEMON_NAMES = {
    DemonDifficulty.EASY: 'Easy Demon',
    DemonDifficulty.MEDIUM: 'Medium Demon',
    DemonDifficulty.HARD: 'Hard Demon',
    DemonDifficulty.INSANE: 'Insane Demon',
    DemonDifficulty.EXTREME: 'Extreme Demon',
}


def difficulty_name(difficulty: int, demon: bool = False) -> str:
    """
    Human readable name of a difficulty.

    >>> difficulty_name(Difficulty.HARDER)
    'Harder'
    >>> difficulty_name(DemonDifficulty.EXTREME, demon=True)
    'Extreme Demon'
    """
    if demon:
        return DEMON_NAMES.get(difficulty, 'Demon')
    return DIFFICULTY_NAMES.get(difficulty, 'N/A')


class LevelLength(Enum):
    TINY = 0
    SHORT = 1
    MEDIUM = 2
    LONG = 3
    XL = 4


class Award(Enum):
    """
    Highest rating given to a level.

    FEATURE and EPIC levels also have a position in the featured list.
    """

    NONE = 0
    STAR = 1
    FEATURE = 2
    EPIC = 3


class Permission(Enum):
    USER = 0
    MODERATOR = 1
    ELDER_MODERATOR = 2


class SearchOrder(Enum):
    """
    Order of level search results, as sent in the ``type`` field.
    """

    LIKES = 0
    DOWNLOADS = 1
    TRENDING = 3
    RECENT = 4
    FEATURED = 6
    MAGIC = 7
    AWARDED = 11
    HALL_OF_FAME = 16


class LikeType(Enum):
    LEVEL = 1
    COMMENT = 2
    ACCOUNT_COMMENT = 3


class LeaderboardType(Enum):
    TOP = 'top'
    CREATORS = 'creators'
    FRIENDS = 'friends'


ORBS = [0, 0, 50, 75, 125, 175, 225, 275, 350, 425, 500]
"""Orbs rewarded by a level, indexed by its stars."""

DEFAULT_SONGS = [
    ('Stay Inside Me', 'OcularNebula'),
    ('Stereo Madness', 'ForeverBound'),
    ('Back on Track', 'DJVI'),
    ('Polargeist', 'Step'),
    ('Dry Out', 'DJVI'),
    ('Base After Base', 'DJVI'),
    ("Can't Let Go", 'DJVI'),
    ('Jumper', 'Waterflame'),
    ('Time Machine', 'Waterflame'),
    ('Cycles', 'DJVI'),
    ('xStep', 'DJVI'),
    ('Clutterfunk', 'Waterflame'),
    ('Theory of Everything', 'DJ-Nate'),
    ('Electroman Adventures', 'Waterflame'),
    ('Clubstep', 'DJ-Nate'),
    ('Electrodynamix', 'DJ-Nate'),
    ('Hexagon Force', 'Waterflame'),
    ('Blast Processing', 'Waterflame'),
    ('Theory of Everything 2', 'DJ-Nate'),
    ('Geometrical Dominator', 'Waterflame'),
    ('Deadlocked', 'F-777'),
    ('Fingerdash', 'MDK'),
    ('The Seven Seas', 'F-777'),
    ('Viking Arena', 'F-777'),
    ('Airborne Robots', 'F-777'),
    ('The Challenge', 'RobTop'),
    ('Payload', 'Dex Arson'),
    ('Beast Mode', 'Dex Arson'),
    ('Machina', 'Dex Arson'),
    ('Years', 'Dex Arson'),
    ('Frontlines', 'Dex Arson'),
    ('Space Pirates', 'Waterflame'),
    ('Striker', 'Waterflame'),
    ('Round 1', 'Dex Arson'),
    ('Embers', 'Dex Arson'),
    ('Monster Dance Off', 'F-777'),
    ('Press Start', 'MDK'),
    ('Nock Em', 'Bossfight'),
    ('Power Trip', 'Boom Kitty'),
]
"""Official songs as ``(name, artist)``, indexed by the level song field."""


class User(BaseObject):
    """
    Player of the game.

    The id is the account id. Users found in lists (friends, blocked users,
    requests) only carry their names, ids and icon; statistics are only
    given by profiles, searches and leaderboards.
    """

    username = StringField('Name of the player')
    user_id = IntField('Player id, different from the account id')
    account_id = IntField('Account id')

    stars = IntField('Collected stars')
    diamonds = IntField('Collected diamonds')
    demons = IntField('Beaten demons')
    coins = IntField('Collected secret coins')
    user_coins = IntField('Collected user coins')
    creator_points = IntField('Creator points')
    rank = IntField('Global rank, 0 when not ranked')

    youtube = StringField('URL of the YouTube channel')
    twitter = StringField('URL of the Twitter profile')
    twitch = StringField('URL of the Twitch channel')

    color1 = IntField('Primary color index')
    color2 = IntField('Secondary color index')
    icon = IntField('Displayed icon')
    icon_type = IntField('Kind of the displayed icon (cube, ship...)')
    icons = Field('Selected icon of each kind', dict)
    permission = EnumField('Moderation level', Permission)


class Song(BaseObject):
    """
    Song of a level.

    Official songs have no artist id, size or download URL.
    """

    name = StringField('Title of the song')
    artist = StringField('Name of the artist')
    artist_id = IntField('Artist id')
    size = IntField('Size of the file, in bytes')
    custom = BoolField('Whether the song has been uploaded by a user')


class LevelData(BaseObject):
    """
    Decompressed level string.

    The id is the level id. Objects are left as parsed: their keys are not
    given any meaning.
    """

    raw = StringField('Decompressed level string')
    header = Field('Level settings', dict)
    colors = Field('Color channels of the header', list)
    objects = Field('Level objects', list)


class Level(BaseObject):
    """
    Level of the game database.
    """

    name = StringField('Name of the level')
    description = StringField('Description of the level')
    version = IntField('Version of the level')
    creator = Field('Creator of the level', User)
    song = Field('Song of the level', Song)

    difficulty = EnumField('Difficulty', Difficulty)
    demon = BoolField('Whether the level is a demon')
    demon_difficulty = EnumField('Difficulty of a demon level', DemonDifficulty)
    auto = BoolField('Whether the level is an auto level')
    stars = IntField('Stars given by the level')
    requested_stars = IntField('Stars requested by the creator')
    orbs = IntField('Orbs given by the level')
    diamonds = IntField('Diamonds given by the level')
    award = EnumField('Highest rating given to the level', Award)
    featured_position = IntField('Position in the featured list')

    downloads = IntField('Number of downloads')
    likes = IntField('Number of likes, minus dislikes')
    length = EnumField('Length of the level', LevelLength)
    game_version = IntField('Game version used to upload the level')
    objects = IntField('Number of objects')
    coins = IntField('Number of user coins')
    verified_coins = BoolField('Whether the user coins are verified')
    original = IntField('Id of the copied level')

    password = StringField('Password to copy the level')
    copyable = BoolField('Whether the level can be copied')
    data = Field('Level string', LevelData)
    uploaded = DateField('Upload date')
    updated = DateField('Last update date')

    @property
    def difficulty_name(self) -> str:
        if self.demon:
            return difficulty_name(self.demon_difficulty, demon=True)
        return difficulty_name(self.difficulty)


class Comment(BaseObject):
    """
    Comment on a level or on a profile.

    Profile comments have no level id and no percentage.
    """

    text = StringField('Text of the comment')
    author = Field('Author of the comment', User)
    level_id = IntField('Id of the commented level')
    percent = IntField('Progress shown with the comment')
    likes = IntField('Number of likes, minus dislikes')
    spam = BoolField('Whether the comment is flagged as spam')
    date = DateField('Approximate date of the comment')


class FriendRequest(BaseObject):
    """
    Friend request sent or received by the logged account.

    ``user`` is the other side of the request.
    """

    user = Field('Sender of an incoming request, receiver of an outgoing one', User)
    message = StringField('Message sent with the request')
    read = BoolField('Whether the request has been read')
    outgoing = BoolField('Whether the logged account sent the request')
    date = DateField('Approximate date of the request')


class Message(BaseObject):
    """
    Private message.

    The body is only given when a message is fetched by its id.
    """

    user = Field('Sender of an incoming message, receiver of an outgoing one', User)
    subject = StringField('Subject of the message')
    body = StringField('Body of the message')
    read = BoolField('Whether the message has been read')
    outgoing = BoolField('Whether the logged account sent the message')
    date = DateField('Approximate date of the message')


class CapGameDatabase(Capability):
    """
    Capability of game databases: levels, players and their social features.

    Methods which act on behalf of a player need the credentials of the
    module configuration. Failure sentinels of the server are given back as
    ``None`` for single objects, ``False`` for actions and an empty iterator
    for lists.
    """

    def get_user(self, account_id: int) -> User | None:
        """
        Get the profile of a player.

        :param account_id: account id of the player
        :rtype: :class:`User` or None
        """
        raise NotImplementedError()

    def get_user_by_name(self, username: str) -> User | None:
        """
        Get the profile of a player by name, ignoring case.

        :rtype: :class:`User` or None
        """
        raise NotImplementedError()

    def search_users(self, pattern: str, count: int = 10) -> Iterator[User]:
        """
        Search players.

        :param pattern: text to search in names
        :param count: maximum number of results
        :rtype: iter[:class:`User`]
        """
        raise NotImplementedError()

    def search_levels(self, pattern: str = '', count: int = 10, **filters) -> Iterator[Level]:
        """
        Search levels.

        :param pattern: text to search, or a level id
        :param count: maximum number of results
        :param filters: difficulty, demon, length, order, featured, epic,
                        original, two_player and coins
        :rtype: iter[:class:`Level`]
        """
        raise NotImplementedError()

    def get_level(self, level_id: int) -> Level | None:
        """
        Download a level, with its data and password.

        :rtype: :class:`Level` or None
        """
        raise NotImplementedError()

    def download_levels(self, level_ids: Iterable[int]) -> Iterator[Level | None]:
        """
        Download several levels at once.

        Results are in the order of ``level_ids``.
        """
        raise NotImplementedError()

    def update_level_description(self, level_id: int, description: str) -> bool:
        raise NotImplementedError()

    def iter_account_comments(self, account_id: int, count: int = 10) -> Iterator[Comment]:
        raise NotImplementedError()

    def iter_level_comments(self, level_id: int, count: int = 10, by_likes: bool = False) -> Iterator[Comment]:
        raise NotImplementedError()

    def iter_comment_history(self, user_id: int, count: int = 10, by_likes: bool = False) -> Iterator[Comment]:
        raise NotImplementedError()

    def post_account_comment(self, text: str) -> Comment | None:
        """
        Post a comment on the profile of the logged account.

        :returns: the posted comment, None on failure
        """
        raise NotImplementedError()

    def post_level_comment(self, level_id: int, text: str, percent: int = 0) -> Comment | None:
        """
        Post a comment on a level.

        :param percent: progress to show with the comment, 0 for none
        :returns: the posted comment, None on failure
        """
        raise NotImplementedError()

    def delete_account_comment(self, comment_id: int) -> bool:
        raise NotImplementedError()

    def delete_level_comment(self, comment_id: int, level_id: int) -> bool:
        raise NotImplementedError()

    def like(self, item_id: int, like_type: int = LikeType.LEVEL, special: int = 0, like: bool = True) -> bool:
        """
        Like or dislike a level or a comment.

        :param like_type: a :class:`LikeType`
        :param special: level id for level comments, account id for profile
                        comments, 0 for levels
        """
        raise NotImplementedError()

    def send_friend_request(self, account_id: int, message: str = '') -> bool:
        raise NotImplementedError()

    def iter_friend_requests(self, count: int = 10, outgoing: bool = False) -> Iterator[FriendRequest]:
        raise NotImplementedError()

    def read_friend_request(self, request: FriendRequest) -> bool:
        raise NotImplementedError()

    def accept_friend_request(self, request: FriendRequest) -> bool:
        raise NotImplementedError()

    def reject_friend_request(self, request: FriendRequest) -> bool:
        raise NotImplementedError()

    def cancel_friend_request(self, request: FriendRequest) -> bool:
        raise NotImplementedError()

    def unfriend(self, account_id: int) -> bool:
        raise NotImplementedError()

    def block(self, account_id: int) -> bool:
        raise NotImplementedError()

    def unblock(self, account_id: int) -> bool:
        raise NotImplementedError()

    def iter_friends(self) -> Iterator[User]:
        raise NotImplementedError()

    def iter_blocked(self) -> Iterator[User]:
        raise NotImplementedError()

    def get_leaderboard(self, kind: str = LeaderboardType.TOP, count: int = 100) -> list[User]:
        """
        Get a leaderboard.

        :param kind: a :class:`LeaderboardType`
        :rtype: list[:class:`User`]
        """
        raise NotImplementedError()

    def send_message(self, account_id: int, subject: str, body: str) -> bool:
        raise NotImplementedError()

    def iter_messages(self, count: int = 10, outgoing: bool = False) -> Iterator[Message]:
        raise NotImplementedError()

    def get_message(self, message_id: int, outgoing: bool = False) -> Message | None:
        """
        Get a message with its body.

        :rtype: :class:`Message` or None
        """
        raise NotImplementedError()

    def delete_message(self, message_id: int, outgoing: bool = False) -> bool:
        raise NotImplementedError()
