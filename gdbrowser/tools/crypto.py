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

"""
Obfuscation primitives used on the game database wire format.

The server Base64 flavour swaps ``+`` for ``-`` and ``/`` for ``_``. Every
function here works on byte strings carried as :class:`str` objects where
each character is one byte (Latin-1), which is what the server exchanges.
Text typed by players goes through :func:`encode_text` and
:func:`decode_text`, which add the UTF-8 layer on top.
"""

import base64
import random
import re
import string
import typing as t
from enum import Enum
from hashlib import sha1

__all__ = [
    'Salt', 'XorKey', 'cipher', 'comment_checksum', 'decode_base64',
    'decode_base64_bytes', 'decode_text', 'decrypt', 'encode_base64',
    'encode_text', 'encrypt', 'generate_udid', 'like_checksum',
    'make_checksum', 'random_string',
]

BytesLike = t.Union[str, bytes, bytearray]


class XorKey(str, Enum):
    """XOR keys, per kind of obfuscated value."""

    ACCOUNT_PASSWORD = '37526'
    LEVEL_PASSWORD = '26364'
    COMMENT = '29481'
    LIKE = '58281'
    MESSAGE = '14251'


class Salt(str, Enum):
    """Salts appended before hashing checksummed requests."""

    COMMENT = 'xPT6iUrtws0J'
    LIKE = 'ysg6pUrtjn0J'


_TO_SERVICE_ALPHABET = str.maketrans('+/', '-_')
_FROM_SERVICE_ALPHABET = str.maketrans('-_', '+/')
_NOT_BASE64_RE = re.compile(r'[^A-Za-z0-9+/]')

_BASE36_ALPHABET = string.digits + string.ascii_lowercase

# Not used for anything secret: rs and udid only need to look random.
_random = random.SystemRandom()


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        # Raises UnicodeEncodeError for characters above U+00FF, which do
        # not fit in one byte and would not survive a round-trip.
        return data.encode('latin-1')
    return bytes(data)


def encode_base64(data: BytesLike) -> str:
    """Encode a byte string with the server Base64 alphabet.

    >>> encode_base64(b'\\xfb\\xff')
    '-_8='
    """
    encoded = base64.b64encode(_as_bytes(data)).decode('ascii')
    return encoded.translate(_TO_SERVICE_ALPHABET)


def decode_base64_bytes(
    data: BytesLike,
    *,
    urlsafe: bool = True,
    lenient: bool = False,
) -> bytes:
    """Decode server Base64 into raw bytes.

    With ``urlsafe``, the standard alphabet is accepted as well. Missing
    padding is restored, since it shows up in server responses.

    When ``lenient`` is set nothing is rejected: characters outside the
    alphabet are skipped, decoding stops at the first padding character and
    a dangling last character is dropped.

    >>> decode_base64_bytes('abcde', lenient=True)
    b'i\\xb7\\x1d'

    :raises: :class:`binascii.Error` on malformed input, unless ``lenient``
    """
    if not isinstance(data, str):
        data = bytes(data).decode('ascii', 'replace' if lenient else 'strict')
    data = data.strip()
    if urlsafe:
        data = data.translate(_FROM_SERVICE_ALPHABET)
    if lenient:
        data = _NOT_BASE64_RE.sub('', data.split('=', 1)[0])
        if len(data) % 4 == 1:
            data = data[:-1]
    data += '=' * (-len(data) % 4)
    return base64.b64decode(data)


def decode_base64(data: BytesLike) -> str:
    """Decode server Base64 into a byte-preserving string.

    >>> decode_base64('-_8=') == '\\xfb\\xff'
    True
    """
    return decode_base64_bytes(data).decode('latin-1')


def encode_text(text: str) -> str:
    """Encode player text (comments, messages, descriptions)."""
    return encode_base64(text.encode('utf-8'))


def decode_text(data: BytesLike) -> str:
    """Decode player text, replacing bytes which are not valid UTF-8."""
    return decode_base64_bytes(data).decode('utf-8', 'replace')


def cipher(data: str, key: str) -> str:
    """XOR each character code of ``data`` with the repeated ``key``.

    Applying it twice with the same key gives the input back.
    """
    if not key:
        raise ValueError('XOR key must not be empty')

    key_codes = [ord(char) for char in key]
    size = len(key_codes)
    return ''.join(
        chr(ord(char) ^ key_codes[index % size])
        for index, char in enumerate(data)
    )


def encrypt(data: str, key: str) -> str:
    return encode_base64(cipher(data, key))


def decrypt(data: BytesLike, key: str) -> str:
    """Reverse :func:`encrypt`.

    Ill-formed input, Base64 layer included, gives meaningless output
    rather than an error.

    >>> decrypt('0', XorKey.LEVEL_PASSWORD)
    ''
    """
    return cipher(decode_base64_bytes(data, lenient=True).decode('latin-1'), key)


def make_checksum(fields: t.Iterable[t.Any], salt: str, key: str) -> str:
    """Compute the ``chk`` value of a checksummed request.

    The fields are concatenated in the given order, which is fixed by the
    server for each endpoint.
    """
    payload = ''.join(str(field) for field in fields) + salt
    digest = sha1(payload.encode('utf-8')).hexdigest()
    return encrypt(digest, key)


def comment_checksum(
    username: str,
    comment: str,
    level_id: int,
    percent: int = 0,
) -> str:
    """Checksum of ``uploadGJComment21``.

    :param comment: the comment, already Base64 encoded
    """
    return make_checksum(
        (username, comment, level_id, percent, 0),
        Salt.COMMENT,
        XorKey.COMMENT,
    )


def like_checksum(
    special: int,
    item_id: int,
    like: int,
    like_type: int,
    rs: str,
    account_id: int,
    udid: str,
    uuid: str,
) -> str:
    """Checksum of ``likeGJItem211``."""
    return make_checksum(
        (special, item_id, like, like_type, rs, account_id, udid, uuid),
        Salt.LIKE,
        XorKey.LIKE,
    )


def random_string(length: int = 10) -> str:
    """Random base-36 string, as sent in the ``rs`` field."""
    return ''.join(_random.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_udid() -> str:
    """Random device identifier sent on login and like requests."""
    return random_string(16)
