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

import binascii

import pytest

from gdbrowser.tools.crypto import (
    XorKey, cipher, comment_checksum, decode_base64, decode_base64_bytes,
    decode_text, decrypt, encode_base64, encode_text, encrypt, generate_udid,
    like_checksum, make_checksum, random_string,
)


@pytest.mark.parametrize('text, encoded', [
    ('Hello', 'SGVsbG8='),
    ('Hello world', 'SGVsbG8gd29ybGQ='),
    ('Bloodbath', 'Qmxvb2RiYXRo'),
])
def test_encode_text(text, encoded):
    assert encode_text(text) == encoded
    assert decode_text(encoded) == text


def test_server_alphabet():
    assert encode_base64(b'\xfb\xff') == '-_8='
    assert decode_base64('-_8=') == '\xfb\xff'
    # the standard alphabet is accepted as well
    assert decode_base64('+/8=') == '\xfb\xff'


@pytest.mark.parametrize('length', [0, 1, 2, 3, 4, 5, 16, 255, 256])
def test_base64_keeps_bytes(length):
    for start in range(0, 256, 17):
        data = bytes((start + i) % 256 for i in range(length))
        encoded = encode_base64(data)
        assert '+' not in encoded and '/' not in encoded
        assert decode_base64_bytes(encoded) == data
        assert decode_base64(encoded) == data.decode('latin-1')


def test_missing_padding():
    assert decode_text('SGVsbG8') == 'Hello'
    assert decode_text(' SGVsbG8=\n') == 'Hello'


def test_unicode_text():
    encoded = encode_text('Très bien ✓')
    assert decode_text(encoded) == 'Très bien ✓'


def test_invalid_utf8_is_replaced():
    assert decode_text(encode_base64(b'ok\xff')) == 'ok�'


def test_cipher():
    assert cipher('', '37526') == ''
    assert cipher(cipher('hunter2', '37526'), '37526') == 'hunter2'
    # the key repeats
    assert cipher('AAAAAA', 'ab') == cipher('AA', 'ab') * 3

    with pytest.raises(ValueError):
        cipher('data', '')


def test_account_password():
    assert encrypt('hunter2', XorKey.ACCOUNT_PASSWORD) == 'W0JbRlNBBQ=='
    assert decrypt('W0JbRlNBBQ==', XorKey.ACCOUNT_PASSWORD) == 'hunter2'


@pytest.mark.parametrize('key', list(XorKey) + ['k'])
@pytest.mark.parametrize('value', ['', '0', 'hunter2', 'Très bien', '\x00\xff' * 8])
def test_encrypt_decrypt(value, key):
    assert decrypt(encrypt(value, key), key) == value


@pytest.mark.parametrize('data, decoded', [
    ('0', ''),
    ('A', ''),
    ('!!', ''),
    ('Ag==garbage', '0'),
    ('A g=\n=', '0'),
])
def test_decrypt_malformed(data, decoded):
    assert decrypt(data, XorKey.LEVEL_PASSWORD) == decoded


def test_decrypt_dangling_character():
    # the last character alone cannot make a byte
    assert decrypt('abcde', XorKey.ACCOUNT_PASSWORD) == decrypt('abcd', XorKey.ACCOUNT_PASSWORD)
    assert len(decrypt('abcde', XorKey.ACCOUNT_PASSWORD)) == 3


def test_text_decoding_is_strict():
    with pytest.raises(binascii.Error):
        decode_text('abcde')
    assert decode_base64_bytes(b'abcde', lenient=True) == b'i\xb7\x1d'


@pytest.mark.parametrize('encrypted, password', [
    ('AwYDBgQGBA==', '1000042'),
    ('Aw==', '1'),
    ('Ag==', '0'),
])
def test_level_password(encrypted, password):
    assert decrypt(encrypted, XorKey.LEVEL_PASSWORD) == password
    assert encrypt(password, XorKey.LEVEL_PASSWORD) == encrypted


# Field orders are only known from captured traffic: pinned by fixture,
# not independently derivable.
def test_comment_checksum():
    assert comment_checksum('Player', 'SGVsbG8=', 128) == \
        'Ag1QXAgCCAcOCAdaAQhSAgxWC1UACgIMAFYLAFoCUwAED1MHDVIPAQ=='
    assert comment_checksum('Player', 'SGVsbG8=', 128, 5) == \
        'CgtWXAUFAQYMAFNfUFlXCgAGDglUCw0KBVEMVQFQBw9RCFIBCwcKAA=='


def test_like_checksum():
    checksum = like_checksum(0, 128, 1, 1, 'abcdefghij', 16, 'udid0000000000', 'udid0000000000')
    assert checksum == 'AQ5XWVRRCABbBQMJBQoBBw4ED1IMAAVaUgENAQAGUAECAARUXAUIAQ=='


def test_checksum_is_a_sha1():
    checksum = make_checksum(('a', 1), 'salt', 'k')
    # 40 hexadecimal characters, xored and encoded
    assert len(decrypt(checksum, 'k')) == 40
    assert make_checksum(('a', 1), 'salt', 'k') == checksum
    assert make_checksum((1, 'a'), 'salt', 'k') != checksum


@pytest.mark.parametrize('salt, key', [
    ('salt2', 'k'),
    ('', 'k'),
    ('salt', 'K'),
    ('salt', 'kk2'),
])
def test_checksum_depends_on_salt_and_key(salt, key):
    checksum = make_checksum(('a', 1), 'salt', 'k')
    assert make_checksum(('a', 1), salt, key) != checksum


def test_random_strings():
    value = random_string()
    assert len(value) == 10
    assert value.isalnum() and value == value.lower()
    assert len(random_string(4)) == 4
    assert len(generate_udid()) == 16
    assert generate_udid() != generate_udid()
