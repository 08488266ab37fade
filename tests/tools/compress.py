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

import base64
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool

import pytest

from gdbrowser.exceptions import DecompressionError
from gdbrowser.tools.compress import (
    CompressionType, compress, decompress, detect_compression, inflate,
)
from gdbrowser.tools.crypto import encode_base64


LEVEL_STRING = 'kS38,1_40_2_125_3_255_6_1000|,kA2,0;1,1,2,15,3,15;'


@pytest.mark.parametrize('kind', list(CompressionType))
def test_detect_compression(kind):
    assert detect_compression(compress(LEVEL_STRING, kind)) == kind


def test_detect_short_buffer():
    assert detect_compression(b'') == CompressionType.DEFLATE
    assert detect_compression(b'x') == CompressionType.DEFLATE


@pytest.mark.parametrize('kind', list(CompressionType))
def test_decompress_server_base64(kind):
    assert decompress(encode_base64(compress(LEVEL_STRING, kind))) == LEVEL_STRING


def test_decompress_standard_base64():
    data = base64.b64encode(compress(LEVEL_STRING, CompressionType.GZIP)).decode('ascii')
    assert decompress(data, urlsafe=False) == LEVEL_STRING


def test_decompress_bytes():
    assert decompress(compress(LEVEL_STRING)) == LEVEL_STRING


def test_decompress_keeps_bytes():
    raw = bytes(range(256))
    assert decompress(compress(raw)) == raw.decode('latin-1')


def test_decompress_in_worker():
    data = encode_base64(compress(LEVEL_STRING, CompressionType.GZIP))
    assert decompress(data, worker=True, executor_class=ThreadPoolExecutor) == LEVEL_STRING


class BrokenExecutor(ThreadPoolExecutor):
    def __enter__(self):
        raise BrokenProcessPool('no worker can be started')


def test_decompress_worker_unavailable(caplog):
    data = encode_base64(compress(LEVEL_STRING, CompressionType.ZLIB))

    assert decompress(data, worker=True, executor_class=BrokenExecutor) == LEVEL_STRING
    assert 'inflating in process' in caplog.text


def test_worker_keeps_stream_errors():
    buf = compress(LEVEL_STRING * 10, CompressionType.ZLIB)
    with pytest.raises(DecompressionError, match='Truncated'):
        decompress(buf[:len(buf) // 2], worker=True, executor_class=ThreadPoolExecutor)


def test_invalid_base64():
    with pytest.raises(DecompressionError):
        decompress('A')


def test_truncated_stream():
    buf = compress(LEVEL_STRING * 10, CompressionType.ZLIB)
    with pytest.raises(DecompressionError, match='Truncated'):
        inflate(buf[:len(buf) // 2], CompressionType.ZLIB)


def test_corrupt_stream():
    buf = bytearray(compress(LEVEL_STRING, CompressionType.GZIP))
    buf[12:20] = b'\xff' * 8
    with pytest.raises(DecompressionError):
        decompress(bytes(buf))
