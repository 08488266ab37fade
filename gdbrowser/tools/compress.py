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
Decompression of level and asset payloads.

The server does not say which framing it used, so it is guessed from the
first bytes, in this order: gzip magic, then the zlib header check, then
raw deflate for anything failing that check. The zlib check is the one of
RFC 1950 and may accept a raw stream by chance.
"""

import binascii
import pickle
import typing as t
import zlib
from concurrent.futures import Executor, ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from enum import Enum

from gdbrowser.exceptions import DecompressionError
from gdbrowser.tools.crypto import decode_base64_bytes
from gdbrowser.tools.log import getLogger

__all__ = [
    'GZIP_MAGIC', 'CompressionType', 'compress', 'decompress',
    'detect_compression', 'inflate',
]

GZIP_MAGIC = b'\x1f\x8b\x08'


class CompressionType(str, Enum):
    GZIP = 'gzip'
    ZLIB = 'zlib'
    DEFLATE = 'deflate'


_WBITS = {
    CompressionType.GZIP: zlib.MAX_WBITS | 16,
    CompressionType.ZLIB: zlib.MAX_WBITS,
    CompressionType.DEFLATE: -zlib.MAX_WBITS,
}

logger = getLogger('tools.compress')


def detect_compression(buf: bytes) -> CompressionType:
    """Guess the framing of a compressed buffer from its first bytes."""
    if buf[:3] == GZIP_MAGIC:
        return CompressionType.GZIP

    # Too short to carry a zlib header.
    if len(buf) < 2:
        return CompressionType.DEFLATE

    first, second = buf[0], buf[1]
    if (first & 0x0F) != 8 or (first >> 4) > 7 or ((first << 8) | second) % 31:
        return CompressionType.DEFLATE
    return CompressionType.ZLIB


def inflate(buf: bytes, kind: CompressionType) -> bytes:
    """Decompress a whole buffer of the given framing.

    :raises: :class:`DecompressionError` if the stream is corrupt or stops
             before its end marker
    """
    decompressor = zlib.decompressobj(_WBITS[kind])
    try:
        data = decompressor.decompress(buf) + decompressor.flush()
    except zlib.error as exc:
        raise DecompressionError('Corrupt %s stream: %s' % (kind.value, exc)) from exc

    if not decompressor.eof:
        raise DecompressionError('Truncated %s stream' % kind.value)
    return data


def _inflate_in_worker(
    buf: bytes,
    kind: CompressionType,
    executor_class: t.Callable[..., Executor],
) -> bytes:
    # One short-lived worker per payload. Only failing to run the job falls
    # back to inflating here; errors from the stream itself are re-raised by
    # result() as they are.
    try:
        with executor_class(max_workers=1) as executor:
            return executor.submit(inflate, buf, kind).result()
    except (BrokenProcessPool, pickle.PicklingError, OSError, RuntimeError) as exc:
        logger.warning('Inflate worker failed (%r), inflating in process', exc)

    return inflate(buf, kind)


def decompress(
    data: t.Union[str, bytes],
    *,
    urlsafe: bool = True,
    worker: bool = False,
    executor_class: t.Callable[..., Executor] = ProcessPoolExecutor,
) -> str:
    """Decode and decompress a payload into a byte-preserving string.

    Each decompressed byte becomes one character, the result is not decoded
    as UTF-8 since it is delimited text handled byte-wise.

    :param data: Base64 text as received, or raw bytes
    :param urlsafe: whether text input uses the server Base64 alphabet or
                    the standard one
    :param worker: inflate in a separate process
    :param executor_class: executor used when ``worker`` is set
    :raises: :class:`DecompressionError`
    """
    if isinstance(data, str):
        try:
            buf = decode_base64_bytes(data, urlsafe=urlsafe)
        except (binascii.Error, ValueError) as exc:
            raise DecompressionError('Invalid Base64 layer: %s' % exc) from exc
    else:
        buf = bytes(data)

    kind = detect_compression(buf)
    logger.debug('Inflating %d bytes of %s data', len(buf), kind.value)

    if worker:
        raw = _inflate_in_worker(buf, kind, executor_class)
    else:
        raw = inflate(buf, kind)
    return raw.decode('latin-1')


def compress(
    data: t.Union[str, bytes],
    kind: CompressionType = CompressionType.ZLIB,
    level: int = zlib.Z_DEFAULT_COMPRESSION,
) -> bytes:
    """Compress a byte string with the given framing.

    Strings are taken as Latin-1, the same way :func:`decompress` returns
    them.
    """
    if isinstance(data, str):
        data = data.encode('latin-1')

    compressor = zlib.compressobj(level, zlib.DEFLATED, _WBITS[kind])
    return compressor.compress(data) + compressor.flush()
