"""
Reverse seek reader.

Presents a forward ``read`` interface over a seekable binary source while
walking the source from its end toward offset 0.

Each call:
1. sizes the chunk as min(bytes left before the cursor, buffer capacity)
2. rounds it down to a power of two (2 ** floor(log2(size)))
3. seeks back by that many bytes, reads them forward (retrying short
   reads), reverses them in place and hands them out
4. seeks back over the bytes just read so the cursor sits before them

Draining the reader therefore yields the source's bytes last-to-first;
``read_forward`` undoes that to recover the original order.

Chunk sizes are always powers of two. Check the target media before
relaxing that.
"""
from __future__ import annotations

import io
import logging
import threading
from typing import BinaryIO, MutableSequence

from blocktree.schemas.errors import NilSourceError


logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 4096


def largest_power_of_two(n: int) -> int:
    """
    Largest power of two not exceeding ``n``.

    Example:
        >>> largest_power_of_two(10)
        8
        >>> largest_power_of_two(4096)
        4096

    Raises:
        ValueError: If n is not positive
    """
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    return 1 << (n.bit_length() - 1)


def reverse_in_place(buf: MutableSequence[int]) -> None:
    """Swap byte ``i`` with byte ``len - 1 - i`` for the whole buffer."""
    last = len(buf) - 1
    for i in range(len(buf) // 2):
        buf[i], buf[last - i] = buf[last - i], buf[i]


class ReverseSeekReader(io.RawIOBase):
    """
    Readable raw stream that consumes ``source`` from its end.

    One reader per instance. Reads are serialised with an internal lock.

    Example:
        >>> r = ReverseSeekReader(BytesIO(b"abcdefgh"))
        >>> r.read(4), r.read(4), r.read(4)
        (b'hgfe', b'dcba', b'')
    """

    def __init__(self, source: BinaryIO) -> None:
        if source is None:
            raise NilSourceError()
        super().__init__()
        self._source = source
        self._lock = threading.Lock()
        self._position = source.seek(0, io.SEEK_END)
        self._at_start = False
        logger.debug("reverse reader positioned at end offset %d", self._position)

    @property
    def position(self) -> int:
        """Absolute offset of the cursor in the source, decreasing as reads proceed."""
        return self._position

    @property
    def at_start(self) -> bool:
        """True once the reader has consumed the source back to offset 0."""
        return self._at_start

    def readable(self) -> bool:
        return True

    def _read_block(self, block_size: int) -> bytearray:
        """Read ``block_size`` bytes forward, retrying short reads until end of stream."""
        chunk = bytearray()
        while len(chunk) < block_size:
            data = self._source.read(block_size - len(chunk))
            if not data:
                break
            chunk += data
        return chunk

    def readinto(self, buffer) -> int:
        """
        Fill ``buffer`` with the next chunk before the cursor, reversed.

        Returns 0 once offset 0 has been reached. If the source raises,
        the source cursor is restored to ``position`` before the error
        propagates, so the call can be retried.
        """
        with self._lock:
            if self._at_start:
                return 0

            view = memoryview(buffer).cast("B")
            capacity = len(view)
            if capacity == 0:
                return 0
            if self._position <= 0:
                self._at_start = True
                return 0

            size = min(self._position, capacity)
            block_size = largest_power_of_two(size)

            target = self._source.seek(-block_size, io.SEEK_CUR)
            try:
                chunk = self._read_block(block_size)
            except Exception:
                # Leave the source where this call found it.
                self._source.seek(self._position, io.SEEK_SET)
                raise
            reverse_in_place(chunk)
            n = len(chunk)
            view[:n] = chunk

            self._position = self._source.seek(-n, io.SEEK_CUR)
            if target <= 0:
                self._at_start = True
            return n


def read_forward(source: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    """
    Drain ``source`` through a ReverseSeekReader and return its bytes in
    original forward order.
    """
    reader = ReverseSeekReader(source)
    chunks: list[bytes] = []
    while True:
        chunk = reader.read(buffer_size)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)[::-1]


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "ReverseSeekReader",
    "largest_power_of_two",
    "reverse_in_place",
    "read_forward",
]
