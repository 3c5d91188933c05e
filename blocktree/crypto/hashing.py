"""
Hashing Utilities

Checksum primitive contract and hashlib-backed implementation used to
compute Merkle leaf and internal-node checksums.

This module provides:
- ChecksumHasher: the reset / write / digest contract every primitive meets
- HashlibHasher: adapter over any ``hashlib`` constructor
- new_hasher / default_hasher: factories (BLAKE2b-256 by default)
- Hex rendering and the internal-node concatenation rule

Determinism Notes:
- Digests are always rendered as lowercase hexadecimal text
- Internal-node input is the concatenation of the two child checksums in
  their textual (hex) form, UTF-8 encoded
- Two primitives yielding the same hex text are indistinguishable to the
  tree index: use one primitive per tree
"""
from __future__ import annotations

import hashlib
import threading
import weakref
from typing import BinaryIO, Protocol, runtime_checkable

from blocktree.schemas.errors import UnsupportedAlgorithmError


DEFAULT_ALGORITHM = "blake2b"
DEFAULT_DIGEST_SIZE = 32

# Algorithms whose digest length is configurable.
_VARIABLE_DIGEST = {"blake2b", "blake2s"}

SUPPORTED_ALGORITHMS: tuple[str, ...] = (
    "blake2b",
    "blake2s",
    "sha256",
    "sha512",
    "sha3_256",
    "sha1",
    "md5",
)

_COPY_CHUNK = 64 * 1024


@runtime_checkable
class ChecksumHasher(Protocol):
    """
    Reusable hashing primitive.

    Implementations accumulate bytes through ``write`` and finalize with
    ``digest``; ``reset`` returns them to the empty state so the same
    handle can hash an unrelated input next.
    """

    def reset(self) -> None:
        ...

    def write(self, data: bytes) -> int:
        ...

    def digest(self) -> bytes:
        ...


class HashlibHasher:
    """
    ChecksumHasher backed by a ``hashlib`` constructor.

    Example:
        >>> h = HashlibHasher("sha256")
        >>> h.write(b"hello")
        5
        >>> to_hex(h.digest())[:8]
        '2cf24dba'
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        digest_size: int = DEFAULT_DIGEST_SIZE,
    ) -> None:
        algorithm = algorithm.lower()
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise UnsupportedAlgorithmError(algorithm, list(SUPPORTED_ALGORITHMS))
        self.algorithm = algorithm
        self.digest_size = digest_size if algorithm in _VARIABLE_DIGEST else None
        self._state = self._new_state()

    def _new_state(self):
        if self.digest_size is not None:
            return getattr(hashlib, self.algorithm)(digest_size=self.digest_size)
        return hashlib.new(self.algorithm)

    def reset(self) -> None:
        self._state = self._new_state()

    def write(self, data: bytes) -> int:
        self._state.update(data)
        return len(data)

    def digest(self) -> bytes:
        return self._state.digest()

    def __repr__(self) -> str:
        if self.digest_size is None:
            return f"HashlibHasher({self.algorithm!r})"
        return f"HashlibHasher({self.algorithm!r}, digest_size={self.digest_size})"


def new_hasher(
    algorithm: str = DEFAULT_ALGORITHM,
    digest_size: int = DEFAULT_DIGEST_SIZE,
) -> HashlibHasher:
    """
    Create a fresh hasher for the named algorithm.

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    return HashlibHasher(algorithm, digest_size)


def default_hasher() -> HashlibHasher:
    """BLAKE2b with a 256-bit digest."""
    return HashlibHasher(DEFAULT_ALGORITHM, DEFAULT_DIGEST_SIZE)


_hasher_locks: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
_hasher_locks_guard = threading.Lock()


def hasher_lock(hasher: ChecksumHasher) -> threading.Lock:
    """
    Lock owned by one hasher instance.

    A reset / write / digest sequence must run under it whenever the same
    instance may be used by several builds at once. Hashers must support
    weak references.
    """
    with _hasher_locks_guard:
        lock = _hasher_locks.get(hasher)
        if lock is None:
            lock = threading.Lock()
            _hasher_locks[hasher] = lock
        return lock


def to_hex(digest: bytes) -> str:
    """Render a digest as lowercase hexadecimal text."""
    return digest.hex()


def checksum_of(
    data: bytes | BinaryIO,
    hasher: ChecksumHasher | None = None,
) -> str:
    """
    Hex checksum of a bytes value or of everything a readable stream yields.

    The hasher is reset before use.

    Example:
        >>> checksum_of(b"a" * 10) == checksum_of(BytesIO(b"a" * 10))
        True
    """
    h = hasher if hasher is not None else default_hasher()
    h.reset()
    if isinstance(data, (bytes, bytearray, memoryview)):
        h.write(bytes(data))
    else:
        while True:
            chunk = data.read(_COPY_CHUNK)
            if not chunk:
                break
            h.write(chunk)
    return to_hex(h.digest())


def hash_concat_hex(left: str, right: str, hasher: ChecksumHasher) -> str:
    """
    Checksum of two checksums concatenated in their textual form.

    This is the internal-node rule: parent = hash(left_hex || right_hex).
    The hasher is reset first so no state leaks from a previous use.
    """
    hasher.reset()
    hasher.write(f"{left}{right}".encode("utf-8"))
    return to_hex(hasher.digest())


__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_DIGEST_SIZE",
    "SUPPORTED_ALGORITHMS",
    "ChecksumHasher",
    "HashlibHasher",
    "new_hasher",
    "default_hasher",
    "to_hex",
    "checksum_of",
    "hash_concat_hex",
    "hasher_lock",
]
