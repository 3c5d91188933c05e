"""
Checksum primitives.

Provides the ChecksumHasher contract, the hashlib-backed default and
hex helpers used by the Merkle tree.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGEST_SIZE,
    SUPPORTED_ALGORITHMS,
    ChecksumHasher,
    HashlibHasher,
    new_hasher,
    default_hasher,
    to_hex,
    checksum_of,
    hash_concat_hex,
    hasher_lock,
)

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
