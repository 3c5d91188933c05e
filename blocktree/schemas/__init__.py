"""
Schemas: error taxonomy and tree snapshots.

Only the error taxonomy is re-exported here; import snapshot models from
``blocktree.schemas.snapshot`` directly.
"""

from .errors import (
    ErrorCodes,
    BlockTreeError,
    BlockTreeException,
    NilSourceError,
    InvalidBlockSizeError,
    NotIndexedError,
    EmptyChecksumError,
    ParentAlreadySetError,
    UnsupportedAlgorithmError,
    MerkleVerificationException,
)

__all__ = [
    "ErrorCodes",
    "BlockTreeError",
    "BlockTreeException",
    "NilSourceError",
    "InvalidBlockSizeError",
    "NotIndexedError",
    "EmptyChecksumError",
    "ParentAlreadySetError",
    "UnsupportedAlgorithmError",
    "MerkleVerificationException",
]
