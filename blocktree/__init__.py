"""
blocktree
=========

Merkle trees over fixed-size blocks of a byte stream, with checksum
lookup and a reverse seek reader for building trees from a source's end.

    from blocktree import merklefy, default_hasher

    with open("app.log", "rb") as f:
        tree = merklefy(f, default_hasher(), block_size=4096)
    tree.lookup(checksum)
"""

from .crypto import ChecksumHasher, HashlibHasher, checksum_of, default_hasher, new_hasher
from .merkle import (
    MerkleTree,
    Node,
    build_node_proof,
    merklefy,
    reverse_merklefy,
    verify_node_proof,
)
from .schemas.errors import (
    BlockTreeException,
    EmptyChecksumError,
    NilSourceError,
    NotIndexedError,
)
from .streams import ReverseSeekReader, read_forward

__version__ = "0.1.0"

__all__ = [
    "ChecksumHasher",
    "HashlibHasher",
    "checksum_of",
    "default_hasher",
    "new_hasher",
    "MerkleTree",
    "Node",
    "build_node_proof",
    "merklefy",
    "reverse_merklefy",
    "verify_node_proof",
    "BlockTreeException",
    "EmptyChecksumError",
    "NilSourceError",
    "NotIndexedError",
    "ReverseSeekReader",
    "read_forward",
]
