"""
Test fixtures package for blocktree tests.

Usage:
    from fixtures.streams import scenario_bytes, blake2b_hex

    def test_something():
        tree = merklefy(io.BytesIO(scenario_bytes()), default_hasher(), 10)
        assert tree.lookup(blake2b_hex(b"a" * 10))
"""

from .streams import (
    repeat_bytes,
    scenario_bytes,
    scenario_stream,
    patterned_bytes,
    blake2b_hex,
    blake2b_join_hex,
    ShortReadStream,
    FailingStream,
    RelativeSeekFailingStream,
    SeekableShortReadStream,
    SeekableFailingStream,
)

__all__ = [
    "repeat_bytes",
    "scenario_bytes",
    "scenario_stream",
    "patterned_bytes",
    "blake2b_hex",
    "blake2b_join_hex",
    "ShortReadStream",
    "FailingStream",
    "RelativeSeekFailingStream",
    "SeekableShortReadStream",
    "SeekableFailingStream",
]
