"""
Stream adapters feeding the Merkle tree builder.
"""
from .reverse_reader import (
    DEFAULT_BUFFER_SIZE,
    ReverseSeekReader,
    largest_power_of_two,
    reverse_in_place,
    read_forward,
)

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "ReverseSeekReader",
    "largest_power_of_two",
    "reverse_in_place",
    "read_forward",
]
