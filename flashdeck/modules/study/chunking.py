"""Pagination of a generated word list into fixed-size blocks."""

from __future__ import annotations

import math
from typing import Iterator, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_BLOCK_SIZE = 25


def _check_size(size: int) -> int:
    if size <= 0:
        raise ValueError("block size must be positive")
    return size


def block_count(total: int, size: int = DEFAULT_BLOCK_SIZE) -> int:
    return math.ceil(max(0, total) / _check_size(size))


def get_block(items: Sequence[T], index: int, size: int = DEFAULT_BLOCK_SIZE) -> list[T]:
    """Return block ``index``: the slice ``[index*size, min((index+1)*size, len))``."""
    _check_size(size)
    if index < 0 or index >= block_count(len(items), size):
        raise IndexError(f"block {index} out of range for {len(items)} items")
    start = index * size
    return list(items[start : start + size])


def has_more_blocks(index: int, total: int, size: int = DEFAULT_BLOCK_SIZE) -> bool:
    return (index + 1) * _check_size(size) < total


def iter_blocks(items: Sequence[T], size: int = DEFAULT_BLOCK_SIZE) -> Iterator[list[T]]:
    for i in range(block_count(len(items), size)):
        yield get_block(items, i, size)
