"""
Frequency multisets of token ids ("token sets").

A token set records one occurrence per insertion; sampling picks an element
with probability proportional to how often it was inserted.

Two backends share the TokSet interface:
- BufferTokSet: occurrences packed into one bytearray, split into 1/2/3-byte
  segments by id magnitude. Weighted sampling is a single uniform index draw.
- HashTokSet: explicit counts in a Counter (reference / fallback backend).
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import Counter
from typing import Callable, Dict

from .errors import EmptyTokSetError, TokenIdOverflowError

MAX_1BYTE = 0xFF
MAX_2BYTE = 0xFFFF
MAX_3BYTE = 0xFF_FFFF

# Entry limit for the 1-byte and 2-byte segments (counters are u16)
SEGMENT_CAPACITY = 0xFFFF


def check_token_id(token_id: int) -> None:
    """Raise TokenIdOverflowError if token_id cannot be packed in 3 bytes."""
    if token_id < 0 or token_id > MAX_3BYTE:
        raise TokenIdOverflowError(token_id)


class TokSet(ABC):
    """Multiset of token ids supporting frequency-weighted draws."""

    @abstractmethod
    def insert(self, token_id: int) -> None:
        """Add one occurrence of token_id."""

    @abstractmethod
    def sample(self, rng: random.Random) -> int:
        """Draw a token id weighted by occurrence count."""

    @abstractmethod
    def count(self) -> int:
        """Total number of occurrences."""

    def is_empty(self) -> bool:
        return self.count() == 0

    def __len__(self) -> int:
        return self.count()


class BufferTokSet(TokSet):
    """
    Packed token set.

    Layout of ``buf`` (little-endian):

        [ 1-byte ids ... | 2-byte ids ... | 3-byte ids ... ]
          c1 entries       c2 entries       remainder // 3 entries

    New ids go to the end of the narrowest segment that fits them and still
    has room; once a segment holds SEGMENT_CAPACITY entries, further ids of
    that size spill into the next wider segment.
    """

    __slots__ = ("buf", "c1", "c2")

    def __init__(self):
        self.buf = bytearray()
        self.c1 = 0
        self.c2 = 0

    def insert(self, token_id: int) -> None:
        check_token_id(token_id)

        if token_id <= MAX_1BYTE and self.c1 < SEGMENT_CAPACITY:
            self.buf.insert(self.c1, token_id)
            self.c1 += 1
        elif token_id <= MAX_2BYTE and self.c2 < SEGMENT_CAPACITY:
            pos = self.c1 + self.c2 * 2
            self.buf[pos:pos] = token_id.to_bytes(2, "little")
            self.c2 += 1
        else:
            self.buf += token_id.to_bytes(3, "little")

    def count(self) -> int:
        leftover = len(self.buf) - self.c1 - self.c2 * 2
        return self.c1 + self.c2 + leftover // 3

    def get(self, index: int) -> int:
        """
        Return the token id stored at a logical index.

        Args:
            index: Position in [0, count())

        Returns:
            Token id at that position
        """
        if index < 0 or index >= self.count():
            raise IndexError(f"token set index {index} out of range")

        if index < self.c1:
            return self.buf[index]

        if index < self.c1 + self.c2:
            start = self.c1 + (index - self.c1) * 2
            return int.from_bytes(self.buf[start:start + 2], "little")

        start = self.c1 + self.c2 * 2 + (index - self.c1 - self.c2) * 3
        return int.from_bytes(self.buf[start:start + 3], "little")

    def sample(self, rng: random.Random) -> int:
        n = self.count()
        if n == 0:
            raise EmptyTokSetError("cannot sample from an empty token set")
        return self.get(rng.randrange(n))

    def __repr__(self) -> str:
        return f"BufferTokSet(c1={self.c1}, c2={self.c2}, bytes={len(self.buf)})"


class HashTokSet(TokSet):
    """Token set backed by explicit occurrence counts."""

    __slots__ = ("counts",)

    def __init__(self):
        self.counts: Counter = Counter()

    def insert(self, token_id: int) -> None:
        check_token_id(token_id)
        self.counts[token_id] += 1

    def count(self) -> int:
        return sum(self.counts.values())

    def sample(self, rng: random.Random) -> int:
        if not self.counts:
            raise EmptyTokSetError("cannot sample from an empty token set")
        ids = list(self.counts.keys())
        weights = list(self.counts.values())
        return rng.choices(ids, weights=weights, k=1)[0]

    def __repr__(self) -> str:
        return f"HashTokSet(distinct={len(self.counts)}, total={self.count()})"


TOKSET_BACKENDS: Dict[str, Callable[[], TokSet]] = {
    "buffer": BufferTokSet,
    "hash": HashTokSet,
}


def get_tokset_factory(name: str) -> Callable[[], TokSet]:
    """Resolve a backend name ("buffer" or "hash") to a TokSet factory."""
    try:
        return TOKSET_BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"unknown token set backend {name!r}, expected one of {sorted(TOKSET_BACKENDS)}"
        ) from None
