"""
Markov chain text generator over whitespace tokens.

Learns second-order transitions in both directions, so generation can grow a
sentence outward from any seed word:
- ingest lines of text (each line is one sentence)
- generate from sentence start, from one seed word, or from a seed phrase
- best-of-N selection of the candidate closest to a target length
"""
from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from itertools import takewhile
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from .dictionary import SENTINEL_ID, TokenDictionary
from .errors import TokenIdOverflowError
from .token_paths import Context, Direction, EntryIndex, TokenPaths
from .tokset import MAX_3BYTE, BufferTokSet, TokSet

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATES = 49
DEFAULT_TARGET = 20

LENGTH_UNITS: Dict[str, Callable[[str], int]] = {
    "chars": len,
    "words": lambda text: len(text.split()),
}

# Sentinel padding around each ingested line
LEAD_PADDING = 3
TAIL_PADDING = 2


@dataclass
class ChainSizes:
    """Index sizes, for diagnostics."""
    dictionary_size: int
    context_count: int
    single_token_count: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class Chain:
    """
    Bidirectional second-order Markov chain.

    Usage:
        chain = Chain()
        chain.ingest_file("corpus.txt")
        text = chain.generate(seed="cat", target_length=40)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        tokset_factory: Callable[[], TokSet] = BufferTokSet,
        candidates: int = DEFAULT_CANDIDATES,
        length_unit: str = "chars",
    ):
        """
        Initialize an empty chain.

        Args:
            rng: Random source used for every draw (a fresh Random if omitted)
            tokset_factory: Token set backend for all indexes
            candidates: Attempts per best-of-N generation
            length_unit: "chars" or "words", unit of target_length
        """
        if length_unit not in LENGTH_UNITS:
            raise ValueError(
                f"unknown length unit {length_unit!r}, expected one of {sorted(LENGTH_UNITS)}"
            )
        if candidates < 1:
            raise ValueError("candidates must be at least 1")

        self.rng = rng or random.Random()
        self.dictionary = TokenDictionary()
        self.paths = TokenPaths(tokset_factory)
        self.entries = EntryIndex(tokset_factory)
        self.candidates = candidates
        self.length_unit = length_unit
        self._measure = LENGTH_UNITS[length_unit]

    # --- ingestion ---
    def ingest_line(self, text: str) -> bool:
        """
        Learn transitions from one line of text.

        Returns:
            True if the line had tokens, False if it was blank (a no-op)
        """
        words = text.split()
        if not words:
            return False

        # nothing is interned or recorded if the line would overflow the id space
        new_words = {w for w in words if w not in self.dictionary}
        last_id = len(self.dictionary) + len(new_words) - 1
        if new_words and last_id > MAX_3BYTE:
            raise TokenIdOverflowError(last_id)

        ids = [SENTINEL_ID] * LEAD_PADDING
        ids.extend(self.dictionary.intern(w) for w in words)
        ids.extend([SENTINEL_ID] * TAIL_PADDING)

        for i in range(len(ids) - 3):
            a, b, c, d = ids[i:i + 4]
            self.paths.record((b, c), next_id=d, previous_id=a)
            self.entries.record(b, c)
        return True

    def ingest_source(self, lines: Iterable[str]) -> int:
        """
        Ingest every line of a source in order.

        Errors raised while reading the source propagate; lines consumed
        before the failure stay learned.

        Returns:
            Number of non-blank lines ingested
        """
        ingested = 0
        for line in lines:
            if self.ingest_line(line):
                ingested += 1
        return ingested

    def ingest_file(self, path: Union[str, Path], encoding: str = "utf-8") -> int:
        """Ingest a text file, one sentence per line."""
        path = Path(path)
        logger.info(f"[Chain] Indexing {path}...")
        with path.open("r", encoding=encoding) as f:
            ingested = self.ingest_source(f)
        logger.info(f"[Chain] Indexed {ingested} lines: {self.describe_sizes()}")
        return ingested

    # --- generation ---
    def generate_one(self, seed: Optional[str] = None) -> Optional[str]:
        """
        Generate a single candidate.

        Args:
            seed: Optional seed phrase; every word must have been ingested

        Returns:
            Generated text, or None if the seed is unknown or a dead end
        """
        words = seed.split() if seed else []

        seed_ids: List[int] = []
        for word in words:
            token_id = self.dictionary.lookup(word)
            if token_id is None:
                return None
            seed_ids.append(token_id)

        if not seed_ids:
            start: Context = (SENTINEL_ID, SENTINEL_ID)
            if start not in self.paths:
                return None
            forward = self._walk(Direction.FORWARD, start)
            return self._assemble([], [], forward)

        if len(seed_ids) == 1:
            successors = self.entries.lookup(seed_ids[0])
            if successors is None or successors.is_empty():
                return None
            seed_ids.append(successors.sample(self.rng))

        reverse_ctx: Context = (seed_ids[0], seed_ids[1])
        forward_ctx: Context = (seed_ids[-2], seed_ids[-1])

        reverse = self._walk(Direction.REVERSE, reverse_ctx)
        forward = self._walk(Direction.FORWARD, forward_ctx)
        reverse.reverse()
        return self._assemble(reverse, seed_ids, forward)

    def generate(
        self,
        seed: Optional[str] = None,
        target_length: int = DEFAULT_TARGET,
    ) -> Optional[str]:
        """
        Best-of-N generation.

        Every attempt re-resolves the seed independently; the surviving
        candidate closest to target_length (in the chain's length unit) wins,
        earliest first on ties.

        Returns:
            Best candidate, or None if every attempt failed
        """
        best: Optional[str] = None
        best_distance = 0
        for _ in range(self.candidates):
            candidate = self.generate_one(seed)
            if candidate is None:
                continue
            distance = abs(self._measure(candidate) - target_length)
            if best is None or distance < best_distance:
                best, best_distance = candidate, distance
        return best

    def describe_sizes(self) -> ChainSizes:
        return ChainSizes(
            dictionary_size=len(self.dictionary),
            context_count=len(self.paths),
            single_token_count=len(self.entries),
        )

    # --- helpers ---
    def _walk(self, direction: Direction, start: Context) -> List[int]:
        steps = self.paths.walk(direction, start, self.rng)
        return list(takewhile(lambda t: t != SENTINEL_ID, steps))

    def _assemble(self, before: List[int], middle: List[int], after: List[int]) -> str:
        words = []
        for token_id in (*before, *middle, *after):
            if token_id == SENTINEL_ID:
                continue
            word = self.dictionary.resolve(token_id)
            if word:
                words.append(word)
        return " ".join(words)
