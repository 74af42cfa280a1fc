"""
Transition indexes over token ids.

- TokenPaths: bigram context (a, b) -> forward/reverse token sets, with a
  lazy random walk in either direction.
- EntryIndex: single token -> token set of its immediate successors, used to
  bootstrap a walk from a one-word seed.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple

from .tokset import BufferTokSet, TokSet, check_token_id

Context = Tuple[int, int]


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass
class Transitions:
    """Tokens seen directly after (forward) and before (reverse) a context."""
    forward: TokSet
    reverse: TokSet

    def get(self, direction: Direction) -> TokSet:
        return self.forward if direction is Direction.FORWARD else self.reverse


class TokenPaths:
    """Bigram transition index keyed by (first, second) token id."""

    def __init__(self, tokset_factory: Callable[[], TokSet] = BufferTokSet):
        self.tokset_factory = tokset_factory
        self.paths: Dict[Context, Transitions] = {}

    def record(self, context: Context, next_id: int, previous_id: int) -> None:
        """
        Record one observed window (previous, context[0], context[1], next).

        Args:
            context: The two middle tokens of the window
            next_id: Token following the context
            previous_id: Token preceding the context
        """
        check_token_id(next_id)
        check_token_id(previous_id)
        entry = self.paths.get(context)
        if entry is None:
            entry = Transitions(self.tokset_factory(), self.tokset_factory())
            self.paths[context] = entry
        entry.forward.insert(next_id)
        entry.reverse.insert(previous_id)

    def lookup(self, context: Context) -> Optional[Transitions]:
        return self.paths.get(context)

    def walk(
        self,
        direction: Direction,
        start: Context,
        rng: random.Random,
    ) -> Iterator[int]:
        """
        Lazily walk the index from a starting context.

        Each step samples a token from the current context's set in the given
        direction, yields it, then shifts the context:
        forward (a, b) -> (b, sampled), reverse (a, b) -> (sampled, a).

        The walk ends when the current context is unknown or has no entries.
        Sentinel ids are yielded like any other token; stopping on them is up
        to the consumer.
        """
        context = start
        while True:
            entry = self.paths.get(context)
            if entry is None:
                return
            tokset = entry.get(direction)
            if tokset.is_empty():
                return
            chosen = tokset.sample(rng)
            yield chosen
            if direction is Direction.FORWARD:
                context = (context[1], chosen)
            else:
                context = (chosen, context[0])

    def __contains__(self, context: object) -> bool:
        return context in self.paths

    def __len__(self) -> int:
        return len(self.paths)


class EntryIndex:
    """Single-token successor index."""

    def __init__(self, tokset_factory: Callable[[], TokSet] = BufferTokSet):
        self.tokset_factory = tokset_factory
        self.entries: Dict[int, TokSet] = {}

    def record(self, token_id: int, next_id: int) -> None:
        check_token_id(next_id)
        tokset = self.entries.get(token_id)
        if tokset is None:
            tokset = self.tokset_factory()
            self.entries[token_id] = tokset
        tokset.insert(next_id)

    def lookup(self, token_id: int) -> Optional[TokSet]:
        return self.entries.get(token_id)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)
