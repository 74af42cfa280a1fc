"""
Chain engine: token dictionary, packed token sets, transition indexes,
the Chain itself and its serialized worker.
"""

from .chain import Chain, ChainSizes
from .dictionary import SENTINEL, SENTINEL_ID, TokenDictionary
from .errors import ChainError, EmptyTokSetError, TokenIdOverflowError
from .token_paths import Direction, EntryIndex, TokenPaths, Transitions
from .tokset import BufferTokSet, HashTokSet, TokSet, get_tokset_factory
from .worker import ChainWorker

__all__ = [
    "Chain",
    "ChainSizes",
    "ChainWorker",
    "TokenDictionary",
    "SENTINEL",
    "SENTINEL_ID",
    "TokenPaths",
    "EntryIndex",
    "Transitions",
    "Direction",
    "TokSet",
    "BufferTokSet",
    "HashTokSet",
    "get_tokset_factory",
    "ChainError",
    "EmptyTokSetError",
    "TokenIdOverflowError",
]
