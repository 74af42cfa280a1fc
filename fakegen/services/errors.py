"""
Exceptions raised by the chain engine.
"""
from __future__ import annotations


class ChainError(Exception):
    """Base class for chain engine errors."""


class TokenIdOverflowError(ChainError, OverflowError):
    """Token id does not fit the 3-byte packed encoding."""

    def __init__(self, token_id: int):
        super().__init__(f"token id {token_id} cannot be packed (max 0xFFFFFF)")
        self.token_id = token_id


class EmptyTokSetError(ChainError, LookupError):
    """Sampling was attempted on a token set with no entries."""
