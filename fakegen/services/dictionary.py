"""
Token dictionary: bidirectional word <-> dense integer id mapping.
"""
from __future__ import annotations

from typing import Dict, List, Optional

SENTINEL = ""
SENTINEL_ID = 0


class TokenDictionary:
    """
    Interns token strings into dense ids assigned in first-seen order.

    The sentinel token (empty string, marking sequence start/end) is always
    id 0. Ids are never reused or renumbered.
    """

    def __init__(self):
        self.tokens: List[str] = []
        self.ids: Dict[str, int] = {}
        self.intern(SENTINEL)

    def intern(self, token: str) -> int:
        """Return the id for token, assigning the next id if it is new."""
        found = self.ids.get(token)
        if found is not None:
            return found
        token_id = len(self.tokens)
        self.ids[token] = token_id
        self.tokens.append(token)
        return token_id

    def lookup(self, token: str) -> Optional[int]:
        """Return the id for a known token without interning it."""
        return self.ids.get(token)

    def resolve(self, token_id: int) -> Optional[str]:
        """Return the token string for an id, or None if out of range."""
        if 0 <= token_id < len(self.tokens):
            return self.tokens[token_id]
        return None

    def __contains__(self, token: object) -> bool:
        return token in self.ids

    def __len__(self) -> int:
        return len(self.tokens)
