"""
Tests for the token dictionary.
"""
from fakegen.services.dictionary import SENTINEL, SENTINEL_ID, TokenDictionary


class TestTokenDictionary:
    """Test suite for TokenDictionary."""

    def test_sentinel_is_id_zero(self):
        """Test the sentinel exists before any insertion."""
        d = TokenDictionary()

        assert len(d) == 1
        assert d.lookup(SENTINEL) == SENTINEL_ID == 0
        assert d.resolve(0) == ""
        assert d.intern("") == 0

    def test_ids_assigned_in_first_seen_order(self):
        """Test ids are dense and sequential."""
        d = TokenDictionary()

        assert d.intern("the") == 1
        assert d.intern("cat") == 2
        assert d.intern("sat") == 3

    def test_intern_same_token_twice(self):
        """Test interning is idempotent."""
        d = TokenDictionary()
        first = d.intern("hello")
        second = d.intern("hello")

        assert first == second
        assert len(d) == 2

    def test_distinct_tokens_get_distinct_ids(self):
        """Test different strings never share an id."""
        d = TokenDictionary()
        words = ["a", "b", "A", "a.", "b "]
        ids = [d.intern(w) for w in words]

        assert len(set(ids)) == len(words)

    def test_lookup_does_not_intern(self):
        """Test lookup of an unknown token leaves the dictionary unchanged."""
        d = TokenDictionary()
        d.intern("known")

        assert d.lookup("unknown") is None
        assert len(d) == 2
        assert "unknown" not in d
        assert "known" in d

    def test_resolve_out_of_range(self):
        """Test resolve returns None for unassigned ids."""
        d = TokenDictionary()

        assert d.resolve(1) is None
        assert d.resolve(-1) is None

    def test_round_trip(self):
        """Test lookup(resolve(id)) == id for every id."""
        d = TokenDictionary()
        for w in "the cat sat on the mat".split():
            d.intern(w)

        for token_id in range(len(d)):
            assert d.lookup(d.resolve(token_id)) == token_id
