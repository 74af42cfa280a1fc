"""
Tests for token sets (packed and counting backends).
"""
import random

import pytest

from fakegen.services.errors import EmptyTokSetError, TokenIdOverflowError
from fakegen.services.token_paths import EntryIndex, TokenPaths
from fakegen.services.tokset import (
    MAX_3BYTE,
    SEGMENT_CAPACITY,
    BufferTokSet,
    HashTokSet,
    TokSet,
    check_token_id,
    get_tokset_factory,
)


def members(tokset: BufferTokSet):
    return [tokset.get(i) for i in range(tokset.count())]


class TestBufferTokSet:
    """Test suite for BufferTokSet."""

    def test_initialization(self):
        """Test token set starts empty."""
        tokset = BufferTokSet()

        assert tokset.count() == 0
        assert tokset.is_empty() == True
        assert len(tokset) == 0
        assert isinstance(tokset, TokSet)

    def test_small_values(self):
        """Test 1-byte ids are stored in insertion order."""
        tokset = BufferTokSet()
        for token_id in (2, 7, 42):
            tokset.insert(token_id)

        assert tokset.get(0) == 2
        assert tokset.get(1) == 7
        assert tokset.get(2) == 42
        assert tokset.count() == 3
        assert len(tokset.buf) == 3

    def test_large_values(self):
        """Test ids are grouped by width, each group in insertion order."""
        tokset = BufferTokSet()
        tokset.insert(0xFFFFF)
        tokset.insert(1)
        tokset.insert(0xFF + 1)
        tokset.insert(42)

        assert tokset.get(0) == 1
        assert tokset.get(1) == 42
        assert tokset.get(2) == 0xFF + 1
        assert tokset.get(3) == 0xFFFFF
        assert tokset.count() == 4
        assert len(tokset.buf) == 2 * 1 + 1 * 2 + 1 * 3

    def test_small_after_many_large(self):
        """Test small ids inserted after wider ones are still retrievable."""
        tokset = BufferTokSet()
        for _ in range(1000):
            tokset.insert(0xFF + 1)
        for _ in range(1000):
            tokset.insert(1)

        assert tokset.count() == 2000
        for i in range(1000):
            assert tokset.get(i) == 1
        for i in range(1000, 2000):
            assert tokset.get(i) == 0xFF + 1

    def test_round_trip_across_segments(self):
        """Test every width class round-trips through the buffer."""
        values = [0, 255, 256, 65535, 65536, MAX_3BYTE, 3, 70000, 300]
        tokset = BufferTokSet()
        for v in values:
            tokset.insert(v)

        one_byte = [v for v in values if v <= 0xFF]
        two_byte = [v for v in values if 0xFF < v <= 0xFFFF]
        three_byte = [v for v in values if v > 0xFFFF]

        assert members(tokset) == one_byte + two_byte + three_byte
        assert tokset.c1 == len(one_byte)
        assert tokset.c2 == len(two_byte)

    def test_full_segment_spills_to_wider_segment(self):
        """Test a full 1-byte segment sends further small ids to the 2-byte segment."""
        tokset = BufferTokSet()
        for _ in range(SEGMENT_CAPACITY):
            tokset.insert(9)
        tokset.insert(9)
        tokset.insert(10)

        assert tokset.c1 == SEGMENT_CAPACITY
        assert tokset.c2 == 2
        assert tokset.count() == SEGMENT_CAPACITY + 2
        assert tokset.get(SEGMENT_CAPACITY) == 9
        assert tokset.get(SEGMENT_CAPACITY + 1) == 10

    def test_full_two_byte_segment_spills_to_three_byte_segment(self):
        """Test a full 2-byte segment sends further mid-size ids to the 3-byte segment."""
        tokset = BufferTokSet()
        for _ in range(SEGMENT_CAPACITY):
            tokset.insert(300)
        tokset.insert(301)
        tokset.insert(7)

        assert tokset.c1 == 1
        assert tokset.c2 == SEGMENT_CAPACITY
        assert tokset.count() == SEGMENT_CAPACITY + 2
        assert len(tokset.buf) == 1 + SEGMENT_CAPACITY * 2 + 3
        assert tokset.get(0) == 7
        assert tokset.get(1) == 300
        assert tokset.get(SEGMENT_CAPACITY) == 300
        assert tokset.get(SEGMENT_CAPACITY + 1) == 301

    def test_overflow_raises(self):
        """Test ids above the 3-byte ceiling are rejected."""
        tokset = BufferTokSet()

        with pytest.raises(TokenIdOverflowError):
            tokset.insert(MAX_3BYTE + 1)

        assert tokset.count() == 0

    def test_check_token_id_bounds(self):
        """Test the id check accepts the full 3-byte range only."""
        check_token_id(0)
        check_token_id(MAX_3BYTE)

        with pytest.raises(TokenIdOverflowError):
            check_token_id(MAX_3BYTE + 1)
        with pytest.raises(TokenIdOverflowError):
            check_token_id(-1)

    def test_overflow_leaves_no_trace_in_indexes(self):
        """Test an overflowing id creates no context or successor entry."""
        paths = TokenPaths()
        entries = EntryIndex()

        with pytest.raises(TokenIdOverflowError):
            paths.record((1, 2), next_id=MAX_3BYTE + 1, previous_id=0)
        with pytest.raises(TokenIdOverflowError):
            paths.record((1, 2), next_id=3, previous_id=MAX_3BYTE + 1)
        with pytest.raises(TokenIdOverflowError):
            entries.record(1, MAX_3BYTE + 1)

        assert (1, 2) not in paths
        assert len(paths) == 0
        assert 1 not in entries
        assert len(entries) == 0

    def test_overflow_is_overflow_error(self):
        """Test the overflow error is a builtin OverflowError."""
        tokset = BufferTokSet()

        with pytest.raises(OverflowError):
            tokset.insert(-1)

    def test_get_out_of_range(self):
        """Test get rejects indexes outside [0, count)."""
        tokset = BufferTokSet()
        tokset.insert(5)

        with pytest.raises(IndexError):
            tokset.get(1)
        with pytest.raises(IndexError):
            tokset.get(-1)

    def test_sample_empty_raises(self):
        """Test sampling an empty set raises."""
        tokset = BufferTokSet()

        with pytest.raises(EmptyTokSetError):
            tokset.sample(random.Random(0))

    def test_sample_only_inserted_ids(self):
        """Test samples always come from inserted ids."""
        rng = random.Random(0)
        tokset = BufferTokSet()
        inserted = {3, 300, 70000}
        for v in inserted:
            tokset.insert(v)

        drawn = {tokset.sample(rng) for _ in range(500)}

        assert drawn <= inserted
        assert drawn == inserted

    def test_sample_weighted_by_occurrences(self):
        """Test more frequent ids are drawn more often."""
        rng = random.Random(0)
        tokset = BufferTokSet()
        for _ in range(9):
            tokset.insert(5)
        tokset.insert(6)

        draws = [tokset.sample(rng) for _ in range(2000)]

        assert draws.count(5) > draws.count(6) * 3


class TestHashTokSet:
    """Test suite for HashTokSet."""

    def test_insert_counts_occurrences(self):
        """Test count is the number of insertions."""
        tokset = HashTokSet()
        for v in (1, 1, 2, 70000):
            tokset.insert(v)

        assert tokset.count() == 4
        assert tokset.counts[1] == 2
        assert tokset.is_empty() == False

    def test_sample_only_inserted_ids(self):
        """Test samples always come from inserted ids."""
        rng = random.Random(0)
        tokset = HashTokSet()
        for v in (4, 400, 40000):
            tokset.insert(v)

        drawn = {tokset.sample(rng) for _ in range(300)}

        assert drawn <= {4, 400, 40000}

    def test_overflow_raises(self):
        """Test ids above the 3-byte ceiling are rejected."""
        with pytest.raises(TokenIdOverflowError):
            HashTokSet().insert(MAX_3BYTE + 1)

    def test_sample_empty_raises(self):
        """Test sampling an empty set raises."""
        with pytest.raises(EmptyTokSetError):
            HashTokSet().sample(random.Random(0))


class TestTokSetFactory:
    """Test backend resolution."""

    def test_known_backends(self):
        assert get_tokset_factory("buffer") is BufferTokSet
        assert get_tokset_factory("hash") is HashTokSet

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_tokset_factory("btree")
