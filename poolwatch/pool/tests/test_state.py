"""
Tests for ReserveState and SeenTransactionSet.
"""

import pytest

from poolwatch.pool.state import ReserveState, SeenTransactionSet, normalize_hash


class TestReserveState:
    """ReserveState invariants."""

    def test_non_negative(self):
        """Test reserves of zero are allowed."""
        state = ReserveState(0, 0)
        assert state.reserve0 == 0
        assert state.as_of_tx_hash is None

    @pytest.mark.parametrize("reserves", [(-1, 0), (0, -1)])
    def test_negative_rejected(self, reserves):
        """Test a negative reserve cannot be constructed."""
        with pytest.raises(ValueError, match="Negative reserves"):
            ReserveState(*reserves)


class TestSeenTransactionSet:
    """Bounded hash set with coarse eviction."""

    def test_membership_is_case_insensitive(self):
        """Test hashes match regardless of case or bytes/str form."""
        seen = SeenTransactionSet()
        seen.add("0xAA")

        assert "0xaa" in seen
        assert "0xAA" in seen
        assert b"\xaa" in seen
        assert "0xbb" not in seen
        assert None not in seen

    def test_duplicates_do_not_grow(self):
        """Test re-adding a hash keeps the size."""
        seen = SeenTransactionSet()
        for _ in range(5):
            seen.add("0x01")

        assert len(seen) == 1

    def test_eviction_clears_after_limit_plus_one(self):
        """Test the set empties when the 1001st distinct hash is inserted."""
        seen = SeenTransactionSet(limit=1000)
        for i in range(1000):
            seen.add(f"0x{i:064x}")

        assert len(seen) == 1000
        assert seen.clears == 0

        seen.add(f"0x{1000:064x}")

        assert len(seen) == 0
        assert seen.clears == 1
        assert f"0x{0:064x}" not in seen
        assert f"0x{1000:064x}" not in seen

    def test_invalid_limit(self):
        """Test a non-positive limit is rejected."""
        with pytest.raises(ValueError):
            SeenTransactionSet(limit=0)

    def test_normalize_hash(self):
        """Test hash normalization."""
        assert normalize_hash(b"\x01\x02") == "0x0102"
        assert normalize_hash("ABCD") == "0xabcd"
        assert normalize_hash(" 0xAbCd ") == "0xabcd"
