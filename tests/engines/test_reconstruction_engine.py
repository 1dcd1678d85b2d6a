"""
Tests for point-in-time reconstruction and profit.

Covers:
- Window arithmetic for recorded and post-recorded purchase days
- Combination of the gathered sums
- Profit sign and rounding
"""

from datetime import date, timedelta
from decimal import Decimal

from perishable_engines.profit import compute_profit
from perishable_engines.reconstruction import reconstruct, reconstruction_window
from perishable_kernel.domain.dtos import EPOCH_FLOOR, LedgerEntry, RangeTotals
from perishable_kernel.domain.values import Money

SHELF_LIFE = timedelta(days=3)


class TestReconstructionWindow:
    """Tests for purchase-day windows."""

    def test_window_bounds(self):
        window = reconstruction_window(
            date(2024, 1, 5), date(2024, 1, 10), date(2024, 1, 8), SHELF_LIFE
        )

        assert window.recorded_from == date(2024, 1, 2)
        assert window.recorded_expire == date(2024, 1, 5)
        assert window.post_until == date(2024, 1, 7)
        assert window.has_recorded_range
        assert window.has_post_range
        assert window.post_counted_after == window.recorded_expire
        assert not window.has_pre_window_range

    def test_snapshot_on_end_date_has_no_post_range(self):
        window = reconstruction_window(
            date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 8), SHELF_LIFE
        )

        assert not window.has_post_range

    def test_snapshot_before_start_has_no_recorded_range(self):
        window = reconstruction_window(
            date(2024, 2, 1), date(2024, 2, 5), date(2024, 1, 10), SHELF_LIFE
        )

        assert not window.has_recorded_range
        assert window.has_post_range
        assert window.post_counted_after == date(2024, 1, 28)
        assert window.has_pre_window_range

    def test_epoch_floor_snapshot(self):
        window = reconstruction_window(
            date(2024, 1, 1), date(2024, 1, 2), EPOCH_FLOOR, SHELF_LIFE
        )

        assert window.recorded_expire == date(1969, 12, 29)

    def test_window_clamps_at_minimum_date(self):
        window = reconstruction_window(
            date.min, date.min, date.min, SHELF_LIFE
        )

        assert window.recorded_from == date.min
        assert window.post_until == date.min


class TestReconstruct:
    """Tests for combining the sums."""

    def test_unswept_stock_is_moved_from_inventory_to_expired(self):
        snapshot = LedgerEntry(day=date(2024, 1, 1), purchased=10, in_inventory=10)

        result = reconstruct(snapshot, recorded_num_expired=0, post_recorded_num_expired=10)

        assert result.in_inventory == 0
        assert result.expired == 10

    def test_recorded_expirations_pass_through(self):
        snapshot = LedgerEntry(day=date(2024, 1, 5), in_inventory=5)

        result = reconstruct(snapshot, recorded_num_expired=10, post_recorded_num_expired=0)

        assert result.in_inventory == 5
        assert result.expired == 10

    def test_stock_expired_before_window_leaves_inventory_only(self):
        snapshot = LedgerEntry(day=date(2024, 1, 1), purchased=10, in_inventory=10)

        result = reconstruct(
            snapshot,
            recorded_num_expired=0,
            post_recorded_num_expired=0,
            expired_before_window=10,
        )

        assert result.in_inventory == 0
        assert result.expired == 0

    def test_empty_snapshot(self):
        result = reconstruct(LedgerEntry.empty(), 0, 0)

        assert result.in_inventory == 0
        assert result.expired == 0


class TestProfit:
    """Tests for price x sold - cost x purchased."""

    def test_positive_profit(self):
        profit = compute_profit(
            RangeTotals(purchased=10, sold=8),
            Money.of("0.35", "USD"),
            Money.of("0.20", "USD"),
        )

        assert profit.amount == Decimal("0.80")

    def test_negative_profit_formats_with_leading_sign(self):
        profit = compute_profit(
            RangeTotals(purchased=20, sold=3),
            Money.of("0.35", "USD"),
            Money.of("0.20", "USD"),
        )

        assert profit.is_negative
        assert profit.format() == "-$2.95"

    def test_no_activity_is_zero(self):
        profit = compute_profit(
            RangeTotals(), Money.of("0.35", "USD"), Money.of("0.20", "USD")
        )

        assert profit.format() == "$0.00"
