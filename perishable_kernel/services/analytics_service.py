"""
AnalyticsService -- read-only reconstruction over arbitrary date windows.

Responsibility:
    Answer purchased / sold / profit / in-inventory / expired for an
    inclusive ``[start_date, end_date]`` window without triggering a sweep.
    Because sweeps are lazy and journal against the purchase day, expiry
    and inventory are reconstructed as of ``end_date`` by
    perishable_engines.reconstruction.

Architecture position:
    Kernel > Services (read side).  Composes LedgerSelector, BatchSelector
    and the pure reconstruction / profit engines.  Never flushes, adds or
    deletes; run it inside read_only_scope() for a consistent snapshot.

Failure modes:
    - ValidationError on malformed dates or start_date > end_date.
    - Windows with no data yield all-zero totals, never an error.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from sqlalchemy.orm import Session

from perishable_engines.profit import compute_profit
from perishable_engines.reconstruction import reconstruct, reconstruction_window
from perishable_kernel.domain.dtos import (
    AnalyticsReport,
    ExpiryInventory,
    LedgerEntry,
    RangeTotals,
)
from perishable_kernel.domain.validation import parse_analytics_range
from perishable_kernel.domain.values import Money
from perishable_kernel.logging_config import get_logger
from perishable_kernel.selectors.batch_selector import BatchSelector
from perishable_kernel.selectors.ledger_selector import LedgerSelector

logger = get_logger("services.analytics")

_ONE_DAY = timedelta(days=1)


class AnalyticsService:
    """
    Historical analytics over the ledger and the batch queue.

    Guarantees:
        - expiry_and_inventory(d, end) equals what a sweep run exactly at
          ``end`` would have produced, for every reachable store state.
        - No stored state is modified.
    """

    def __init__(
        self,
        session: Session,
        shelf_life: timedelta,
        unit_price: Money,
        unit_cost: Money,
    ):
        self.session = session
        self.shelf_life = shelf_life
        self.unit_price = unit_price
        self.unit_cost = unit_cost
        self._ledger = LedgerSelector(session)
        self._batches = BatchSelector(session)

    def range_totals(self, start_date: date, end_date: date) -> RangeTotals:
        """Purchased and sold over ledger days in ``[start_date, end_date]``."""
        return self._ledger.range_totals(start_date, end_date)

    def expiry_and_inventory(self, start_date: date, end_date: date) -> ExpiryInventory:
        """
        Expired units whose expiry day falls in the window, and fresh stock
        as of ``end_date``.

        Postconditions:
            - expired counts each unit at purchase_day + shelf_life.
            - in_inventory excludes stock logically expired by end_date even
              when no mutation has swept it yet.
        """
        snapshot = self._ledger.latest_on_or_before(end_date) or LedgerEntry.empty()
        window = reconstruction_window(start_date, end_date, snapshot.day, self.shelf_life)

        recorded = 0
        if window.has_recorded_range:
            recorded = self._ledger.expired_between(window.recorded_from, window.recorded_expire)

        post_recorded = 0
        before_window = 0
        if window.has_post_range:
            post_recorded = self._expired_after_snapshot(
                window.post_counted_after, window.post_until
            )
        if window.has_pre_window_range:
            before_window = self._expired_after_snapshot(
                window.recorded_expire, window.post_counted_after
            )

        return reconstruct(snapshot, recorded, post_recorded, before_window)

    def _expired_after_snapshot(self, after: date, until: date) -> int:
        """
        Units bought in ``(after, until]`` that expire after the snapshot.

        Still queued, or swept whole by a mutation dated after the window.
        """
        return self._batches.quantity_after_until(after, until) + self._ledger.expired_between(
            after + _ONE_DAY, until
        )

    def profit(self, totals: RangeTotals) -> Money:
        return compute_profit(totals, self.unit_price, self.unit_cost).round()

    def analytics(self, start_date: Any, end_date: Any) -> AnalyticsReport:
        """Full analytics report for ``[start_date, end_date]``."""
        start, end = parse_analytics_range(start_date, end_date)

        totals = self.range_totals(start, end)
        expiry = self.expiry_and_inventory(start, end)
        report = AnalyticsReport(
            start_date=start,
            end_date=end,
            purchased=totals.purchased,
            sold=totals.sold,
            profit=self.profit(totals),
            in_inventory=expiry.in_inventory,
            expired=expiry.expired,
        )

        logger.info("analytics_computed", extra={
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "purchased": report.purchased,
            "sold": report.sold,
            "profit": report.formatted_profit,
            "in_inventory": report.in_inventory,
            "expired": report.expired,
        })
        return report
