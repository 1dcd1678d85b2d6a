"""
perishable_engines.reconstruction -- Point-in-time expiry reconstruction.

Responsibility:
    Compute, without touching storage, the expired and fresh-inventory totals
    a sweep run exactly at a window's end date would have produced.  Sweeps
    only run on mutations and journal ``expired`` against the PURCHASE day,
    so analytics must shift each expiry to ``purchase_day + shelf_life`` and
    account for batches that are logically expired but still queued.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  AnalyticsService gathers
    the sums from the selectors using the bounds computed here.

Window arithmetic (S = latest ledger day <= end, L = shelf life):
    recorded_expire      = S - L
    recorded window      = purchase days [start - L, recorded_expire]
                           (journaled by sweeps at or before S)
    post-recorded window = purchase days (recorded_expire, end - L]
                           (expired by ``end`` but not swept as of S)

    expired      = recorded + post_recorded
    in_inventory = snapshot.in_inventory - post_recorded

When S falls before ``start``, part of the post-recorded window expired
before the query window opened.  That part, purchase days
(recorded_expire, start - L - 1], still leaves inventory but is not counted
as expired inside the window.

Units in the post-recorded window are either still queued, or were swept by
a mutation dated after ``end`` -- in which case they were journaled whole,
since no sell after ``end`` can reach a batch that expired by ``end``.  Both
sources are counted, so the result does not drift when later mutations run.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from perishable_kernel.domain.dtos import ExpiryInventory, LedgerEntry
from perishable_kernel.logging_config import get_logger

logger = get_logger("engines.reconstruction")

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class ReconstructionWindow:
    """Purchase-day bounds for one reconstruction."""

    snapshot_day: date
    recorded_from: date
    recorded_expire: date
    post_until: date

    @property
    def has_recorded_range(self) -> bool:
        return self.recorded_from <= self.recorded_expire

    @property
    def has_post_range(self) -> bool:
        return self.recorded_expire < self.post_until

    @property
    def post_counted_after(self) -> date:
        """Exclusive lower bound of post-recorded days that count as expired."""
        return max(self.recorded_expire, _days_before(self.recorded_from, _ONE_DAY))

    @property
    def has_pre_window_range(self) -> bool:
        """True when unswept stock expired before the window opened."""
        return self.has_post_range and self.recorded_expire < self.post_counted_after


def _days_before(day: date, delta: timedelta) -> date:
    try:
        return day - delta
    except OverflowError:
        return date.min


def reconstruction_window(
    start_date: date,
    end_date: date,
    snapshot_day: date,
    shelf_life: timedelta,
) -> ReconstructionWindow:
    """Derive the purchase-day windows for ``[start_date, end_date]``."""
    return ReconstructionWindow(
        snapshot_day=snapshot_day,
        recorded_from=_days_before(start_date, shelf_life),
        recorded_expire=_days_before(snapshot_day, shelf_life),
        post_until=_days_before(end_date, shelf_life),
    )


def reconstruct(
    snapshot: LedgerEntry,
    recorded_num_expired: int,
    post_recorded_num_expired: int,
    expired_before_window: int = 0,
) -> ExpiryInventory:
    """Combine the gathered sums into the as-of-end totals."""
    result = ExpiryInventory(
        in_inventory=(
            snapshot.in_inventory - post_recorded_num_expired - expired_before_window
        ),
        expired=recorded_num_expired + post_recorded_num_expired,
    )
    logger.debug("expiry_reconstructed", extra={
        "snapshot_day": snapshot.day.isoformat(),
        "snapshot_in_inventory": snapshot.in_inventory,
        "recorded_num_expired": recorded_num_expired,
        "post_recorded_num_expired": post_recorded_num_expired,
        "expired_before_window": expired_before_window,
    })
    return result
