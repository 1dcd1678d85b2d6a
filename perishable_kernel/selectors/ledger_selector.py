"""
Module: perishable_kernel.selectors.ledger_selector
Responsibility: Read queries over the per-day ledger: latest day, as-of
    snapshot lookup and inclusive day-range sums.
Architecture position: Kernel > Selectors.

Every range is inclusive on both ends and ordered by ``day``; empty ranges
sum to zero rather than NULL.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select

from perishable_kernel.domain.dtos import LedgerEntry, RangeTotals
from perishable_kernel.logging_config import get_logger
from perishable_kernel.models.ledger import LedgerEntryModel
from perishable_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector):
    """Read-only access to ledger rows."""

    def get(self, day: date) -> LedgerEntry | None:
        model = self.session.get(LedgerEntryModel, day)
        return LedgerEntry.from_model(model) if model is not None else None

    def latest(self) -> LedgerEntry | None:
        """Most recent ledger row, or None when the ledger is empty."""
        model = self.session.execute(
            select(LedgerEntryModel).order_by(LedgerEntryModel.day.desc()).limit(1)
        ).scalar_one_or_none()
        return LedgerEntry.from_model(model) if model is not None else None

    def latest_on_or_before(self, day: date) -> LedgerEntry | None:
        """Snapshot row: the latest ledger day that is <= ``day``."""
        model = self.session.execute(
            select(LedgerEntryModel)
            .where(LedgerEntryModel.day <= day)
            .order_by(LedgerEntryModel.day.desc())
            .limit(1)
        ).scalar_one_or_none()
        return LedgerEntry.from_model(model) if model is not None else None

    def entries(self, start: date | None = None, end: date | None = None) -> list[LedgerEntry]:
        """Ledger rows in ``[start, end]`` ascending by day (open ends allowed)."""
        stmt = select(LedgerEntryModel).order_by(LedgerEntryModel.day)
        if start is not None:
            stmt = stmt.where(LedgerEntryModel.day >= start)
        if end is not None:
            stmt = stmt.where(LedgerEntryModel.day <= end)
        return [LedgerEntry.from_model(m) for m in self.session.execute(stmt).scalars()]

    def range_totals(self, start: date, end: date) -> RangeTotals:
        """Sum purchased and sold over ``start <= day <= end``."""
        row = self.session.execute(
            select(
                func.coalesce(func.sum(LedgerEntryModel.purchased), 0),
                func.coalesce(func.sum(LedgerEntryModel.sold), 0),
            ).where(LedgerEntryModel.day >= start, LedgerEntryModel.day <= end)
        ).one()
        totals = RangeTotals(purchased=int(row[0]), sold=int(row[1]))
        logger.debug("ledger_range_totals", extra={
            "start": start.isoformat(),
            "end": end.isoformat(),
            "purchased": totals.purchased,
            "sold": totals.sold,
        })
        return totals

    def expired_between(self, start: date, end: date) -> int:
        """Sum ``expired`` journaled on purchase days in ``[start, end]``."""
        if start > end:
            return 0
        total = self.session.execute(
            select(func.coalesce(func.sum(LedgerEntryModel.expired), 0))
            .where(LedgerEntryModel.day >= start, LedgerEntryModel.day <= end)
        ).scalar_one()
        return int(total)
