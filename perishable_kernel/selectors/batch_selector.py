"""
Module: perishable_kernel.selectors.batch_selector
Responsibility: Read queries over the batch queue: ordered snapshot and
    quantity sums over purchase-day ranges.
Architecture position: Kernel > Selectors.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select

from perishable_kernel.domain.dtos import Batch, QueueSnapshot
from perishable_kernel.models.batch import BatchModel
from perishable_kernel.selectors.base import BaseSelector


class BatchSelector(BaseSelector):
    """Read-only access to the batch queue."""

    def get(self, purchase_day: date) -> Batch | None:
        model = self.session.get(BatchModel, purchase_day)
        return Batch.from_model(model) if model is not None else None

    def snapshot(self) -> QueueSnapshot:
        """All remaining batches, oldest purchase day first."""
        models = self.session.execute(
            select(BatchModel).order_by(BatchModel.purchase_day)
        ).scalars()
        return QueueSnapshot(batches=tuple(Batch.from_model(m) for m in models))

    def total_quantity(self) -> int:
        total = self.session.execute(
            select(func.coalesce(func.sum(BatchModel.quantity), 0))
        ).scalar_one()
        return int(total)

    def quantity_after_until(self, after: date, until: date) -> int:
        """Sum quantities of batches with ``after < purchase_day <= until``."""
        if after >= until:
            return 0
        total = self.session.execute(
            select(func.coalesce(func.sum(BatchModel.quantity), 0))
            .where(BatchModel.purchase_day > after, BatchModel.purchase_day <= until)
        ).scalar_one()
        return int(total)
