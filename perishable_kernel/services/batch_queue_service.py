"""
BatchQueueService -- flush-only writes to the FIFO batch queue.

Responsibility:
    Add purchases to the queue (new batch or same-day merge), apply the
    expiration sweep, and apply FIFO consumption for sells.  The decisions
    are made by the pure planners in perishable_engines; this service only
    loads their inputs and writes their outcome.

Architecture position:
    Kernel > Services -- imperative shell over perishable_engines.expiration
    and perishable_engines.fifo.

Invariants enforced:
    - One batch per purchase day; same-day purchases merge (explicit
      lookup-then-branch, never a constraint-triggered upsert).
    - Zero-quantity batches are deleted, not stored.
    - Swept quantities are journaled on the ORIGINAL purchase day's ledger
      row, in the same transaction as the batch deletion.

Failure modes:
    - InventoryIntegrityError from LedgerService if a swept batch has no
      purchase-day ledger row.
    - InsufficientStockError from the FIFO planner if the queue is short.
"""

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import select

from perishable_engines.expiration import SweepResult, expiry_cutoff, plan_sweep
from perishable_engines.fifo import ConsumptionPlan, plan_fifo_consumption
from perishable_kernel.domain.dtos import Batch
from perishable_kernel.logging_config import get_logger
from perishable_kernel.models.batch import BatchModel
from perishable_kernel.services.base import BaseService
from perishable_kernel.services.ledger_service import LedgerService

logger = get_logger("services.batch_queue")


class BatchQueueService(BaseService):
    """Write access to the batch queue."""

    def add_purchase(self, purchase_day: date, quantity: int) -> Batch:
        """Create the batch for ``purchase_day`` or merge into it."""
        model = self.session.get(BatchModel, purchase_day)
        if model is None:
            model = BatchModel(purchase_day=purchase_day, quantity=quantity)
            self.session.add(model)
            action = "created"
        else:
            model.quantity += quantity
            action = "merged"
        self.session.flush()

        logger.info("batch_purchase_recorded", extra={
            "purchase_day": purchase_day.isoformat(),
            "quantity": quantity,
            "batch_quantity": model.quantity,
            "action": action,
        })
        return Batch.from_model(model)

    def sweep(
        self,
        operation_date: date,
        shelf_life: timedelta,
        ledger: LedgerService,
    ) -> SweepResult:
        """
        Remove every batch past shelf life and journal it as expired.

        Postconditions:
            - No batch with purchase_day <= operation_date - shelf_life remains.
            - Each removed batch's quantity was added to ``expired`` on the
              ledger row of its purchase day.
        """
        cutoff = expiry_cutoff(operation_date, shelf_life)
        candidates = list(
            self.session.execute(
                select(BatchModel)
                .where(BatchModel.purchase_day <= cutoff)
                .order_by(BatchModel.purchase_day)
            ).scalars()
        )
        result = plan_sweep(
            (Batch.from_model(m) for m in candidates), operation_date, shelf_life
        )

        by_day = {m.purchase_day: m for m in candidates}
        for batch in result.expired_batches:
            ledger.journal_expired(batch.purchase_day, batch.quantity)
            self.session.delete(by_day[batch.purchase_day])
        self.session.flush()

        logger.info("expiration_sweep_completed", extra={
            "operation_date": operation_date.isoformat(),
            "cutoff": result.cutoff.isoformat(),
            "expired_batches": len(result.expired_batches),
            "num_expired": result.num_expired,
        })
        return result

    def consume_fifo(self, quantity: int, operation_date: date) -> ConsumptionPlan:
        """Take ``quantity`` units from the oldest batches first."""
        models = list(
            self.session.execute(
                select(BatchModel).order_by(BatchModel.purchase_day)
            ).scalars()
        )
        plan = plan_fifo_consumption(
            [Batch.from_model(m) for m in models], quantity, operation_date
        )

        by_day = {m.purchase_day: m for m in models}
        for day in plan.removed_days:
            self.session.delete(by_day[day])
        if plan.reduction is not None:
            by_day[plan.reduction.purchase_day].quantity = plan.reduction.remaining
        self.session.flush()

        logger.info("fifo_consumption_applied", extra={
            "quantity": quantity,
            "removed_batches": len(plan.removed),
            "reduced_day": (
                plan.reduction.purchase_day.isoformat() if plan.reduction else None
            ),
        })
        return plan
