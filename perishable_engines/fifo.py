"""
perishable_engines.fifo -- FIFO batch consumption planning.

Responsibility:
    Given the batch queue and a sell quantity, decide which batches are
    consumed entirely and which single batch is reduced, walking oldest
    purchase day first with a running total.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Applied to storage by
    BatchQueueService.consume_fifo.

Invariants enforced:
    - Oldest first: every removed batch is older than the reduced one, and
      no batch older than the oldest survivor remains.
    - Running-sum cutoff: a batch whose inclusive running total is strictly
      less than the quantity is removed; the next batch is reduced by the
      remainder.  A reduction that reaches zero deletes the batch instead.
    - Conservation: removed quantities plus the reduction equal the quantity.

Failure modes:
    - InsufficientStockError if the queue holds fewer units than requested.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from perishable_kernel.domain.dtos import Batch
from perishable_kernel.exceptions import InsufficientStockError
from perishable_kernel.logging_config import get_logger

logger = get_logger("engines.fifo")


@dataclass(frozen=True, slots=True)
class BatchReduction:
    """A batch that survives a sell with fewer units."""

    purchase_day: date
    consumed: int
    remaining: int


@dataclass(frozen=True, slots=True)
class ConsumptionPlan:
    """What a FIFO sell takes from the queue."""

    quantity: int
    removed: tuple[Batch, ...] = ()
    reduction: BatchReduction | None = None

    @property
    def removed_days(self) -> tuple[date, ...]:
        return tuple(b.purchase_day for b in self.removed)

    @property
    def total_consumed(self) -> int:
        reduced = self.reduction.consumed if self.reduction else 0
        return sum(b.quantity for b in self.removed) + reduced


def plan_fifo_consumption(
    batches: Sequence[Batch],
    quantity: int,
    operation_date: date,
) -> ConsumptionPlan:
    """
    Plan the consumption of ``quantity`` units, oldest batch first.

    Preconditions:
        quantity >= 0; the orchestrator has already checked it against the
        freshness-adjusted available stock.

    Postconditions:
        plan.total_consumed == quantity.

    Raises:
        InsufficientStockError: if the queue holds fewer than ``quantity``.
    """
    ordered = sorted(batches, key=lambda b: b.purchase_day)
    available = sum(b.quantity for b in ordered)
    if quantity > available:
        logger.warning("fifo_queue_insufficient", extra={
            "requested": quantity,
            "available": available,
        })
        raise InsufficientStockError(quantity, available, operation_date)

    removed: list[Batch] = []
    reduction: BatchReduction | None = None
    running = 0
    for batch in ordered:
        if quantity == 0:
            break
        running += batch.quantity
        if running < quantity:
            removed.append(batch)
            continue
        remainder = quantity - (running - batch.quantity)
        if remainder == batch.quantity:
            removed.append(batch)
        else:
            reduction = BatchReduction(
                purchase_day=batch.purchase_day,
                consumed=remainder,
                remaining=batch.quantity - remainder,
            )
        break

    plan = ConsumptionPlan(quantity=quantity, removed=tuple(removed), reduction=reduction)
    assert plan.total_consumed == quantity, "FIFO plan must consume exactly the requested quantity"

    logger.debug("fifo_consumption_planned", extra={
        "quantity": quantity,
        "removed_batches": len(removed),
        "reduced_day": reduction.purchase_day.isoformat() if reduction else None,
    })
    return plan
