"""
perishable_engines.expiration -- Expiration sweep planning.

Responsibility:
    Decide which batches a mutation dated ``operation_date`` must sweep as
    expired under a fixed shelf life, and how many units that removes.
    The stateful application (deleting batches, journaling ``expired`` onto
    the purchase-day ledger rows) lives in BatchQueueService.sweep.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Whole-batch aging: a batch is either entirely fresh or entirely
      expired; there is no partial expiry.
    - Eligibility: a batch bought on D is swept by an operation on T iff
      ``D <= T - shelf_life``.
    - Idempotent per call: planning again over the surviving batches with
      the same date yields nothing.

Failure modes:
    - ValueError if shelf_life is not a positive whole number of days.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from perishable_kernel.domain.dtos import Batch
from perishable_kernel.logging_config import get_logger

logger = get_logger("engines.expiration")


def expiry_cutoff(operation_date: date, shelf_life: timedelta) -> date:
    """Latest purchase day that is expired as of ``operation_date``."""
    if shelf_life <= timedelta(0) or shelf_life % timedelta(days=1):
        raise ValueError(f"Shelf life must be a positive number of whole days, got {shelf_life}")
    return operation_date - shelf_life


@dataclass(frozen=True, slots=True)
class SweepResult:
    """Batches selected for expiry by one sweep."""

    cutoff: date
    expired_batches: tuple[Batch, ...] = ()

    @property
    def num_expired(self) -> int:
        return sum(b.quantity for b in self.expired_batches)

    @property
    def is_empty(self) -> bool:
        return not self.expired_batches


def plan_sweep(
    batches: Iterable[Batch],
    operation_date: date,
    shelf_life: timedelta,
) -> SweepResult:
    """Select every batch whose purchase day is on or before the cutoff."""
    cutoff = expiry_cutoff(operation_date, shelf_life)
    expired = tuple(
        sorted(
            (b for b in batches if b.purchase_day <= cutoff),
            key=lambda b: b.purchase_day,
        )
    )
    result = SweepResult(cutoff=cutoff, expired_batches=expired)

    logger.debug("expiration_sweep_planned", extra={
        "operation_date": operation_date.isoformat(),
        "cutoff": cutoff.isoformat(),
        "expired_batches": len(expired),
        "num_expired": result.num_expired,
    })
    return result
