"""
InventoryOrchestrator -- atomic Purchase / Sell against ledger + batch queue.

Responsibility:
    Compose the mutation guard, the expiration sweep and the purchase/sell
    effect into one transaction, enforce the monotonic-day and no-oversell
    rules, and return the resulting queue snapshot.

Architecture position:
    Kernel > Services -- the only entry point for inventory mutations.
    Receives its Session and shelf life from the caller; there is no
    process-wide store.

Pipeline (both operations):
    1. Validate quantity (positive int) and date.
    2. Acquire the guard row, read the latest ledger row (epoch floor / 0
       when empty) and reject dates before it (OrderingError).
    3. Sweep batches purchased on or before ``date - shelf_life``.
    4. Check that the ledger snapshot minus the swept units equals the
       queued units (InventoryIntegrityError otherwise).
    5. Sell only: reject quantity > available (InsufficientStockError).
    6. New day -> insert ledger row; same day -> apply delta.
    7. Purchase: add/merge today's batch.  Sell: FIFO consumption.
    8. Commit (auto_commit) and return the ordered snapshot.

Invariants enforced:
    - Atomicity: with auto_commit=True any failure, including cancellation,
      rolls the whole transaction back -- no ledger row, batch mutation or
      expiration journaling from the failed call persists.  With
      auto_commit=False the caller owns commit/rollback, and a failed call
      is still undone through its savepoint, leaving the caller's
      transaction exactly as it was.
    - Monotonic days: the operation date is never before the latest day.
    - No oversell against freshness-adjusted inventory.
    - Ledger/queue agreement: latest in_inventory == sum(batch quantities)
      after every committed mutation.

Failure modes:
    - ValidationError, OrderingError, InsufficientStockError,
      InventoryIntegrityError (see perishable_kernel.exceptions).
    - StorageError wrapping any SQLAlchemyError (or driver OverflowError)
      raised by the store.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from perishable_kernel.domain.dtos import EPOCH_FLOOR, LedgerEntry, MutationResult, QueueSnapshot
from perishable_kernel.domain.validation import parse_date, require_positive_quantity
from perishable_kernel.exceptions import (
    InsufficientStockError,
    InventoryIntegrityError,
    OrderingError,
    StorageError,
)
from perishable_kernel.logging_config import LogContext, get_logger
from perishable_kernel.selectors.batch_selector import BatchSelector
from perishable_kernel.selectors.ledger_selector import LedgerSelector
from perishable_kernel.services.batch_queue_service import BatchQueueService
from perishable_kernel.services.guard_service import GuardService
from perishable_kernel.services.ledger_service import LedgerService

logger = get_logger("services.inventory_orchestrator")

PURCHASE = "purchase"
SELL = "sell"


class InventoryOrchestrator:
    """
    Runs Purchase and Sell as single logical transactions.

    Contract:
        Accepts a Session and the shelf life.  ``purchase``/``sell`` return
        the queue snapshot; ``record_purchase``/``record_sell`` return the
        full MutationResult (revision, ledger row, swept units).

    Non-goals:
        - No retry or de-duplication: repeating a call double-counts.
        - No input parsing beyond type/range defence; string parsing lives
          in perishable_kernel.domain.validation at the boundary.
    """

    def __init__(
        self,
        session: Session,
        shelf_life: timedelta,
        auto_commit: bool = True,
    ):
        self.session = session
        self.shelf_life = shelf_life
        self._auto_commit = auto_commit

        self._guard = GuardService(session)
        self._ledger = LedgerService(session)
        self._queue = BatchQueueService(session)
        self._ledger_reader = LedgerSelector(session)
        self._batches = BatchSelector(session)

    # =========================================================================
    # Public operations
    # =========================================================================

    def purchase(self, quantity: int, day: date) -> QueueSnapshot:
        """Record a purchase; return the remaining batches oldest first."""
        return self.record_purchase(quantity, day).snapshot

    def sell(self, quantity: int, day: date) -> QueueSnapshot:
        """Record a sale; return the remaining batches oldest first."""
        return self.record_sell(quantity, day).snapshot

    def record_purchase(self, quantity: int, day: date) -> MutationResult:
        return self._run(PURCHASE, quantity, day)

    def record_sell(self, quantity: int, day: date) -> MutationResult:
        return self._run(SELL, quantity, day)

    # =========================================================================
    # Transaction shell
    # =========================================================================

    def _run(self, operation: str, quantity: Any, day: Any) -> MutationResult:
        quantity = require_positive_quantity(quantity)
        day = parse_date(day)

        with LogContext.bind(
            correlation_id=str(uuid4()),
            operation=operation,
            operation_date=day.isoformat(),
        ):
            logger.info(f"{operation}_started", extra={"quantity": quantity})
            t0 = time.monotonic()
            try:
                with self._storage_errors(operation):
                    # A failed call leaves a caller-owned transaction as it was.
                    savepoint = self.session.begin_nested()
                    try:
                        result = self._apply(operation, quantity, day)
                        savepoint.commit()
                    except BaseException:
                        savepoint.rollback()
                        raise
                    if self._auto_commit:
                        self.session.commit()
            except BaseException:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                if self._auto_commit:
                    self.session.rollback()
                logger.warning(
                    f"{operation}_failed",
                    extra={"quantity": quantity, "duration_ms": duration_ms},
                    exc_info=True,
                )
                raise

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            with LogContext.bind(revision=str(result.revision)):
                logger.info(f"{operation}_completed", extra={
                    "quantity": quantity,
                    "num_expired": result.num_expired,
                    "batches": len(result.snapshot),
                    "in_inventory": result.ledger_entry.in_inventory,
                    "duration_ms": duration_ms,
                })
            return result

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        # Running totals past the BigInteger range overflow inside the driver.
        except (SQLAlchemyError, OverflowError) as exc:
            logger.error("storage_failure", extra={
                "operation": operation,
                "error": type(exc).__name__,
            })
            raise StorageError(operation, f"Storage failure during {operation}: {exc}") from exc

    # =========================================================================
    # Pipeline
    # =========================================================================

    def _apply(self, operation: str, quantity: int, day: date) -> MutationResult:
        revision = self._guard.acquire()

        latest = self._ledger_reader.latest()
        latest_day = latest.day if latest is not None else EPOCH_FLOOR
        previous_in_inventory = latest.in_inventory if latest is not None else 0

        # INVARIANT: monotonic days
        if day < latest_day:
            logger.warning("mutation_rejected_out_of_order", extra={
                "latest_day": latest_day.isoformat(),
            })
            raise OrderingError(day, latest_day)

        sweep = self._queue.sweep(day, self.shelf_life, self._ledger)
        num_expired = sweep.num_expired
        available = previous_in_inventory - num_expired

        # INVARIANT: ledger snapshot agrees with the swept queue
        queued = self._batches.total_quantity()
        if available != queued:
            logger.error("ledger_queue_disagreement", extra={
                "previous_in_inventory": previous_in_inventory,
                "num_expired": num_expired,
                "queued": queued,
            })
            raise InventoryIntegrityError(
                operation,
                f"ledger reports {available} fresh units after sweep but queue holds {queued}",
            )

        if operation == SELL and quantity > available:
            logger.warning("sell_rejected_insufficient_stock", extra={
                "requested": quantity,
                "available": available,
            })
            raise InsufficientStockError(quantity, available, day)

        if operation == PURCHASE:
            entry = self._record_purchase(quantity, day, latest, previous_in_inventory, num_expired)
        else:
            entry = self._record_sell(quantity, day, latest, previous_in_inventory, num_expired)

        snapshot = self._batches.snapshot()

        return MutationResult(
            operation=operation,
            day=day,
            quantity=quantity,
            num_expired=num_expired,
            revision=revision,
            ledger_entry=entry,
            snapshot=snapshot,
        )

    def _record_purchase(
        self,
        quantity: int,
        day: date,
        latest: LedgerEntry | None,
        previous_in_inventory: int,
        num_expired: int,
    ) -> LedgerEntry:
        if latest is None or day > latest.day:
            entry = self._ledger.create_entry(
                day,
                purchased=quantity,
                sold=0,
                in_inventory=previous_in_inventory + quantity - num_expired,
            )
        else:
            entry = self._ledger.apply_delta(
                day,
                purchased=quantity,
                inventory_change=quantity - num_expired,
            )
        self._queue.add_purchase(day, quantity)
        return entry

    def _record_sell(
        self,
        quantity: int,
        day: date,
        latest: LedgerEntry | None,
        previous_in_inventory: int,
        num_expired: int,
    ) -> LedgerEntry:
        if latest is None or day > latest.day:
            entry = self._ledger.create_entry(
                day,
                purchased=0,
                sold=quantity,
                in_inventory=previous_in_inventory - quantity - num_expired,
            )
        else:
            entry = self._ledger.apply_delta(
                day,
                sold=quantity,
                inventory_change=-quantity - num_expired,
            )
        self._queue.consume_fifo(quantity, day)
        return entry
