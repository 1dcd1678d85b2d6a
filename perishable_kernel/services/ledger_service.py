"""
LedgerService -- flush-only writes to the per-day ledger.

Responsibility:
    Create a ledger row for a new day, apply purchase/sell deltas to the
    latest day, and journal swept expirations onto purchase-day rows.

Architecture position:
    Kernel > Services -- imperative shell.  Called only by the
    InventoryOrchestrator and BatchQueueService.sweep, inside the
    orchestrator's transaction.

Invariants enforced:
    - One row per day: create_entry refuses a day that already has a row.
    - Monotone counters: purchased, sold and expired deltas must be >= 0.
    - Retroactive expiry: journal_expired targets the batch's purchase day.

Failure modes:
    - InventoryIntegrityError when a row expected to exist is missing, or a
      new row would duplicate an existing day.
    - ValueError on a negative counter delta (programming error).
"""

from __future__ import annotations

from datetime import date

from perishable_kernel.domain.dtos import LedgerEntry
from perishable_kernel.exceptions import InventoryIntegrityError
from perishable_kernel.logging_config import get_logger
from perishable_kernel.models.ledger import LedgerEntryModel
from perishable_kernel.services.base import BaseService

logger = get_logger("services.ledger")


class LedgerService(BaseService):
    """Write access to ledger rows."""

    def create_entry(
        self,
        day: date,
        purchased: int,
        sold: int,
        in_inventory: int,
    ) -> LedgerEntry:
        """Insert the first row for ``day`` (expired starts at zero)."""
        _require_non_negative(purchased=purchased, sold=sold)
        if self.session.get(LedgerEntryModel, day) is not None:
            raise InventoryIntegrityError(
                "ledger_create", f"ledger row for {day.isoformat()} already exists"
            )

        model = LedgerEntryModel(
            day=day,
            purchased=purchased,
            sold=sold,
            expired=0,
            in_inventory=in_inventory,
        )
        self.session.add(model)
        self.session.flush()

        logger.info("ledger_entry_created", extra={
            "day": day.isoformat(),
            "purchased": purchased,
            "sold": sold,
            "in_inventory": in_inventory,
        })
        return LedgerEntry.from_model(model)

    def apply_delta(
        self,
        day: date,
        purchased: int = 0,
        sold: int = 0,
        inventory_change: int = 0,
    ) -> LedgerEntry:
        """Add to an existing day's counters and shift its inventory snapshot."""
        _require_non_negative(purchased=purchased, sold=sold)
        model = self._require(day, "ledger_update")

        model.purchased += purchased
        model.sold += sold
        model.in_inventory += inventory_change
        self.session.flush()

        logger.info("ledger_entry_updated", extra={
            "day": day.isoformat(),
            "purchased_delta": purchased,
            "sold_delta": sold,
            "inventory_change": inventory_change,
            "in_inventory": model.in_inventory,
        })
        return LedgerEntry.from_model(model)

    def journal_expired(self, purchase_day: date, quantity: int) -> None:
        """Add a swept batch's quantity to its purchase day's ``expired``."""
        _require_non_negative(expired=quantity)
        model = self._require(purchase_day, "expiration_journal")
        model.expired += quantity

        logger.debug("ledger_expiration_journaled", extra={
            "purchase_day": purchase_day.isoformat(),
            "quantity": quantity,
            "expired_total": model.expired,
        })

    def _require(self, day: date, operation: str) -> LedgerEntryModel:
        model = self.session.get(LedgerEntryModel, day)
        if model is None:
            logger.error("ledger_entry_missing", extra={
                "day": day.isoformat(),
                "operation": operation,
            })
            raise InventoryIntegrityError(operation, f"no ledger row for {day.isoformat()}")
        return model


def _require_non_negative(**deltas: int) -> None:
    for name, value in deltas.items():
        if value < 0:
            raise ValueError(f"Ledger {name} delta must be non-negative, got {value}")
