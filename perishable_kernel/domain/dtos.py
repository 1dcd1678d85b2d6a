"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that cross the service boundary:
    LedgerEntry and Batch (persistence boundary), QueueSnapshot (mutation
    output), RangeTotals / ExpiryInventory / AnalyticsReport (analytics
    output) and MutationResult (orchestrator audit record).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods exist as boundary converters but are only
    invoked from the service and selector layers.

Invariants enforced:
    - Services and selectors return DTOs, never ORM entities.
    - QueueSnapshot batches are strictly ascending by purchase day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from perishable_kernel.domain.values import Money

EPOCH_FLOOR = date(1970, 1, 1)


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """One ledger day: cumulative counters plus end-of-day fresh inventory."""

    day: date
    purchased: int = 0
    sold: int = 0
    expired: int = 0
    in_inventory: int = 0

    @classmethod
    def empty(cls, day: date = EPOCH_FLOOR) -> LedgerEntry:
        """Zero entry used when no ledger row exists yet."""
        return cls(day=day)

    @classmethod
    def from_model(cls, model: Any) -> LedgerEntry:
        return cls(
            day=model.day,
            purchased=model.purchased,
            sold=model.sold,
            expired=model.expired,
            in_inventory=model.in_inventory,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day.isoformat(),
            "purchased": self.purchased,
            "sold": self.sold,
            "expired": self.expired,
            "inInventory": self.in_inventory,
        }


@dataclass(frozen=True, slots=True)
class Batch:
    """Unsold, unswept stock bought on ``purchase_day``."""

    purchase_day: date
    quantity: int

    @classmethod
    def from_model(cls, model: Any) -> Batch:
        return cls(purchase_day=model.purchase_day, quantity=model.quantity)

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.purchase_day.isoformat(), "quantity": self.quantity}


@dataclass(frozen=True, slots=True)
class QueueSnapshot:
    """
    Ordered view of the batch queue after a mutation.

    Guarantees:
        - batches are strictly ascending by purchase_day (no duplicate days).
    """

    batches: tuple[Batch, ...] = ()

    def __post_init__(self) -> None:
        days = [b.purchase_day for b in self.batches]
        if any(a >= b for a, b in zip(days, days[1:])):
            raise ValueError("QueueSnapshot batches must be strictly ascending by day")

    @property
    def total_quantity(self) -> int:
        return sum(b.quantity for b in self.batches)

    def __len__(self) -> int:
        return len(self.batches)

    def __iter__(self):
        return iter(self.batches)

    def to_list(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self.batches]


@dataclass(frozen=True, slots=True)
class MutationResult:
    """Audit record of one committed-or-pending Purchase/Sell."""

    operation: str
    day: date
    quantity: int
    num_expired: int
    revision: int
    ledger_entry: LedgerEntry
    snapshot: QueueSnapshot

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "day": self.day.isoformat(),
            "quantity": self.quantity,
            "numExpired": self.num_expired,
            "revision": self.revision,
            "ledger": self.ledger_entry.to_dict(),
            "store": self.snapshot.to_list(),
        }


@dataclass(frozen=True, slots=True)
class RangeTotals:
    """Purchased / sold totals over an inclusive day range."""

    purchased: int = 0
    sold: int = 0


@dataclass(frozen=True, slots=True)
class ExpiryInventory:
    """Expired units and fresh inventory reconstructed as of a window end."""

    in_inventory: int = 0
    expired: int = 0


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    """Analytics over [start_date, end_date]."""

    start_date: date
    end_date: date
    purchased: int
    sold: int
    profit: Money
    in_inventory: int
    expired: int

    @property
    def formatted_profit(self) -> str:
        return self.profit.format()

    def to_dict(self) -> dict[str, Any]:
        return {
            "purchased": self.purchased,
            "sold": self.sold,
            "profit": self.formatted_profit,
            "inInventory": self.in_inventory,
            "expired": self.expired,
        }
