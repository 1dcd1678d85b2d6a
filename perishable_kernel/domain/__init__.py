"""Pure domain layer: value objects, DTOs and boundary validation."""

from perishable_kernel.domain.dtos import (
    EPOCH_FLOOR,
    AnalyticsReport,
    Batch,
    ExpiryInventory,
    LedgerEntry,
    MutationResult,
    QueueSnapshot,
    RangeTotals,
)
from perishable_kernel.domain.values import Currency, Money

__all__ = [
    "EPOCH_FLOOR",
    "AnalyticsReport",
    "Batch",
    "Currency",
    "ExpiryInventory",
    "LedgerEntry",
    "Money",
    "MutationResult",
    "QueueSnapshot",
    "RangeTotals",
]
