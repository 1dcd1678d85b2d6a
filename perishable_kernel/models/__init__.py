"""ORM models for the ledger, the batch queue and the inventory guard."""

from perishable_kernel.models.batch import BatchModel
from perishable_kernel.models.guard import InventoryGuard
from perishable_kernel.models.ledger import LedgerEntryModel

__all__ = [
    "BatchModel",
    "InventoryGuard",
    "LedgerEntryModel",
]
