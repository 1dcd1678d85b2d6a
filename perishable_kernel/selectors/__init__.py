"""Read-only selectors over the ledger and the batch queue."""

from perishable_kernel.selectors.base import BaseSelector
from perishable_kernel.selectors.batch_selector import BatchSelector
from perishable_kernel.selectors.ledger_selector import LedgerSelector

__all__ = [
    "BaseSelector",
    "BatchSelector",
    "LedgerSelector",
]
