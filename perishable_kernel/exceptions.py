"""
Typed Exception Hierarchy for the Perishable Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the CLI, an HTTP layer, tests) must distinguish a rejected mutation
from a broken store without parsing message strings.  Every exception below:
  1. Has its own class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        orchestrator.sell(quantity, day)
    except InsufficientStockError as e:
        respond(code=e.code, requested=e.requested, available=e.available)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PerishableKernelError (base)
    |
    +-- ValidationError             malformed quantity / date / range
    |
    +-- OrderingError               operation dated before the latest ledger day
    |
    +-- InsufficientStockError      sell exceeds fresh available stock
    |
    +-- StorageError                transactional store failure
        +-- InventoryIntegrityError ledger and batch queue disagree

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                    | When Raised
------------------------|----------------------------------------------------
VALIDATION_ERROR        | Quantity not a positive integer, date not YYYY-MM-DD
DATE_BEFORE_LATEST_DAY  | Purchase/Sell dated earlier than the latest ledger day
INSUFFICIENT_STOCK      | Sell quantity > freshness-adjusted inventory
STORAGE_ERROR           | Underlying database failure (rolled back)
INVENTORY_INTEGRITY     | Ledger snapshot disagrees with the batch queue

Every mutation error aborts the enclosing transaction: no ledger row, batch
or expiration journaling from the failed call is ever persisted.
"""

from __future__ import annotations

from datetime import date


class PerishableKernelError(Exception):
    """
    Base exception for all perishable kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PERISHABLE_KERNEL_ERROR"


class ValidationError(PerishableKernelError):
    """Input failed shape validation (quantity, date or date range)."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}: {reason} (got {value!r})")


class OrderingError(PerishableKernelError):
    """
    Mutation dated before the most recent ledger day.

    The ledger only moves forward in time; a Purchase or Sell may land on the
    latest recorded day or any later day, never earlier.
    """

    code: str = "DATE_BEFORE_LATEST_DAY"

    def __init__(self, operation_date: date, latest_day: date):
        self.operation_date = operation_date
        self.latest_day = latest_day
        super().__init__(
            f"Date {operation_date.isoformat()} cannot be earlier than "
            f"last recorded date {latest_day.isoformat()}"
        )


class InsufficientStockError(PerishableKernelError):
    """Sell requested more units than are freshly available."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, requested: int, available: int, operation_date: date):
        self.requested = requested
        self.available = available
        self.operation_date = operation_date
        super().__init__(
            f"Cannot sell {requested} units on {operation_date.isoformat()}: "
            f"only {available} fresh units available"
        )


class StorageError(PerishableKernelError):
    """The transactional store failed; the transaction was rolled back."""

    code: str = "STORAGE_ERROR"

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"Storage failure during {operation}")


class InventoryIntegrityError(StorageError):
    """
    Ledger and batch queue disagree.

    After every sweep the latest ledger snapshot minus the swept quantity must
    equal the sum of batch quantities.  A mismatch means the stored state was
    altered outside the orchestrator.
    """

    code: str = "INVENTORY_INTEGRITY"

    def __init__(self, operation: str, detail: str):
        self.detail = detail
        super().__init__(operation, f"Inventory integrity violated during {operation}: {detail}")
