"""Kernel services: flush-only writers, the mutation orchestrator and analytics."""

from perishable_kernel.services.analytics_service import AnalyticsService
from perishable_kernel.services.base import BaseService
from perishable_kernel.services.batch_queue_service import BatchQueueService
from perishable_kernel.services.guard_service import GuardService
from perishable_kernel.services.inventory_orchestrator import InventoryOrchestrator
from perishable_kernel.services.ledger_service import LedgerService

__all__ = [
    "AnalyticsService",
    "BaseService",
    "BatchQueueService",
    "GuardService",
    "InventoryOrchestrator",
    "LedgerService",
]
