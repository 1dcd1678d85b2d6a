"""
Config → Kernel Bridges.

Functions that convert an InventoryConfig into kernel-compatible inputs.
These live in perishable_config (the producer) because the kernel must
NEVER import perishable_config.

Usage:
    from perishable_config.bridges import build_orchestrator, build_analytics

    config = get_active_config()
    with session_scope(factory) as session:
        build_orchestrator(session, config).purchase(10, date(2024, 1, 1))
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from perishable_config.schema import InventoryConfig
from perishable_kernel.domain.values import Money
from perishable_kernel.services.analytics_service import AnalyticsService
from perishable_kernel.services.inventory_orchestrator import InventoryOrchestrator


def build_pricing(config: InventoryConfig) -> tuple[Money, Money]:
    """Return ``(unit_price, unit_cost)`` as Money in the configured currency."""
    return (
        Money.of(config.unit_price, config.currency),
        Money.of(config.unit_cost, config.currency),
    )


def build_orchestrator(
    session: Session,
    config: InventoryConfig,
    auto_commit: bool = True,
) -> InventoryOrchestrator:
    return InventoryOrchestrator(session, config.shelf_life, auto_commit=auto_commit)


def build_analytics(session: Session, config: InventoryConfig) -> AnalyticsService:
    unit_price, unit_cost = build_pricing(config)
    return AnalyticsService(session, config.shelf_life, unit_price, unit_cost)
