"""
Inventory configuration schema.

The frozen runtime configuration: shelf life, unit pricing and the store
URL.  YAML is parsed into this type by the loader; kernel-facing inputs are
derived from it by the bridges.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal


@dataclass(frozen=True)
class InventoryConfig:
    """Validated configuration set."""

    config_id: str
    version: int
    shelf_life_days: int
    currency: str
    unit_price: Decimal
    unit_cost: Decimal
    database_url: str
    checksum: str = ""

    @property
    def shelf_life(self) -> timedelta:
        return timedelta(days=self.shelf_life_days)
