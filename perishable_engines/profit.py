"""
perishable_engines.profit -- Profit over an analytics window.

Pure calculation: ``price * sold - cost * purchased``.  Rounding and
currency rendering happen on the returned Money (``Money.format``).
"""

from __future__ import annotations

from perishable_kernel.domain.dtos import RangeTotals
from perishable_kernel.domain.values import Money


def compute_profit(totals: RangeTotals, unit_price: Money, unit_cost: Money) -> Money:
    """Revenue from units sold minus spend on units purchased (may be negative)."""
    return unit_price * totals.sold - unit_cost * totals.purchased
