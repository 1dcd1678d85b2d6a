"""
Perishable Engines - pure calculation, zero I/O.

Sweep planning, FIFO consumption planning, point-in-time reconstruction and
profit.  The stateful services that apply these plans live in
perishable_kernel.services.
"""

from perishable_kernel.logging_config import get_logger

logger = get_logger("engines")

from perishable_engines.expiration import SweepResult, expiry_cutoff, plan_sweep
from perishable_engines.fifo import BatchReduction, ConsumptionPlan, plan_fifo_consumption
from perishable_engines.profit import compute_profit
from perishable_engines.reconstruction import (
    ReconstructionWindow,
    reconstruct,
    reconstruction_window,
)

__all__ = [
    "BatchReduction",
    "ConsumptionPlan",
    "ReconstructionWindow",
    "SweepResult",
    "compute_profit",
    "expiry_cutoff",
    "plan_fifo_consumption",
    "plan_sweep",
    "reconstruct",
    "reconstruction_window",
]
