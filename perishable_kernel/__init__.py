"""
Perishable Kernel

Accounting core for a perishable good tracked by calendar day:
- Per-day aggregate ledger (purchased / sold / expired / in inventory)
- FIFO queue of unsold purchase batches
- Lazy, mutation-triggered expiration sweeps
- Point-in-time analytics reconstruction
"""

__version__ = "0.1.0"
