"""
Module: perishable_kernel.models.batch
Responsibility: ORM persistence for the batch queue -- stock bought on one day
    that has been neither sold nor swept as expired.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    B1 -- One batch per purchase day (primary key on purchase_day).
    B2 -- FIFO ordering.  The primary key index gives ascending range scans by
          purchase day for both the FIFO walk and the expiration sweep.
    B3 -- Positive quantity.  Batches reduced to zero are deleted, never kept
          as zero-quantity rows (CHECK quantity > 0).
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, CheckConstraint, Date
from sqlalchemy.orm import Mapped, mapped_column

from perishable_kernel.db.base import Base


class BatchModel(Base):
    """Persistent storage for one unsold, unswept purchase batch."""

    __tablename__ = "batches"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_batch_quantity_positive"),
    )

    purchase_day: Mapped[date] = mapped_column(Date, primary_key=True)

    quantity: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Batch {self.purchase_day.isoformat()}: quantity={self.quantity}>"
