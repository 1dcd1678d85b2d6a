"""
Module: perishable_kernel.models.ledger
Responsibility: ORM persistence for the per-day aggregate ledger.  Each row
    records the cumulative purchased / sold / expired counts of one calendar
    day and the end-of-day fresh inventory snapshot.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    L1 -- One row per day.  ``day`` is the primary key.
    L2 -- Monotone counters.  purchased, sold and expired are only ever
          incremented after the row exists (enforced at service layer).
    L3 -- Retroactive expiry.  ``expired`` accrues on the row of the batch's
          ORIGINAL purchase day, not the day the sweep ran.
    L4 -- Non-negative counters (CHECK constraints).

Failure modes:
    - IntegrityError on a second row for the same day (L1).
    - IntegrityError on a negative counter (L4).
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, CheckConstraint, Date
from sqlalchemy.orm import Mapped, mapped_column

from perishable_kernel.db.base import Base


class LedgerEntryModel(Base):
    """
    Persistent storage for one ledger day.

    Guarantees:
        - Primary key on ``day`` supports ordered range scans by day.
        - in_inventory is signed; it is a snapshot, not a counter.

    Non-goals:
        - This model does NOT enforce L2; LedgerService only ever adds
          non-negative deltas to the counters.
    """

    __tablename__ = "ledger_entries"

    __table_args__ = (
        CheckConstraint("purchased >= 0", name="ck_ledger_purchased_non_negative"),
        CheckConstraint("sold >= 0", name="ck_ledger_sold_non_negative"),
        CheckConstraint("expired >= 0", name="ck_ledger_expired_non_negative"),
    )

    day: Mapped[date] = mapped_column(Date, primary_key=True)

    purchased: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    sold: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    # INVARIANT L3: journaled by sweeps against the purchase day
    expired: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    in_inventory: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.day.isoformat()}: purchased={self.purchased} "
            f"sold={self.sold} expired={self.expired} in_inventory={self.in_inventory}>"
        )
