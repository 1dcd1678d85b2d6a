"""
Module: perishable_kernel.models.guard
Responsibility: Inventory guard table -- one named counter row per store whose
    row lock serializes mutations and whose value is the store revision.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from perishable_kernel.db.base import Base


class InventoryGuard(Base):
    """
    Guard counter table.

    Every mutation increments the row before it reads anything else, so the
    row lock is held for the rest of the transaction.
    """

    __tablename__ = "inventory_guard"

    STORE = "store"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)

    revision: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
