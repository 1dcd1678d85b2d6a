"""
Module: perishable_kernel.db.base
Responsibility: Declarative base class for all SQLAlchemy ORM models.  Provides
    the type annotation map for consistent column types across the schema.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Calendar days: Python date maps to DATE, so ledger rows and batches are
      keyed by a day with no time-of-day or timezone component.
    - Integer counts: Python int maps to BigInteger for every quantity column.
    - Decimal precision: Decimal maps to Numeric(38, 9).  NEVER use float for
      monetary amounts.

Models are keyed by their natural day key (LedgerEntry.day,
Batch.purchase_day), so Base declares no primary key itself.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import BigInteger, Date, DateTime, Numeric
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - date maps to Date.
        - int maps to BigInteger.
        - Decimal maps to Numeric(38, 9).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        date: Date,
        int: BigInteger,
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
    }
