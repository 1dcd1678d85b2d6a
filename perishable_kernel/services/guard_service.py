"""
GuardService -- serializes inventory mutations via a locked counter row.

Responsibility:
    Every Purchase/Sell first bumps the ``inventory_guard`` row.  The UPDATE
    takes the row lock (PostgreSQL) or the database write lock (SQLite)
    before the mutation reads the ledger, so two concurrent sells can never
    both pass the oversell check against the same stale inventory.  The
    bumped value is the store revision, logged with every mutation.

Invariants enforced:
    - The guard is acquired before any ledger or batch read in a mutation.
    - Revisions are strictly increasing across committed mutations; a
      rolled-back mutation returns its revision.

Failure modes:
    - IntegrityError: concurrent creation of a missing guard row (handled
      via savepoint rollback and retry).  create_tables() seeds the row, so
      this path only runs against hand-built schemas.
"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from perishable_kernel.logging_config import get_logger
from perishable_kernel.models.guard import InventoryGuard
from perishable_kernel.services.base import BaseService

logger = get_logger("services.guard")


class GuardService(BaseService):
    """Acquire the store-wide mutation guard."""

    def acquire(self, name: str = InventoryGuard.STORE) -> int:
        """
        Lock the guard row for the rest of the transaction.

        Postconditions:
            - Returns the new revision (> 0).
            - The row stays locked until the caller's transaction ends.
        """
        if self._bump(name) == 0:
            savepoint = self.session.begin_nested()
            try:
                self.session.add(InventoryGuard(name=name, revision=0))
                self.session.flush()
                savepoint.commit()
            except IntegrityError:
                logger.debug("inventory_guard_race_retry", extra={"guard": name})
                savepoint.rollback()
            self._bump(name)

        revision = self.session.execute(
            select(InventoryGuard.revision)
            .where(InventoryGuard.name == name)
            .with_for_update()
        ).scalar_one()
        assert revision > 0, "inventory guard revision must be strictly positive"

        logger.debug("inventory_guard_acquired", extra={"guard": name, "revision": revision})
        return revision

    def current_revision(self, name: str = InventoryGuard.STORE) -> int:
        """Revision of the last committed (or in-flight) mutation; 0 if none."""
        revision = self.session.execute(
            select(InventoryGuard.revision).where(InventoryGuard.name == name)
        ).scalar_one_or_none()
        return revision or 0

    def _bump(self, name: str) -> int:
        result = self.session.execute(
            update(InventoryGuard)
            .where(InventoryGuard.name == name)
            .values(revision=InventoryGuard.revision + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
