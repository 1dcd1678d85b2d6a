"""
BaseService -- abstract base for all kernel write services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write service.  Concrete services receive a SQLAlchemy ``Session``
    and persist through ``session.flush()`` -- never ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or rollback themselves.  The InventoryOrchestrator (or
    session_scope, or a test harness) owns commit/rollback, so a sweep, a
    ledger delta and a batch mutation land together or not at all.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for all kernel write services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide query-only methods -- those belong in
          ``perishable_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
