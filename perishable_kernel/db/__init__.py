"""Database layer - base class, engine and transactional scopes."""

from perishable_kernel.db.base import Base
from perishable_kernel.db.engine import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
    drop_tables,
    read_only_scope,
    session_scope,
)

__all__ = [
    "Base",
    "create_engine_from_url",
    "create_session_factory",
    "create_tables",
    "drop_tables",
    "read_only_scope",
    "session_scope",
]
