"""
Module: perishable_kernel.db.engine
Responsibility: SQLAlchemy engine construction, session factories, and
    transactional scope utilities.  This is the single point of database
    connection configuration for the kernel.
Architecture position: Kernel > DB.  May import from db/base.py and the
    logging configuration.  MUST NOT import from services/, selectors/,
    domain/, or outer layers (create_tables imports models to register them).

Invariants enforced:
    - No process-wide engine: every function takes or returns an explicit
      Engine / sessionmaker, which callers thread through the orchestrator
      and the analytics service.
    - Mutations run at READ COMMITTED on PostgreSQL and are serialized by the
      inventory guard row lock (see services/guard_service.py).
    - Analytics reads run at REPEATABLE READ where the dialect supports it,
      giving a consistent multi-row view without locks.
    - session_scope() commits on success and rolls back on ANY exit by
      exception, including cancellation (KeyboardInterrupt, task cancel).

Failure modes:
    - OperationalError on connection failure propagates from the first
      statement executed in a scope.
    - Connection pool exhaustion if pool_size + max_overflow is exceeded.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, insert
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from perishable_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_READ_ISOLATION = {
    "postgresql": "REPEATABLE READ",
    "mysql": "REPEATABLE READ",
}


def create_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create a SQLAlchemy engine for the inventory store.

    PostgreSQL (and other server databases) get a QueuePool at READ COMMITTED.
    SQLite gets the driver defaults; an in-memory SQLite database is pinned to
    a single shared connection so every session sees the same store.

    Args:
        database_url: SQLAlchemy URL (postgresql://..., sqlite:///path, sqlite://).
        echo: If True, log all SQL statements.
        pool_size: Number of connections to keep in the pool.
        max_overflow: Max connections beyond pool_size.
        pool_pre_ping: If True, test connections before use.
        pool_timeout: Seconds to wait for a pooled connection.
        pool_recycle: Seconds after which a connection is recycled.

    Returns:
        SQLAlchemy Engine instance.
    """
    url = make_url(database_url)
    dialect = url.get_backend_name()

    if dialect == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        _emit_sqlite_begin(engine)
    else:
        engine = create_engine(
            url,
            echo=echo,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            isolation_level="READ COMMITTED",
        )

    logger.info(
        "engine_initialized",
        extra={
            "dialect": dialect,
            "pool_size": pool_size if dialect != "sqlite" else None,
            "echo": echo,
        },
    )
    return engine


def _emit_sqlite_begin(engine: Engine) -> None:
    """
    Let SQLAlchemy own SQLite transaction boundaries.

    pysqlite only emits BEGIN in front of DML, so a SAVEPOINT issued first
    becomes the outermost transaction and its RELEASE commits.  The
    orchestrator opens a savepoint per mutation, so BEGIN must be explicit.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Build the session factory used by session_scope / read_only_scope."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Postconditions: On normal exit, session is committed and closed.
        On any exception (BaseException included), session is rolled back
        and closed, and the exception is re-raised to the caller.

    Usage:
        with session_scope(factory) as session:
            InventoryOrchestrator(session, config).purchase(10, day)
            # Commits on successful exit, rolls back on exception
    """
    session = factory()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except BaseException:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


@contextmanager
def read_only_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provide a read-only transactional scope for analytics.

    The transaction is pinned to REPEATABLE READ on dialects that support it
    and always rolled back on exit, so nothing can be persisted through it.
    """
    session = factory()
    try:
        isolation = _READ_ISOLATION.get(session.get_bind().dialect.name)
        if isolation is not None:
            session.connection(execution_options={"isolation_level": isolation})
        yield session
    finally:
        session.rollback()
        session.close()


def create_tables(engine: Engine) -> None:
    """
    Create all inventory tables and seed the inventory guard row.

    Idempotent: existing tables are left untouched and the guard row is only
    inserted when missing.
    """
    from perishable_kernel.db.base import Base
    from perishable_kernel.models import BatchModel, InventoryGuard, LedgerEntryModel  # noqa: F401
    from sqlalchemy import select

    Base.metadata.create_all(engine)

    with engine.begin() as conn:
        existing = conn.execute(
            select(InventoryGuard.name).where(InventoryGuard.name == InventoryGuard.STORE)
        ).first()
        if existing is None:
            conn.execute(insert(InventoryGuard).values(name=InventoryGuard.STORE, revision=0))

    logger.info(
        "tables_created",
        extra={"tables": sorted(Base.metadata.tables)},
    )


def drop_tables(engine: Engine) -> None:
    """
    Drop all tables. Use with caution - primarily for testing.
    """
    from perishable_kernel.db.base import Base
    import perishable_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine)
