"""
Property-based tests for the inventory laws.

Random Purchase/Sell sequences with non-decreasing dates are replayed
against a fresh in-memory store per example, and checked for:

- Queue ordering and ledger/queue agreement after every mutation
- FIFO law: a sell only ever removes or reduces the oldest fresh batches
- Oversell law: a rejected sell leaves the store unchanged
- Reconstruction consistency: analytics as of any end date equals what a
  real sweep executed exactly at that date produces
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, timedelta

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from sqlalchemy.orm import Session, sessionmaker

from perishable_engines.fifo import plan_fifo_consumption
from perishable_kernel.db import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
    read_only_scope,
    session_scope,
)
from perishable_kernel.domain.dtos import Batch
from perishable_kernel.domain.values import Money
from perishable_kernel.exceptions import InsufficientStockError
from perishable_kernel.selectors import BatchSelector, LedgerSelector
from perishable_kernel.services import (
    AnalyticsService,
    BatchQueueService,
    InventoryOrchestrator,
    LedgerService,
)

SHELF_LIFE = timedelta(days=3)
BASE_DAY = date(2024, 1, 1)
PRICE = Money.of("0.35", "USD")
COST = Money.of("0.20", "USD")

PROPERTY_SETTINGS = settings(
    max_examples=60,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

# (operation, quantity, days after the previous operation)
operations = st.lists(
    st.tuples(
        st.sampled_from(["purchase", "sell"]),
        st.integers(min_value=1, max_value=20),
        st.integers(min_value=0, max_value=3),
    ),
    min_size=1,
    max_size=15,
)


def _schedule(ops: list[tuple[str, int, int]]) -> list[tuple[str, int, date]]:
    day = BASE_DAY
    scheduled = []
    for kind, quantity, gap in ops:
        day += timedelta(days=gap)
        scheduled.append((kind, quantity, day))
    return scheduled


@contextmanager
def _store() -> Iterator[sessionmaker[Session]]:
    engine = create_engine_from_url("sqlite://")
    create_tables(engine)
    try:
        yield create_session_factory(engine)
    finally:
        engine.dispose()


def _replay(factory: sessionmaker[Session], schedule: list[tuple[str, int, date]]) -> None:
    with session_scope(factory) as session:
        orchestrator = InventoryOrchestrator(session, SHELF_LIFE)
        for kind, quantity, day in schedule:
            try:
                getattr(orchestrator, kind)(quantity, day)
            except InsufficientStockError:
                pass


def _state(session: Session) -> tuple[list[dict], list[dict]]:
    ledger = [e.to_dict() for e in LedgerSelector(session).entries()]
    return ledger, BatchSelector(session).snapshot().to_list()


class TestMutationLaws:

    @given(ops=operations)
    @PROPERTY_SETTINGS
    def test_laws_hold_after_every_mutation(self, ops):
        with _store() as factory, session_scope(factory) as session:
            orchestrator = InventoryOrchestrator(session, SHELF_LIFE)
            ledger = LedgerSelector(session)
            batches = BatchSelector(session)

            for kind, quantity, day in _schedule(ops):
                before = _state(session)
                fresh = [
                    b for b in batches.snapshot() if b.purchase_day > day - SHELF_LIFE
                ]

                if kind == "purchase":
                    snapshot = orchestrator.purchase(quantity, day)
                else:
                    available = sum(b.quantity for b in fresh)
                    try:
                        snapshot = orchestrator.sell(quantity, day)
                    except InsufficientStockError:
                        # Oversell law
                        assert quantity > available
                        assert _state(session) == before
                        continue

                    # FIFO law: survivors are a suffix of the fresh queue,
                    # with only the first one possibly reduced.
                    remaining = list(snapshot)
                    survivors = fresh[len(fresh) - len(remaining):]
                    assert [b.purchase_day for b in remaining] == [
                        b.purchase_day for b in survivors
                    ]
                    if remaining:
                        assert remaining[0].quantity <= survivors[0].quantity
                        assert remaining[1:] == survivors[1:]
                    assert available - snapshot.total_quantity == quantity

                days = [b.purchase_day for b in snapshot]
                assert days == sorted(set(days))
                assert all(b.quantity > 0 for b in snapshot)
                assert ledger.latest().in_inventory == snapshot.total_quantity


class TestReconstructionConsistency:

    @given(
        ops=operations,
        end_offset=st.integers(min_value=0, max_value=40),
        start_back=st.integers(min_value=0, max_value=15),
    )
    @PROPERTY_SETTINGS
    def test_analytics_matches_a_sweep_at_end_date(self, ops, end_offset, start_back):
        schedule = _schedule(ops)
        end = BASE_DAY + timedelta(days=end_offset)
        start = end - timedelta(days=start_back)

        with _store() as full, _store() as prefix:
            _replay(full, schedule)
            _replay(prefix, [op for op in schedule if op[2] <= end])

            # Ground truth: actually sweep the prefix store at ``end``.
            session = prefix()
            try:
                BatchQueueService(session).sweep(end, SHELF_LIFE, LedgerService(session))
                true_inventory = BatchSelector(session).total_quantity()
                true_expired = sum(
                    e.expired
                    for e in LedgerSelector(session).entries()
                    if start - SHELF_LIFE <= e.day <= end - SHELF_LIFE
                )
            finally:
                session.rollback()
                session.close()

            with read_only_scope(full) as session:
                result = AnalyticsService(
                    session, SHELF_LIFE, PRICE, COST
                ).expiry_and_inventory(start, end)

        assert result.in_inventory == true_inventory
        assert result.expired == true_expired


class TestFifoPlanner:

    @given(
        quantities=st.lists(st.integers(min_value=1, max_value=50), min_size=1, max_size=10),
        data=st.data(),
    )
    @settings(max_examples=200)
    def test_plan_consumes_exactly_oldest_first(self, quantities, data):
        batches = [
            Batch(BASE_DAY + timedelta(days=i), q) for i, q in enumerate(quantities)
        ]
        quantity = data.draw(st.integers(min_value=0, max_value=sum(quantities)))

        plan = plan_fifo_consumption(batches, quantity, BASE_DAY)

        assert plan.total_consumed == quantity
        assert list(plan.removed) == batches[: len(plan.removed)]
        if plan.reduction is not None:
            boundary = batches[len(plan.removed)]
            assert plan.reduction.purchase_day == boundary.purchase_day
            assert 0 < plan.reduction.consumed < boundary.quantity
