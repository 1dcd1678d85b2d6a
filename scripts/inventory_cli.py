#!/usr/bin/env python3
"""
Perishable inventory CLI.

Record purchases and sales, query analytics, and inspect the store from the
command line.  Every command prints JSON on stdout; structured logs go to
stderr.

Usage:
    python -m scripts.inventory_cli init-db
    python -m scripts.inventory_cli purchase 10 2024-01-01
    python -m scripts.inventory_cli sell 4 2024-01-02
    python -m scripts.inventory_cli analytics 2024-01-01 2024-01-31
    python -m scripts.inventory_cli show
    python -m scripts.inventory_cli --config my.yaml --database-url sqlite:///x.db show

Exit codes:
    0  success
    1  the command was rejected (validation, ordering, stock, storage)
       or the configuration file could not be loaded
    2  bad command-line usage (argparse)
"""

import argparse
import json
import logging
import sys

import yaml

from perishable_config import get_active_config
from perishable_config.bridges import build_analytics, build_orchestrator
from perishable_config.schema import InventoryConfig
from perishable_kernel.db import (
    create_engine_from_url,
    create_session_factory,
    create_tables,
    read_only_scope,
    session_scope,
)
from perishable_kernel.domain.validation import parse_analytics_range, parse_transaction
from perishable_kernel.exceptions import PerishableKernelError
from perishable_kernel.logging_config import configure_logging, get_logger
from perishable_kernel.selectors import BatchSelector, LedgerSelector

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory_cli",
        description="Perishable goods inventory ledger",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--database-url", help="Override the configured database URL")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables and seed the inventory guard row")

    for name in ("purchase", "sell"):
        p = sub.add_parser(name, help=f"Record a {name}")
        p.add_argument("quantity", help="Positive whole number of units")
        p.add_argument("date", help="Day of the operation, YYYY-MM-DD")

    p = sub.add_parser("analytics", help="Analytics over an inclusive date range")
    p.add_argument("start_date", help="YYYY-MM-DD")
    p.add_argument("end_date", help="YYYY-MM-DD")

    sub.add_parser("show", help="Print the ledger and the batch queue")
    return parser


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2))


def _run(args: argparse.Namespace, config: InventoryConfig) -> None:
    engine = create_engine_from_url(args.database_url or config.database_url)
    factory = create_session_factory(engine)
    try:
        if args.command == "init-db":
            create_tables(engine)
            _emit({"status": "ok", "tables": ["batches", "inventory_guard", "ledger_entries"]})

        elif args.command in ("purchase", "sell"):
            quantity, day = parse_transaction(args.quantity, args.date)
            with session_scope(factory) as session:
                orchestrator = build_orchestrator(session, config)
                if args.command == "purchase":
                    snapshot = orchestrator.purchase(quantity, day)
                else:
                    snapshot = orchestrator.sell(quantity, day)
            _emit({"store": snapshot.to_list()})

        elif args.command == "analytics":
            start, end = parse_analytics_range(args.start_date, args.end_date)
            with read_only_scope(factory) as session:
                report = build_analytics(session, config).analytics(start, end)
            _emit(report.to_dict())

        elif args.command == "show":
            with read_only_scope(factory) as session:
                ledger = [e.to_dict() for e in LedgerSelector(session).entries()]
                store = BatchSelector(session).snapshot().to_list()
            _emit({"ledger": ledger, "store": store})
    finally:
        engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = get_active_config(args.config)
    except (OSError, KeyError, ValueError, yaml.YAMLError) as exc:
        print(f"ERROR [CONFIG_ERROR]: {exc}", file=sys.stderr)
        return 1

    try:
        _run(args, config)
    except PerishableKernelError as exc:
        print(f"ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
