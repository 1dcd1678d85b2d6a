"""
Configuration Loader (``perishable_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a validated, frozen
``InventoryConfig``.  The single public entry point for runtime config is
``perishable_config.get_active_config()``.

Invariants enforced
-------------------
* Every parse error raises ``ValueError`` or ``KeyError`` with a
  descriptive message; no silent defaults for required fields.
* Shelf life is a whole number of days >= 1.
* Unit price and cost are non-negative decimals, written as strings or
  integers (floats are rejected to avoid binary rounding).
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from perishable_config.schema import InventoryConfig
from perishable_kernel.domain.values import Currency


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return data


def _parse_money_amount(value: Any, name: str) -> Decimal:
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"{name} must be a string or integer, got {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"{name} is not a valid decimal: {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"{name} must be a non-negative amount, got {value!r}")
    return amount


def _parse_shelf_life(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"inventory.shelf_life_days must be an integer >= 1, got {value!r}")
    return value


def parse_inventory_config(data: dict[str, Any]) -> InventoryConfig:
    """
    Parse a raw YAML mapping into an InventoryConfig.

    Postconditions:
        - Returns a frozen InventoryConfig with its checksum filled in.
    """
    inventory = data["inventory"]
    pricing = data["pricing"]
    database = data.get("database") or {}

    currency = Currency(pricing.get("currency", "USD")).code
    config = InventoryConfig(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        shelf_life_days=_parse_shelf_life(inventory["shelf_life_days"]),
        currency=currency,
        unit_price=_parse_money_amount(pricing["unit_price"], "pricing.unit_price"),
        unit_cost=_parse_money_amount(pricing["unit_cost"], "pricing.unit_cost"),
        database_url=str(database.get("url", "sqlite:///perishable_inventory.db")),
    )
    return replace(config, checksum=compute_checksum(config))


def compute_checksum(config: InventoryConfig) -> str:
    """Deterministic SHA-256 over the business-relevant fields."""
    canonical = json.dumps(
        {
            "config_id": config.config_id,
            "version": config.version,
            "shelf_life_days": config.shelf_life_days,
            "currency": config.currency,
            "unit_price": str(config.unit_price),
            "unit_cost": str(config.unit_cost),
        },
        sort_keys=True,
    )
    return hashlib.sha256(canonical.encode()).hexdigest()
