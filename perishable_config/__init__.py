"""
perishable_config -- single public entrypoint for inventory configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  Returns a frozen ``InventoryConfig``.

Architecture position:
    Configuration.  This package sits above ``perishable_kernel`` and
    ``perishable_engines``.  The kernel MUST NEVER import from
    ``perishable_config``; ``perishable_config.bridges`` translates the
    config into kernel constructor arguments.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Deterministic checksum: the same YAML always produces the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` -- a required section or key is missing.
    - ``ValueError`` -- a value fails validation.

Audit relevance:
    Every successful ``get_active_config()`` call emits a ``config_loaded``
    log entry with the config_id, version and checksum, tying recorded
    analytics back to the pricing that produced them.
"""

from __future__ import annotations

import logging
from pathlib import Path

from perishable_config.loader import load_yaml_file, parse_inventory_config
from perishable_config.schema import InventoryConfig

_logger = logging.getLogger("perishable_kernel.config")

# Default configuration set
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> InventoryConfig:
    """The ONLY public configuration entrypoint.

    Guarantees:
        - The returned config has passed validation and carries its checksum.
        - A ``config_loaded`` log entry is emitted on every successful call.

    Non-goals:
        - No caching across calls and no environment-variable overrides;
          callers pass overrides (e.g. a database URL) explicitly.

    Args:
        config_path: Path to a YAML configuration file.  Defaults to
            perishable_config/sets/default.yaml.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If configuration validation fails.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_inventory_config(load_yaml_file(path))

    _logger.info(
        "config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "shelf_life_days": config.shelf_life_days,
            "currency": config.currency,
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "InventoryConfig",
    "get_active_config",
]
