"""Shared logging helpers for instarelay."""

from __future__ import annotations

import logging

LOG_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_log_level(name: str) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value."""

    normalized = name.strip().upper()
    if normalized not in LOG_LEVEL_NAMES:
        raise ValueError(f"Unknown log level: {name}")
    return logging.getLevelNamesMapping()[normalized]


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    Thin wrapper over ``logging.basicConfig``: INFO by default and a terse format
    that keeps one emitted event per line. Pass ``force=True`` to reconfigure
    from tests or when the CLI overrides the level.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
