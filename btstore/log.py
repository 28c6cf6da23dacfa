"""Logging setup for hosts embedding the storage layer."""

from __future__ import annotations

import logging

from btstore.config import StorageConfig


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    debug: bool = False,
    level: str | None = None,
    config: StorageConfig | None = None,
) -> None:
    """Configure root logging.

    An explicit ``level`` wins, then the verbosity flags, then the
    configured ``log_level``. Without any of them the level is INFO.
    """
    if level:
        resolved = _level_number(level)
    elif quiet:
        resolved = logging.WARNING
    elif verbose or debug:
        resolved = logging.DEBUG
    elif config is not None:
        resolved = _level_number(config.log_level)
    else:
        resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _level_number(name: str) -> int:
    resolved = logging.getLevelName(name.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {name}")
    return resolved
