"""Logging setup for archgen.

All modules log under the ``archgen`` hierarchy.  The console handler is a
``rich`` handler so log lines share styling with the rest of the CLI output.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from archgen.utils import console, ensure_dir

_LOGGER_NAME = "archgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the archgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the archgen logger with rich console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    rich_handler.setLevel(level)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file is not None:
        log_file = Path(log_file)
        ensure_dir(log_file.parent)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
