"""Logging configuration for podguid."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT_FILE = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "WARNING",
) -> None:
    """Configure the root logger.

    Terminal output goes to stderr through Rich so it does not mix with
    command output. A plain-text file handler is added when ``log_file``
    is given.

    Args:
        verbose: Force DEBUG level
        log_file: Optional file to also write logs to
        level: Level name used when not verbose
    """
    effective_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(effective_level)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_FILE))
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

    root.setLevel(logging.DEBUG if log_file is not None else effective_level)

    # httpx logs every request at INFO, including full URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
