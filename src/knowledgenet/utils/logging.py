"""
Logging setup for the knowledgenet command line.

Library modules only create loggers; handlers are installed once by the CLI
from the ``[logging]`` section of ``knowledgenet.toml``.
"""

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> logging.Logger:
    """
    Route knowledgenet logs to stderr, and optionally to a file.

    Args:
        level: Log level name, case-insensitive
        log_file: Also append plain-text records here when given

    Returns:
        The root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    # stdout carries command output, so logs go to stderr
    console_handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger


class StructuredLogger:
    """
    Logger that prefixes each message with ``[key=value ...]``.

    The network uses this to tag its records with the network name:

        StructuredLogger("knowledgenet.knn.network", network="pets").info("Forward search")
        # [network=pets] Forward search
    """

    def __init__(self, name: str, **context: Any):
        self.logger = logging.getLogger(name)
        self.prefix = "[" + " ".join(f"{k}={v}" for k, v in context.items()) + "] " if context else ""

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(self.prefix + msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(self.prefix + msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(self.prefix + msg, **kwargs)
