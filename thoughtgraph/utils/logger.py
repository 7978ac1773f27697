"""Logging configuration using Loguru."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{line} - {message}"
LOG_FILE_NAME = "thoughtgraph_{time:YYYY-MM-DD}.log"


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> list[int]:
    """
    Replace all sinks with a stderr sink and, optionally, a rotating file sink.

    Records logged through the bare loguru logger get module "thoughtgraph".

    Returns:
        Ids of the added sinks
    """
    logger.remove()
    logger.configure(extra={"module": "thoughtgraph"})
    level = level.upper()

    sink_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)]

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # JSON lines when serialize is on
        sink_ids.append(
            logger.add(
                log_path / LOG_FILE_NAME,
                level=level,
                format=FILE_FORMAT,
                rotation=file_rotation,
                retention=file_retention,
                compression=compression,
                serialize=serialize,
                enqueue=True,
            )
        )

    return sink_ids


def get_logger(name: str):
    """Logger bound to a module name, shown in every record."""
    return logger.bind(module=name)
