"""Logging setup for windsock.

Console output is colorized on stderr; a rotating file sink is optional.
Structured kwargs (``logger.info("Built climb grid", climb=..., days=...)``)
and contextualized values land in ``record["extra"]`` and are appended to the
line only when present.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

_CONSOLE = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Per-request INFO lines from the HTTP stack would drown out per-climb progress.
_QUIET = ("httpx", "httpcore")


def _formatter(template: str):
    def format_record(record) -> str:
        if record["extra"]:
            return template + " | <dim>{extra}</dim>\n{exception}"
        return template + "\n{exception}"

    return format_record


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with windsock's console and file sinks.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write to this file, rotated and compressed
        rotation: Size or age at which the file rotates
        retention: How long rotated files are kept
    """
    logger.remove()
    logger.add(sys.stderr, format=_formatter(_CONSOLE), level=level, colorize=True)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            format=_formatter(_FILE),
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
        )

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"Logger initialized with level={level}, file={log_file}")


def climb_context(name: str):
    """Tag every record logged inside the block with the climb being built."""
    return logger.contextualize(climb=name)
