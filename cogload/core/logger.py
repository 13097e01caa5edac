"""Loguru setup for applications embedding the engine.

The library itself only emits records; handlers are installed by
setup_logger, which CognitiveLoadEngine.from_settings calls.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Replace all handlers with a console handler and an optional rotating file.

    Args:
        level: Minimum level for every handler
        log_file: Path of a log file rotated at 10 MB and kept for 7 days
    """
    handlers: list[dict] = [{"sink": sys.stderr, "format": CONSOLE_FORMAT, "level": level, "colorize": True}]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            {
                "sink": path,
                "format": FILE_FORMAT,
                "level": level,
                "rotation": "10 MB",
                "retention": "7 days",
                "compression": "zip",
                "diagnose": False,
            }
        )
    logger.configure(handlers=handlers)
    logger.info("Logger configured", level=level, log_file=log_file)
