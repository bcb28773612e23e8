import logging
import os
from typing import Any, Dict

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOG_LEVEL_ENV = "NDFORMAT_LOG_LEVEL"

LOGGER_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "critical": "bold white on red",
    "debug": "dim white",
    "function": "bold green",
})

# Log records go to stderr so rendered arrays printed on stdout stay clean.
console = Console(theme=LOGGER_THEME, stderr=True)


class CustomRichHandler(RichHandler):
    """Rich handler that prefixes each message with the function that logged it."""

    def render(self, *, record, traceback, message_renderable):
        if record.funcName and record.funcName != "<module>":
            message = f"[function]{record.funcName}()[/function] {message_renderable}"
        else:
            message = message_renderable

        return super().render(
            record=record,
            traceback=traceback,
            message_renderable=message,
        )


def default_level() -> int:
    """Level named by ``NDFORMAT_LOG_LEVEL``, WARNING when unset or unknown."""
    name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_logger(
    name: str,
    level: int | None = None,
    rich_kwargs: Dict[str, Any] | None = None,
) -> logging.Logger:
    """Create a logger that renders through rich and shows the calling function.

    Args:
        name: Logger name, typically __name__
        level: Logging level, defaults to the ``NDFORMAT_LOG_LEVEL`` environment variable
        rich_kwargs: Additional kwargs for RichHandler

    Returns:
        Configured logger instance
    """
    if rich_kwargs is None:
        rich_kwargs = {
            "rich_tracebacks": True,
            "markup": True,
            "show_time": True,
            "show_level": True,
            "show_path": False,
            "console": console,
        }

    logger = logging.getLogger(name)
    logger.setLevel(default_level() if level is None else level)

    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(CustomRichHandler(**rich_kwargs))
    return logger


def set_all_loggers_level(level: int, prefix: str | None = None) -> None:
    """Set all existing loggers to the specified level.

    With ``prefix``, only that logger and its children are touched.
    """
    for logger_name in list(logging.root.manager.loggerDict):
        if prefix is None or logger_name == prefix or logger_name.startswith(f"{prefix}."):
            logging.getLogger(logger_name).setLevel(level)
