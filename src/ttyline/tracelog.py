"""
Logging to stderr through click, with one color per severity.

Call initialize() once from the command line entry point, then log from each
module with a conventional module logger:

```
import logging

logger = logging.getLogger(__name__)
logger.debug(f"cursor {buffer.cursor}")
```

Below logging.INFO each entry also shows its timestamp and source location.
"""
# Reworked from https://github.com/click-contrib/click-log

import logging
import time

import click


class ClickHandler(logging.Handler):
    """A logging.Handler that writes records with click.echo()."""

    def __init__(self: "ClickHandler", level: int | str = logging.NOTSET, *, use_stderr: bool = True) -> None:
        """Create a new ClickHandler that writes to stderr unless use_stderr is False."""
        super().__init__(level)
        self.use_stderr = use_stderr

    def emit(self: "ClickHandler", record: logging.LogRecord) -> None:
        """Write the specified record with click.echo()."""
        try:
            formatted_entry = self.format(record)
            click.echo(formatted_entry, err=self.use_stderr)
        except Exception:  # noqa: BLE001 Matches Python's design pattern for emit()
            self.handleError(record)


class ColorFormatter(logging.Formatter):
    """A logging.Formatter that colors each entry with click.style()."""

    COLORS = {  # noqa: RUF012 Switching to tuples for immutability is too cumbersome
        "critical": "bright_magenta",
        "error": "red",
        "warning": "yellow",
        "info": "cyan",
        "debug": "white",
    }

    def __init__(self: "ColorFormatter", level: int | str = logging.NOTSET) -> None:
        """Create a new ColorFormatter for the specified logging level."""
        super().__init__()
        self.level = resolve_level(level)

    def format(self: "ColorFormatter", record: logging.LogRecord) -> str:
        """Format the specified record, one styled entry per message line."""
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        color = self.COLORS.get(record.levelname.lower(), "bright_white")
        prefix_parts = []
        if self.level < logging.INFO:
            timestamp = time.strftime("%H:%M:%S", time.localtime(record.created))
            prefix_parts.append(click.style(f"{timestamp}.{record.msecs:03.0f}", fg=color))
            prefix_parts.append(click.style(f"{record.name:>18}::{record.funcName:<14} {record.lineno:>4}", fg=color))
        prefix_parts.append(click.style(f"{record.levelname:<8}", fg=color))

        entry_prefix = " ".join(prefix_parts)
        return "\n".join(f"{entry_prefix} {click.style(line, fg='bright_white')}" for line in message.splitlines() or [""])


def resolve_level(level: int | str) -> int:
    """Return the numeric logging level for an int or a level name like 'DEBUG'."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        valid_levels = logging.getLevelNamesMapping()
        if level.upper() not in valid_levels:
            exception_message = f"Unknown level: {level}"
            raise ValueError(exception_message)
        return valid_levels[level.upper()]
    exception_message = f"Level not an integer or a valid string: {level}"
    raise TypeError(exception_message)


def initialize(log_level: int | str) -> None:
    """Send ttyline logging to stderr with colors at the specified level."""
    click_handler = build_click_handler(log_level)
    logging.basicConfig(
        handlers=[click_handler],
        level=resolve_level(log_level),
    )


def build_click_handler(log_level: int | str) -> ClickHandler:
    """Create a logging Handler with click and color support."""
    click_handler = ClickHandler(log_level)
    click_handler.setFormatter(ColorFormatter(log_level))
    return click_handler
