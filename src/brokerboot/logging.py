"""Logging for BROKERBOOT.

`configure_logging` installs up to two handlers on the root logger:

- a Rich console handler on stderr, whose level follows ``-v``/``-q``;
- an in-memory flight recorder keeping the recent DEBUG history and writing
  it to ``--log-path`` as soon as a WARNING or worse is logged.

Every record passes through `RedactingFilter` on its way into either
handler, so admin credentials given as options (``--admin-password``) or as
environment (``BROKERBOOT_ADMIN_PASSWORD=...``) are masked both on the
terminal and in the flight-recorder file.

A successful ``run`` ends in ``os.execv``, which does not run exit hooks;
`close_for_handoff` closes logging the way a normal exit would.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from brokerboot.interfaces.redactor import Redactor

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "brokerboot"
DEFAULT_CONSOLE_LEVEL = logging.WARNING
DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


@dataclass(frozen=True)
class LoggingOptions:
    """How the CLI asked for logging to be set up.

    Attributes:
        console_level: Minimum level shown on the console.
        debug: Developer formatting (paths, timestamps, logger names).
        color: Whether the console may use color.
        log_path: Flight-recorder file; ``None`` disables the recorder.
        capacity: Number of records the flight recorder keeps in memory.
        force_flush: Write the recorder's buffer on close even without a
            WARNING, so the last steps before hand-off are kept.
        logger_levels: Per-logger minimum levels.
    """

    console_level: int = DEFAULT_CONSOLE_LEVEL
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY
    force_flush: bool = False
    logger_levels: Mapping[str, int] = field(default_factory=dict)

    @property
    def flight_recorder(self) -> bool:
        return self.log_path is not None


def console_level(verbose_count: int = 0, quiet_count: int = 0) -> int:
    """Shift the default WARNING level by one step per -v (down) or -q (up)."""
    level = DEFAULT_CONSOLE_LEVEL - 10 * verbose_count + 10 * quiet_count
    return max(logging.DEBUG, min(logging.CRITICAL, level))


# ============================================================================
#                           Filters
# ============================================================================


class LibraryPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[libname]`` for records from other packages."""

    def filter(self, record: logging.LogRecord) -> bool:
        top = record.name.split(".")[0]
        record.prefix = "" if top == PROJECT_PREFIX else f"[{top}]"
        return True


class RedactingFilter(logging.Filter):
    """Mask secrets in the rendered message of every record.

    The record is rewritten in place (``msg`` set to the sanitized text and
    ``args`` cleared), so every handler downstream sees the masked version.
    """

    def __init__(self, redactor: Redactor) -> None:
        super().__init__()
        self.redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # bad format args; the handler reports those itself
            return True
        sanitized = self.redactor.sanitize_text(message)
        if sanitized != message:
            record.msg = sanitized
            record.args = None
        return True


# ============================================================================
#                           Handlers
# ============================================================================


def console_handler(
    level: int = DEFAULT_CONSOLE_LEVEL, *, debug: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    stdout is left to command output (``plan``, ``resolve``) and, after the
    hand-off, to the broker.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug,
        enable_link_path=debug,
    )
    if debug:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(LibraryPrefixFilter())
    return handler


def flight_recorder(
    path: Path,
    *,
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY,
    force_flush: bool = False,
) -> MemoryHandler:
    """Return a MemoryHandler that dumps its buffer to *path* on WARNING.

    The file is only created on the first flush.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setLevel(logging.DEBUG)
    target.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d] %(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )
    return MemoryHandler(
        capacity=capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=force_flush,
    )


def configure_logging(
    options: LoggingOptions, redactor: Redactor
) -> list[logging.Handler]:
    """Install the console handler and flight recorder on the root logger.

    The root logger itself accepts everything; each handler applies its own
    level. Any handlers installed before are replaced.

    Returns:
        The installed handlers, console first.
    """
    handlers: list[logging.Handler] = [
        console_handler(options.console_level, debug=options.debug, color=options.color)
    ]
    if options.log_path is not None:
        handlers.append(
            flight_recorder(
                options.log_path,
                capacity=options.capacity,
                force_flush=options.force_flush,
            )
        )

    redacting = RedactingFilter(redactor)
    for handler in handlers:
        handler.addFilter(redacting)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def close_for_handoff() -> None:
    """Flush and close every handler right before the broker takes over."""
    logging.getLogger(__name__).debug("Handing the process over to the broker")
    logging.shutdown()


# ============================================================================
#                           Startup diagnostics
# ============================================================================


def _dist_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:
        return "<not installed>"


def log_startup(
    logger: logging.Logger,
    options: LoggingOptions,
    *,
    app_version: str,
    redactor_mode: str,
) -> None:
    """Log a one-line INFO summary, then DEBUG details of the environment."""
    logger.info(
        "BROKERBOOT %s - console=%s, flight-recorder=%s, redaction=%s",
        app_version,
        logging.getLevelName(options.console_level),
        options.log_path if options.flight_recorder else "OFF",
        redactor_mode,
    )
    logger.debug(
        "Python %s on %s %s, pid %s, host %s, cwd %s",
        sys.version.split()[0],
        platform.system(),
        platform.release(),
        os.getpid(),
        platform.node(),
        Path.cwd(),
    )
    logger.debug(
        "click %s, click-extra %s, rich %s",
        _dist_version("click"),
        _dist_version("click-extra"),
        _dist_version("rich"),
    )
    if options.flight_recorder:
        logger.debug(
            "Flight recorder keeps %d records, force-flush %s",
            options.capacity,
            "ON" if options.force_flush else "OFF",
        )
    if options.logger_levels:
        logger.debug(
            "Logger levels: %s",
            {name: logging.getLevelName(lvl) for name, lvl in options.logger_levels.items()},
        )
