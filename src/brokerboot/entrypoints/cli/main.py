"""The ``brokerboot`` console command.

The group sets up logging (console verbosity, flight recorder, per-logger
levels, redaction of credentials) once, then dispatches to the bootstrap
commands in :mod:`.commands`:

- ``brokerboot run``: bootstrap the broker instance and hand over to it.
- ``brokerboot plan``: dry run; show what ``run`` would do.
- ``brokerboot validate``: check a destination file and report every error.
- ``brokerboot resolve``: print this instance's network address.

Typical container entrypoint::

    $ brokerboot --force-flush -v run
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from brokerboot import __version__
from brokerboot.bootstrap import make_redactor
from brokerboot.interfaces.redactor import RedactorMode
from brokerboot.logging import (
    DEFAULT_FLIGHT_RECORDER_CAPACITY,
    LoggingOptions,
    configure_logging,
    console_level,
    log_startup,
)

from .commands import plan, resolve, run, validate
from .helpers.log_level_parser import parse_log_level

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(user_log_dir("brokerboot", appauthor=False)) / "latest.log"

HELP = """Provision a message-broker instance and start it.

    Run inside the broker's container: brokerboot finds the container's own
    address in the routing table, reads the destination file, creates the
    broker instance with those addresses and queues, and then becomes the
    broker process.
    """

EPILOG = "\b\n" + "\n".join(
    [
        click.style("Destination file:", fg="blue", bold=True, underline=True),
        "  <address>[:<queue>][:anycast|multicast][:true|false]",
        "  one per line; '#' starts a comment line",
    ]
)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    epilog=EPILOG,
    params=[clickx.ColorOption(show_envvar=True), clickx.ExtraVersionOption()],
)
@click.option(
    "-v",
    "--verbose",
    "verbose_count",
    count=True,
    default=0,
    help="Show more on the console: -v for INFO, -vv for DEBUG.",
)
@click.option(
    "-q",
    "--quiet",
    "quiet_count",
    count=True,
    default=0,
    help="Show less on the console: -q for ERROR only, -qq for CRITICAL only.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="DEBUG console output with timestamps, logger names and source paths.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="BROKERBOOT_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_FLIGHT_RECORDER_CAPACITY,
    envvar="BROKERBOOT_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    hidden=True,
    help="Number of log records the flight recorder keeps.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    envvar="BROKERBOOT_FLIGHT_RECORDER",
    show_envvar=True,
    help=(
        "Keep recent DEBUG records in memory and write them to --log-path "
        "when a warning or error is logged, whatever the console verbosity."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    default=False,
    envvar="BROKERBOOT_FORCE_FLUSH",
    show_default=True,
    show_envvar=True,
    help=(
        "Also write the flight recorder on exit and right before the "
        "broker takes over the process, even if nothing went wrong."
    ),
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("click_extra=WARNING",),
    envvar="BROKERBOOT_LOGGER_LEVELS",
    show_default=True,
    show_envvar=True,
    help=(
        "Minimum LEVEL for logger NAME, as NAME=LEVEL, for both console and "
        "flight recorder (e.g. -L brokerboot.adapters=DEBUG). Repeatable."
    ),
)
@click.option(
    "--redactor-mode",
    type=click.Choice([m.value for m in RedactorMode], case_sensitive=False),
    default=RedactorMode.LENIENT.value,
    envvar="BROKERBOOT_REDACTOR_MODE",
    show_default=True,
    show_envvar=True,
    help=(
        "How much to mask in logs and command lines: 'lenient' hides "
        "passwords, 'strict' hides user names as well."
    ),
)
@clickx.pass_context
def brokerboot(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """BROKERBOOT command-line interface."""
    mode = RedactorMode(redactor_mode.lower())
    options = LoggingOptions(
        console_level=console_level(verbose_count, quiet_count),
        debug=debug,
        color=ctx.color is not False,
        log_path=log_path if flight_recorder else None,
        capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )
    configure_logging(options, make_redactor(mode))
    log_startup(logger, options, app_version=__version__, redactor_mode=mode.value)

    ctx.ensure_object(dict)["redactor_mode"] = mode
    ctx.call_on_close(logging.shutdown)


brokerboot.add_command(run)
brokerboot.add_command(plan)
brokerboot.add_command(validate)
brokerboot.add_command(resolve)
