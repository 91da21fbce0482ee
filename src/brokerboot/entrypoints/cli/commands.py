"""BROKERBOOT bootstrap commands.

``run`` is the container entrypoint: it resolves the instance address, parses
the destination file, creates the broker instance and replaces itself with
the broker's run step. ``plan``, ``validate`` and ``resolve`` expose the same
steps individually for operators, without touching the broker.

Behavior
- Human-oriented notices go to **stderr**; data (``plan`` output, the
  resolved address) goes to **stdout**.
- Every setting is an option backed by a ``BROKERBOOT_*`` environment
  variable, so the container image only needs environment configuration.

Failure modes
- Any bootstrap failure prints a single ``<stage>: <cause>`` line and exits
  non-zero. A failed creation exits with the broker tool's own status.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from brokerboot import config
from brokerboot.bootstrap import bootstrap
from brokerboot.domain import destinations
from brokerboot.domain.errors import BootstrapError, CreationError
from brokerboot.interfaces.redactor import RedactorMode
from brokerboot.logging import close_for_handoff

from .helpers import error, success, warn

if TYPE_CHECKING:
    from brokerboot.bootstrap import AppContainer

logger = logging.getLogger(__name__)

GENERIC_FAILURE_STATUS = 1


def settings_options(fn: Callable) -> Callable:
    """Attach the bootstrap settings options to a command.

    The decorated command receives a single ``settings`` argument built from
    the options (and their environment variables).
    """

    @click.option(
        "--destinations",
        "destinations_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=config.DEFAULT_DESTINATIONS_PATH,
        envvar="BROKERBOOT_DESTINATIONS_PATH",
        show_default=True,
        show_envvar=True,
        help="Destination file. A missing file means no destinations.",
    )
    @click.option(
        "--broker-home",
        type=click.Path(dir_okay=False, path_type=Path),
        default=config.DEFAULT_BROKER_HOME,
        envvar="BROKERBOOT_BROKER_HOME",
        show_default=True,
        show_envvar=True,
        help="Path to the broker distribution's 'artemis' tool.",
    )
    @click.option(
        "--instance-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=config.DEFAULT_INSTANCE_DIR,
        envvar="BROKERBOOT_INSTANCE_DIR",
        show_default=True,
        show_envvar=True,
        help="Directory the broker instance is created in.",
    )
    @click.option(
        "--admin-user",
        default=config.DEFAULT_ADMIN_USER,
        envvar="BROKERBOOT_ADMIN_USER",
        show_default=True,
        show_envvar=True,
        help="Administrative user of the created instance.",
    )
    @click.option(
        "--admin-password",
        default=config.DEFAULT_ADMIN_PASSWORD,
        envvar="BROKERBOOT_ADMIN_PASSWORD",
        show_envvar=True,
        help="Password of the administrative user.",
    )
    @click.option(
        "--allow-anonymous/--require-login",
        default=True,
        envvar="BROKERBOOT_ALLOW_ANONYMOUS",
        show_default=True,
        show_envvar=True,
        help="Whether clients may connect without credentials.",
    )
    @click.option(
        "--route-probe",
        default=config.DEFAULT_ROUTE_PROBE,
        envvar="BROKERBOOT_ROUTE_PROBE",
        show_default=True,
        show_envvar=True,
        help="Destination used to select the outbound route.",
    )
    @functools.wraps(fn)
    def wrapper(  # pylint: disable=too-many-arguments
        *args,
        destinations_path: Path,
        broker_home: Path,
        instance_dir: Path,
        admin_user: str,
        admin_password: str,
        allow_anonymous: bool,
        route_probe: str,
        **kwargs,
    ):
        settings = config.BootstrapSettings(
            destinations_path=destinations_path,
            broker_home=broker_home,
            instance_dir=instance_dir,
            admin_user=admin_user,
            admin_password=admin_password,
            allow_anonymous=allow_anonymous,
            route_probe=route_probe,
        )
        return fn(*args, settings=settings, **kwargs)

    return wrapper


def _container(
    ctx: click.Context,
    settings: config.BootstrapSettings,
    route_output: Path | None = None,
) -> AppContainer:
    mode = (ctx.obj or {}).get("redactor_mode", RedactorMode.LENIENT)
    return bootstrap(
        settings,
        redactor_mode=mode,
        route_output=(
            None if route_output is None else route_output.read_text(encoding="utf-8")
        ),
        on_handoff=close_for_handoff,
    )


route_output_option = click.option(
    "--route-output",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read routing-table output from this file instead of querying 'ip'.",
)


def _fail(exc: BootstrapError) -> NoReturn:
    """Report a bootstrap failure on one line and exit non-zero."""
    error(exc.diagnostic())
    status = GENERIC_FAILURE_STATUS
    if isinstance(exc, CreationError) and exc.exit_code > 0:
        status = exc.exit_code
    raise click.exceptions.Exit(status)


@click.command()
@settings_options
@click.pass_context
def run(ctx: click.Context, settings: config.BootstrapSettings) -> None:
    """Bootstrap the broker instance and hand the process over to it.

    Never returns on success: the process becomes the broker.
    """
    container = _container(ctx, settings)
    try:
        container.orchestrator.run()
    except BootstrapError as e:
        logger.debug("Bootstrap failed", exc_info=True)
        _fail(e)


@click.command()
@settings_options
@route_output_option
@click.pass_context
def plan(
    ctx: click.Context, settings: config.BootstrapSettings, route_output: Path | None
) -> None:
    """Show what 'run' would do, without creating or running anything."""
    container = _container(ctx, settings, route_output)
    try:
        result = container.orchestrator.plan()
    except BootstrapError as e:
        _fail(e)

    context = container.context
    click.echo(f"address:   {result.identity.network_address}")
    click.echo(f"name:      {result.identity.instance_name}")
    click.echo(f"addresses: {result.arguments.address_arg or '<none>'}")
    click.echo(f"queues:    {result.arguments.queue_arg or '<none>'}")
    click.echo(
        "command:   "
        + context.redactor.sanitize_command(
            context.broker_tool.describe(result.request)
        )
    )
    for descriptor in result.arguments.deferred:
        warn(
            f"{descriptor.address_name} has auto-create disabled; "
            "it must be created explicitly after start-up."
        )
    if result.instance_exists:
        warn(f"Instance already exists at {settings.instance_dir}; creation would be skipped.")


@click.command()
@click.argument(
    "file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=config.DEFAULT_DESTINATIONS_PATH,
    envvar="BROKERBOOT_DESTINATIONS_PATH",
)
def validate(file: Path) -> None:
    """Check a destination FILE and report every malformed line."""
    try:
        lines = destinations.read_lines(file)
    except BootstrapError as e:
        _fail(e)
    if lines is None:
        warn(f"No destination file at {file}; no destinations configured.")
        return

    results = destinations.scan(lines)
    invalid = [r for r in results if isinstance(r, destinations.InvalidLine)]
    for line in invalid:
        error(line.to_error().diagnostic())
    if invalid:
        raise click.exceptions.Exit(GENERIC_FAILURE_STATUS)

    count = sum(isinstance(r, destinations.ParsedLine) for r in results)
    success(f"{count} destination(s) valid.")


@click.command()
@settings_options
@route_output_option
@click.pass_context
def resolve(
    ctx: click.Context, settings: config.BootstrapSettings, route_output: Path | None
) -> None:
    """Print this instance's network address."""
    container = _container(ctx, settings, route_output)
    try:
        identity = container.orchestrator.resolve_identity()
    except BootstrapError as e:
        _fail(e)
    click.echo(identity.network_address)
