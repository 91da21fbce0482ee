"""Wire adapters into the bootstrap orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from brokerboot import config
from brokerboot.adapters.artemis import ArtemisCli
from brokerboot.adapters.redactor import Redactor
from brokerboot.adapters.routing import IpRouteSource, StaticRouteSource
from brokerboot.config import BootstrapSettings
from brokerboot.interfaces import redactor
from brokerboot.interfaces.broker_tool import BrokerTool
from brokerboot.interfaces.redactor import RedactorMode
from brokerboot.interfaces.route_source import RouteSource
from brokerboot.service_layer.orchestrator import (
    BootstrapContext,
    BootstrapOrchestrator,
)


def make_redactor(mode: RedactorMode = RedactorMode.LENIENT) -> redactor.Redactor:
    """Return the redactor used for command lines and log records."""
    return Redactor(mode)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold the wired application."""

    context: BootstrapContext
    orchestrator: BootstrapOrchestrator


def build_context(  # pylint: disable=too-many-arguments
    settings: BootstrapSettings,
    *,
    host_identifier: str,
    redactor_mode: RedactorMode = RedactorMode.LENIENT,
    route_source: RouteSource | None = None,
    broker_tool: BrokerTool | None = None,
    on_handoff: Callable[[], None] | None = None,
) -> BootstrapContext:
    """Build a bootstrap context, defaulting to the production adapters."""
    hooks = {} if on_handoff is None else {"on_handoff": on_handoff}
    return BootstrapContext(
        settings=settings,
        route_source=route_source or IpRouteSource(),
        broker_tool=broker_tool or ArtemisCli(settings.broker_home),
        host_identifier=host_identifier,
        redactor=make_redactor(redactor_mode),
        **hooks,
    )


def bootstrap(
    settings: BootstrapSettings | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    redactor_mode: RedactorMode = RedactorMode.LENIENT,
    route_output: str | None = None,
    on_handoff: Callable[[], None] | None = None,
) -> AppContainer:
    """Bootstrap the orchestrator with production adapters.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        environ: Environment mapping used for settings and the host identifier.
        redactor_mode: How aggressively command lines are redacted in logs.
        route_output: Canned routing-table output used instead of querying ``ip``.
        on_handoff: Hook run right before the process is replaced by the broker.
    """
    if settings is None:
        settings = config.settings_from_env(environ)
    context = build_context(
        settings,
        host_identifier=config.host_identifier(environ),
        redactor_mode=redactor_mode,
        route_source=None if route_output is None else StaticRouteSource(route_output),
        on_handoff=on_handoff,
    )
    return AppContainer(context=context, orchestrator=BootstrapOrchestrator(context))
