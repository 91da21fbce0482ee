"""Bootstrap Orchestrator.

Runs once per broker instance, strictly in sequence::

    resolve address -> derive instance name -> parse destinations
        -> synthesize arguments -> create instance -> hand over to run

Every fatal step raises a `BootstrapError` subclass naming its stage. The
run step is never reached when creation fails, and creation is skipped when
the instance directory already holds an instance (for example after a
container restart), which keeps the bootstrap idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

from brokerboot.domain import destinations
from brokerboot.domain.arguments import synthesize
from brokerboot.domain.errors import CreationError, ResolutionError
from brokerboot.domain.value_objects import (
    DestinationDescriptor,
    ResolvedInstanceIdentity,
    SynthesizedArguments,
)
from brokerboot.interfaces.broker_tool import CreateInstanceRequest

from .resolver import AddressResolver

if TYPE_CHECKING:
    from brokerboot.config import BootstrapSettings
    from brokerboot.interfaces.broker_tool import BrokerTool
    from brokerboot.interfaces.redactor import Redactor
    from brokerboot.interfaces.route_source import RouteSource

logger = logging.getLogger(__name__)


def _noop() -> None:
    return None


@dataclass(frozen=True)
class BootstrapContext:  # pylint: disable=too-many-instance-attributes
    """Explicit inputs of a bootstrap run.

    Attributes:
        settings: Paths, credentials and flags.
        route_source: Source of routing information for the resolver.
        broker_tool: The external broker tool.
        host_identifier: Runtime-assigned host identifier.
        redactor: Used for every command line that is logged.
        on_handoff: Called right before the process is replaced by the
            broker, e.g. to flush log handlers.
    """

    settings: BootstrapSettings
    route_source: RouteSource
    broker_tool: BrokerTool
    host_identifier: str
    redactor: Redactor
    on_handoff: Callable[[], None] = _noop


@dataclass(frozen=True)
class BootstrapPlan:
    """Everything derived before the broker tool is invoked."""

    identity: ResolvedInstanceIdentity
    descriptors: tuple[DestinationDescriptor, ...]
    arguments: SynthesizedArguments
    request: CreateInstanceRequest
    instance_exists: bool


class BootstrapOrchestrator:
    """Top-level driver of one bootstrap run."""

    def __init__(self, context: BootstrapContext) -> None:
        self._ctx = context
        self._resolver = AddressResolver(
            context.route_source, context.settings.route_probe
        )

    def resolve_identity(self) -> ResolvedInstanceIdentity:
        """Resolve the network address and derive the instance name.

        Raises:
            ResolutionError: If either value cannot be determined.
        """
        address = self._resolver.resolve()
        if not (name := self._ctx.host_identifier.strip()):
            raise ResolutionError("runtime host identifier is empty")
        identity = ResolvedInstanceIdentity(network_address=address, instance_name=name)
        logger.info("Instance %s resolved to %s", name, address)
        return identity

    def load_destinations(self) -> list[DestinationDescriptor]:
        """Parse the destination file (missing file means none).

        Raises:
            ParseError: If the file contains a malformed line.
        """
        return destinations.parse(self._ctx.settings.destinations_path)

    def plan(self) -> BootstrapPlan:
        """Perform every step up to, but not including, creation."""
        identity = self.resolve_identity()
        descriptors = self.load_destinations()
        arguments = synthesize(descriptors)
        settings = self._ctx.settings
        request = CreateInstanceRequest(
            instance_dir=settings.instance_dir,
            user=settings.admin_user,
            password=settings.admin_password,
            allow_anonymous=settings.allow_anonymous,
            host=identity.network_address,
            name=identity.instance_name,
            arguments=arguments,
        )
        return BootstrapPlan(
            identity=identity,
            descriptors=tuple(descriptors),
            arguments=arguments,
            request=request,
            instance_exists=self._ctx.broker_tool.instance_exists(
                settings.instance_dir
            ),
        )

    def create(self, plan: BootstrapPlan) -> bool:
        """Create the broker instance described by *plan*.

        Returns:
            True if the instance was created, False if it already existed.

        Raises:
            CreationError: If the broker tool exits non-zero.
        """
        if plan.instance_exists:
            logger.info(
                "Instance already present at %s; skipping creation",
                plan.request.instance_dir,
            )
            return False

        for descriptor in plan.arguments.deferred:
            logger.warning(
                "Destination %s (queue %s) has auto-create disabled and is not "
                "created at bootstrap; create it explicitly once the broker runs",
                descriptor.address_name,
                descriptor.queue_name,
            )

        tool = self._ctx.broker_tool
        logger.info(
            "Creating instance: %s",
            self._ctx.redactor.sanitize_command(tool.describe(plan.request)),
        )
        result = tool.create_instance(plan.request)
        if not result.succeeded:
            logger.error("Instance creation failed with status %s", result.returncode)
            raise CreationError(
                result.returncode, self._ctx.redactor.sanitize_text(result.output)
            )
        logger.info("Instance created at %s", plan.request.instance_dir)
        return True

    def run(self) -> NoReturn:
        """Bootstrap the instance and hand the process over to the broker.

        Raises:
            BootstrapError: If any step fails; the broker is not started.
        """
        plan = self.plan()
        self.create(plan)
        self._ctx.on_handoff()
        self._ctx.broker_tool.run_instance(plan.request.instance_dir)
