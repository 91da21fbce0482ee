"""Module including value objects used across the domain layer."""

from dataclasses import dataclass, field
from enum import Enum


class RoutingType(Enum):
    """Enumeration of broker routing types."""

    ANYCAST = "anycast"
    MULTICAST = "multicast"


@dataclass(frozen=True)
class DestinationDescriptor:
    """Value object representing one parsed destination line.

    `queue_name` is always the effective queue name; the parser substitutes
    `address_name` when the file leaves it out.
    """

    address_name: str
    queue_name: str
    routing_type: RoutingType = RoutingType.ANYCAST
    auto_create_address: bool = True


@dataclass(frozen=True)
class ResolvedInstanceIdentity:
    """Value object describing who this broker instance is on the network."""

    network_address: str
    instance_name: str


@dataclass(frozen=True)
class SynthesizedArguments:
    """Startup arguments derived from the destination descriptors.

    Attributes:
        address_arg: Comma-joined ``name:routing`` pairs for addresses.
        queue_arg: Comma-joined ``name:routing`` pairs for queues.
        deferred: Descriptors with ``auto_create_address=False``. They are not
            part of the batch arguments and must be created explicitly once
            the broker is running.
    """

    address_arg: str = ""
    queue_arg: str = ""
    deferred: tuple[DestinationDescriptor, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True when neither argument carries a destination."""
        return not self.address_arg and not self.queue_arg
