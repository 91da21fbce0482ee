"""Argument synthesis for the broker's create-instance step."""

from collections.abc import Iterator, Sequence

from .value_objects import DestinationDescriptor, SynthesizedArguments

ENTRY_SEPARATOR = ","
ADDRESSES_FLAG = "--addresses"
QUEUES_FLAG = "--queues"


def _entry(name: str, descriptor: DestinationDescriptor) -> str:
    return f"{name}:{descriptor.routing_type.value.lower()}"


def synthesize(descriptors: Sequence[DestinationDescriptor]) -> SynthesizedArguments:
    """Build the comma-joined address and queue arguments.

    Order follows the input and duplicates are kept. Descriptors with
    ``auto_create_address=False`` cannot be expressed in the batch form, so
    they are moved to `SynthesizedArguments.deferred` instead of the
    arguments.

    Args:
        descriptors: Parsed destinations, in file order.

    Returns:
        SynthesizedArguments: Empty strings when nothing is batch-eligible.
    """
    batch = [d for d in descriptors if d.auto_create_address]
    deferred = tuple(d for d in descriptors if not d.auto_create_address)
    return SynthesizedArguments(
        address_arg=ENTRY_SEPARATOR.join(_entry(d.address_name, d) for d in batch),
        queue_arg=ENTRY_SEPARATOR.join(_entry(d.queue_name, d) for d in batch),
        deferred=deferred,
    )


def creation_flags(arguments: SynthesizedArguments) -> Iterator[str]:
    """Yield the destination flags, omitting any whose value is empty.

    An empty value would be read by the broker as a single destination with
    an empty name.
    """
    if arguments.address_arg:
        yield ADDRESSES_FLAG
        yield arguments.address_arg
    if arguments.queue_arg:
        yield QUEUES_FLAG
        yield arguments.queue_arg
