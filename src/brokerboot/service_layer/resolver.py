"""Address Resolver: find this instance's own network address."""

import logging

from brokerboot.domain.routes import select_source_address
from brokerboot.interfaces.route_source import RouteSource

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class AddressResolver:
    """Resolve the source address of the outbound default route.

    Args:
        route_source: Where routing information comes from.
        probe: Destination address used to select the outbound route.
    """

    def __init__(self, route_source: RouteSource, probe: str) -> None:
        self._route_source = route_source
        self._probe = probe

    def resolve(self) -> str:
        """Return the resolved network address.

        Raises:
            ResolutionError: If no route entry or source address is found.
        """
        output = self._route_source.query(self._probe)
        address = select_source_address(output)
        logger.debug("Resolved network address %s via probe %s", address, self._probe)
        return address
