"""Interface for routing-table sources."""

import abc

# pylint: disable=too-few-public-methods


class RouteSource(abc.ABC):
    """Contract for something that can describe the outbound route."""

    @abc.abstractmethod
    def query(self, probe: str) -> str:
        """Return raw routing information for traffic towards *probe*.

        Raises:
            ResolutionError: If the routing information cannot be obtained.
        """
