"""Route sources backed by the ``ip`` tool or by canned output."""

import logging
import shutil
import subprocess

from brokerboot.domain.errors import ResolutionError
from brokerboot.interfaces.route_source import RouteSource

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class IpRouteSource(RouteSource):
    """Route source that asks the kernel via ``ip -4 -o route get``.

    ``route get`` reports the route the kernel would actually use, including
    the ``src`` address bound to it, which plain ``ip route show default``
    omits inside most containers.
    """

    def __init__(self, ip_binary: str = "ip") -> None:
        self._ip_binary = ip_binary

    def command(self, probe: str) -> list[str]:
        """Return the argv used to query the route towards *probe*."""
        return [self._ip_binary, "-4", "-o", "route", "get", probe]

    def query(self, probe: str) -> str:
        if shutil.which(self._ip_binary) is None:
            raise ResolutionError(f"{self._ip_binary!r} tool not found on PATH")

        cmd = self.command(probe)
        logger.debug("Querying route: %s", " ".join(cmd))
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise ResolutionError(
                f"route lookup for {probe} failed with status "
                f"{result.returncode}: {detail or '<no output>'}"
            )
        logger.debug("Route output: %s", result.stdout.strip())
        return result.stdout


class StaticRouteSource(RouteSource):
    """Route source returning fixed output.

    Note:
        Primarily for testing and for replaying a captured routing table.
    """

    def __init__(self, output: str) -> None:
        self._output = output
        self.probes: list[str] = []

    def query(self, probe: str) -> str:
        self.probes.append(probe)
        return self._output
