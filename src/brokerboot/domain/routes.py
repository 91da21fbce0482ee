"""Extract the instance's own address from routing-table output.

The input is the text printed by ``ip -4 -o route get <probe>`` (or any
routing listing in the same ``key value`` token style). Host-name lookups
are never used: inside a container the host name may not resolve, or may
resolve to an address on the wrong network.
"""

import ipaddress

from .errors import ResolutionError

SOURCE_KEYWORD = "src"


def source_addresses(route_output: str) -> list[str]:
    """Return every ``src`` address in the output, in output order."""
    tokens = route_output.split()
    return [
        tokens[index + 1]
        for index, token in enumerate(tokens[:-1])
        if token == SOURCE_KEYWORD
    ]


def select_source_address(route_output: str) -> str:
    """Return the first usable source address found in *route_output*.

    Raises:
        ResolutionError: If the output has no route entry, or no entry
            carries a valid source address.
    """
    if not route_output.strip():
        raise ResolutionError("no route entry found for the default route")

    for candidate in source_addresses(route_output):
        try:
            return str(ipaddress.ip_address(candidate))
        except ValueError:
            continue
    raise ResolutionError(
        f"no source address in route entry: {route_output.strip()!r}"
    )
