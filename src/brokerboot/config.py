"""Configuration utilities for BROKERBOOT.

This module centralizes the settings the bootstrap needs and how they are read
from the environment. Every setting has a default suitable for the broker
container image, so an unconfigured container still boots.
"""

import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "BROKERBOOT_"  # pragma: no mutate

DEFAULT_DESTINATIONS_PATH = Path("/etc/brokerboot/destinations.conf")
DEFAULT_BROKER_HOME = Path("/opt/artemis/bin/artemis")
DEFAULT_INSTANCE_DIR = Path("/var/lib/artemis-instance")
DEFAULT_ADMIN_USER = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"
DEFAULT_ROUTE_PROBE = "1.1.1.1"

TRUE_TOKENS = frozenset({"1", "true", "yes", "on"})
FALSE_TOKENS = frozenset({"0", "false", "no", "off"})


class InvalidSettingError(ValueError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Invalid value for {name}: {value!r}")
        self.name = name
        self.value = value


@dataclass(frozen=True)
class BootstrapSettings:  # pylint: disable=too-many-instance-attributes
    """Settings for one bootstrap run.

    Attributes:
        destinations_path: Destination file to read.
        broker_home: Path to the broker's command-line tool.
        instance_dir: Where the broker instance is created.
        admin_user: Administrative user for the created instance.
        admin_password: Password for `admin_user`.
        allow_anonymous: Whether anonymous clients may connect.
        route_probe: Destination used to ask the routing table for the
            outbound route.
    """

    destinations_path: Path = DEFAULT_DESTINATIONS_PATH
    broker_home: Path = DEFAULT_BROKER_HOME
    instance_dir: Path = DEFAULT_INSTANCE_DIR
    admin_user: str = DEFAULT_ADMIN_USER
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    allow_anonymous: bool = True
    route_probe: str = DEFAULT_ROUTE_PROBE


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    if (raw := environ.get(name)) is None or not raw.strip():
        return default
    token = raw.strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    raise InvalidSettingError(name, raw)


def settings_from_env(environ: Mapping[str, str] | None = None) -> BootstrapSettings:
    """Build `BootstrapSettings` from ``BROKERBOOT_*`` environment variables.

    Args:
        environ: Mapping to read from; defaults to `os.environ`.

    Returns:
        Settings with defaults for any variable that is unset or empty.

    Raises:
        InvalidSettingError: If ``BROKERBOOT_ALLOW_ANONYMOUS`` is not a boolean.
    """
    environ = os.environ if environ is None else environ

    def get(name: str, default: str) -> str:
        return environ.get(ENV_PREFIX + name) or default

    return BootstrapSettings(
        destinations_path=Path(
            get("DESTINATIONS_PATH", str(DEFAULT_DESTINATIONS_PATH))
        ),
        broker_home=Path(get("BROKER_HOME", str(DEFAULT_BROKER_HOME))),
        instance_dir=Path(get("INSTANCE_DIR", str(DEFAULT_INSTANCE_DIR))),
        admin_user=get("ADMIN_USER", DEFAULT_ADMIN_USER),
        admin_password=get("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
        allow_anonymous=_env_bool(environ, ENV_PREFIX + "ALLOW_ANONYMOUS", True),
        route_probe=get("ROUTE_PROBE", DEFAULT_ROUTE_PROBE),
    )


def host_identifier(environ: Mapping[str, str] | None = None) -> str:
    """Return the runtime-assigned host identifier.

    Container runtimes set ``HOSTNAME`` to the container id or the configured
    host name; fall back to the OS host name otherwise.
    """
    environ = os.environ if environ is None else environ
    return environ.get("HOSTNAME") or socket.gethostname()
