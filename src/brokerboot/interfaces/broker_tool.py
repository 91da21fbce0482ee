"""Interface for the external broker command-line tool.

The broker engine is a third-party program. BROKERBOOT only drives two of its
operations: the one-time creation of an instance directory and the
long-running ``run`` of that instance. This module defines the request and
result types exchanged with it and the abstract port adapters implement.
"""

import abc
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from brokerboot.domain.arguments import creation_flags
from brokerboot.domain.value_objects import SynthesizedArguments


@dataclass(frozen=True)
class CreateInstanceRequest:  # pylint: disable=too-many-instance-attributes
    """Everything the create-instance step needs."""

    instance_dir: Path
    user: str
    password: str
    allow_anonymous: bool
    host: str
    name: str
    arguments: SynthesizedArguments
    role: str = "admin"

    def to_args(self) -> list[str]:
        """Render the request as command-line arguments (without the tool)."""
        args = [
            "create",
            str(self.instance_dir),
            "--user",
            self.user,
            "--password",
            self.password,
            "--role",
            self.role,
            "--allow-anonymous" if self.allow_anonymous else "--require-login",
            "--host",
            self.host,
            "--name",
            self.name,
        ]
        args.extend(creation_flags(self.arguments))
        args.append("--silent")
        return args


@dataclass(frozen=True)
class CommandResult:
    """Outcome of running an external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Both streams, stdout first; the broker tool reports errors on either."""
        return "\n".join(s for s in (self.stdout.strip(), self.stderr.strip()) if s)


class BrokerTool(abc.ABC):
    """Contract for driving the external broker tool."""

    @abc.abstractmethod
    def instance_exists(self, instance_dir: Path) -> bool:
        """Return True if *instance_dir* already holds a created instance."""

    @abc.abstractmethod
    def create_instance(self, request: CreateInstanceRequest) -> CommandResult:
        """Run the one-time create-instance step and report its outcome."""

    @abc.abstractmethod
    def run_instance(self, instance_dir: Path) -> NoReturn:
        """Replace the current process with the broker's run step.

        Raises:
            HandoffError: If the run step cannot be started.
        """

    @abc.abstractmethod
    def describe(self, request: CreateInstanceRequest) -> list[str]:
        """Return the full argv that `create_instance` would execute."""
