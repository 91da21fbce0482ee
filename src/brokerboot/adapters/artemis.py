"""Broker tool adapter for the ActiveMQ Artemis command-line tool."""

import logging
import os
import subprocess
from pathlib import Path
from typing import NoReturn

from brokerboot.domain.errors import HandoffError
from brokerboot.interfaces.broker_tool import (
    BrokerTool,
    CommandResult,
    CreateInstanceRequest,
)

logger = logging.getLogger(__name__)

# A created instance always ships its own launcher script.
INSTANCE_LAUNCHER = Path("bin") / "artemis"


class ArtemisCli(BrokerTool):
    """Drive ``artemis create`` and ``<instance>/bin/artemis run``.

    Creation runs as a child process with captured output and is never
    retried. The run step replaces the current process via `os.execv`, so the
    broker inherits the container's PID and signals.

    Args:
        broker_home: Path to the distribution's ``artemis`` script.
    """

    def __init__(self, broker_home: Path) -> None:
        self._broker_home = broker_home

    def describe(self, request: CreateInstanceRequest) -> list[str]:
        return [str(self._broker_home), *request.to_args()]

    def instance_exists(self, instance_dir: Path) -> bool:
        return (instance_dir / INSTANCE_LAUNCHER).is_file()

    def create_instance(self, request: CreateInstanceRequest) -> CommandResult:
        try:
            completed = subprocess.run(
                self.describe(request), capture_output=True, text=True, check=False
            )
        except OSError as e:
            # the tool itself could not be started (missing, not executable)
            return CommandResult(returncode=127, stderr=str(e))

        for line in completed.stdout.splitlines():
            logger.debug("[artemis] %s", line)
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def run_instance(self, instance_dir: Path) -> NoReturn:
        launcher = instance_dir / INSTANCE_LAUNCHER
        logger.info("Handing over to %s run", launcher)
        try:
            os.execv(launcher, [str(launcher), "run"])
        except OSError as e:
            raise HandoffError(f"cannot start {launcher}: {e}") from e
