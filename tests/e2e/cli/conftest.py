"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` command, a CliRunner with an isolated
filesystem, and `fake_system`, which replaces the ``ip`` tool, the broker
tool and `os.execv` at the subprocess seam so ``brokerboot run`` can be
exercised end to end.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from brokerboot.adapters import artemis, routing
from brokerboot.entrypoints.cli.main import brokerboot

# pylint: disable=redefined-outer-name

ROUTE_GET = "1.1.1.1 via 172.17.0.1 dev eth0 src 172.17.0.3 uid 0 \\    cache \n"


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests."""
    logger = logging.getLogger("brokerboot.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.debug("Creating with --admin-password s3cr3t --host 10.0.0.1")
    logger.info("Environment has BROKERBOOT_ADMIN_PASSWORD=%s", "s3cr3t")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    brokerboot.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(brokerboot, "log-demo")


@pytest.fixture
def register_command():
    """Register extra commands on `brokerboot` for the duration of a test."""
    names: list[str] = []

    def _register(command: click.Command, name: str) -> None:
        brokerboot.add_command(command, name=name)
        names.append(name)

    yield _register
    for name in names:
        _remove_command_everywhere(brokerboot, name)


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Provide an isolated filesystem context for tests using CliRunner."""
    with runner.isolated_filesystem():
        yield


@dataclass
class FakeSystem:
    """What the fake ``ip`` / ``artemis`` / ``execv`` saw, and how they answer."""

    route_output: str = ROUTE_GET
    create_status: int = 0
    create_stderr: str = ""
    created: list[list[str]] = field(default_factory=list)
    execs: list[list[str]] = field(default_factory=list)


@pytest.fixture
def fake_system(monkeypatch):
    """Replace the ip tool, the broker tool and os.execv with fakes."""
    system = FakeSystem()

    def fake_run(cmd, **kwargs):  # pylint: disable=unused-argument
        if cmd[0] == "ip":
            return subprocess.CompletedProcess(cmd, 0, stdout=system.route_output)
        system.created.append(list(cmd))
        return subprocess.CompletedProcess(
            cmd, system.create_status, stdout="", stderr=system.create_stderr
        )

    def fake_execv(path, argv):
        system.execs.append([os.fspath(path), *argv[1:]])
        raise SystemExit(0)

    monkeypatch.setattr(routing.shutil, "which", lambda name: f"/sbin/{name}")
    monkeypatch.setattr(subprocess, "run", fake_run)
    monkeypatch.setattr(artemis.os, "execv", fake_execv)
    return system


@pytest.fixture
def cli_env(tmp_path) -> dict[str, str]:
    """Environment pointing every path setting into tmp_path."""
    return {
        "HOSTNAME": "broker-1",
        "BROKERBOOT_DESTINATIONS_PATH": str(tmp_path / "destinations.conf"),
        "BROKERBOOT_BROKER_HOME": str(tmp_path / "artemis"),
        "BROKERBOOT_INSTANCE_DIR": str(tmp_path / "instance"),
        "BROKERBOOT_ADMIN_PASSWORD": "s3cr3t",
        "BROKERBOOT_LOG_PATH": str(tmp_path / "latest.log"),
    }


@pytest.fixture
def destinations_file(tmp_path) -> Path:
    """Path of the destination file named in `cli_env` (not yet written)."""
    return tmp_path / "destinations.conf"
