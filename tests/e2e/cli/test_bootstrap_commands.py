"""End-to-end tests for `brokerboot run/plan/validate/resolve`."""

import pytest

from brokerboot.entrypoints.cli.main import brokerboot

# pylint: disable=unused-argument

EXAMPLE = "orders\ninvoices:invoice-queue:anycast\nshipments::multicast\n"


def flag_value(argv: list[str], flag: str) -> str:
    """Return the value following *flag* in *argv*."""
    return argv[argv.index(flag) + 1]


class TestRun:
    """Tests for `brokerboot run`."""

    @staticmethod
    def test_creates_and_hands_over(runner, fake_system, cli_env, destinations_file, tmp_path):
        """A full bootstrap creates the instance and execs the broker."""
        destinations_file.write_text(EXAMPLE, encoding="utf-8")
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 0, result.output

        (argv,) = fake_system.created
        assert argv[:3] == [
            str(tmp_path / "artemis"),
            "create",
            str(tmp_path / "instance"),
        ]
        assert flag_value(argv, "--host") == "172.17.0.3"
        assert flag_value(argv, "--name") == "broker-1"
        assert flag_value(argv, "--user") == "admin"
        assert flag_value(argv, "--password") == "s3cr3t"
        assert "--allow-anonymous" in argv
        assert argv[-1] == "--silent"
        assert (
            flag_value(argv, "--addresses")
            == "orders:anycast,invoices:anycast,shipments:multicast"
        )
        assert (
            flag_value(argv, "--queues")
            == "orders:anycast,invoice-queue:anycast,shipments:multicast"
        )
        launcher = str(tmp_path / "instance" / "bin" / "artemis")
        assert fake_system.execs == [[launcher, "run"]]

    @staticmethod
    def test_without_destination_file(runner, fake_system, cli_env):
        """A missing destination file omits both destination flags."""
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 0, result.output
        (argv,) = fake_system.created
        assert "--addresses" not in argv
        assert "--queues" not in argv
        assert len(fake_system.execs) == 1

    @staticmethod
    def test_parse_error(runner, fake_system, cli_env, destinations_file):
        """A malformed line exits 1 with the line number and nothing is started."""
        destinations_file.write_text(
            "orders\ninvoices:invoice-queue:broadcast\n", encoding="utf-8"
        )
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 1
        assert "parse: line 2" in result.output
        assert "broadcast" in result.output
        assert not fake_system.created
        assert not fake_system.execs

    @staticmethod
    def test_undecodable_file(runner, fake_system, cli_env, destinations_file):
        """Invalid UTF-8 gives a one-line parse diagnostic, not a traceback."""
        destinations_file.write_bytes(b"orders\n\xff\xfe\n")
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "parse: line 2: invalid UTF-8" in result.output
        assert "Traceback" not in result.output
        assert not fake_system.created
        assert not fake_system.execs

    @staticmethod
    def test_resolution_error(runner, fake_system, cli_env):
        """Without a source address the bootstrap stops before creation."""
        fake_system.route_output = "default via 172.17.0.1 dev eth0\n"
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 1
        assert "resolve:" in result.output
        assert not fake_system.created

    @staticmethod
    def test_creation_error_passes_exit_code_through(runner, fake_system, cli_env):
        """The broker tool's exit status becomes the process exit status."""
        fake_system.create_status = 5
        fake_system.create_stderr = "Error: something broke"
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 5
        assert "create:" in result.output
        assert "something broke" in result.output
        assert not fake_system.execs

    @staticmethod
    def test_existing_instance_is_not_recreated(runner, fake_system, cli_env, tmp_path):
        """A restart with an existing instance goes straight to run."""
        launcher = tmp_path / "instance" / "bin" / "artemis"
        launcher.parent.mkdir(parents=True)
        launcher.write_text("#!/bin/sh\n", encoding="utf-8")
        result = runner.invoke(brokerboot, ["run"], env=cli_env)
        assert result.exit_code == 0, result.output
        assert not fake_system.created
        assert fake_system.execs == [[str(launcher), "run"]]

    @staticmethod
    def test_options_override_environment(runner, fake_system, cli_env):
        """Command-line options win over environment variables."""
        result = runner.invoke(
            brokerboot,
            ["run", "--admin-user", "ops", "--require-login"],
            env=cli_env,
        )
        assert result.exit_code == 0, result.output
        (argv,) = fake_system.created
        assert flag_value(argv, "--user") == "ops"
        assert "--require-login" in argv

    @staticmethod
    def test_password_not_logged(runner, fake_system, cli_env):
        """The admin password never appears in console output."""
        result = runner.invoke(brokerboot, ["-vv", "run"], env=cli_env)
        assert result.exit_code == 0, result.output
        assert "s3cr3t" not in result.output


class TestPlan:
    """Tests for `brokerboot plan`."""

    @staticmethod
    def test_prints_plan_without_side_effects(runner, fake_system, cli_env, destinations_file):
        """plan shows the derived values and never calls the broker."""
        destinations_file.write_text(
            EXAMPLE + "dead-letter:DLQ:anycast:false\n", encoding="utf-8"
        )
        result = runner.invoke(brokerboot, ["plan"], env=cli_env)
        assert result.exit_code == 0, result.output
        assert "172.17.0.3" in result.output
        assert "broker-1" in result.output
        assert "orders:anycast,invoices:anycast,shipments:multicast" in result.output
        assert "dead-letter" in result.output
        assert "s3cr3t" not in result.output
        assert not fake_system.created
        assert not fake_system.execs

    @staticmethod
    def test_empty_plan(runner, fake_system, cli_env):
        """Without destinations both arguments show as <none>."""
        result = runner.invoke(brokerboot, ["plan"], env=cli_env)
        assert result.exit_code == 0, result.output
        assert result.output.count("<none>") == 2

    @staticmethod
    def test_plan_reports_parse_error(runner, fake_system, cli_env, destinations_file):
        """plan fails like run on a malformed file."""
        destinations_file.write_text(":queue\n", encoding="utf-8")
        result = runner.invoke(brokerboot, ["plan"], env=cli_env)
        assert result.exit_code == 1
        assert "parse: line 1" in result.output


class TestValidate:
    """Tests for `brokerboot validate`."""

    @staticmethod
    def test_valid_file(runner, destinations_file):
        """A valid file reports its destination count."""
        destinations_file.write_text("# c\n" + EXAMPLE, encoding="utf-8")
        result = runner.invoke(brokerboot, ["validate", str(destinations_file)])
        assert result.exit_code == 0
        assert "3 destination(s) valid" in result.output

    @staticmethod
    def test_reports_every_invalid_line(runner, destinations_file):
        """All malformed lines are reported, not just the first."""
        destinations_file.write_text(
            "orders\n:queue\na:b:broadcast\nc:d:anycast:maybe\n", encoding="utf-8"
        )
        result = runner.invoke(brokerboot, ["validate", str(destinations_file)])
        assert result.exit_code == 1
        for number in (2, 3, 4):
            assert f"line {number}:" in result.output

    @staticmethod
    def test_undecodable_file(runner, destinations_file):
        """validate reports undecodable bytes with their line number."""
        destinations_file.write_bytes(b"orders\n\xff\xfe\n")
        result = runner.invoke(brokerboot, ["validate", str(destinations_file)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "parse: line 2: invalid UTF-8" in result.output

    @staticmethod
    def test_missing_file_is_not_an_error(runner, tmp_path):
        """A missing file means zero destinations."""
        result = runner.invoke(brokerboot, ["validate", str(tmp_path / "absent")])
        assert result.exit_code == 0
        assert "no destinations configured" in result.output

    @staticmethod
    def test_file_from_environment(runner, cli_env, destinations_file):
        """Without an argument the configured destination file is checked."""
        destinations_file.write_text("orders\n", encoding="utf-8")
        result = runner.invoke(brokerboot, ["validate"], env=cli_env)
        assert result.exit_code == 0
        assert "1 destination(s) valid" in result.output


class TestResolve:
    """Tests for `brokerboot resolve`."""

    @staticmethod
    def test_prints_address(runner, fake_system, cli_env):
        """The resolved address is printed."""
        result = runner.invoke(brokerboot, ["resolve"], env=cli_env)
        assert result.exit_code == 0
        assert "172.17.0.3" in result.output

    @staticmethod
    @pytest.mark.parametrize("route_output", ["", "default via 10.0.0.1 dev eth0"])
    def test_failure(runner, fake_system, cli_env, route_output):
        """Unresolvable routes exit 1 with a resolve diagnostic."""
        fake_system.route_output = route_output
        result = runner.invoke(brokerboot, ["resolve"], env=cli_env)
        assert result.exit_code == 1
        assert "resolve:" in result.output

    @staticmethod
    def test_route_output_file_replaces_ip(runner, fake_system, cli_env, tmp_path):
        """--route-output reads the routing entry from a file instead of 'ip'."""
        fake_system.route_output = ""
        routes = tmp_path / "route.txt"
        routes.write_text(
            "1.1.1.1 via 10.1.0.1 dev eth1 src 10.1.2.3 uid 0\n", encoding="utf-8"
        )
        result = runner.invoke(
            brokerboot, ["resolve", "--route-output", str(routes)], env=cli_env
        )
        assert result.exit_code == 0
        assert "10.1.2.3" in result.output

    @staticmethod
    def test_plan_accepts_route_output(runner, fake_system, cli_env, tmp_path):
        """plan uses the same override for the --host value."""
        routes = tmp_path / "route.txt"
        routes.write_text("1.1.1.1 dev eth1 src 10.1.2.3\n", encoding="utf-8")
        result = runner.invoke(
            brokerboot, ["plan", "--route-output", str(routes)], env=cli_env
        )
        assert result.exit_code == 0
        assert "--host 10.1.2.3" in result.output
