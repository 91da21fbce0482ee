"""Unit tests for the CLI log level parser.

These tests exercise brokerboot.entrypoints.cli.helpers.log_level_parser.parse_log_level,
covering default behavior, override semantics, input normalization (commas/spaces),
case-insensitivity, and error handling for malformed input.
"""

import logging
import types

import click
import pytest

from brokerboot.entrypoints.cli.helpers.log_level_parser import parse_log_level


def make_ctx():
    """Create a minimal Click context stub (unused by the callback)."""
    return types.SimpleNamespace()


def test_empty_uses_defaults():
    """When no levels are provided, return the default library logger levels."""
    assert parse_log_level(make_ctx(), None, ()) == {"click_extra": logging.WARNING}


def test_repeated_flags_override_order():
    """Later repeated CLI flags override earlier ones for the same logger."""
    value = ("brokerboot=INFO", "click_extra=ERROR", "brokerboot=WARNING")
    out = parse_log_level(make_ctx(), None, value)
    assert out["brokerboot"] == logging.WARNING
    assert out["click_extra"] == logging.ERROR


def test_envvar_string_with_commas_and_spaces():
    """Accept a plain string (e.g. from an env var) with commas and spaces."""
    value = "brokerboot.adapters=INFO,  urllib3=WARNING rich=ERROR"
    out = parse_log_level(make_ctx(), None, value)
    assert out["brokerboot.adapters"] == logging.INFO
    assert out["urllib3"] == logging.WARNING
    assert out["rich"] == logging.ERROR


def test_case_insensitive_levels():
    """Level names should be parsed case-insensitively."""
    out = parse_log_level(make_ctx(), None, ("brokerboot=info", "rich=WaRnInG"))
    assert out["brokerboot"] == logging.INFO
    assert out["rich"] == logging.WARNING


def test_invalid_pair_raises():
    """Malformed NAME=LEVEL pairs should raise click.BadParameter."""
    with pytest.raises(click.BadParameter):
        parse_log_level(make_ctx(), None, ("not-a-pair",))


def test_invalid_level_raises():
    """Unknown level names should raise click.BadParameter."""
    with pytest.raises(click.BadParameter):
        parse_log_level(make_ctx(), None, ("brokerboot=LOUD",))
