"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to hide secrets (admin passwords, tokens) from command lines
and free-form text before they are logged or printed.
"""

import abc
from collections.abc import Sequence
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact passwords/tokens but keep user names visible.
    - STRICT: redact passwords/tokens and also user names.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize_command(self, argv: Sequence[str]) -> str:
        """Return a display-safe, shell-quoted rendering of *argv*.

        Args:
            argv: Program and arguments as passed to the operating system.

        Returns:
            The command line with sensitive option values redacted.
        """

    @abc.abstractmethod
    def sanitize_text(self, text: str) -> str:
        """Return *text* with ``key: value`` / ``key=value`` secrets redacted."""

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
