"""Global pytest fixtures for BROKERBOOT."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

pytest_plugins = [
    "tests.fixtures.fakes",
]


@pytest.fixture
def write_destinations(tmp_path: Path) -> Callable[[str], Path]:
    """Return a factory writing destination-file content to a temp file.

    Example:
        ```py
        def test_something(write_destinations):
            path = write_destinations("orders\\nshipments::multicast\\n")
        ```
    """

    def _write(content: str, name: str = "destinations.conf") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
