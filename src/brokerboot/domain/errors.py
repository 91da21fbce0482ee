"""Domain-layer error definitions."""

from pathlib import Path

# ============================================================================
#                           General bootstrap errors
# ============================================================================


class BootstrapError(Exception):
    """Base class for every fatal bootstrap failure.

    Attributes:
        stage: Short name of the bootstrap stage that failed.
    """

    stage: str = "bootstrap"

    def diagnostic(self) -> str:
        """Return a single human-readable line naming the stage and cause."""
        return f"{self.stage}: {self}"


class ResolutionError(BootstrapError):
    """Raised when no usable network address can be determined."""

    stage = "resolve"


class HandoffError(BootstrapError):
    """Raised when the broker's run step cannot be started."""

    stage = "run"


# ============================================================================
#                   Destination file errors
# ============================================================================


class ParseError(BootstrapError):
    """Raised when a destination line is malformed."""

    stage = "parse"

    def __init__(self, line_number: int, raw_line: str, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason} (got {raw_line!r})")
        self.line_number = line_number
        self.raw_line = raw_line
        self.reason = reason


class DestinationFileError(BootstrapError):
    """Raised when the destination file exists but cannot be read."""

    stage = "parse"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


# ============================================================================
#                   Broker tool errors
# ============================================================================


class CreationError(BootstrapError):
    """Raised when the broker's create-instance step exits non-zero.

    The exit code and output of the broker tool are carried verbatim.
    """

    stage = "create"

    def __init__(self, exit_code: int, output: str) -> None:
        detail = output.strip() or "<no output>"
        super().__init__(f"broker tool exited with status {exit_code}: {detail}")
        self.exit_code = exit_code
        self.output = output
