"""CLI helpers for BROKERBOOT.

Utilities used by the command-line interface: logger-level option parsing and
message emitters that write to stderr with emoji→ASCII fallbacks.
"""

from .messages import error, success, warn

__all__ = ["error", "warn", "success"]
