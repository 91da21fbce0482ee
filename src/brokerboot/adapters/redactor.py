"""Regex-based redactor for sanitizing secrets from command lines and text.

Masks the values of secret-bearing options (``--password``, ``--token`` ...)
in argv lists, in both ``--opt value`` and ``--opt=value`` forms. In free
text such as tool output or log messages it masks ``--admin-password value``
as well as ``key: value`` / ``key=value`` fragments, including prefixed keys
like ``BROKERBOOT_ADMIN_PASSWORD=...``. Strict mode also hides user names.
"""

import re
import shlex
from collections.abc import Sequence

from brokerboot.interfaces import redactor
from brokerboot.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "cluster_password",
]
STRICT_MODE_ADDITIONAL_KEYWORDS = ["user", "username", "cluster_user"]
STRICT_MODE_SECRET_KEYWORDS = SECRET_KEYWORDS + STRICT_MODE_ADDITIONAL_KEYWORDS

# a value that is already masked, possibly shell-quoted
ALREADY_MASKED = r"(?!'?\*\*\*)"


def _keyword_pattern(keywords: list[str]) -> str:
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


def _text_patterns(keywords: list[str]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    kw = _keyword_pattern(keywords)
    key_value = re.compile(
        rf"(\b[\w.-]*?(?:{kw})\s*[:=]\s*){ALREADY_MASKED}\S+", re.IGNORECASE
    )
    option_value = re.compile(
        rf"(--[\w-]*?(?:{kw})\s+)(?!-){ALREADY_MASKED}\S+", re.IGNORECASE
    )
    return key_value, option_value


OPTION_PATTERN = re.compile(
    rf"--(?:{_keyword_pattern(SECRET_KEYWORDS)})", re.IGNORECASE
)
STRICT_MODE_OPTION_PATTERN = re.compile(
    rf"--(?:{_keyword_pattern(STRICT_MODE_SECRET_KEYWORDS)})", re.IGNORECASE
)
TEXT_PATTERNS = _text_patterns(SECRET_KEYWORDS)
STRICT_MODE_TEXT_PATTERNS = _text_patterns(STRICT_MODE_SECRET_KEYWORDS)


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    @property
    def _strict(self) -> bool:
        return self._mode == RedactorMode.STRICT

    def sanitize_command(self, argv: Sequence[str]) -> str:
        option_pattern = STRICT_MODE_OPTION_PATTERN if self._strict else OPTION_PATTERN
        sanitized: list[str] = []
        hide_next = False
        for arg in argv:
            if hide_next:
                sanitized.append(PLACEHOLDER)
                hide_next = False
                continue

            # 1) --password=value
            name, sep, _ = arg.partition("=")
            if sep and option_pattern.fullmatch(name):
                sanitized.append(f"{name}={PLACEHOLDER}")
            # 2) --password value
            elif option_pattern.fullmatch(arg):
                sanitized.append(arg)
                hide_next = True
            else:
                sanitized.append(arg)
        return shlex.join(sanitized)

    def sanitize_text(self, text: str) -> str:
        patterns = STRICT_MODE_TEXT_PATTERNS if self._strict else TEXT_PATTERNS
        for pattern in patterns:
            text = pattern.sub(rf"\1{PLACEHOLDER}", text)
        return text
