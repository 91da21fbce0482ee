"""Destination-file grammar.

Each non-blank, non-comment line of the destination file describes one
messaging destination::

    <address_name>[:<queue_name>][:<routing_type>][:<auto_create_address>]

Parsing is split in two small steps. ``tokenize`` splits a line into its
four sub-fields, padding omitted trailing fields with empty strings.
``parse_line`` validates those fields and returns a tagged ``LineResult``
(``SkippedLine``, ``ParsedLine`` or ``InvalidLine``) so that line numbers and
error messages can be inspected without exceptions. ``parse_lines`` and
``parse`` build the all-or-nothing contract on top: the first invalid line
raises ``ParseError`` and no descriptor is returned. ``read_lines`` turns the
raw file into lines, reporting undecodable bytes as a ``ParseError`` on the
line that holds them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from .errors import DestinationFileError, ParseError
from .value_objects import DestinationDescriptor, RoutingType

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
FIELD_SEPARATOR = ":"
FIELD_NAMES = ("address", "queue", "routing", "auto_create")

BOOLEAN_TOKENS = {"true": True, "false": False}
ROUTING_TOKENS = {routing.value: routing for routing in RoutingType}


# ============================================================================
#                           Line results
# ============================================================================


@dataclass(frozen=True)
class SkippedLine:
    """A blank or comment line; produces no destination."""

    line_number: int


@dataclass(frozen=True)
class ParsedLine:
    """A line that produced a destination."""

    line_number: int
    descriptor: DestinationDescriptor


@dataclass(frozen=True)
class InvalidLine:
    """A malformed line, with the reason it was rejected."""

    line_number: int
    raw_line: str
    reason: str

    def to_error(self) -> ParseError:
        """Convert this result into the matching `ParseError`."""
        return ParseError(self.line_number, self.raw_line, self.reason)


LineResult: TypeAlias = SkippedLine | ParsedLine | InvalidLine


# ============================================================================
#                           Tokenizer / validator
# ============================================================================


def tokenize(text: str) -> list[str] | None:
    """Split a trimmed line into exactly four sub-fields.

    Returns:
        The sub-fields, each trimmed, with omitted trailing fields as ``""``;
        or ``None`` when the line has more sub-fields than the grammar defines.
    """
    fields = [part.strip() for part in text.split(FIELD_SEPARATOR)]
    if len(fields) > len(FIELD_NAMES):
        return None
    return fields + [""] * (len(FIELD_NAMES) - len(fields))


def parse_line(line_number: int, raw_line: str) -> LineResult:
    """Parse one line of the destination file.

    Args:
        line_number: 1-based position of the line in the file.
        raw_line: The line as read, including any surrounding whitespace.

    Returns:
        LineResult: The tagged outcome for this line.
    """
    text = raw_line.strip()
    if not text or text.startswith(COMMENT_MARKER):
        return SkippedLine(line_number)

    raw = raw_line.rstrip("\r\n")

    fields = tokenize(text)
    if fields is None:
        return InvalidLine(
            line_number,
            raw,
            f"too many fields (at most {len(FIELD_NAMES)} separated by "
            f"{FIELD_SEPARATOR!r})",
        )
    address, queue, routing_token, auto_create_token = fields

    if not address:
        return InvalidLine(line_number, raw, "missing address name")

    # empty sub-fields fall back to their defaults
    routing = ROUTING_TOKENS.get(routing_token or RoutingType.ANYCAST.value)
    if routing is None:
        return InvalidLine(
            line_number, raw, f"unknown routing type {routing_token!r}"
        )

    auto_create = BOOLEAN_TOKENS.get(auto_create_token or "true")
    if auto_create is None:
        return InvalidLine(
            line_number, raw, f"unknown auto-create value {auto_create_token!r}"
        )

    descriptor = DestinationDescriptor(
        address_name=address,
        queue_name=queue or address,
        routing_type=routing,
        auto_create_address=auto_create,
    )
    return ParsedLine(line_number, descriptor)


# ============================================================================
#                           File-level parsing
# ============================================================================


def scan(lines: Iterable[str]) -> list[LineResult]:
    """Parse every line and return all results, valid or not."""
    return [parse_line(number, line) for number, line in enumerate(lines, start=1)]


def parse_lines(lines: Iterable[str]) -> list[DestinationDescriptor]:
    """Parse lines into descriptors, in order.

    Raises:
        ParseError: On the first malformed line. Earlier valid lines are
            discarded; there is no partial result.
    """
    descriptors: list[DestinationDescriptor] = []
    for result in scan(lines):
        if isinstance(result, InvalidLine):
            raise result.to_error()
        if isinstance(result, ParsedLine):
            descriptors.append(result.descriptor)
    return descriptors


def decode_lines(data: bytes) -> list[str]:
    """Decode destination-file content into its lines.

    Only ``\\n`` ends a line and a trailing ``\\r`` is dropped, so line numbers
    match what an editor shows. A leading UTF-8 byte-order mark is ignored.

    Raises:
        ParseError: If a line is not valid UTF-8.
    """
    lines: list[str] = []
    for number, chunk in enumerate(data.split(b"\n"), start=1):
        encoding = "utf-8-sig" if number == 1 else "utf-8"
        try:
            lines.append(chunk.decode(encoding).rstrip("\r"))
        except UnicodeDecodeError as e:
            raw = chunk.decode("utf-8", errors="replace").rstrip("\r")
            reason = f"invalid UTF-8 byte 0x{e.object[e.start]:02x}"
            raise ParseError(number, raw, reason) from e
    return lines


def read_lines(file_path: Path) -> list[str] | None:
    """Read the destination file, or return None if it does not exist.

    Raises:
        DestinationFileError: If the file exists but cannot be read.
        ParseError: If the content is not valid UTF-8.
    """
    try:
        data = file_path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise DestinationFileError(file_path, e.strerror or str(e)) from e
    return decode_lines(data)


def parse(file_path: Path) -> list[DestinationDescriptor]:
    """Parse the destination file at *file_path*.

    A missing file means no destinations are configured and yields an empty
    list.

    Raises:
        ParseError: If any line is malformed or not valid UTF-8.
        DestinationFileError: If the file exists but cannot be read.
    """
    lines = read_lines(file_path)
    if lines is None:
        logger.info("No destination file at %s; no destinations configured", file_path)
        return []

    descriptors = parse_lines(lines)
    logger.debug("Parsed %d destination(s) from %s", len(descriptors), file_path)
    return descriptors
