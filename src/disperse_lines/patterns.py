"""Line grammar — delimiter class, address shape and amount numeral.

Input lines look like ``<identifier><delimiter><amount>``.  The delimiter
is exactly one whitespace character, comma or equals sign; every such
character is its own split point, so ``"a,,1"`` yields an empty middle field.
"""

from __future__ import annotations
import math
import re
from decimal import Decimal

from .types import Line

# ECMAScript whitespace and line terminators, not Python's Unicode \s
WHITESPACE = r"\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"

# Each delimiter char is a single split point (no run collapsing)
FIELD_DELIMITER = re.compile(f"[{WHITESPACE},=]")

# Non-negative, non-scientific decimal numeral
AMOUNT_PATTERN = re.compile(r"^\d+(\.\d+)?$", re.ASCII)

ADDRESS_PREFIX = "0x"
ADDRESS_LENGTH = 42    # "0x" + 40 chars; charset is not checked

DELIMITER_HINT = "Separated by ',' or ' ' or '='"

EXAMPLE_LINES: tuple[str, ...] = (
    "0x2CB99F193549681e06C6770dDD5543812B4FaFE8=1",
    "0x8B3392483BA26D65E331dB86D4F430E9B3814E5e 50",
    "0x09ae5A64465c18718a46b3aD946270BD3E5e6aaB,13",
)


def split_fields(line: str) -> list[str]:
    """Split one line into fields.  Never raises."""
    return FIELD_DELIMITER.split(line)


def split_lines(text: str) -> list[Line]:
    """Split raw text on ``\\n``, keeping empty lines, and tokenize each."""
    return [
        Line(number=i, raw=raw, fields=tuple(split_fields(raw)))
        for i, raw in enumerate(text.split("\n"), start=1)
    ]


def is_valid_address(identifier: str) -> bool:
    return identifier.startswith(ADDRESS_PREFIX) and len(identifier) == ADDRESS_LENGTH


def parse_amount(amount_text: str) -> Decimal | None:
    """Parse an amount numeral, or return None if it is not one.

    Both gates must pass: the numeral regex and a finite float parse
    (very long digit strings overflow to inf).
    """
    if not AMOUNT_PATTERN.match(amount_text):
        return None
    if not math.isfinite(float(amount_text)):
        return None
    return Decimal(amount_text)


def example_text() -> str:
    return "\n".join(EXAMPLE_LINES)
