"""Entry validator — per-line checks, then a duplicate pass.

Usage:
    from disperse_lines import validate

    report = validate("0x2CB99F193549681e06C6770dDD5543812B4FaFE8=1")
    report.ok          # True
    report.messages    # []

Diagnostics come out in line order; duplicate summaries follow, in the
order each duplicated identifier was first seen.
"""

from __future__ import annotations

from .logging_setup import get_logger
from .patterns import is_valid_address, parse_amount, split_lines
from .types import Diagnostic, DiagnosticKind, Line, ValidationReport

logger = get_logger(__name__)


def validate(text: str) -> ValidationReport:
    """Validate raw text.  Never raises; an empty report means valid."""
    return validate_lines(split_lines(text))


def validate_lines(lines: list[Line]) -> ValidationReport:
    diagnostics: list[Diagnostic] = []
    index: dict[str, list[int]] = {}

    # --- Pass 1: per-line structure ---
    for line in lines:
        n = line.number
        if not line.is_entry:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.FORMAT,
                message=f"Line {n}: Invalid format.",
                lines=(n,),
            ))
            continue

        identifier, amount_text = line.fields[0], line.fields[1]

        # Address and amount are checked independently
        if not is_valid_address(identifier):
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.ADDRESS,
                message=f"Line {n}: invalid Ethereum address.",
                lines=(n,),
                identifier=identifier,
            ))

        if parse_amount(amount_text) is None:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.AMOUNT,
                message=f"Line {n}: wrong amount.",
                lines=(n,),
                identifier=identifier,
            ))

        # Indexed even when malformed; exact string match
        index.setdefault(identifier, []).append(n)

    # --- Pass 2: duplicates ---
    for identifier, numbers in index.items():
        if len(numbers) > 1:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.DUPLICATE,
                message=f"{identifier} duplicate in line: {', '.join(map(str, numbers))}.",
                lines=tuple(numbers),
                identifier=identifier,
            ))

    logger.debug(
        "validated %d lines: %d diagnostics, %d identifiers",
        len(lines), len(diagnostics), len(index),
    )
    return ValidationReport(diagnostics=diagnostics, index=index)
