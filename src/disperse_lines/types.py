"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class DiagnosticKind(str, Enum):
    """Category of a validation finding."""
    FORMAT = "format"          # fewer than 2 fields
    ADDRESS = "address"        # bad 0x prefix or length
    AMOUNT = "amount"          # not a plain decimal numeral
    DUPLICATE = "duplicate"    # identifier on 2+ lines


@dataclass(frozen=True, slots=True)
class Line:
    """One newline-delimited unit of the raw text."""
    number: int            # 1-based
    raw: str
    fields: tuple[str, ...]

    @property
    def is_entry(self) -> bool:
        return len(self.fields) >= 2

    @property
    def identifier(self) -> str | None:
        return self.fields[0] if self.is_entry else None

    @property
    def amount_text(self) -> str | None:
        return self.fields[1] if self.is_entry else None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single validation finding."""
    kind: DiagnosticKind
    message: str
    lines: tuple[int, ...]
    identifier: str | None = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "lines": list(self.lines),
            "identifier": self.identifier,
        }


@dataclass(slots=True)
class ValidationReport:
    """Result of validating a block of text."""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    index: dict[str, list[int]] = field(default_factory=dict)  # identifier → line numbers

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    @property
    def has_duplicates(self) -> bool:
        return any(d.kind is DiagnosticKind.DUPLICATE for d in self.diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def duplicates(self) -> dict[str, list[int]]:
        """Identifiers seen on more than one line."""
        return {ident: nums for ident, nums in self.index.items() if len(nums) > 1}

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "entries": sum(len(nums) for nums in self.index.values()),
        }
