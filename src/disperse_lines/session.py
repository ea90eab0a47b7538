"""Session — the one mutable holder around the pure core.

Stands where the input form's state lives: it owns the current text and
the diagnostics last shown for it.

Usage:

    session = DisperseSession()
    session.edit(pasted_text)
    report = session.validate()

    if session.show_duplicate_actions:
        session.keep_first()       # or session.merge()

    if session.can_proceed:
        for address, amount in session.entries():
            ...
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal

from .logging_setup import get_logger
from .patterns import parse_amount, split_lines
from .resolver import keep_first, merge_amounts, resolve
from .types import Diagnostic, DiagnosticKind, ValidationReport
from .validator import validate

logger = get_logger(__name__)


@dataclass
class DisperseSession:
    """Current text plus the diagnostics from its last validation."""

    text: str = ""
    duplicate_policy: str = "keep-first"
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _validated: bool = field(default=False, repr=False)

    def edit(self, text: str) -> None:
        """Replace the text; any shown diagnostics are now stale."""
        self.text = text
        self._validated = False
        if self.diagnostics:
            self.diagnostics = []

    def validate(self) -> ValidationReport:
        report = validate(self.text)
        self.diagnostics = list(report.diagnostics)
        self._validated = True
        return report

    def keep_first(self) -> ValidationReport:
        """Drop repeated identifiers, then re-validate the new text."""
        return self._resolve(keep_first(self.text), "keep-first")

    def merge(self) -> ValidationReport:
        """Sum repeated identifiers, then re-validate the new text."""
        return self._resolve(merge_amounts(self.text), "merge")

    def resolve(self) -> ValidationReport:
        """Apply the configured duplicate policy, then re-validate."""
        return self._resolve(resolve(self.text, self.duplicate_policy), self.duplicate_policy)

    def _resolve(self, new_text: str, policy: str) -> ValidationReport:
        logger.debug("resolving duplicates with %s", policy)
        self.text = new_text
        return self.validate()

    @property
    def can_proceed(self) -> bool:
        return self._validated and not self.diagnostics

    @property
    def show_duplicate_actions(self) -> bool:
        return any(d.kind is DiagnosticKind.DUPLICATE for d in self.diagnostics)

    def entries(self) -> list[tuple[str, Decimal]]:
        """Parsed (identifier, amount) pairs.  Only valid once ``can_proceed``."""
        # ``text`` is a plain field and may have been reassigned since validate()
        if not self.can_proceed or not validate(self.text).ok:
            raise ValueError("text has not been validated clean")
        return [
            (line.fields[0], parse_amount(line.fields[1]))
            for line in split_lines(self.text)
        ]
