"""disperse-lines — parse, validate and normalize address/amount lists."""

from .patterns import split_fields, split_lines, parse_amount, example_text
from .validator import validate, validate_lines
from .resolver import keep_first, merge_amounts, resolve
from .session import DisperseSession
from .config import create_session, load_config, load_from_yaml
from .types import Diagnostic, DiagnosticKind, Line, ValidationReport

__all__ = [
    "split_fields", "split_lines", "parse_amount", "example_text",
    "validate", "validate_lines",
    "keep_first", "merge_amounts", "resolve",
    "DisperseSession",
    "create_session", "load_config", "load_from_yaml",
    "Diagnostic", "DiagnosticKind", "Line", "ValidationReport",
]
__version__ = "0.1.0"
