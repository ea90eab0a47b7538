"""Tests for the line splitter and entry validator."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from decimal import Decimal

import pytest

from disperse_lines import validate, split_lines, split_fields, parse_amount, DiagnosticKind
from disperse_lines.patterns import EXAMPLE_LINES, example_text

ADDR = "0x2CB99F193549681e06C6770dDD5543812B4FaFE8"
ADDR_A = "0x" + "A" * 40
ADDR_B = "0x" + "b" * 40


# ── Line Splitter ────────────────────────────────────────────────────

def test_split_keeps_empty_lines():
    lines = split_lines("a=1\n\nb=2\n")
    assert [l.raw for l in lines] == ["a=1", "", "b=2", ""]
    assert [l.number for l in lines] == [1, 2, 3, 4]


def test_split_empty_text_is_one_blank_line():
    lines = split_lines("")
    assert len(lines) == 1
    assert lines[0].fields == ("",)
    assert not lines[0].is_entry


def test_split_fields_each_delimiter_is_a_split_point():
    assert split_fields("a,,1") == ["a", "", "1"]
    assert split_fields("a 1") == ["a", "1"]
    assert split_fields("a=1") == ["a", "1"]
    assert split_fields("a\t1") == ["a", "1"]
    assert split_fields("a=1 extra") == ["a", "1", "extra"]


def test_split_fields_uses_browser_whitespace():
    # Separators like \x1c and \x85 are not whitespace in a browser
    assert split_fields("a\x1c1") == ["a\x1c1"]
    assert split_fields("a\x851") == ["a\x851"]
    assert split_fields("a\ufeff1") == ["a", "1"]
    assert split_fields("a\u00a01") == ["a", "1"]
    assert split_fields("a\u20051") == ["a", "1"]


def test_line_accessors():
    line = split_lines(f"{ADDR},5")[0]
    assert line.identifier == ADDR
    assert line.amount_text == "5"
    blank = split_lines("")[0]
    assert blank.identifier is None
    assert blank.amount_text is None


# ── Amount parsing ───────────────────────────────────────────────────

@pytest.mark.parametrize("text", ["0", "1", "50", "0.5", "13.000001"])
def test_parse_amount_accepts_plain_numerals(text):
    assert parse_amount(text) == Decimal(text)


@pytest.mark.parametrize("text", ["", "-1", "1e5", ".5", "1.", "1.2.3", "abc", " 1", "١"])
def test_parse_amount_rejects(text):
    assert parse_amount(text) is None


def test_parse_amount_rejects_overflowing_numeral():
    assert parse_amount("9" * 400) is None


# ── Validator: single lines ──────────────────────────────────────────

@pytest.mark.parametrize("delim", [" ", ",", "="])
def test_valid_line_with_each_delimiter(delim):
    report = validate(f"{ADDR}{delim}1")
    assert report.ok
    assert report.messages == []


def test_reference_address_is_valid():
    report = validate(f"{ADDR}=1")
    assert not report.of_kind(DiagnosticKind.ADDRESS)
    assert not report.of_kind(DiagnosticKind.AMOUNT)


def test_short_address():
    report = validate(f"{ADDR[:-1]}=1")
    assert report.messages == ["Line 1: invalid Ethereum address."]
    assert report.diagnostics[0].kind is DiagnosticKind.ADDRESS
    assert report.diagnostics[0].lines == (1,)


def test_missing_prefix():
    report = validate("1x" + ADDR[2:] + "=1")
    assert report.messages == ["Line 1: invalid Ethereum address."]


def test_wrong_amount():
    report = validate(f"{ADDR}=1.2.3")
    assert report.messages == ["Line 1: wrong amount."]
    assert report.diagnostics[0].kind is DiagnosticKind.AMOUNT


def test_address_and_amount_fail_together():
    report = validate("0x1=abc")
    assert report.messages == [
        "Line 1: invalid Ethereum address.",
        "Line 1: wrong amount.",
    ]


def test_blank_line_is_format_error():
    report = validate(f"{ADDR}=1\n\n{ADDR_B}=2")
    assert report.messages == ["Line 2: Invalid format."]
    assert report.diagnostics[0].kind is DiagnosticKind.FORMAT


def test_single_field_line_not_indexed():
    report = validate(f"{ADDR}\n{ADDR}")
    assert report.messages == ["Line 1: Invalid format.", "Line 2: Invalid format."]
    assert report.index == {}
    assert not report.has_duplicates


def test_double_delimiter_leaves_empty_amount():
    report = validate(f"{ADDR},,1")
    assert report.messages == ["Line 1: wrong amount."]


# ── Validator: duplicates ────────────────────────────────────────────

def test_duplicate_lines_reported():
    report = validate(f"{ADDR_A}=1\n{ADDR_B}=2\n{ADDR_A}=3")
    assert report.messages == [f"{ADDR_A} duplicate in line: 1, 3."]
    dup = report.diagnostics[0]
    assert dup.kind is DiagnosticKind.DUPLICATE
    assert dup.lines == (1, 3)
    assert dup.identifier == ADDR_A
    assert report.duplicates() == {ADDR_A: [1, 3]}


def test_duplicates_follow_line_diagnostics_in_first_seen_order():
    text = f"{ADDR_B}=1\n{ADDR_A}=x\n{ADDR_A}=2\n{ADDR_B}=2"
    report = validate(text)
    assert report.messages == [
        "Line 2: wrong amount.",
        f"{ADDR_B} duplicate in line: 1, 4.",
        f"{ADDR_A} duplicate in line: 2, 3.",
    ]


def test_malformed_identifiers_still_tracked_for_duplicates():
    report = validate("bad=1\nbad=2")
    assert report.messages == [
        "Line 1: invalid Ethereum address.",
        "Line 2: invalid Ethereum address.",
        "bad duplicate in line: 1, 2.",
    ]


def test_duplicates_are_case_sensitive():
    lower = "0x" + "a" * 40
    upper = "0x" + "A" * 40
    report = validate(f"{lower}=1\n{upper}=1")
    assert report.ok


def test_triple_duplicate_lists_all_lines():
    report = validate(f"{ADDR}=1\n{ADDR}=1\n{ADDR}=1")
    assert report.messages == [f"{ADDR} duplicate in line: 1, 2, 3."]


# ── Validator: general properties ────────────────────────────────────

def test_validation_is_deterministic():
    text = f"{ADDR_A}=1\nnope\n{ADDR_A}=x\n0x12 3"
    assert validate(text).diagnostics == validate(text).diagnostics


def test_example_input_is_valid():
    assert len(EXAMPLE_LINES) == 3
    assert validate(example_text()).ok


def test_report_to_dict():
    data = validate(f"{ADDR}=1\n{ADDR}=oops").to_dict()
    assert data["ok"] is False
    assert data["entries"] == 2
    assert data["diagnostics"][0] == {
        "kind": "amount",
        "message": "Line 2: wrong amount.",
        "lines": [2],
        "identifier": ADDR,
    }
    assert data["diagnostics"][1]["kind"] == "duplicate"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
