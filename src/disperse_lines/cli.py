"""CLI interface for disperse-lines.

Usage:
    # Validate (stdin: address/amount lines, stdout: JSON report)
    printf '0xabc=1\\n' | python -m disperse_lines.cli validate

    # Resolve duplicates, printing the rewritten text
    python -m disperse_lines.cli --input recipients.txt keep-first
    python -m disperse_lines.cli --input recipients.txt merge

    # Resolve with the configured policy, then re-validate (JSON out)
    python -m disperse_lines.cli --config disperse.yaml fix

    # Show sample input
    python -m disperse_lines.cli example

``validate`` and ``fix`` exit with status 1 while diagnostics remain,
unless ``strict: false`` is set in the config.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import Any

from .config import create_session, load_config, load_from_yaml
from .logging_setup import configure_logging, get_logger
from .patterns import DELIMITER_HINT, example_text
from .resolver import POLICIES, keep_first, merge_amounts
from .validator import validate

logger = get_logger(__name__)


def _read_input(args: argparse.Namespace) -> str:
    if args.input and args.input != "-":
        with open(args.input, encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()
    # Drop the one trailing newline a file or pipe usually carries
    return text[:-1] if text.endswith("\n") else text


def _load(args: argparse.Namespace) -> dict[str, Any]:
    return load_from_yaml(args.config) if args.config else load_config({})


def _exit_code(ok: bool, cfg: dict[str, Any]) -> int:
    return 0 if ok or not cfg["strict"] else 1


def cmd_validate(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    """Validate lines from the input, print a JSON report."""
    report = validate(_read_input(args))
    json.dump(report.to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return _exit_code(report.ok, cfg)


def cmd_keep_first(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    sys.stdout.write(keep_first(_read_input(args)) + "\n")
    return 0


def cmd_merge(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    sys.stdout.write(merge_amounts(_read_input(args)) + "\n")
    return 0


def cmd_fix(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    """Resolve duplicates with a policy and re-validate the result."""
    if args.policy:
        cfg = {**cfg, "duplicates": args.policy}
    session = create_session(cfg, _read_input(args))
    report = session.resolve()
    logger.info("fix (%s): %d diagnostics remain", session.duplicate_policy, len(report.diagnostics))

    output = {"text": session.text, **report.to_dict()}
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return _exit_code(report.ok, cfg)


def cmd_example(args: argparse.Namespace, cfg: dict[str, Any]) -> int:
    """Print sample input and the delimiter hint."""
    sys.stdout.write(example_text() + "\n")
    sys.stderr.write(DELIMITER_HINT + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="disperse-lines",
        description="Validate and normalize address/amount lists for batch transfers",
    )
    parser.add_argument("--config", help="YAML config path")
    parser.add_argument("--input", help="Input file (default: stdin)")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("validate", help="Validate lines, print JSON diagnostics")
    sub.add_parser("keep-first", help="Keep the first line per address")
    sub.add_parser("merge", help="Combine amounts per address")
    fix = sub.add_parser("fix", help="Resolve duplicates, then re-validate")
    fix.add_argument("--policy", choices=sorted(POLICIES), help="Override the configured policy")
    sub.add_parser("example", help="Print sample input")

    args = parser.parse_args(argv)
    cfg = _load(args)
    configure_logging(args.log_level or cfg["log_level"])

    cmds = {
        "validate": cmd_validate,
        "keep-first": cmd_keep_first,
        "merge": cmd_merge,
        "fix": cmd_fix,
        "example": cmd_example,
    }
    return cmds[args.command](args, cfg)


if __name__ == "__main__":
    sys.exit(main())
