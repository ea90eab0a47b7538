"""YAML/dict config loader for disperse-lines.

Supports loading from a YAML file or a plain dict (for embedding
in a larger tool config).

Example YAML:

    disperse_lines:
      duplicates: merge        # "keep-first" or "merge"
      strict: true             # non-zero CLI exit while diagnostics remain
      log_level: INFO
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml

from .resolver import POLICIES
from .session import DisperseSession


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "disperse_lines" key or flat
    if "disperse_lines" in data:
        data = data["disperse_lines"] or {}

    duplicates = data.get("duplicates", "keep-first")
    if duplicates not in POLICIES:
        raise ValueError(f"duplicates must be one of {sorted(POLICIES)}, got {duplicates!r}")

    return {
        "duplicates": duplicates,
        "strict": bool(data.get("strict", True)),
        "log_level": data.get("log_level", "WARNING"),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    with open(path) as f:
        return load_config(yaml.safe_load(f))


def create_session(config: dict[str, Any] | None = None, text: str = "") -> DisperseSession:
    """Create a session seeded with text and the configured duplicate policy."""
    cfg = load_config(config)
    return DisperseSession(text=text, duplicate_policy=cfg["duplicates"])
