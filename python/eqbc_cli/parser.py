"""Command-line splitting for eqbc-client commands."""

from __future__ import annotations

import shlex
from typing import List, Tuple

COMMAND_PREFIX = ":"


def split_command(line: str) -> List[str]:
    """Split command arguments into argv tokens using shlex rules."""
    if not line:
        return []
    try:
        return shlex.split(line, comments=False, posix=True)
    except ValueError as exc:
        # Return the raw line as a single token so callers can raise a friendlier error.
        return [line.strip(), f"#parse-error:{exc}"]


def split_head(line: str) -> Tuple[str, str]:
    """Return ``(command name, untouched remainder)``."""
    name, _, remainder = line.strip().partition(" ")
    return name, remainder.strip()


def is_command_line(line: str) -> bool:
    return line.startswith(COMMAND_PREFIX) and len(line.strip()) > len(COMMAND_PREFIX)
