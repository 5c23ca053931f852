"""Output helpers for eqbc-client."""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Mapping, Optional, Sequence

from eqbc import InboundLine

from .context import ClientContext


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def emit_result(ctx: ClientContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: ClientContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def format_line(line: InboundLine, *, timestamps: bool = False) -> str:
    """Render one inbound line for the terminal; text is never rewritten."""
    if not timestamps:
        return line.text
    stamp = time.strftime("%H:%M:%S", time.localtime(line.ts))
    return f"[{stamp}] {line.text}"


def render_hotkeys(hotkeys: Sequence[str]) -> None:
    if not hotkeys:
        print("  hotkeys: (none)")
        return
    print("  hotkeys:")
    for idx, body in enumerate(hotkeys, start=1):
        print(f"    {idx:>2}  {body}")


__all__ = ["emit_result", "emit_error", "format_line", "render_hotkeys"]
