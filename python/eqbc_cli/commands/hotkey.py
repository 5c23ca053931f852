"""Hotkey management command."""

from __future__ import annotations

from typing import List, Tuple

from eqbc import HotkeyError

from .base import Command
from ..context import ClientContext
from ..output import emit_error, emit_result, render_hotkeys

USAGE = "usage: hotkey [list | run N | set N <text> | add <text> | reset]"


def _slot(ctx: ClientContext, token: str) -> int:
    """Translate a 1-based slot number to a store index."""
    try:
        number = int(token, 10)
    except ValueError as exc:
        raise IndexError(f"not a hotkey number: {token!r}") from exc
    if not 1 <= number <= len(ctx.hotkeys):
        raise IndexError(f"hotkey {number} does not exist (1..{len(ctx.hotkeys)})")
    return number - 1


def _take_word(text: str) -> Tuple[str, str]:
    """Split the first word off *text*; the rest keeps its quotes and spacing."""
    head, _, rest = text.strip().partition(" ")
    return head, rest.lstrip()


class HotkeyCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "hotkey",
            "List, run and edit hotkeys (:N runs hotkey N)",
            aliases=("hk",),
            raw_args=True,
        )

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        sub, rest = _take_word(argv[0] if argv else "")
        if not sub or sub == "list":
            hotkeys = ctx.hotkey_list()
            if not ctx.json_output:
                render_hotkeys(hotkeys)
                return 0
            emit_result(ctx, message="hotkeys", data={"hotkeys": hotkeys})
            return 0
        try:
            if sub == "run" and rest and " " not in rest:
                ctx.run_hotkey(_slot(ctx, rest))
                return 0
            if sub == "set":
                slot, value = _take_word(rest)
                if slot and value:
                    index = _slot(ctx, slot)
                    ctx.hotkeys.set(index, value)
                    ctx.hotkeys.persist()
                    emit_result(ctx, message=f"hotkey {index + 1} = {value}", data={"index": index + 1, "value": value})
                    return 0
            if sub == "add" and rest:
                index = ctx.hotkeys.add(rest)
                ctx.hotkeys.persist()
                emit_result(ctx, message=f"hotkey {index + 1} = {rest}", data={"index": index + 1, "value": rest})
                return 0
            if sub == "reset" and not rest:
                hotkeys = ctx.hotkeys.reset()
                emit_result(ctx, message="Hotkeys reset to defaults", data={"hotkeys": hotkeys})
                return 0
        except (IndexError, HotkeyError) as exc:
            emit_error(ctx, message=str(exc))
            return 1
        emit_error(ctx, message=USAGE)
        return 1
