"""Exit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ClientContext


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__("exit", "Disconnect and quit", aliases=("quit", "q"))

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        ctx.session.disconnect()
        raise SystemExit(0)
