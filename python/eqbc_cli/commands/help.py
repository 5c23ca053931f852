"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command
from ..context import ClientContext

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry

INPUT_HELP = """\
Plain lines are sent as chat.  "/bct <name> <text>" sends a TELL and
"/bca <text>" (or "/bcaa") a MSGALL.  "connect <host> <port> <name>"
opens a connection."""


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show available commands", aliases=("?",))
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        for command in registry.list_commands():
            print(command.format_help())
        print()
        print(INPUT_HELP)
        return 0
