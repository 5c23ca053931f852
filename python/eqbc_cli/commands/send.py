"""Tell / broadcast send commands."""

from __future__ import annotations

from typing import List, Sequence

from eqbc import Intent

from .base import Command
from ..context import ClientContext


class SendCommand(Command):
    """Send the rest of the line with a fixed intent.

    With no text the next prompt is pre-filled with the intent's marker.
    """

    def __init__(self, name: str, description: str, intent: Intent, aliases: Sequence[str] = ()) -> None:
        super().__init__(name, description, aliases=tuple(aliases), raw_args=True)
        self.intent = intent

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        text = argv[0] if argv else ""
        ctx.send(text, self.intent)
        return 0


def build_send_commands() -> List[SendCommand]:
    return [
        SendCommand("tell", "Tell one client: tell <name> <text>", Intent.TELL_TARGET, aliases=("bct",)),
        SendCommand("msgall", "Broadcast to every client: msgall <text>", Intent.BROADCAST_ALL, aliases=("bca",)),
        SendCommand("say", "Send plain chat text", Intent.PLAIN_SEND),
    ]
