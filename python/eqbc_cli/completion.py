"""prompt_toolkit completer for eqbc-client."""

from __future__ import annotations

from typing import Iterable, List

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from eqbc.framing import MARKERS

from .commands import CommandRegistry
from .context import ClientContext
from .parser import COMMAND_PREFIX

HOTKEY_SUBCOMMANDS = ("list", "run", "set", "add", "reset")


class ClientCompleter(Completer):
    """Completes ``:`` commands, hotkey sub-commands and input markers."""

    def __init__(self, ctx: ClientContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        text = document.text_before_cursor
        if not text.startswith(COMMAND_PREFIX):
            if " " not in text:
                for marker, _intent in MARKERS:
                    if text and marker.startswith(text):
                        yield Completion(marker, start_position=-len(text))
            return
        body = text[len(COMMAND_PREFIX):]
        tokens = body.split(" ")
        if len(tokens) == 1:
            for name in self._format_candidates(self.registry.names(), tokens[0]):
                yield Completion(name, start_position=-len(tokens[0]))
            return
        command = self.registry.get(tokens[0])
        if command is None or command.name != "hotkey":
            return
        if len(tokens) == 2:
            for sub in self._format_candidates(HOTKEY_SUBCOMMANDS, tokens[1]):
                yield Completion(sub, start_position=-len(tokens[1]))
            return
        if len(tokens) == 3 and tokens[1] in ("run", "set"):
            slots = [str(idx) for idx in range(1, len(self.ctx.hotkeys) + 1)]
            for slot in self._format_candidates(slots, tokens[2]):
                yield Completion(slot, start_position=-len(tokens[2]))

    @staticmethod
    def _format_candidates(candidates: Iterable[str], prefix: str = "") -> List[str]:
        needle = prefix.lower()
        ordered = [c for c in candidates if c.lower().startswith(needle)]
        return list(dict.fromkeys(ordered))
