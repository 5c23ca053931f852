"""Interactive chat REPL for eqbc-client."""

from __future__ import annotations

import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from eqbc import InboundLine, Intent, LineSubscription, split_marker

from .commands import CommandRegistry
from .completion import ClientCompleter
from .context import ClientContext
from .output import format_line
from .parser import COMMAND_PREFIX, is_command_line

LOGGER = logging.getLogger("eqbc_cli.repl")


class ClientREPL:
    """prompt_toolkit REPL; server lines print above the prompt."""

    def __init__(
        self,
        ctx: ClientContext,
        registry: CommandRegistry,
        *,
        history_path: Optional[str] = None,
        timestamps: bool = False,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_path = history_path
        self.timestamps = timestamps
        self._token: Optional[int] = None

    def attach(self) -> None:
        """Start printing inbound lines; call before connecting."""
        if self._token is None:
            self._token = self.ctx.line_bus.subscribe(LineSubscription(handler=self.print_line))
        self.ctx.line_bus.start()

    def detach(self) -> None:
        if self._token is not None:
            self.ctx.line_bus.unsubscribe(self._token)
            self._token = None

    def run(self) -> int:
        self.attach()
        session: PromptSession = PromptSession(
            self._prompt_message,
            history=self._build_history(),
            completer=ClientCompleter(self.ctx, self.registry),
            complete_while_typing=False,
        )
        with patch_stdout():
            while True:
                try:
                    line = session.prompt(default=self.ctx.take_prefill())
                except (EOFError, KeyboardInterrupt):
                    print()
                    return 0
                self.dispatch(line)

    def dispatch(self, line: str) -> None:
        """Route one submitted line; Ctrl-C abandons a blocked connect or send."""
        try:
            self._route(line)
        except KeyboardInterrupt:
            LOGGER.info("interrupted; dropping the pending connection")
            self.ctx.session.disconnect()
            print("Interrupted")

    def _route(self, line: str) -> None:
        if not line.strip():
            return
        if is_command_line(line):
            self.registry.execute(self.ctx, line[len(COMMAND_PREFIX):])
            return
        marked = split_marker(line, allow_bare=True)
        if marked is not None:
            intent, remainder = marked
            self.ctx.send(remainder, intent)
            return
        self.ctx.send(line, Intent.PLAIN_SEND)

    def print_line(self, line: InboundLine) -> None:
        print(format_line(line, timestamps=self.timestamps))

    def _prompt_message(self) -> str:
        target = self.ctx.session.target
        if target is None or not self.ctx.session.connected:
            return "[offline]> "
        return f"[{target}]> "

    def _build_history(self) -> History:
        if not self.history_path:
            return InMemoryHistory()
        try:
            return FileHistory(self.history_path)
        except OSError as exc:
            LOGGER.warning("history disabled: %s", exc)
            return InMemoryHistory()
