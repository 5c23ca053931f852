"""Command registry for eqbc-client."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .base import Command
from .connect import ConnectCommand
from .exit import ExitCommand
from .help import HelpCommand
from .hotkey import HotkeyCommand
from .send import build_send_commands
from .session import DisconnectCommand, LastCommand, ReconnectCommand, StatusCommand
from ..context import ClientContext
from ..parser import split_command, split_head

LOGGER = logging.getLogger("eqbc_cli.commands")


class CommandRegistry:
    """Stores the known commands and resolves aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered

    def names(self) -> List[str]:
        return sorted(self._commands)

    def execute(self, ctx: ClientContext, line: str) -> int:
        """Run one command line (without the ``:`` prefix)."""
        name, remainder = split_head(line)
        if not name:
            return 0
        command = self.get(name)
        if command is None and name.isdigit():
            command = self.get("hotkey")
            argv = [f"run {name}"]
        elif command is None:
            print(f"Unknown command: {name}")
            return 1
        elif command.raw_args:
            argv = [remainder] if remainder else []
        else:
            argv = split_command(remainder)
            if len(argv) == 2 and argv[1].startswith("#parse-error"):
                print(f"Parse error: {argv[1].split(':', 1)[-1]}")
                return 1
        if command is None:
            return 1
        try:
            return command.run(ctx, argv)
        except SystemExit:
            raise
        except Exception as exc:
            LOGGER.exception("command failed")
            print(f"Command '{name}' failed: {exc}")
            return 1


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        HelpCommand(),
        ConnectCommand(),
        ReconnectCommand(),
        DisconnectCommand(),
        StatusCommand(),
        *build_send_commands(),
        HotkeyCommand(),
        LastCommand(),
        ExitCommand(),
    ]
    for command in commands:
        registry.register(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(registry)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
