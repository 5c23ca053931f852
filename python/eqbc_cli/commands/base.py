"""Command base classes for eqbc-client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..context import ClientContext
from ..parser import split_command


@dataclass
class Command:
    """Abstract command description.

    Commands with ``raw_args`` receive the untouched remainder of the line as
    a single argument (or none), so chat text keeps its quotes and spacing.
    """

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    raw_args: bool = False

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        names = ", ".join((self.name, *self.aliases))
        return f":{names:<16} {self.description}"

    def parse(self, line: str) -> List[str]:
        return split_command(line)
