"""Connect command implementation."""

from __future__ import annotations

import argparse
from typing import List

from eqbc import ConnectionTarget

from .base import Command
from ..context import ClientContext
from ..output import emit_error, emit_result


class ConnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("connect", "Connect to a server: connect [host [port [name]]]", aliases=("open",))
        self._parser = argparse.ArgumentParser(prog="connect", add_help=False)
        self._parser.add_argument("host", nargs="?", help="Server host")
        self._parser.add_argument("port", nargs="?", type=int, help="Server port")
        self._parser.add_argument("name", nargs="?", help="Login name")

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            emit_error(ctx, message="usage: connect [host [port [name]]]")
            return 1
        default = ctx.default_target()
        host = args.host or (default.host if default else None)
        if args.port is not None:
            port = args.port
        else:
            port = default.port if default and not args.host else ctx.port
        name = args.name or (default.username if default else ctx.username)
        if not host or not name:
            emit_error(ctx, message="connect needs a host and a login name")
            return 1
        try:
            target = ConnectionTarget(host=host, port=port, username=name)
        except ValueError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        if not ctx.session.connect(target):
            # The session already published the cause on the line stream.
            return 2
        emit_result(
            ctx,
            message=f"Connected to {target.host}:{target.port} as {target.username}",
            data={"result": "connected", "host": target.host, "port": target.port, "name": target.username},
        )
        return 0
