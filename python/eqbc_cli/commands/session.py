"""Connection lifecycle commands: reconnect, disconnect, status, last."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command
from ..context import ClientContext
from ..output import emit_error, emit_result


class ReconnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("reconnect", "Reconnect to the last used server", aliases=("re",))

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        last = ctx.registry.load_last_connection()
        if last is None:
            emit_error(ctx, message="no previous connection recorded")
            return 1
        if not ctx.session.disconnect_and_reconnect_to_last():
            return 2
        emit_result(
            ctx,
            message=f"Reconnected to {last.host}:{last.port} as {last.username}",
            data={"result": "connected", "host": last.host, "port": last.port, "name": last.username},
        )
        return 0


class DisconnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("disconnect", "Close the current connection", aliases=("close",))

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        target = ctx.session.target
        ctx.session.disconnect()
        if target is None:
            emit_result(ctx, message="Not connected", data={"result": "disconnected"})
        else:
            emit_result(ctx, message=f"Disconnected from {target.host}:{target.port}", data={"result": "disconnected"})
        return 0


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show connection status")

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        state = ctx.session.state.value
        target = ctx.session.target
        data = {
            "state": state,
            "target": str(target) if target else None,
            "hotkeys": len(ctx.hotkeys),
        }
        message = f"{state}" + (f" {target}" if target else "")
        emit_result(ctx, message=message, data=data)
        return 0


class LastCommand(Command):
    def __init__(self) -> None:
        super().__init__("last", "Show (or --clear) the last connection record")
        parser = argparse.ArgumentParser(prog="last", add_help=False)
        parser.add_argument("--clear", action="store_true", help="Forget the last connection")
        self._parser = parser

    def run(self, ctx: ClientContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        if args.clear:
            ctx.registry.forget()
            emit_result(ctx, message="Last connection cleared", data={"last": None})
            return 0
        last = ctx.registry.load_last_connection()
        if last is None:
            emit_result(ctx, message="No last connection", data={"last": None})
            return 0
        emit_result(
            ctx,
            message=f"Last connection: {last.host} {last.port} {last.username}",
            data={"last": {"host": last.host, "port": last.port, "name": last.username}},
        )
        return 0
