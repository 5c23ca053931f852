"""eqbc-client CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from eqbc import ConnectionTarget

from .commands import CommandRegistry, build_registry
from .context import DEFAULT_PORT, ClientContext
from .parser import COMMAND_PREFIX
from .repl import ClientREPL

LOG = logging.getLogger("eqbc_cli.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return number


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="EQBC terminal client")
    parser.add_argument("--host", help="Server host (connects at start-up together with --name)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Server port (default {DEFAULT_PORT})")
    parser.add_argument("--name", help="Login name")
    parser.add_argument("--reconnect", action="store_true", help="Connect to the last used server at start-up")
    parser.add_argument("--json", action="store_true", help="Emit JSON command results")
    parser.add_argument("--timestamps", action="store_true", help="Prefix server lines with the local time")
    parser.add_argument(
        "--state",
        type=Path,
        default=Path(os.environ.get("EQBC_STATE", Path.home() / ".eqbc-client.json")),
        help="Path to the state file holding hotkeys and the last connection",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".eqbc-history",
        help="Path to input history file",
    )
    parser.add_argument(
        "--connect-timeout",
        type=_positive_float,
        help="Give up on a TCP handshake after this many seconds (default: wait)",
    )
    parser.add_argument("--log-level", default=os.environ.get("EQBC_LOG", "WARNING"), help="Logging level (default WARNING)")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single command non-interactively (quote the command string)",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    ctx = ClientContext(
        host=args.host,
        port=args.port,
        username=args.name,
        state_path=args.state,
        connect_timeout=args.connect_timeout,
        json_output=args.json,
    )
    registry = build_registry()
    repl = ClientREPL(ctx, registry, history_path=str(args.history), timestamps=args.timestamps)
    repl.attach()
    try:
        _initial_connect(ctx, args)
        if args.command:
            return _run_single_command(ctx, registry, args.command)
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0
    finally:
        repl.detach()
        ctx.close()


def _initial_connect(ctx: ClientContext, args: argparse.Namespace) -> None:
    if args.reconnect:
        ctx.session.disconnect_and_reconnect_to_last()
        return
    if not (args.host and args.name):
        return
    try:
        target = ConnectionTarget(host=args.host, port=args.port, username=args.name)
    except ValueError as exc:
        LOG.error("invalid connection settings: %s", exc)
        return
    ctx.session.connect(target)


def _run_single_command(ctx: ClientContext, registry: CommandRegistry, command_line: str) -> int:
    line = command_line[len(COMMAND_PREFIX):] if command_line.startswith(COMMAND_PREFIX) else command_line
    try:
        return registry.execute(ctx, line)
    except SystemExit as exc:
        return int(exc.code or 0)
    finally:
        # Final pump flushes diagnostics produced by the command.
        ctx.line_bus.stop()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
