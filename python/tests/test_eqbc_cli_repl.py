from unittest.mock import MagicMock

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from eqbc import InboundLine, Intent, MemoryStore
from eqbc_cli.cli import build_arg_parser
from eqbc_cli.commands import build_registry
from eqbc_cli.completion import ClientCompleter
from eqbc_cli.context import ClientContext
from eqbc_cli.output import format_line
from eqbc_cli.parser import is_command_line, split_command, split_head
from eqbc_cli.repl import ClientREPL


def _repl():
    ctx = ClientContext(store=MemoryStore())
    ctx.session = MagicMock()
    ctx.session.target = None
    registry = build_registry()
    return ClientREPL(ctx, registry), ctx


def _complete(completer, text):
    document = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(document, CompleteEvent())]


def test_dispatch_plain_text():
    repl, ctx = _repl()
    repl.dispatch("hello world")
    ctx.session.submit.assert_called_once_with("hello world", Intent.PLAIN_SEND)


def test_dispatch_markers():
    repl, ctx = _repl()
    repl.dispatch("/bct bob //follow")
    repl.dispatch("/bcaa //sit")
    repl.dispatch("/bca //stand")
    calls = [call.args for call in ctx.session.submit.call_args_list]
    assert calls == [
        ("bob //follow", Intent.TELL_TARGET),
        ("//sit", Intent.BROADCAST_ALL),
        ("//stand", Intent.BROADCAST_ALL),
    ]


def test_dispatch_bare_marker_prefills():
    repl, ctx = _repl()
    repl.dispatch("/bct")
    ctx.session.submit.assert_not_called()
    assert ctx.take_prefill() == "/bct "


def test_dispatch_blank_line_is_ignored():
    repl, ctx = _repl()
    repl.dispatch("   ")
    ctx.session.submit.assert_not_called()


def test_dispatch_command_and_hotkey_shortcut():
    repl, ctx = _repl()
    repl.dispatch(":2")
    ctx.session.submit.assert_called_once_with("/bcaa //stand", macro=True)
    repl.dispatch(":disconnect")
    ctx.session.disconnect.assert_called_once_with()


def test_dispatch_connect_directive_goes_to_session():
    repl, ctx = _repl()
    repl.dispatch("connect 10.0.0.5 2112 bob")
    ctx.session.submit.assert_called_once_with("connect 10.0.0.5 2112 bob", Intent.PLAIN_SEND)


def test_prompt_message_reflects_connection():
    repl, ctx = _repl()
    assert repl._prompt_message() == "[offline]> "
    ctx.session.target = "bob@eq.local:2112"
    ctx.session.connected = True
    assert repl._prompt_message() == "[bob@eq.local:2112]> "


def test_completer_commands_and_markers():
    repl, ctx = _repl()
    completer = ClientCompleter(ctx, repl.registry)
    assert "connect" in _complete(completer, ":con")
    assert _complete(completer, ":hotkey r") == ["run", "reset"]
    assert _complete(completer, ":hotkey run ") == ["1", "2", "3"]
    assert _complete(completer, "/bcaa") == ["/bcaa "]
    assert set(_complete(completer, "/bc")) == {"/bcaa ", "/bca ", "/bct "}
    assert _complete(completer, "hello") == []


def test_parser_helpers():
    assert split_head("  tell bob  hi there ") == ("tell", "bob  hi there")
    assert split_command('set 1 "a b"') == ["set", "1", "a b"]
    assert is_command_line(":status")
    assert not is_command_line(":")
    assert not is_command_line("status")


def test_format_line_keeps_text():
    line = InboundLine(text="  [bob] hi  ", ts=0.0)
    assert format_line(line) == "  [bob] hi  "
    assert format_line(line, timestamps=True).endswith("]   [bob] hi  ")


def test_arg_parser_defaults():
    args = build_arg_parser().parse_args([])
    assert args.port == 2112
    assert args.host is None
    assert args.json is False
    args = build_arg_parser().parse_args(["--host", "eq.local", "--name", "bob", "-c", "status"])
    assert (args.host, args.name, args.command) == ("eq.local", "bob", "status")


def test_interrupted_connect_returns_to_prompt(capsys):
    repl, ctx = _repl()
    ctx.session.submit.side_effect = KeyboardInterrupt
    repl.dispatch("connect 10.255.255.1 2112 bob")
    ctx.session.disconnect.assert_called_once_with()
    assert "Interrupted" in capsys.readouterr().out
    ctx.session.connect.side_effect = KeyboardInterrupt
    repl.dispatch(":connect 10.255.255.1 2112 bob")
    assert ctx.session.disconnect.call_count == 2


def test_connect_timeout_flows_into_transport_config():
    args = build_arg_parser().parse_args(["--connect-timeout", "3.5"])
    ctx = ClientContext(store=MemoryStore(), connect_timeout=args.connect_timeout)
    assert ctx.session.transport_config.connect_timeout == 3.5
    assert ctx.session.session_config.remember_last is True
    assert ClientContext(store=MemoryStore()).session.transport_config.connect_timeout is None
