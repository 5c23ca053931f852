"""
eqbc - connection & command session toolkit for EQBC broadcast servers.

The package is the common surface for EQBC front-ends (the terminal client
in ``eqbc_cli``, scripts, bots).  Each concern lives in its own module:

    framing.py    → input interpretation, command framing, wire bytes
    transport.py  → one TCP connection: login, read loop, writes
    session.py    → the single live connection, state machine, send path
    lines.py      → inbound line fan-out to display surfaces
    registry.py   → last-connection record for one-step reconnects
    hotkeys.py    → persisted hotkey macros
    store.py      → key-value state store backends
"""

from .framing import (  # noqa: F401
    CONTROL_BYTE,
    ConnectionTarget,
    Framing,
    Intent,
    OutboundMessage,
    encode,
    frame_input,
    frame_macro,
    interpret,
    is_connect_directive,
    login_line,
    parse_connect_directive,
    split_marker,
    suggest_prefill,
)
from .hotkeys import DEFAULT_HOTKEYS, HotkeyError, HotkeyStore  # noqa: F401
from .lines import InboundLine, LineBus, LineSubscription  # noqa: F401
from .registry import ConnectionRegistry  # noqa: F401
from .session import Session, SessionConfig, SessionState  # noqa: F401
from .store import JsonFileStore, KeyValueStore, MemoryStore  # noqa: F401
from .transport import LineTransport, TransportConfig, TransportError  # noqa: F401

__all__ = [
    "CONTROL_BYTE",
    "ConnectionTarget",
    "Framing",
    "Intent",
    "OutboundMessage",
    "encode",
    "frame_input",
    "frame_macro",
    "interpret",
    "is_connect_directive",
    "login_line",
    "parse_connect_directive",
    "split_marker",
    "suggest_prefill",
    "DEFAULT_HOTKEYS",
    "HotkeyError",
    "HotkeyStore",
    "InboundLine",
    "LineBus",
    "LineSubscription",
    "ConnectionRegistry",
    "Session",
    "SessionConfig",
    "SessionState",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "LineTransport",
    "TransportConfig",
    "TransportError",
]

__version__ = "0.1.0"
