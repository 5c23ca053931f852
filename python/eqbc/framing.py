"""
Command framing for the EQBC line protocol.

Everything in this module is pure: it turns what the user typed (or what a
hotkey holds) into either a connect request or exactly one outbound message,
and turns outbound messages into wire bytes.  No sockets are touched here.

Wire format:

    chat line      <payload>\\n
    command line   \\t<payload>\\n        (0x09 control byte first)
    login line     LOGIN=<username>;\\n

Tell and broadcast are always sent as uppercase ``TELL`` / ``MSGALL``
commands.  The lowercase ``/bct``, ``/bca`` and ``/bcaa`` markers are only
recognised on input and never reach the wire.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

CONTROL_BYTE = b"\t"
LINE_END = b"\n"
CONNECT_WORD = "connect"
# Characters that would break out of the LOGIN=<user>; line.
USERNAME_FORBIDDEN = ";\r\n"


class Intent(enum.Enum):
    PLAIN_SEND = "plain"
    TELL_TARGET = "tell"
    BROADCAST_ALL = "broadcast"


class Framing(enum.Enum):
    CHAT = "chat"
    COMMAND = "command"


# Keyword placed in front of the payload for each command intent.
KEYWORDS = {
    Intent.TELL_TARGET: "TELL",
    Intent.BROADCAST_ALL: "MSGALL",
}

# Literal prefix surfaced in the input field when a command intent is
# triggered with nothing typed.
PREFILL_MARKERS = {
    Intent.PLAIN_SEND: "",
    Intent.TELL_TARGET: "/bct",
    Intent.BROADCAST_ALL: "/bca",
}

# Input markers, longest first so "/bcaa " wins over "/bca ".
MARKERS: Tuple[Tuple[str, Intent], ...] = (
    ("/bcaa ", Intent.BROADCAST_ALL),
    ("/bca ", Intent.BROADCAST_ALL),
    ("/bct ", Intent.TELL_TARGET),
)


@dataclass(frozen=True)
class ConnectionTarget:
    host: str
    port: int
    username: str

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("host must not be empty")
        if not self.username or not self.username.strip():
            raise ValueError("username must not be empty")
        if any(ch in self.username for ch in USERNAME_FORBIDDEN):
            raise ValueError(f"username may not contain any of {USERNAME_FORBIDDEN!r}")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"port must be an integer, got {self.port!r}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")

    def __str__(self) -> str:
        return f"{self.username}@{self.host}:{self.port}"


@dataclass(frozen=True)
class OutboundMessage:
    payload: str
    framing: Framing = Framing.CHAT

    @property
    def is_command(self) -> bool:
        return self.framing is Framing.COMMAND


Interpretation = Union[ConnectionTarget, OutboundMessage, None]


def suggest_prefill(intent: Intent) -> str:
    """Text to put back into the input field for a blank command send."""
    marker = PREFILL_MARKERS[intent]
    return f"{marker} " if marker else ""


def frame_input(raw_text: str, intent: Intent = Intent.PLAIN_SEND) -> Optional[OutboundMessage]:
    """Frame typed text for the given intent; ``None`` for blank input."""
    text = (raw_text or "").strip()
    if not text:
        return None
    keyword = KEYWORDS.get(intent)
    if keyword is None:
        return OutboundMessage(text, Framing.CHAT)
    return OutboundMessage(f"{keyword} {text}", Framing.COMMAND)


def split_marker(text: str, *, allow_bare: bool = False) -> Optional[Tuple[Intent, str]]:
    """Return ``(intent, remainder)`` when *text* starts with an input marker.

    With *allow_bare* a marker without the trailing space (``"/bct"``) also
    matches, so a prefilled field submitted untouched maps back onto its
    intent.
    """
    if not text:
        return None
    for marker, intent in MARKERS:
        if text.startswith(marker):
            return intent, text[len(marker):]
        if allow_bare and text.rstrip() == marker.rstrip():
            return intent, ""
    return None


def frame_macro(text: str) -> Optional[OutboundMessage]:
    """Frame a hotkey body.

    Marker-prefixed bodies are rewritten to their protocol keyword and sent
    as commands; anything else goes out verbatim as chat.
    """
    if not text or not text.strip():
        return None
    marked = split_marker(text)
    if marked is not None:
        intent, remainder = marked
        return frame_input(remainder, intent)
    return OutboundMessage(text, Framing.CHAT)


def is_connect_directive(text: str) -> bool:
    tokens = (text or "").split()
    return bool(tokens) and tokens[0] == CONNECT_WORD


def parse_connect_directive(text: str) -> Optional[ConnectionTarget]:
    """Parse ``connect <host> <port> <username>``.

    Malformed directives (missing tokens, non-numeric or out-of-range port)
    return ``None``; callers drop them without reporting anything.
    Tokens past the username are ignored.
    """
    tokens = (text or "").split()
    if len(tokens) < 4 or tokens[0] != CONNECT_WORD:
        return None
    host, port_text, username = tokens[1], tokens[2], tokens[3]
    try:
        port = int(port_text, 10)
    except ValueError:
        return None
    try:
        return ConnectionTarget(host=host, port=port, username=username)
    except ValueError:
        return None


def interpret(text: str, intent: Intent = Intent.PLAIN_SEND, *, macro: bool = False) -> Interpretation:
    """Resolve one line of user input.

    Returns a ``ConnectionTarget`` for a well-formed connect directive, an
    ``OutboundMessage`` for anything sendable, or ``None`` when nothing
    should happen (blank input, malformed connect directive).
    Only plain input and hotkey bodies carry connect directives; Tell and
    Broadcast text starting with "connect" is framed like any other text.
    """
    if (macro or intent is Intent.PLAIN_SEND) and is_connect_directive(text):
        return parse_connect_directive(text)
    if macro:
        return frame_macro(text)
    return frame_input(text, intent)


def encode(message: OutboundMessage) -> bytes:
    body = message.payload.encode("utf-8") + LINE_END
    if message.is_command:
        return CONTROL_BYTE + body
    return body


def login_line(username: str) -> bytes:
    return f"LOGIN={username};".encode("utf-8") + LINE_END


__all__ = [
    "CONTROL_BYTE",
    "ConnectionTarget",
    "Framing",
    "Intent",
    "Interpretation",
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
]
