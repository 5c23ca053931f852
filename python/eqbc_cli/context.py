"""Client context: the state shared by the REPL and its commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from eqbc import (
    ConnectionRegistry,
    ConnectionTarget,
    HotkeyStore,
    Intent,
    JsonFileStore,
    KeyValueStore,
    LineBus,
    MemoryStore,
    Session,
    TransportConfig,
    suggest_prefill,
)

LOGGER = logging.getLogger("eqbc_cli.context")

DEFAULT_PORT = 2112


@dataclass
class ClientContext:
    """Holds the session, persisted state and display hints for one client."""

    host: Optional[str] = None
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    state_path: Optional[Path] = None
    connect_timeout: Optional[float] = None
    json_output: bool = False
    store: Optional[KeyValueStore] = None
    registry: ConnectionRegistry = field(init=False, repr=False)
    hotkeys: HotkeyStore = field(init=False, repr=False)
    line_bus: LineBus = field(init=False, repr=False)
    session: Session = field(init=False, repr=False)
    _prefill: str = field(default="", init=False, repr=False)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = JsonFileStore(self.state_path) if self.state_path else MemoryStore()
        self.registry = ConnectionRegistry(self.store)
        self.hotkeys = HotkeyStore(self.store)
        self.hotkeys.load()
        self.line_bus = LineBus()
        self.session = Session(
            registry=self.registry,
            line_bus=self.line_bus,
            transport_config=TransportConfig(connect_timeout=self.connect_timeout),
        )

    def default_target(self) -> Optional[ConnectionTarget]:
        """Target from the command line, falling back to the last connection."""
        last = self.registry.load_last_connection()
        host = self.host or (last.host if last else None)
        username = self.username or (last.username if last else None)
        port = self.port if self.host or not last else last.port
        if not host or not username:
            return None
        try:
            return ConnectionTarget(host=host, port=port, username=username)
        except ValueError as exc:
            LOGGER.debug("default target invalid: %s", exc)
            return None

    def send(self, text: str, intent: Intent = Intent.PLAIN_SEND) -> bool:
        """Send typed text; a blank Tell/Broadcast pre-fills the next prompt."""
        if not text.strip() and intent is not Intent.PLAIN_SEND:
            self._prefill = suggest_prefill(intent)
            return False
        return self.session.submit(text, intent)

    def run_hotkey(self, index: int) -> bool:
        body = self.hotkeys.get(index)
        LOGGER.debug("hotkey %d -> %r", index + 1, body)
        return self.session.submit(body, macro=True)

    def take_prefill(self) -> str:
        text, self._prefill = self._prefill, ""
        return text

    def hotkey_list(self) -> List[str]:
        return self.hotkeys.hotkeys

    def close(self) -> None:
        try:
            self.session.close()
        finally:
            self.line_bus.stop()
