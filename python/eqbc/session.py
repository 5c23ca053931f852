"""Session: the single live connection plus the send path and its state."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from .framing import (
    ConnectionTarget,
    Intent,
    OutboundMessage,
    encode,
    interpret,
    is_connect_directive,
)
from .lines import LineBus
from .registry import ConnectionRegistry
from .transport import LineTransport, TransportConfig, TransportError, describe_error


logger = logging.getLogger(__name__)

DIAGNOSTIC_PREFIX = "Error: "


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"


@dataclass
class SessionConfig:
    remember_last: bool = True


StateCallback = Callable[[SessionState], None]
TransportFactory = Callable[..., LineTransport]


class Session:
    """Owns at most one LineTransport at a time.

    Control calls (connect, send, disconnect) come from the caller's thread;
    the transport's reader thread only reports lines and its own end.  A
    report from a transport that is no longer current is ignored.
    """

    def __init__(
        self,
        *,
        registry: Optional[ConnectionRegistry] = None,
        line_bus: Optional[LineBus] = None,
        session_config: Optional[SessionConfig] = None,
        transport_config: Optional[TransportConfig] = None,
        transport_factory: Optional[TransportFactory] = None,
    ) -> None:
        self.registry = registry
        self.line_bus = line_bus if line_bus is not None else LineBus()
        self.session_config = session_config or SessionConfig()
        self.transport_config = transport_config or TransportConfig()
        self._transport_factory = transport_factory or LineTransport
        self._lock = threading.Lock()
        self._state = SessionState.DISCONNECTED
        self._transport: Optional[LineTransport] = None
        self._shutdown = False
        self._on_state: List[StateCallback] = []
        self._on_connect: List[StateCallback] = []
        self._on_disconnect: List[StateCallback] = []

    #
    # Observers
    #
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def target(self) -> Optional[ConnectionTarget]:
        with self._lock:
            transport = self._transport
        return transport.target if transport else None

    @property
    def connected(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def register_on_state(self, callback: StateCallback) -> None:
        self._on_state.append(callback)

    def register_on_connect(self, callback: StateCallback) -> None:
        self._on_connect.append(callback)

    def register_on_disconnect(self, callback: StateCallback) -> None:
        self._on_disconnect.append(callback)

    #
    # Control operations
    #
    def connect(self, target: ConnectionTarget) -> bool:
        """Replace any live connection with one to *target*.

        Returns True once the login line is on the wire.  Failures are
        reported as a diagnostic line, not raised.
        """
        if self._shutdown:
            raise TransportError("session closed")
        transport = self._transport_factory(
            target,
            self.transport_config,
            on_line=self._handle_line,
            on_closed=self._handle_closed,
        )
        with self._lock:
            previous, self._transport = self._transport, transport
        if previous is not None:
            logger.info("closing previous connection %s", previous.target)
            previous.close()
            self._set_state(SessionState.DISCONNECTED)
        self._set_state(SessionState.CONNECTING)
        logger.info("connecting to %s", target)
        try:
            transport.open()
        except TransportError as exc:
            transport.close()
            if not self._release(transport):
                logger.debug("connect to %s superseded: %s", target, exc)
                return False
            logger.warning("connect to %s failed: %s", target, exc)
            self._diagnostic(exc)
            self._set_state(SessionState.DISCONNECTED)
            return False
        except BaseException:
            # Interrupted handshake (Ctrl-C): drop the half-open socket, then re-raise.
            transport.close()
            if self._release(transport):
                self._set_state(SessionState.DISCONNECTED)
            raise
        if not self._transition(transport, SessionState.AUTHENTICATED):
            transport.close()
            return False
        self._remember(target)
        transport.start()
        logger.info("logged in to %s", target)
        return True

    def send(self, message: OutboundMessage) -> bool:
        """Write one framed message; dropped silently when not connected."""
        with self._lock:
            transport = self._transport
            state = self._state
        if transport is None or state is not SessionState.AUTHENTICATED:
            logger.debug("dropping %s send, no open connection", message.framing.value)
            return False
        try:
            transport.write(encode(message))
        except TransportError as exc:
            if transport.closed or not self._release(transport):
                logger.debug("send raced with connection teardown: %s", exc)
                return False
            logger.warning("send to %s failed: %s", transport.target, exc)
            transport.close()
            self._diagnostic(exc)
            self._set_state(SessionState.DISCONNECTED)
            return False
        return True

    def submit(self, text: str, intent: Intent = Intent.PLAIN_SEND, *, macro: bool = False) -> bool:
        """Route one line of user input: connect directive or framed send."""
        result = interpret(text, intent, macro=macro)
        if isinstance(result, ConnectionTarget):
            return self.connect(result)
        if isinstance(result, OutboundMessage):
            return self.send(result)
        if is_connect_directive(text):
            logger.debug("ignoring malformed connect directive")
        return False

    def disconnect(self) -> None:
        with self._lock:
            transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()
            logger.info("disconnected from %s", transport.target)
        self._set_state(SessionState.DISCONNECTED)

    def disconnect_and_reconnect_to_last(self) -> bool:
        if self.registry is None:
            return False
        target = self.registry.load_last_connection()
        if target is None:
            logger.debug("no last connection recorded")
            return False
        return self.connect(target)

    def close(self) -> None:
        self._shutdown = True
        self.disconnect()

    #
    # Transport callbacks (reader thread)
    #
    def _handle_line(self, text: str) -> None:
        self.line_bus.publish(text)

    def _handle_closed(self, transport: LineTransport, error: Optional[BaseException]) -> None:
        if not self._release(transport):
            return
        if error is not None:
            logger.warning("connection to %s lost: %s", transport.target, error)
            self._diagnostic(error)
        else:
            logger.info("server closed connection %s", transport.target)
        self._set_state(SessionState.DISCONNECTED)

    #
    # Internal helpers
    #
    def _release(self, transport: LineTransport) -> bool:
        """Drop *transport* if it is still current; False if superseded."""
        with self._lock:
            if self._transport is not transport:
                return False
            self._transport = None
            return True

    def _transition(self, transport: LineTransport, new_state: SessionState) -> bool:
        with self._lock:
            if self._transport is not transport:
                return False
        self._set_state(new_state)
        return True

    def _remember(self, target: ConnectionTarget) -> None:
        if self.registry is None or not self.session_config.remember_last:
            return
        try:
            self.registry.record_last_connection(target)
        except OSError as exc:
            logger.warning("failed to record last connection: %s", exc)

    def _diagnostic(self, exc: BaseException) -> None:
        self.line_bus.publish(DIAGNOSTIC_PREFIX + describe_error(exc), diagnostic=True)

    def _set_state(self, new_state: SessionState) -> None:
        with self._lock:
            if self._state is new_state:
                return
            self._state = new_state
        callbacks = list(self._on_state)
        if new_state is SessionState.AUTHENTICATED:
            callbacks.extend(self._on_connect)
        elif new_state is SessionState.DISCONNECTED:
            callbacks.extend(self._on_disconnect)
        for callback in callbacks:
            try:
                callback(new_state)
            except Exception:
                logger.exception("session state callback failed")


__all__ = ["DIAGNOSTIC_PREFIX", "Session", "SessionConfig", "SessionState"]
