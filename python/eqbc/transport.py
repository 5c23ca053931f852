"""
Transport layer for eqbc.

Responsibilities:
    * Own exactly one TCP socket for one ConnectionTarget.
    * Send the login line as soon as the socket is up.
    * Run the blocking read loop on a daemon thread and hand every
      newline-terminated line to the owner, in order.
    * Serialize writes; the read loop never writes.

Lifetime is strictly one connection: a LineTransport is never reopened.
The Session builds a new one per connect request.
"""

from __future__ import annotations

import logging
import socket
import threading
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

from .framing import ConnectionTarget, login_line

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when the transport cannot complete an operation."""


@dataclass
class TransportConfig:
    connect_timeout: Optional[float] = None
    join_timeout: float = 2.0
    encoding: str = "utf-8"
    errors: str = "replace"


LineCallback = Callable[[str], None]
ClosedCallback = Callable[["LineTransport", Optional[BaseException]], None]


def describe_error(exc: BaseException) -> str:
    text = str(exc)
    return text or exc.__class__.__name__


class LineTransport:
    """One TCP connection speaking newline-delimited text."""

    def __init__(
        self,
        target: ConnectionTarget,
        config: Optional[TransportConfig] = None,
        *,
        on_line: Optional[LineCallback] = None,
        on_closed: Optional[ClosedCallback] = None,
    ) -> None:
        self.target = target
        self.config = config or TransportConfig()
        self._on_line = on_line or (lambda text: None)
        self._on_closed = on_closed or (lambda transport, exc: None)
        self._sock: Optional[socket.socket] = None
        self._rfile: Optional[BinaryIO] = None
        self._sock_lock = threading.Lock()
        self._write_lock = threading.Lock()
        # Held while a line is handed out so close() can fence off the reader.
        self._emit_lock = threading.RLock()
        self._cancelled = threading.Event()
        self._reader_thread: Optional[threading.Thread] = None

    @property
    def closed(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_open(self) -> bool:
        return self._sock is not None and not self._cancelled.is_set()

    #
    # Connection lifecycle
    #
    def open(self) -> None:
        """Connect and send the login line."""
        if self._cancelled.is_set():
            raise TransportError("transport closed")
        sock = self._connect()
        with self._sock_lock:
            if self._sock is not sock:
                raise TransportError("connect cancelled")
            self._rfile = sock.makefile("rb")
        self.write(login_line(self.target.username))
        logger.debug("login sent for %s", self.target)

    def start(self) -> None:
        """Start the read loop."""
        if self._reader_thread is not None or self._cancelled.is_set():
            return
        thread = threading.Thread(
            target=self._reader_loop,
            name=f"eqbc-reader-{self.target.host}:{self.target.port}",
            daemon=True,
        )
        self._reader_thread = thread
        thread.start()

    def close(self) -> None:
        """Cancel the read loop and release the socket.

        Shutting the socket down wakes a reader blocked in recv().  Once this
        returns the transport hands out no further lines.
        """
        with self._emit_lock:
            self._cancelled.set()
        sock = self._sock
        if sock is not None:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        thread = self._reader_thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=self.config.join_timeout)
            if thread.is_alive():
                logger.warning("reader for %s did not stop within %.1fs", self.target, self.config.join_timeout)
        self._release_socket()

    def write(self, data: bytes) -> None:
        with self._write_lock:
            sock = self._sock
            if sock is None or self._cancelled.is_set():
                raise TransportError("not connected")
            try:
                sock.sendall(data)
            except OSError as exc:
                raise TransportError(describe_error(exc)) from exc

    #
    # Internal helpers
    #
    def _connect(self) -> socket.socket:
        host, port = self.target.host, self.target.port
        try:
            infos = socket.getaddrinfo(host, port, 0, socket.SOCK_STREAM)
        except OSError as exc:
            raise TransportError(describe_error(exc)) from exc
        last_error: Optional[OSError] = None
        for family, socktype, proto, _canon, address in infos:
            sock = socket.socket(family, socktype, proto)
            with self._sock_lock:
                if self._cancelled.is_set():
                    sock.close()
                    raise TransportError("connect cancelled")
                # Published before connect() so close() can abort the handshake.
                self._sock = sock
            try:
                sock.settimeout(self.config.connect_timeout)
                sock.connect(address)
                sock.settimeout(None)
                return sock
            except OSError as exc:
                last_error = exc
                self._release_socket()
                if self._cancelled.is_set():
                    raise TransportError("connect cancelled") from exc
        if last_error is None:
            raise TransportError(f"no address for {host}:{port}")
        raise TransportError(describe_error(last_error)) from last_error

    def _reader_loop(self) -> None:
        rfile = self._rfile
        error: Optional[BaseException] = None
        while rfile is not None and not self._cancelled.is_set():
            try:
                raw = rfile.readline()
            except (OSError, ValueError) as exc:
                error = exc
                break
            if not raw:
                break
            if raw.endswith(b"\n"):
                raw = raw[:-1]
            text = raw.decode(self.config.encoding, self.config.errors)
            with self._emit_lock:
                if self._cancelled.is_set():
                    return
                self._on_line(text)
        with self._emit_lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
        self._release_socket()
        self._on_closed(self, error)

    def _release_socket(self) -> None:
        with self._sock_lock:
            rfile, self._rfile = self._rfile, None
            sock, self._sock = self._sock, None
        if rfile is not None:
            try:
                rfile.close()
            except OSError:
                pass
        if sock is not None:
            try:
                sock.close()
            except OSError:
                pass


__all__ = ["LineTransport", "TransportConfig", "TransportError", "describe_error"]
