"""Inbound line stream: ordered fan-out of server lines to display surfaces."""

from __future__ import annotations

import itertools
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InboundLine:
    text: str
    diagnostic: bool = False
    seq: int = 0
    ts: float = 0.0


LineHandler = Callable[[InboundLine], None]


@dataclass
class LineSubscription:
    handler: LineHandler = lambda line: None
    include_diagnostics: bool = True
    _queue: "queue.Queue[InboundLine]" = field(init=False)

    def __post_init__(self) -> None:
        # Unbounded: the display must see every line, in order.
        self._queue = queue.Queue()

    def accepts(self, line: InboundLine) -> bool:
        return self.include_diagnostics or not line.diagnostic

    def push(self, line: InboundLine) -> None:
        self._queue.put_nowait(line)

    def pending(self) -> int:
        return self._queue.qsize()

    def dispatch(self) -> None:
        while True:
            try:
                line = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                self.handler(line)
            except Exception:
                logger.exception("line handler failed")


class LineBus:
    """Fan-out of inbound lines; publishes are queued, handlers run on pump()."""

    def __init__(self) -> None:
        self._subs: Dict[int, LineSubscription] = {}
        self._lock = threading.Lock()
        self._next_token = 1
        self._seq = itertools.count(1)
        self._publish_lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._interval = 0.02

    def subscribe(self, sub: LineSubscription) -> int:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subs[token] = sub
            return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            self._subs.pop(token, None)

    def publish(self, text: str, *, diagnostic: bool = False) -> InboundLine:
        with self._publish_lock:
            line = InboundLine(text=text, diagnostic=diagnostic, seq=next(self._seq), ts=time.time())
            with self._lock:
                subscriptions = list(self._subs.values())
            for sub in subscriptions:
                if sub.accepts(line):
                    sub.push(line)
        return line

    def pump(self) -> None:
        """Dispatch queued lines on all subscriptions."""
        with self._lock:
            subscriptions = list(self._subs.values())
        for sub in subscriptions:
            sub.dispatch()

    def start(self, interval: float = 0.02) -> None:
        """Start background dispatcher that periodically pumps the bus."""
        self._interval = interval
        if self._worker and self._worker.is_alive():
            return
        self._stop_event.clear()
        self._worker = threading.Thread(target=self._run, name="eqbc-line-bus", daemon=True)
        self._worker.start()

    def stop(self) -> None:
        self._stop_event.set()
        worker = self._worker
        if worker and worker.is_alive() and worker is not threading.current_thread():
            worker.join(timeout=0.5)
        self._worker = None

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            self.pump()
        self.pump()


__all__ = ["InboundLine", "LineBus", "LineHandler", "LineSubscription"]
