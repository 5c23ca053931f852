"""Remembers the most recently used connection for one-step reconnects."""

from __future__ import annotations

import logging
from typing import Optional

from .framing import ConnectionTarget
from .store import KeyValueStore

logger = logging.getLogger(__name__)

LAST_IP = "LAST_IP"
LAST_PORT = "LAST_PORT"
LAST_NAME = "LAST_NAME"


class ConnectionRegistry:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def record_last_connection(self, target: ConnectionTarget) -> None:
        self.store.set(LAST_IP, target.host)
        self.store.set(LAST_PORT, int(target.port))
        self.store.set(LAST_NAME, target.username)

    def load_last_connection(self) -> Optional[ConnectionTarget]:
        host = self.store.get(LAST_IP)
        port = self.store.get(LAST_PORT)
        name = self.store.get(LAST_NAME)
        if host is None or port is None or name is None:
            return None
        try:
            return ConnectionTarget(host=str(host), port=int(port), username=str(name))
        except (TypeError, ValueError) as exc:
            logger.debug("stored last connection is invalid: %s", exc)
            return None

    def forget(self) -> None:
        for key in (LAST_IP, LAST_PORT, LAST_NAME):
            self.store.delete(key)
