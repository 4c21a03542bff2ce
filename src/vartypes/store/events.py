"""Minimal synchronous signal used by the asset store."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class Signal:
    """A named list of zero-argument listeners called in connection order."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def connect(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def disconnect(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self) -> None:
        logger.debug("Signal %s -> %d listener(s)", self.name, len(self._listeners))
        for listener in list(self._listeners):
            listener()

    def __len__(self) -> int:
        return len(self._listeners)
