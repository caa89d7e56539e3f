"""Per-machine observer registry."""
from __future__ import annotations

from typing import Any

from typed_fsm.types import Listener


class ObserverRegistry:

    def __init__(self) -> None:
        # Keyed by a fresh token so one callable can be registered twice.
        self._listeners: dict[object, Listener] = {}

    def add(self, listener: Listener) -> object:
        token = object()
        self._listeners[token] = listener
        return token

    def remove(self, token: object) -> None:
        self._listeners.pop(token, None)

    def notify(self, previous: Any, current: Any, event: Any) -> None:
        # Snapshot: membership changes made by a listener apply from the next round.
        for listener in list(self._listeners.values()):
            listener(previous, current, event)

    def __len__(self) -> int:
        return len(self._listeners)
