"""Online/offline signal with subscribe/unsubscribe semantics."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ONLINE = "online"
OFFLINE = "offline"

Listener = Callable[[str], None]


class ConnectivitySignal:
    """Tracks connectivity and notifies listeners on transitions only.

    Listeners receive ``"online"`` or ``"offline"``. Setting the state it is
    already in does nothing.
    """

    def __init__(self, initial: bool = True):
        self._online = bool(initial)
        self._listeners: list[Listener] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that removes it again."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def set_online(self, online: bool):
        online = bool(online)
        if online == self._online:
            return
        self._online = online
        event = ONLINE if online else OFFLINE
        logger.info(f"Connectivity changed: {event}")
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(event)

    def refresh(self, remote) -> bool:
        """Probe the remote store and update the state from the answer."""
        self.set_online(remote.is_reachable())
        return self._online
