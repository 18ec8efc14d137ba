"""
Network Mode Monitor - Process-wide Online/Offline Signal

The monitor is the only writer of the network mode. It is driven solely by
the connectivity transport (the UI forwards the runtime's `online` /
`offline` events, see api/network.py and the input WebSocket); it never
infers connectivity from failed provider calls.

How it works:
1. Transport reports a signal → handle_signal("offline")
2. If the mode changed, subscribers are notified immediately
3. Repeating the current mode is a no-op
4. Consumers (scheduler, playback arbiter) hold a read-only NetworkStatus
"""
import logging
from enum import Enum
from typing import Callable, List, Union

from langlink.services.metrics import network_online_gauge

logger = logging.getLogger(__name__)

NetworkListener = Callable[["NetworkMode"], None]


class NetworkMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class NetworkStatus:
    """Read-only view of a NetworkModeMonitor handed to consumers."""

    def __init__(self, monitor: "NetworkModeMonitor"):
        self._monitor = monitor

    @property
    def mode(self) -> NetworkMode:
        return self._monitor.mode

    @property
    def is_online(self) -> bool:
        return self._monitor.is_online

    @property
    def is_offline(self) -> bool:
        return not self._monitor.is_online

    def subscribe(self, listener: NetworkListener) -> Callable[[], None]:
        return self._monitor.subscribe(listener)


class NetworkModeMonitor:
    """Two-state (online / offline) connectivity tracker."""

    def __init__(self, initial: NetworkMode = NetworkMode.ONLINE):
        self._mode = NetworkMode(initial)
        self._listeners: List[NetworkListener] = []
        self._status = NetworkStatus(self)
        network_online_gauge.set(1 if self.is_online else 0)

    @property
    def mode(self) -> NetworkMode:
        return self._mode

    @property
    def is_online(self) -> bool:
        return self._mode == NetworkMode.ONLINE

    @property
    def status(self) -> NetworkStatus:
        return self._status

    def handle_signal(self, signal: Union[str, NetworkMode]) -> bool:
        """
        Apply a connectivity signal from the transport.

        Args:
            signal: "online" or "offline"

        Returns:
            True if the mode changed, False for a repeated signal

        Raises:
            ValueError: for an unknown signal
        """
        mode = NetworkMode(signal)
        if mode == self._mode:
            logger.debug(f"[NetworkModeMonitor] Already {mode.value}, ignoring signal")
            return False

        self._mode = mode
        network_online_gauge.set(1 if self.is_online else 0)
        logger.info(f"[NetworkModeMonitor] Network is now {mode.value}")

        for listener in list(self._listeners):
            try:
                listener(mode)
            except Exception as e:
                logger.error(f"[NetworkModeMonitor] Listener failed on {mode.value}: {e}")
        return True

    def set_online(self) -> bool:
        return self.handle_signal(NetworkMode.ONLINE)

    def set_offline(self) -> bool:
        return self.handle_signal(NetworkMode.OFFLINE)

    def subscribe(self, listener: NetworkListener) -> Callable[[], None]:
        """
        Register a listener called with the new mode on every transition.

        Returns:
            A callable that removes the listener (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
