"""
Invalidation Signal and Reload Bus

Every mutation publishes on the bus; every synchronizer folds the bus
token for its (resource, scope) into its reload check. The bus keeps the
process-wide counter as well as per-topic versions, so it can run in two
modes:

- "global":   the token is the process-wide counter, any mutation reloads
              every synchronizer
- "resource": the token only moves when the synchronizer's resource (or
              its resource + trip scope) is published

Usage:
    from core.invalidation import get_reload_bus

    bus = get_reload_bus()
    bus.publish("events", trip_id)
    token = bus.token("events", trip_id)
"""

import logging
import threading
from typing import Dict, Hashable, Optional, Tuple

from config import settings

logger = logging.getLogger(__name__)

RELOAD_MODES = ("resource", "global")


class InvalidationSignal:
    """Monotonic counter. Starts at zero, only ever goes up."""

    def __init__(self):
        self._value = 0
        self._lock = threading.RLock()

    @property
    def value(self) -> int:
        return self._value

    def bump(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


class ReloadBus:
    """Publish/subscribe channel for "resource X mutated" events."""

    def __init__(self, mode: Optional[str] = None):
        mode = mode or settings.RELOAD_MODE
        if mode not in RELOAD_MODES:
            raise ValueError(f"Unknown reload mode: {mode} (expected one of {RELOAD_MODES})")
        self.mode = mode
        self.signal = InvalidationSignal()
        self._versions: Dict[Tuple[str, Optional[str]], int] = {}
        self._lock = threading.RLock()

    def publish(self, resource: str, scope: Optional[str] = None) -> int:
        """
        Announce that a resource was mutated.

        Args:
            resource: Sheet name
            scope: Trip id; None reaches every scope of the resource

        Returns:
            New value of the process-wide signal
        """
        with self._lock:
            key = (resource, scope)
            self._versions[key] = self._versions.get(key, 0) + 1
            value = self.signal.bump()

        logger.debug(f"Reload published: {resource} (tripId={scope}), signal={value}")
        return value

    def token(self, resource: str, scope: Optional[str] = None) -> Hashable:
        """Current reload token for a synchronizer watching (resource, scope)."""
        if self.mode == "global":
            return self.signal.value

        with self._lock:
            resource_wide = self._versions.get((resource, None), 0)
            if scope is None:
                return (resource_wide,)
            return (resource_wide, self._versions.get((resource, scope), 0))


# Singleton instance for convenience
_bus_instance: Optional[ReloadBus] = None


def get_reload_bus() -> ReloadBus:
    """Get or create the process-wide reload bus."""
    global _bus_instance
    if _bus_instance is None:
        _bus_instance = ReloadBus()
    return _bus_instance
