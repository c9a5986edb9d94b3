"""
Resource Synchronizer

Binds one sheet resource (optionally scoped to a trip) to a locally held
collection for as long as a view is mounted.

A synchronizer reloads only when its inputs change: the resource, the
trip scope, or the reload token taken from the bus. Re-activating with an
unchanged tuple is a no-op, so it is safe to call on every Streamlit rerun.

Every read is tagged with a generation number. A result is applied only
if it belongs to the latest generation issued, so a slow read for an old
scope or token can never overwrite a newer collection.

Usage:
    from core.synchronizer import ResourceSynchronizer

    sync = ResourceSynchronizer("events", store, bus)
    sync.refresh(trip_id)
    for event in sync.items:
        ...
"""

import logging
import threading
from concurrent.futures import Executor
from typing import Any, Dict, Hashable, List, Optional, Tuple

from core.invalidation import ReloadBus, get_reload_bus
from integrations.sheet_store import requires_scope

logger = logging.getLogger(__name__)

_UNSET = object()

# Reads an unconfirmed optimistic change is laid over before it is dropped
PENDING_READS = 2


def sort_by_created_desc(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Newest first by createdAt; records without one sort last."""
    return sorted(records, key=lambda r: str(r.get("createdAt") or ""), reverse=True)


class ResourceSynchronizer:
    """
    Fetch/cache/invalidate unit for one resource.

    Args:
        resource: Sheet name
        store: Anything with read(resource, scope) -> list of records
        bus: ReloadBus the token is taken from (default: process-wide bus)
        executor: Optional pool; reads run inline when omitted
    """

    def __init__(
        self,
        resource: str,
        store,
        bus: Optional[ReloadBus] = None,
        executor: Optional[Executor] = None,
    ):
        self.resource = resource
        self.store = store
        self.bus = bus or get_reload_bus()
        self.executor = executor

        self._items: List[Dict[str, Any]] = []
        self._loading = True
        self._generation = 0
        self._last_key: Any = _UNSET
        self._pending: Dict[Any, Tuple[str, Dict[str, Any], int]] = {}
        self._lock = threading.RLock()

    @property
    def items(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def generation(self) -> int:
        return self._generation

    def refresh(self, scope: Optional[str] = None) -> bool:
        """Activate with the bus's current token for (resource, scope)."""
        return self.activate(scope, self.bus.token(self.resource, scope))

    def activate(self, scope: Optional[str] = None, token: Hashable = None) -> bool:
        """
        Reload if (resource, scope, token) changed since the last activation.

        Args:
            scope: Trip id, required for every resource except trips
            token: Reload token; any change forces a new read

        Returns:
            True if a read was issued
        """
        key = (self.resource, scope, token)

        with self._lock:
            if key == self._last_key:
                return False
            if self._last_key is not _UNSET and self._last_key[1] != scope:
                self._pending.clear()
            self._last_key = key

            if requires_scope(self.resource) and not scope:
                # Guard: no trip selected yet, hold nothing and skip the read
                self._generation += 1
                self._items = []
                self._loading = False
                return False

            self._generation += 1
            generation = self._generation
            self._loading = True

        logger.debug(f"Loading {self.resource} (tripId={scope}), generation={generation}")

        if self.executor is not None:
            future = self.executor.submit(self.store.read, self.resource, scope)
            future.add_done_callback(lambda f: self._on_read_done(generation, f))
        else:
            self._apply(generation, self.store.read(self.resource, scope))
        return True

    def _on_read_done(self, generation: int, future) -> None:
        try:
            records = future.result()
        except Exception as e:
            # store.read already degrades to []; this only catches a broken store
            logger.error(f"Background read for {self.resource} failed: {e}")
            records = []
        self._apply(generation, records)

    def _apply(self, generation: int, records: List[Dict[str, Any]]) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    f"Discarding stale {self.resource} read "
                    f"(generation {generation}, current {self._generation})"
                )
                return False
            self._items = self._overlay_pending(generation, list(records or []))
            self._loading = False
            return True

    # -------------------------------------------------------------------------
    # Optimistic updates
    # -------------------------------------------------------------------------
    #
    # The sheet may not reflect a write yet when the reload it triggers runs.
    # Each optimistic change is remembered by id and laid over incoming reads
    # until a read confirms it or PENDING_READS more reads have gone by.

    def _overlay_pending(self, generation: int, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for record_id, (kind, change, expires) in list(self._pending.items()):
            index = next((i for i, r in enumerate(records) if r.get("id") == record_id), None)

            if kind == "remove":
                confirmed = index is None
            elif kind == "patch":
                confirmed = index is not None and all(
                    records[index].get(k) == v for k, v in change.items()
                )
            else:
                confirmed = index is not None

            if confirmed or generation > expires:
                del self._pending[record_id]
                continue

            if kind == "remove":
                del records[index]
            elif index is not None:
                records[index] = {**records[index], **change}
            elif kind == "merge":
                records.append(dict(change))

        return sort_by_created_desc(records)

    def _remember(self, record_id: Any, kind: str, change: Dict[str, Any]) -> None:
        if kind == "patch" and record_id in self._pending:
            previous_kind, previous, _ = self._pending[record_id]
            if previous_kind == "merge":
                kind, change = "merge", {**previous, **change}
            elif previous_kind == "patch":
                change = {**previous, **change}
        self._pending[record_id] = (kind, change, self._generation + PENDING_READS)

    def merge(self, record: Dict[str, Any]) -> None:
        """Insert or replace a record by id ahead of the next reload."""
        record_id = record.get("id")
        if record_id in (None, ""):
            return
        with self._lock:
            for i, existing in enumerate(self._items):
                if existing.get("id") == record_id:
                    self._items[i] = {**existing, **record}
                    break
            else:
                self._items.append(dict(record))
            self._items = sort_by_created_desc(self._items)
            self._remember(record_id, "merge", dict(record))

    def patch(self, record_id: Any, updates: Dict[str, Any]) -> bool:
        with self._lock:
            for i, existing in enumerate(self._items):
                if existing.get("id") == record_id:
                    self._items[i] = {**existing, **updates}
                    self._remember(record_id, "patch", dict(updates))
                    return True
        return False

    def remove(self, record_id: Any) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [r for r in self._items if r.get("id") != record_id]
            removed = len(self._items) != before
            if removed:
                self._remember(record_id, "remove", {})
            return removed

    @property
    def pending(self) -> Dict[Any, str]:
        """Ids of optimistic changes not yet confirmed by a read, with their kind."""
        with self._lock:
            return {record_id: kind for record_id, (kind, _, _) in self._pending.items()}

    @property
    def last_key(self) -> Optional[Tuple]:
        return None if self._last_key is _UNSET else self._last_key
