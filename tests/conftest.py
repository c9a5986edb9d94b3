"""
Pytest configuration and fixtures for Trip Planner tests.

No network access: the sheet endpoint is replaced by an in-memory store
that records every read and write.
"""

import sys
from concurrent.futures import Future
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.invalidation import ReloadBus
from integrations.sheet_store import WriteResult, normalize_done


class FakeSheetStore:
    """In-memory stand-in for SheetStoreClient."""

    def __init__(self):
        self.tables = {"trips": [], "events": [], "expenses": [], "todos": []}
        self.reads = []
        self.writes = []
        self.fail_writes = False
        self._next_id = 1
        self._clock = 0

    def seed(self, resource, *records):
        for record in records:
            self.tables[resource].append(dict(record))

    def read(self, resource, scope=None):
        self.reads.append((resource, scope))
        rows = self.tables.get(resource, [])
        if scope:
            rows = [r for r in rows if str(r.get("tripId")) == str(scope)]
        result = []
        for row in rows:
            row = dict(row)
            if "done" in row:
                row["done"] = normalize_done(row["done"])
            result.append(row)
        return result

    def write(self, action, resource, payload):
        self.writes.append((action, resource, payload))
        if self.fail_writes:
            return WriteResult(ok=False, action=action, resource=resource, error="connection refused")

        table = self.tables.setdefault(resource, [])
        record = None
        if action == "add":
            self._clock += 1
            record = dict(payload, id=f"rec-{self._next_id}", createdAt=f"2024-06-01T00:00:{self._clock:02d}")
            self._next_id += 1
            table.append(record)
        elif action == "update":
            for row in table:
                if row.get("id") == payload.get("id"):
                    row.update(payload.get("updates", {}))
                    record = dict(row)
        elif action == "delete":
            self.tables[resource] = [r for r in table if r.get("id") != payload.get("id")]
        return WriteResult(ok=True, action=action, resource=resource, record=record)


class ManualExecutor:
    """Executor whose jobs only run when the test says so."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run(self, index):
        future, fn, args, kwargs = self.pending[index]
        future.set_result(fn(*args, **kwargs))


@pytest.fixture
def store():
    return FakeSheetStore()


@pytest.fixture
def bus():
    return ReloadBus(mode="resource")


@pytest.fixture
def global_bus():
    return ReloadBus(mode="global")


@pytest.fixture
def manual_executor():
    return ManualExecutor()
