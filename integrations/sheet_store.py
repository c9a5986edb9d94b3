"""
Google Sheets Remote Store Integration

Reads and writes trip records through a Google Apps Script web app that
fronts a spreadsheet. Each sheet (tab) is a resource: trips, events,
expenses, todos.

Read:  GET  <base>?action=get&sheet=<resource>[&tripId=<id>]
Write: POST <base>  body {"action": ..., "sheet": ..., "data": ...}

Writes are sent as text/plain so the browser-side Apps Script endpoint
accepts them as "simple" requests (no CORS preflight).
"""

import json
import logging
import threading
import requests
from dataclasses import dataclass
from typing import List, Dict, Optional, Any

from config import settings

logger = logging.getLogger(__name__)


# Resource (sheet) names
TRIPS = "trips"
EVENTS = "events"
EXPENSES = "expenses"
TODOS = "todos"

WRITE_ACTIONS = ("add", "update", "delete")

SIMPLE_CONTENT_TYPE = "text/plain;charset=utf-8"


def requires_scope(resource: str) -> bool:
    """Check whether a resource must be read with a trip id."""
    return resource != TRIPS


def normalize_done(value: Any) -> bool:
    """
    Collapse the sheet's done flag into a bool.

    Sheets hand back either a real boolean or the literal "TRUE".
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().upper() == "TRUE"
    return False


@dataclass
class WriteResult:
    """Outcome of a single write request."""
    ok: bool
    action: str
    resource: str
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class SheetStoreClient:
    """
    Client for the Apps Script sheet endpoint.

    The only component that knows transport details. Reads degrade to an
    empty list on any failure; writes report their outcome in a
    WriteResult and never raise for transport errors. No retries.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.SHEET_API_URL
        self.timeout = timeout if timeout is not None else settings.SHEET_TIMEOUT
        self._session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The injected session, or one per calling thread."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def read(self, resource: str, scope: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch every record of a resource, optionally filtered to one trip.

        Args:
            resource: Sheet name
            scope: Trip id; omitted from the query when falsy

        Returns:
            List of records, or [] on transport failure / non-array response
        """
        params = {"action": "get", "sheet": resource}
        if scope:
            params["tripId"] = scope

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Sheet read failed for {resource} (tripId={scope}): {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Sheet read for {resource} returned non-array payload: {str(data)[:200]}")
            return []

        return [self._normalize(record) for record in data if isinstance(record, dict)]

    def write(self, action: str, resource: str, payload: Dict[str, Any]) -> WriteResult:
        """
        Send one add/update/delete request.

        Args:
            action: One of WRITE_ACTIONS
            resource: Sheet name
            payload: Record fields (add), {id, updates} (update) or {id} (delete)

        Returns:
            WriteResult; record holds the echoed row when the endpoint returns one

        Raises:
            ValueError: For an unknown action
        """
        if action not in WRITE_ACTIONS:
            raise ValueError(f"Unknown write action: {action}")

        body = json.dumps({"action": action, "sheet": resource, "data": payload}, ensure_ascii=False)

        try:
            response = self.session.post(
                self.base_url,
                data=body.encode("utf-8"),
                headers={"Content-Type": SIMPLE_CONTENT_TYPE},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Sheet write failed ({action} {resource}): {e}")
            return WriteResult(ok=False, action=action, resource=resource, error=str(e))

        logger.debug(f"Sheet write sent: {action} {resource}")
        return WriteResult(
            ok=True,
            action=action,
            resource=resource,
            record=self._echoed_record(response),
        )

    def add(self, resource: str, data: Dict[str, Any]) -> WriteResult:
        return self.write("add", resource, data)

    def update(self, resource: str, data: Dict[str, Any]) -> WriteResult:
        return self.write("update", resource, data)

    def delete(self, resource: str, data: Dict[str, Any]) -> WriteResult:
        return self.write("delete", resource, data)

    @staticmethod
    def _normalize(record: Dict[str, Any]) -> Dict[str, Any]:
        if "done" in record:
            record = dict(record)
            record["done"] = normalize_done(record["done"])
        return record

    @classmethod
    def _echoed_record(cls, response: requests.Response) -> Optional[Dict[str, Any]]:
        """Pull a created/updated row out of the response body, if any."""
        try:
            body = response.json()
        except ValueError:
            return None

        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if isinstance(body, dict) and body.get("id") not in (None, ""):
            return cls._normalize(body)
        return None


# Singleton instance for convenience
_store_instance: Optional[SheetStoreClient] = None


def get_sheet_store() -> SheetStoreClient:
    """Get or create the singleton sheet store client."""
    global _store_instance
    if _store_instance is None:
        _store_instance = SheetStoreClient()
    return _store_instance
