"""
Structured Input Capture

Turns raw form values into typed, validated payloads for new records.
An empty required field means the user backed out: InputCancelled is
raised and nothing is written.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from config import settings
from core.errors import InputCancelled, ValidationError

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _require(value: Any, field: str) -> str:
    text = _clean(value)
    if not text:
        raise InputCancelled(f"{field} is required")
    return text


@dataclass(frozen=True)
class TripInput:
    title: str
    start_date: str


@dataclass(frozen=True)
class EventInput:
    title: str
    time: str
    location: str


@dataclass(frozen=True)
class ExpenseInput:
    amount: str
    item: str


@dataclass(frozen=True)
class TodoInput:
    text: str


def parse_trip_input(title: Any, start_date: Any = None, today: Optional[date] = None) -> TripInput:
    """
    Validate a new trip.

    Args:
        title: Trip name (required)
        start_date: YYYY-MM-DD string or date; defaults to today
        today: Override for the default date
    """
    title = _require(title, "title")

    if isinstance(start_date, date):
        return TripInput(title=title, start_date=start_date.isoformat())

    text = _clean(start_date)
    if not text:
        return TripInput(title=title, start_date=(today or date.today()).isoformat())

    try:
        parsed = datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("startDate", f"expected YYYY-MM-DD, got {text!r}")
    return TripInput(title=title, start_date=parsed.isoformat())


def parse_event_input(title: Any, time: Any = None, location: Any = None) -> EventInput:
    """Validate a schedule item. Time is normalized to zero-padded HH:MM."""
    title = _require(title, "title")

    text = _clean(time) or settings.DEFAULT_EVENT_TIME
    match = _TIME_PATTERN.match(text)
    if not match:
        raise ValidationError("time", f"expected HH:MM, got {text!r}")
    hours, minutes = match.groups()

    return EventInput(
        title=title,
        time=f"{int(hours):02d}:{minutes}",
        location=_clean(location) or settings.DEFAULT_EVENT_LOCATION,
    )


def parse_expense_input(amount: Any, item: Any = None) -> ExpenseInput:
    """Validate an expense. Amount must be numeric; item falls back to a default."""
    amount = _require(amount, "amount").replace(",", "")
    try:
        value = float(amount)
    except ValueError:
        raise ValidationError("amount", f"expected a number, got {amount!r}")
    if not math.isfinite(value):
        raise ValidationError("amount", f"expected a number, got {amount!r}")

    return ExpenseInput(amount=amount, item=_clean(item) or settings.DEFAULT_EXPENSE_ITEM)


def parse_todo_input(text: Any) -> TodoInput:
    return TodoInput(text=_require(text, "text"))
