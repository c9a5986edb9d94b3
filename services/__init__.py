"""
Services Layer for Trip Planner

Business logic services for the trip planning application.

Services:
- trip_data_service: sorting, totals and mutations for the trip views
- input_capture: typed, validated payloads for new records

Usage:
    from services import TripDataService, parse_event_input
"""

from services.input_capture import (
    TripInput,
    EventInput,
    ExpenseInput,
    TodoInput,
    parse_trip_input,
    parse_event_input,
    parse_expense_input,
    parse_todo_input,
)
from services.trip_data_service import (
    TripDataService,
    sort_events,
    expense_total,
    format_amount,
    is_done,
)

__all__ = [
    'TripInput',
    'EventInput',
    'ExpenseInput',
    'TodoInput',
    'parse_trip_input',
    'parse_event_input',
    'parse_expense_input',
    'parse_todo_input',
    'TripDataService',
    'sort_events',
    'expense_total',
    'format_amount',
    'is_done',
]
