"""
Exceptions raised by the Trip Planner core and services.

Transport failures are never raised from the sheet store; they are
logged and turned into empty reads or failed WriteResults.
"""


class TripPlannerError(Exception):
    """Base class for Trip Planner errors."""


class InputCancelled(TripPlannerError):
    """User left a required field empty; the mutation is aborted."""


class ValidationError(TripPlannerError):
    """Input was provided but could not be parsed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class NavigationError(TripPlannerError):
    """Transition not allowed from the current navigation state."""


class MissingScopeError(TripPlannerError):
    """A trip-scoped mutation was requested without a trip id."""
