"""
Standard error codes for service layer.

These error codes allow the chat glue to pick a reply for a specific
condition without parsing error message text.

Usage:
    from services.error_codes import NO_ACTIVE_ROSTER
    from services.result import Result

    if entry is None:
        return Result.fail("Send a roster first", code=NO_ACTIVE_ROSTER)
"""

# Roster errors, raised by roster validation as RosterValidationError.code
from domain.models.roster import DUPLICATE_NAMES, EMPTY_NAME, INVALID_RATING, INVALID_ROSTER_SIZE

# Session errors
NO_ACTIVE_ROSTER = "no_active_roster"

__all__ = [
    "DUPLICATE_NAMES",
    "EMPTY_NAME",
    "INVALID_RATING",
    "INVALID_ROSTER_SIZE",
    "NO_ACTIVE_ROSTER",
]
