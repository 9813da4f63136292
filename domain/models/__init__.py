"""
Domain models - pure data structures representing business entities.
"""

from domain.models.composition import Composition, CompositionSignature, composition_signature
from domain.models.duty import DutyHistoryEntry, DutyRecord, normalize_duty_key
from domain.models.roster import (
    PlainRoster,
    RankedRoster,
    RatedEntry,
    RatedRoster,
    Roster,
    RosterMode,
    RosterValidationError,
    validate_roster,
)
from domain.models.session import SessionEntry

__all__ = [
    "Composition",
    "CompositionSignature",
    "composition_signature",
    "DutyHistoryEntry",
    "DutyRecord",
    "normalize_duty_key",
    "PlainRoster",
    "RankedRoster",
    "RatedEntry",
    "RatedRoster",
    "Roster",
    "RosterMode",
    "RosterValidationError",
    "validate_roster",
    "SessionEntry",
]
