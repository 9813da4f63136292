"""
Roster domain model.

A roster is one of three shapes: plain names, rated names, or names ranked
strongest-to-weakest. Every shape holds exactly fifteen participants.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

ROSTER_SIZE = 15
GROUP_COUNT = 3
GROUP_SIZE = 5

MIN_RATING = 0.0
MAX_RATING = 100.0  # exclusive

# Validation failure codes, re-exported by services.error_codes
INVALID_ROSTER_SIZE = "invalid_roster_size"
DUPLICATE_NAMES = "duplicate_names"
INVALID_RATING = "invalid_rating"
EMPTY_NAME = "empty_name"


class RosterMode(Enum):
    """How a roster should be partitioned."""

    PLAIN = "plain"
    RATED = "rated"
    RANKED = "ranked"


class RosterValidationError(ValueError):
    """Raised when a roster breaks a precondition of the partitioning engine."""

    def __init__(
        self,
        message: str,
        code: str,
        expected: int = ROSTER_SIZE,
        actual: int | None = None,
        duplicates: list[str] | None = None,
        invalid_ratings: list[str] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.expected = expected
        self.actual = actual
        self.duplicates = duplicates or []
        self.invalid_ratings = invalid_ratings or []

    def to_details(self) -> dict:
        """Structured detail for building a user-facing message."""
        return {
            "expected": self.expected,
            "actual": self.actual,
            "duplicates": list(self.duplicates),
            "invalid_ratings": list(self.invalid_ratings),
        }


@dataclass(frozen=True)
class RatedEntry:
    """A participant with a numeric skill rating."""

    name: str
    rating: float


@dataclass(frozen=True)
class PlainRoster:
    """Fifteen names with no implied strength order."""

    names: tuple[str, ...]
    mode: ClassVar[RosterMode] = RosterMode.PLAIN

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(_clean_name(n) for n in self.names))

    def strength_order(self) -> list[str]:
        return list(self.names)

    def weights(self) -> dict[str, float]:
        return {}


@dataclass(frozen=True)
class RatedRoster:
    """
    Fifteen (name, rating) pairs.

    Entries are kept strongest-to-weakest. The sort is stable so equal ratings
    keep their submission order.
    """

    entries: tuple[RatedEntry, ...]
    mode: ClassVar[RosterMode] = RosterMode.RATED

    def __post_init__(self):
        normalized = [_coerce_entry(e) for e in self.entries]
        ordered = sorted(normalized, key=_rating_sort_key, reverse=True)
        object.__setattr__(self, "entries", tuple(ordered))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(e.name for e in self.entries)

    def strength_order(self) -> list[str]:
        return [e.name for e in self.entries]

    def weights(self) -> dict[str, float]:
        return {e.name: float(e.rating) for e in self.entries}


@dataclass(frozen=True)
class RankedRoster:
    """Fifteen names ordered strongest first, without explicit ratings."""

    names: tuple[str, ...]
    mode: ClassVar[RosterMode] = RosterMode.RANKED

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(_clean_name(n) for n in self.names))

    def strength_order(self) -> list[str]:
        return list(self.names)

    def weights(self) -> dict[str, float]:
        """Synthetic weights: 15 for the strongest down to 1 for the weakest."""
        total = len(self.names)
        return {name: float(total - i) for i, name in enumerate(self.names)}


Roster = PlainRoster | RatedRoster | RankedRoster


def _clean_name(name) -> str:
    if not isinstance(name, str):
        raise RosterValidationError(f"Player names must be text, got {name!r}", code=EMPTY_NAME)
    return name.strip()


def _coerce_entry(entry) -> RatedEntry:
    """Accept a RatedEntry or a (name, rating) pair."""
    if isinstance(entry, RatedEntry):
        name, rating = entry.name, entry.rating
    else:
        try:
            name, rating = entry
        except (TypeError, ValueError):
            raise RosterValidationError(
                f"Rated entries need a name and a rating, got {entry!r}",
                code=INVALID_RATING,
            ) from None
    return RatedEntry(name=_clean_name(name), rating=rating)


def _rating_sort_key(entry: RatedEntry) -> float:
    # Malformed ratings sort last; validation rejects them afterwards.
    try:
        value = float(entry.rating)
    except (TypeError, ValueError):
        return -math.inf
    return value if math.isfinite(value) else -math.inf


def roster_mode(roster: Roster) -> RosterMode:
    """Return the mode tag of a roster, rejecting unknown shapes."""
    if isinstance(roster, (PlainRoster, RatedRoster, RankedRoster)):
        return roster.mode
    raise TypeError(f"Unsupported roster type: {type(roster).__name__}")


def find_duplicates(names) -> list[str]:
    """Names that appear more than once, in first-seen order."""
    counts = Counter(names)
    seen: set[str] = set()
    duplicates = []
    for name in names:
        if counts[name] > 1 and name not in seen:
            duplicates.append(name)
            seen.add(name)
    return duplicates


def _is_valid_rating(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(rating) and MIN_RATING <= rating < MAX_RATING


def validate_roster(roster: Roster) -> None:
    """
    Check every precondition of the partitioning engine.

    Args:
        roster: Roster of any shape

    Raises:
        RosterValidationError: If the roster has the wrong size, blank or
            duplicated names, or ratings outside [0, 100)
        TypeError: If the roster is not one of the known shapes
    """
    mode = roster_mode(roster)
    names = list(roster.names)

    if len(names) != ROSTER_SIZE:
        raise RosterValidationError(
            f"Need exactly {ROSTER_SIZE} players, got {len(names)}",
            code=INVALID_ROSTER_SIZE,
            actual=len(names),
        )

    if any(not name for name in names):
        raise RosterValidationError(
            "Player names cannot be blank",
            code=EMPTY_NAME,
            actual=len(names),
        )

    duplicates = find_duplicates(names)
    if duplicates:
        unique_count = len(set(names))
        raise RosterValidationError(
            f"Duplicate names detected: {', '.join(duplicates)} "
            f"({len(names)} names but {unique_count} unique)",
            code=DUPLICATE_NAMES,
            actual=unique_count,
            duplicates=duplicates,
        )

    if mode is RosterMode.RATED:
        bad = [e.name for e in roster.entries if not _is_valid_rating(e.rating)]
        if bad:
            raise RosterValidationError(
                f"Ratings must be numbers from {MIN_RATING:g} to below {MAX_RATING:g}: {', '.join(bad)}",
                code=INVALID_RATING,
                actual=len(names),
                invalid_ratings=bad,
            )
