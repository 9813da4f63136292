"""
Duty rotation domain model.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field


def normalize_duty_key(name: str | None) -> str:
    """
    Normalize a display name into a duty-tracking key.

    Lower-cases, strips diacritics (NFD, combining marks removed) and trims,
    so "Ámrit " and "amrit" count as the same person.
    """
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


@dataclass
class DutyRecord:
    """
    Persisted duty counts plus the most recent assignee.

    Counts only ever grow; the last assignee lives in its own field so it can
    never collide with a participant key.
    """

    counts: dict[str, int] = field(default_factory=dict)
    last_assignee_key: str | None = None

    def count_for(self, name: str) -> int:
        return self.counts.get(normalize_duty_key(name), 0)

    def copy(self) -> DutyRecord:
        return DutyRecord(counts=dict(self.counts), last_assignee_key=self.last_assignee_key)


@dataclass(frozen=True)
class DutyHistoryEntry:
    """One row of the duty history report."""

    key: str
    count: int
