"""
Per-requester session model for "shuffle again".
"""

from dataclasses import dataclass, field

from domain.models.composition import Composition, CompositionSignature
from domain.models.roster import Roster, RosterMode


@dataclass
class SessionEntry:
    """
    Transient memory of a requester's latest roster.

    Tracks:
    - The roster and its mode
    - The most recent composition and its signature
    - Every signature produced for this roster so far
    - The duty suggestion, which stays the same across reshuffles
    """

    requester: str
    roster: Roster
    mode: RosterMode
    last_composition: Composition
    last_signature: CompositionSignature
    seen_signatures: set[CompositionSignature] = field(default_factory=set)
    next_duty: str | None = None
    shuffle_count: int = 0
