"""
Session state management for "shuffle again".

Handles in-memory state per requester, separated from business logic.
"""

import asyncio
import logging

from domain.models.composition import Composition
from domain.models.roster import Roster, roster_mode
from domain.models.session import SessionEntry

logger = logging.getLogger("snake_teams.services.session_state_manager")


class SessionStateManager:
    """
    Manages in-memory session entries keyed by requester.

    Responsibilities:
    - Remember each requester's latest roster and the compositions produced for it
    - Overwrite the entry when the requester submits a new roster
    - Hand out a per-requester lock so rapid double submissions can be serialized

    Entries are never persisted and are lost on restart; re-submitting a
    roster is cheap.
    """

    def __init__(self):
        self._entries: dict[str, SessionEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, requester: str) -> SessionEntry | None:
        """
        Get the session for a requester.

        Returns:
            SessionEntry or None if the requester has no roster yet
        """
        return self._entries.get(requester)

    def start_session(
        self,
        requester: str,
        roster: Roster,
        composition: Composition,
        next_duty: str | None = None,
    ) -> SessionEntry:
        """
        Store a fresh roster for a requester, replacing any previous one.

        Args:
            requester: Requester identity (e.g. phone number or user ID)
            roster: The validated roster
            composition: The composition produced for it
            next_duty: Cached duty suggestion for this roster

        Returns:
            The new SessionEntry
        """
        signature = composition.signature
        entry = SessionEntry(
            requester=requester,
            roster=roster,
            mode=roster_mode(roster),
            last_composition=composition,
            last_signature=signature,
            seen_signatures={signature},
            next_duty=next_duty,
        )
        replaced = requester in self._entries
        self._entries[requester] = entry
        logger.info(
            f"{'Replaced' if replaced else 'Started'} session for {requester} ({entry.mode.value} roster)"
        )
        return entry

    def record_composition(self, requester: str, composition: Composition) -> SessionEntry:
        """
        Remember another composition produced for the requester's roster.

        Raises:
            KeyError: If the requester has no session
        """
        entry = self._entries.get(requester)
        if entry is None:
            raise KeyError(f"No session for requester {requester}")
        signature = composition.signature
        entry.last_composition = composition
        entry.last_signature = signature
        entry.seen_signatures.add(signature)
        entry.shuffle_count += 1
        return entry

    def clear(self, requester: str) -> SessionEntry | None:
        """
        Drop a requester's session and, unless it is held, their lock.

        Returns:
            The cleared entry, or None if there was none
        """
        entry = self._entries.pop(requester, None)
        lock = self._locks.get(requester)
        if lock is not None and not lock.locked():
            del self._locks[requester]
        if entry:
            logger.info(f"Cleared session for {requester}")
        return entry

    def get_lock(self, requester: str) -> asyncio.Lock:
        """Lock serializing requests from one requester."""
        lock = self._locks.get(requester)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[requester] = lock
        return lock
