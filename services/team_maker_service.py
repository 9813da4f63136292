"""
Team making service: roster in, three teams and a duty suggestion out.

Orchestrates validation, partitioning, duty rotation and session memory for a
chat-triggered workflow. Parsing the chat message and rendering the reply
belong to the caller.
"""

import logging
from dataclasses import dataclass, field

from config import SHOW_TOTALS, SHUFFLER_SETTINGS
from domain.models.composition import Composition, CompositionSignature
from domain.models.duty import DutyHistoryEntry
from domain.models.roster import Roster, RosterMode, RosterValidationError, roster_mode, validate_roster
from services.duty_rotation_service import DutyRotationService
from services.error_codes import NO_ACTIVE_ROSTER
from services.result import Result
from services.session_state_manager import SessionStateManager
from shuffler import ThreeTeamShuffler
from utils.processed_events import ProcessedEventTracker

logger = logging.getLogger("snake_teams.services.team_maker")


@dataclass(frozen=True)
class TeamSheet:
    """Everything the renderer needs for one reply."""

    mode: RosterMode
    composition: Composition
    signature: CompositionSignature
    totals: tuple[float, ...] | None = None
    next_duty: str | None = None
    # (display name, count) for completions recorded by this submission
    duty_recorded: list[tuple[str, int]] = field(default_factory=list)


class TeamMakerService:
    """
    Application service behind "send a roster" and "shuffle again".

    Shared state (sessions, duty store) is only touched after a valid
    composition has been computed.
    """

    def __init__(
        self,
        shuffler: ThreeTeamShuffler,
        duty_service: DutyRotationService,
        sessions: SessionStateManager,
        processed_events: ProcessedEventTracker | None = None,
        show_totals: bool | None = None,
        tie_shuffle_chance: float | None = None,
    ):
        self.shuffler = shuffler
        self.duty_service = duty_service
        self.sessions = sessions
        self.processed_events = processed_events or ProcessedEventTracker()
        self.show_totals = show_totals if show_totals is not None else SHOW_TOTALS
        self.tie_shuffle_chance = (
            tie_shuffle_chance
            if tie_shuffle_chance is not None
            else SHUFFLER_SETTINGS["tie_shuffle_chance"]
        )

    def _totals_for(self, mode: RosterMode, composition: Composition, weights: dict[str, float]):
        if not self.show_totals or mode is RosterMode.PLAIN:
            return None
        return self.shuffler.balancing_service.calculate_group_sums(composition, weights)

    def _compose_initial(self, roster: Roster) -> Composition:
        mode = roster_mode(roster)
        if mode is RosterMode.PLAIN:
            return self.shuffler.random_partition(list(roster.names))
        if mode in (RosterMode.RATED, RosterMode.RANKED):
            return self.shuffler.best_for_order(roster.strength_order(), roster.weights()).composition
        raise TypeError(f"Unsupported roster mode: {mode}")

    def submit_roster(
        self,
        requester: str,
        roster: Roster,
        duty_reports: list[str] | None = None,
        event_id: str | None = None,
    ) -> Result[TeamSheet]:
        """
        Make teams for a newly submitted roster.

        Args:
            requester: Who sent the roster (session key)
            roster: Parsed roster of any shape
            duty_reports: Names reported as having done the duty last time
            event_id: Inbound message ID; duty reports of an already processed
                event are not recorded again

        Returns:
            Result with a TeamSheet, or a failure describing the invalid roster
        """
        try:
            validate_roster(roster)
        except RosterValidationError as exc:
            logger.info(f"Rejected roster from {requester}: {exc}")
            return Result.fail(str(exc), code=exc.code, details=exc.to_details())

        mode = roster_mode(roster)
        composition = self._compose_initial(roster)

        duty_recorded: list[tuple[str, int]] = []
        if duty_reports:
            if self.processed_events.mark_if_new(event_id):
                duty_recorded = self.duty_service.record_completions(duty_reports)
            else:
                logger.info(f"Duty reports for event {event_id} already recorded, skipping")

        next_duty = self.duty_service.next_due(list(roster.names))
        self.sessions.start_session(requester, roster, composition, next_duty=next_duty)

        logger.info(f"Made {mode.value} teams for {requester}; duty next: {next_duty}")
        return Result.ok(
            TeamSheet(
                mode=mode,
                composition=composition,
                signature=composition.signature,
                totals=self._totals_for(mode, composition, roster.weights()),
                next_duty=next_duty,
                duty_recorded=duty_recorded,
            )
        )

    def shuffle_again(self, requester: str) -> Result[TeamSheet]:
        """
        Make a different set of teams for the requester's last roster.

        Plain rosters get a fresh random deal. Rated and ranked rosters get a
        balanced snake draft whose signature has not been shown yet, falling
        back to a repeat when no new one turns up within the attempt budget.

        Returns:
            Result with a TeamSheet, or NO_ACTIVE_ROSTER if nothing was submitted
        """
        entry = self.sessions.get(requester)
        if entry is None:
            return Result.fail("No roster to shuffle yet. Send 15 names first.", code=NO_ACTIVE_ROSTER)

        roster = entry.roster
        weights = roster.weights()
        if entry.mode is RosterMode.PLAIN:
            composition = self.shuffler.random_partition(list(roster.names))
        elif entry.mode is RosterMode.RATED:
            base_order = roster.strength_order()
            if self.shuffler.rng.random() < self.tie_shuffle_chance:
                base_order = self.shuffler.tier_shuffler.shuffle_within_ties(base_order, weights)
            composition = self.shuffler.select_new_balanced(
                base_order, weights, entry.seen_signatures
            ).composition
        elif entry.mode is RosterMode.RANKED:
            composition = self.shuffler.select_new_balanced(
                roster.strength_order(), weights, entry.seen_signatures
            ).composition
        else:
            raise TypeError(f"Unsupported roster mode: {entry.mode}")

        entry = self.sessions.record_composition(requester, composition)
        logger.info(
            f"Reshuffled {entry.mode.value} teams for {requester} "
            f"(shuffle #{entry.shuffle_count}, {len(entry.seen_signatures)} seen)"
        )
        return Result.ok(
            TeamSheet(
                mode=entry.mode,
                composition=composition,
                signature=composition.signature,
                totals=self._totals_for(entry.mode, composition, weights),
                next_duty=entry.next_duty,
            )
        )

    def duty_history(self) -> list[DutyHistoryEntry]:
        """Duty completion counts, fewest first."""
        return self.duty_service.history_report()
