"""
Duty rotation: who takes the repeating chore (washing the bibs) next.
"""

import logging
import random
import threading

from domain.models.duty import DutyHistoryEntry, DutyRecord, normalize_duty_key
from repositories.interfaces import DutyStoreError, IDutyRepository

logger = logging.getLogger("snake_teams.services.duty_rotation")


class DutyRotationService:
    """
    Tracks how often each participant has done the duty.

    Responsibilities:
    - Record completions, ignoring consecutive repeats of the same person
    - Suggest the next person: fewest completions, random among ties, and not
      the last assignee when someone else is equally due
    - Report history for display

    An unreadable store counts as empty and a failed write is logged, so a
    broken store never stops teams from being made.
    """

    def __init__(self, duty_repo: IDutyRepository, rng: random.Random | None = None):
        self.duty_repo = duty_repo
        self.rng = rng or random.Random()
        # Serializes the read-modify-write of record_completion within the process
        self._write_lock = threading.Lock()

    def _load_record(self) -> DutyRecord:
        try:
            return self.duty_repo.load()
        except DutyStoreError as exc:
            logger.error(f"Duty store unavailable, treating as empty: {exc}")
            return DutyRecord()

    def record_completion(self, name: str) -> int:
        """
        Record that name did the duty.

        The count only increases when name differs from the last recorded
        assignee; the last assignee is updated either way.

        Args:
            name: Display name of the person who did the duty

        Returns:
            The person's count after recording
        """
        key = normalize_duty_key(name)
        if not key:
            raise ValueError("Cannot record duty for a blank name")

        with self._write_lock:
            record = self._load_record()
            if record.last_assignee_key != key:
                record.counts[key] = record.counts.get(key, 0) + 1
                logger.info(f"Duty recorded for {key}: now {record.counts[key]}")
            else:
                logger.info(f"Duty repeat for last assignee {key} ignored")
            record.last_assignee_key = key
            try:
                self.duty_repo.save(record)
            except DutyStoreError as exc:
                logger.error(f"Failed to save duty record: {exc}")
            return record.counts.get(key, 0)

    def record_completions(self, names: list[str]) -> list[tuple[str, int]]:
        """
        Record several completions from one report.

        Names are de-duplicated by key, keeping the first display form.

        Returns:
            (display name, count after recording) per unique name
        """
        seen: set[str] = set()
        recorded = []
        for name in names:
            key = normalize_duty_key(name)
            if not key or key in seen:
                continue
            seen.add(key)
            recorded.append((name, self.record_completion(name)))
        return recorded

    def get_count(self, name: str) -> int:
        """Completions recorded for name (0 if never seen)."""
        return self._load_record().count_for(name)

    def next_due(self, names: list[str]) -> str:
        """
        Pick who should do the duty next from the current roster.

        Among the least-frequent names, the last assignee is dropped as long as
        someone else remains; the pick is uniform over what is left.

        Args:
            names: Display names on the current roster

        Returns:
            Display name of the suggested person

        Raises:
            ValueError: If names is empty
        """
        if not names:
            raise ValueError("Cannot pick a duty assignee from an empty roster")

        record = self._load_record()
        counts = {name: record.count_for(name) for name in names}
        minimum = min(counts.values())
        candidates = [name for name in names if counts[name] == minimum]

        if record.last_assignee_key:
            others = [n for n in candidates if normalize_duty_key(n) != record.last_assignee_key]
            if others:
                candidates = others

        choice = self.rng.choice(candidates)
        logger.debug(f"Next duty: {choice} (count={minimum}, candidates={len(candidates)})")
        return choice

    def history_report(self) -> list[DutyHistoryEntry]:
        """Everyone with at least one completion, fewest first."""
        record = self._load_record()
        entries = [
            DutyHistoryEntry(key=key, count=count) for key, count in record.counts.items() if count > 0
        ]
        entries.sort(key=lambda e: (e.count, e.key))
        return entries
