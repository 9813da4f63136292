"""
JSON file repository for duty rotation counts.

File layout:

    {"counts": {"amrit": 2, "juan": 1}, "last_assignee": "juan"}

Older files kept counts at the top level next to a reserved "__lastWasher"
key; those are still read and are rewritten in the new layout on save.
"""

import json
import logging
import os
import tempfile

from domain.models.duty import DutyRecord
from repositories.interfaces import DutyStoreError, IDutyRepository

logger = logging.getLogger("snake_teams.repositories.json_duty")

LEGACY_LAST_KEY = "__lastWasher"


def _valid_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class JsonDutyRepository(IDutyRepository):
    """Stores the whole duty record as one JSON object on disk."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> DutyRecord:
        if not os.path.exists(self.path):
            return DutyRecord()
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = f.read()
        except OSError as exc:
            raise DutyStoreError(f"Failed to read duty file {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DutyStoreError(f"Duty file {self.path} is not valid UTF-8: {exc}") from exc

        if not raw.strip():
            return DutyRecord()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DutyStoreError(f"Corrupt duty file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise DutyStoreError(f"Corrupt duty file {self.path}: expected an object")

        if "counts" in data and isinstance(data["counts"], dict):
            counts_raw = data["counts"]
            last_key = data.get("last_assignee")
        else:
            counts_raw = {k: v for k, v in data.items() if not k.startswith("__")}
            last_key = data.get(LEGACY_LAST_KEY)

        counts = {}
        for key, value in counts_raw.items():
            if _valid_count(value):
                counts[key] = value
            else:
                logger.warning(f"Ignoring invalid duty count for {key!r}: {value!r}")
        return DutyRecord(
            counts=counts,
            last_assignee_key=last_key if isinstance(last_key, str) and last_key else None,
        )

    def save(self, record: DutyRecord) -> None:
        payload = {"counts": dict(record.counts), "last_assignee": record.last_assignee_key}
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            # Write to a temp file and rename so readers never see half a file
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".duty-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            raise DutyStoreError(f"Failed to write duty file {self.path}: {exc}") from exc
