"""
Tests for the SQLite and JSON duty stores.
"""

import json
import os
import sqlite3

import pytest

from domain.models.duty import DutyRecord
from repositories.duty_repository import DutyRepository
from repositories.interfaces import DutyStoreError
from repositories.json_duty_repository import JsonDutyRepository
from services.duty_rotation_service import DutyRotationService


@pytest.fixture
def json_path(tmp_path):
    return str(tmp_path / "duty.json")


@pytest.fixture
def json_repository(json_path):
    return JsonDutyRepository(json_path)


class TestDutyRepository:
    """Test the SQLite duty store."""

    def test_empty_store(self, duty_repository):
        record = duty_repository.load()
        assert record.counts == {}
        assert record.last_assignee_key is None

    def test_save_and_load(self, duty_repository):
        duty_repository.save(DutyRecord(counts={"amrit": 2, "juan": 1}, last_assignee_key="juan"))
        record = duty_repository.load()
        assert record.counts == {"amrit": 2, "juan": 1}
        assert record.last_assignee_key == "juan"

    def test_save_replaces_whole_record(self, duty_repository):
        duty_repository.save(DutyRecord(counts={"amrit": 2}, last_assignee_key="amrit"))
        duty_repository.save(DutyRecord(counts={"juan": 1}, last_assignee_key=None))
        record = duty_repository.load()
        assert record.counts == {"juan": 1}
        assert record.last_assignee_key is None

    def test_persists_across_instances(self, repo_db_path):
        DutyRepository(repo_db_path).save(DutyRecord(counts={"kevin": 4}, last_assignee_key="kevin"))
        record = DutyRepository(repo_db_path).load()
        assert record.count_for("Kevin") == 4

    def test_last_assignee_does_not_collide_with_names(self, duty_repository):
        """A participant named like the legacy marker is just a participant."""
        duty_repository.save(DutyRecord(counts={"__lastwasher": 1}, last_assignee_key="amrit"))
        record = duty_repository.load()
        assert record.counts == {"__lastwasher": 1}
        assert record.last_assignee_key == "amrit"

    def test_negative_count_rejected(self, duty_repository):
        with pytest.raises(DutyStoreError):
            duty_repository.save(DutyRecord(counts={"amrit": -1}))
        assert duty_repository.load().counts == {}

    def test_unreadable_store(self, tmp_path):
        repo = DutyRepository(str(tmp_path / "dropped.db"))
        with sqlite3.connect(repo.db_path) as conn:
            conn.execute("DROP TABLE duty_counts")
        with pytest.raises(DutyStoreError):
            repo.load()

    def test_not_a_database_reports_on_use(self, tmp_path):
        """A text file at the DB path still builds a repository; reads and writes fail cleanly."""
        db_path = tmp_path / "duty.db"
        db_path.write_text("amrit,1\njuan,2\n" * 500, encoding="utf-8")
        repo = DutyRepository(str(db_path))
        with pytest.raises(DutyStoreError):
            repo.load()
        with pytest.raises(DutyStoreError):
            repo.save(DutyRecord(counts={"amrit": 1}))

    def test_not_a_database_treated_as_empty_by_service(self, tmp_path):
        db_path = tmp_path / "duty.db"
        db_path.write_text("not sqlite\n" * 700, encoding="utf-8")
        service = DutyRotationService(DutyRepository(str(db_path)))
        service.record_completion("Amrit")
        assert service.get_count("amrit") == 0
        assert service.next_due(["Amrit", "Juan"]) in ("Amrit", "Juan")

    def test_service_round_trip(self, duty_repository):
        """Scenario: two consecutive completions by Amrit persist a count of 1."""
        service = DutyRotationService(duty_repository)
        service.record_completion("Amrit")
        service.record_completion("Amrit")
        assert duty_repository.load().counts == {"amrit": 1}


class TestJsonDutyRepository:
    """Test the JSON file duty store."""

    def test_missing_file_is_empty(self, json_repository):
        assert json_repository.load() == DutyRecord()

    def test_blank_file_is_empty(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            f.write("  \n")
        assert json_repository.load() == DutyRecord()

    def test_save_and_load(self, json_repository, json_path):
        json_repository.save(DutyRecord(counts={"amrit": 2}, last_assignee_key="amrit"))
        with open(json_path, encoding="utf-8") as f:
            assert json.load(f) == {"counts": {"amrit": 2}, "last_assignee": "amrit"}
        assert json_repository.load() == DutyRecord(counts={"amrit": 2}, last_assignee_key="amrit")

    def test_reads_legacy_layout(self, json_repository, json_path):
        """Older files keep counts at the top level beside __lastWasher."""
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump({"amrit": 3, "juan": 1, "__lastWasher": "juan"}, f)
        record = json_repository.load()
        assert record.counts == {"amrit": 3, "juan": 1}
        assert record.last_assignee_key == "juan"

    def test_legacy_file_rewritten_on_save(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump({"amrit": 3, "__lastWasher": "amrit"}, f)
        json_repository.save(json_repository.load())
        with open(json_path, encoding="utf-8") as f:
            assert json.load(f) == {"counts": {"amrit": 3}, "last_assignee": "amrit"}

    def test_invalid_counts_ignored(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump({"counts": {"amrit": 2, "juan": "many", "kevin": -1, "simon": True}}, f)
        assert json_repository.load().counts == {"amrit": 2}

    def test_corrupt_file_raises(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with pytest.raises(DutyStoreError):
            json_repository.load()

    def test_invalid_utf8_raises(self, json_repository, json_path):
        with open(json_path, "wb") as f:
            f.write(b'{"counts": {"amrit": 1}, "last_assignee": "\xff\xfe"}')
        with pytest.raises(DutyStoreError):
            json_repository.load()

    def test_invalid_utf8_treated_as_empty_by_service(self, json_repository, json_path):
        with open(json_path, "wb") as f:
            f.write(b'{"counts": {"amrit": 1}, "last_assignee": "\xff\xfe"}')
        service = DutyRotationService(json_repository)
        assert service.next_due(["Amrit"]) == "Amrit"

    def test_non_object_raises(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([1, 2, 3], f)
        with pytest.raises(DutyStoreError):
            json_repository.load()

    def test_unicode_keys_kept(self, json_repository):
        json_repository.save(DutyRecord(counts={"søren": 1}))
        assert json_repository.load().counts == {"søren": 1}

    def test_no_temp_files_left(self, json_repository, tmp_path):
        json_repository.save(DutyRecord(counts={"amrit": 1}))
        assert sorted(os.listdir(tmp_path)) == ["duty.json"]

    def test_unwritable_directory_raises(self, tmp_path):
        repo = JsonDutyRepository(str(tmp_path / "missing" / "duty.json"))
        with pytest.raises(DutyStoreError):
            repo.save(DutyRecord(counts={"amrit": 1}))

    def test_corrupt_store_treated_as_empty_by_service(self, json_repository, json_path):
        with open(json_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        service = DutyRotationService(json_repository)
        assert service.get_count("amrit") == 0
        assert service.next_due(["Amrit"]) == "Amrit"
