"""
Pytest fixtures for tests.

Performance optimization: the SQLite schema is created once per session and
copied for each repository test instead of being re-initialized.

Rosters and random sources are centralized here so every test file builds
them the same way.
"""

import random
import shutil

import pytest

from domain.models.duty import DutyRecord
from domain.models.roster import PlainRoster, RankedRoster, RatedRoster
from infrastructure.schema_manager import SchemaManager
from repositories.duty_repository import DutyRepository
from repositories.interfaces import DutyStoreError, IDutyRepository
from services.duty_rotation_service import DutyRotationService
from services.session_state_manager import SessionStateManager
from services.team_maker_service import TeamMakerService
from shuffler import ThreeTeamShuffler


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

FIFTEEN_NAMES = [
    "Rajesh",
    "Anish",
    "Juan",
    "Kunal",
    "Nami",
    "Ashutosh",
    "Apoorva",
    "Andreas",
    "Elias",
    "Anjal",
    "Saugat",
    "Simon",
    "Kevin",
    "Amrit",
    "Ashutosh+1",
]
"""Fifteen unique display names used across the suite."""

SCENARIO_WEIGHTS = [9, 8, 8, 7, 7, 7, 6, 6, 6, 6, 5, 5, 5, 4, 3]
"""Descending ratings with plenty of ties."""

TEST_SEED = 1234


class InMemoryDutyRepository(IDutyRepository):
    """Duty repository kept in a dict, for service tests."""

    def __init__(self, record: DutyRecord | None = None):
        self.record = record.copy() if record else DutyRecord()
        self.save_calls = 0

    def load(self) -> DutyRecord:
        return self.record.copy()

    def save(self, record: DutyRecord) -> None:
        self.save_calls += 1
        self.record = record.copy()


class FailingDutyRepository(IDutyRepository):
    """Duty repository whose backend is always down."""

    def load(self) -> DutyRecord:
        raise DutyStoreError("store offline")

    def save(self, record: DutyRecord) -> None:
        raise DutyStoreError("store offline")


@pytest.fixture
def rng():
    """Seeded random source so randomized tests are reproducible."""
    return random.Random(TEST_SEED)


@pytest.fixture
def names():
    return list(FIFTEEN_NAMES)


@pytest.fixture
def plain_roster():
    return PlainRoster(names=tuple(FIFTEEN_NAMES))


@pytest.fixture
def rated_roster():
    return RatedRoster(entries=tuple(zip(FIFTEEN_NAMES, SCENARIO_WEIGHTS)))


@pytest.fixture
def ranked_roster():
    return RankedRoster(names=tuple(FIFTEEN_NAMES))


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """Create a schema template database once per test session."""
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    SchemaManager(template_path).initialize()
    yield template_path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def duty_repository(repo_db_path):
    """Create a SQLite duty repository with temp database."""
    return DutyRepository(repo_db_path)


@pytest.fixture
def memory_duty_repo():
    return InMemoryDutyRepository()


@pytest.fixture
def duty_service(memory_duty_repo, rng):
    return DutyRotationService(memory_duty_repo, rng=rng)


@pytest.fixture
def shuffler(rng):
    return ThreeTeamShuffler(rng=rng, new_composition_attempts=80, perturb_chance=0.5)


@pytest.fixture
def session_manager():
    return SessionStateManager()


@pytest.fixture
def team_maker(shuffler, duty_service, session_manager):
    return TeamMakerService(
        shuffler=shuffler,
        duty_service=duty_service,
        sessions=session_manager,
        show_totals=True,
        tie_shuffle_chance=0.7,
    )
