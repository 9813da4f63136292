"""Tests for ServiceContainer."""

import json

import pytest

import config as app_config
from domain.models.roster import RankedRoster
from infrastructure.service_container import ServiceConfig, ServiceContainer
from repositories.duty_repository import DutyRepository
from repositories.json_duty_repository import JsonDutyRepository
from tests.conftest import FIFTEEN_NAMES


@pytest.fixture
def config(tmp_path):
    """Create a test configuration."""
    return ServiceConfig(db_path=str(tmp_path / "test.db"), duty_file=str(tmp_path / "duty.json"), seed=7)


class TestServiceContainerInitialization:
    """Tests for ServiceContainer initialization."""

    @pytest.mark.asyncio
    async def test_initialize_creates_all_services(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert container.is_initialized
        assert isinstance(container.duty_repository, DutyRepository)
        assert container.shuffler is not None
        assert container.duty_rotation_service is not None
        assert container.session_state_manager is not None
        assert container.team_maker_service is not None

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, config):
        """Calling initialize multiple times is safe."""
        container = ServiceContainer(config)
        await container.initialize()
        first = container.team_maker_service
        await container.initialize()
        assert container.team_maker_service is first

    def test_access_before_initialize_raises(self, config):
        container = ServiceContainer(config)
        with pytest.raises(RuntimeError, match="not initialized"):
            container.team_maker_service

    @pytest.mark.asyncio
    async def test_json_backend(self, config):
        config.duty_store_backend = "json"
        container = ServiceContainer(config)
        await container.initialize()
        assert isinstance(container.duty_repository, JsonDutyRepository)

        container.duty_rotation_service.record_completion("Amrit")
        with open(config.duty_file, encoding="utf-8") as f:
            assert json.load(f)["counts"] == {"amrit": 1}

    @pytest.mark.asyncio
    async def test_unknown_backend(self, config):
        config.duty_store_backend = "redis"
        with pytest.raises(ValueError, match="Unknown duty store backend"):
            await ServiceContainer(config).initialize()

    @pytest.mark.asyncio
    async def test_corrupt_database_still_serves_teams(self, config):
        """A DB path holding something other than SQLite leaves duty tracking empty, not broken."""
        with open(config.db_path, "w", encoding="utf-8") as f:
            f.write("name,count\n" + "amrit,1\n" * 900)
        container = ServiceContainer(config)
        await container.initialize()

        result = container.team_maker_service.submit_roster(
            "+1555", RankedRoster(names=FIFTEEN_NAMES), duty_reports=["Juan"]
        )
        assert result.success
        assert result.value.next_duty in FIFTEEN_NAMES
        assert container.team_maker_service.shuffle_again("+1555").success


class TestServiceContainerWiring:
    """Services share state through the container."""

    @pytest.mark.asyncio
    async def test_submit_then_shuffle(self, config):
        container = ServiceContainer(config)
        await container.initialize()
        team_maker = container.team_maker_service

        first = team_maker.submit_roster("+1555", RankedRoster(names=FIFTEEN_NAMES), duty_reports=["Juan"])
        again = team_maker.shuffle_again("+1555")

        assert first.success and again.success
        assert again.value.signature != first.value.signature
        assert container.session_state_manager.get("+1555").shuffle_count == 1
        assert container.duty_rotation_service.get_count("juan") == 1

    @pytest.mark.asyncio
    async def test_seed_makes_runs_reproducible(self, config, tmp_path):
        sheets = []
        for run in range(2):
            run_config = ServiceConfig(db_path=str(tmp_path / f"run{run}.db"), seed=config.seed)
            container = ServiceContainer(run_config)
            await container.initialize()
            result = container.team_maker_service.submit_roster("+1555", RankedRoster(names=FIFTEEN_NAMES))
            sheets.append(result.value)
        assert sheets[0].signature == sheets[1].signature
        assert sheets[0].next_duty == sheets[1].next_duty


def test_config_from_env_defaults():
    """from_env mirrors config.py values."""
    service_config = ServiceConfig.from_env()
    assert service_config.duty_store_backend == app_config.DUTY_STORE_BACKEND
    assert service_config.db_path == app_config.DB_PATH
    assert service_config.new_composition_attempts == app_config.SHUFFLER_SETTINGS["new_composition_attempts"]
    assert service_config.show_totals == app_config.SHOW_TOTALS
