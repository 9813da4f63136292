"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring so the chat glue only
has to build one object at process start.

Usage:
    container = ServiceContainer(ServiceConfig.from_env())
    await container.initialize()

    # Access services
    result = container.team_maker_service.submit_roster(sender, roster)
"""

import logging
import random
from dataclasses import dataclass

import config as app_config
from repositories.duty_repository import DutyRepository
from repositories.interfaces import IDutyRepository
from repositories.json_duty_repository import JsonDutyRepository
from services.duty_rotation_service import DutyRotationService
from services.session_state_manager import SessionStateManager
from services.team_maker_service import TeamMakerService
from shuffler import ThreeTeamShuffler
from utils.processed_events import ProcessedEventTracker

logger = logging.getLogger("snake_teams.infrastructure.container")


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Duty store
    duty_store_backend: str = "sqlite"
    db_path: str = "snake_teams.db"
    duty_file: str = "duty.json"

    # Shuffler settings
    new_composition_attempts: int = 80
    perturb_chance: float = 0.5
    tie_shuffle_chance: float = 0.7

    # Output
    show_totals: bool = True

    # Fixed seed for reproducible runs (None = system randomness)
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build a config from the values loaded in config.py."""
        return cls(
            duty_store_backend=app_config.DUTY_STORE_BACKEND,
            db_path=app_config.DB_PATH,
            duty_file=app_config.DUTY_FILE,
            new_composition_attempts=app_config.SHUFFLER_SETTINGS["new_composition_attempts"],
            perturb_chance=app_config.SHUFFLER_SETTINGS["perturb_chance"],
            tie_shuffle_chance=app_config.SHUFFLER_SETTINGS["tie_shuffle_chance"],
            show_totals=app_config.SHOW_TOTALS,
        )


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.

    Example:
        container = ServiceContainer(config)
        await container.initialize()

        # Services are now available
        team_maker = container.team_maker_service
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._rng: random.Random | None = None
        self._duty_repo: IDutyRepository | None = None
        self._shuffler: ThreeTeamShuffler | None = None
        self._duty_service: DutyRotationService | None = None
        self._sessions: SessionStateManager | None = None
        self._team_maker: TeamMakerService | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        self._rng = random.Random(self.config.seed)
        self._init_duty_store()
        self._init_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_duty_store(self) -> None:
        backend = self.config.duty_store_backend
        if backend == "sqlite":
            logger.debug(f"Using SQLite duty store at {self.config.db_path}")
            self._duty_repo = DutyRepository(self.config.db_path)
        elif backend == "json":
            logger.debug(f"Using JSON duty store at {self.config.duty_file}")
            self._duty_repo = JsonDutyRepository(self.config.duty_file)
        else:
            raise ValueError(f"Unknown duty store backend: {backend}")

    def _init_services(self) -> None:
        self._shuffler = ThreeTeamShuffler(
            rng=self._rng,
            new_composition_attempts=self.config.new_composition_attempts,
            perturb_chance=self.config.perturb_chance,
        )
        self._duty_service = DutyRotationService(self._duty_repo, rng=self._rng)
        self._sessions = SessionStateManager()
        self._team_maker = TeamMakerService(
            shuffler=self._shuffler,
            duty_service=self._duty_service,
            sessions=self._sessions,
            processed_events=ProcessedEventTracker(),
            show_totals=self.config.show_totals,
            tie_shuffle_chance=self.config.tie_shuffle_chance,
        )

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("ServiceContainer not initialized. Call initialize() first.")

    @property
    def duty_repository(self) -> IDutyRepository:
        self._require_initialized()
        return self._duty_repo

    @property
    def shuffler(self) -> ThreeTeamShuffler:
        self._require_initialized()
        return self._shuffler

    @property
    def duty_rotation_service(self) -> DutyRotationService:
        self._require_initialized()
        return self._duty_service

    @property
    def session_state_manager(self) -> SessionStateManager:
        self._require_initialized()
        return self._sessions

    @property
    def team_maker_service(self) -> TeamMakerService:
        self._require_initialized()
        return self._team_maker
