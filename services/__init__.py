"""
Application services layer.

Services orchestrate business operations using repositories and domain services.
"""

from services.duty_rotation_service import DutyRotationService

# Result type for consistent error handling
from services.result import Result
from services.session_state_manager import SessionStateManager
from services.team_maker_service import TeamMakerService, TeamSheet

__all__ = [
    "DutyRotationService",
    "SessionStateManager",
    "TeamMakerService",
    "TeamSheet",
    # Result type
    "Result",
]
