"""
Domain services containing pure business logic.
"""

from domain.services.team_balancing_service import BalanceScore, TeamBalancingService
from domain.services.tier_shuffle_service import TierShuffleService

__all__ = ["BalanceScore", "TeamBalancingService", "TierShuffleService"]
