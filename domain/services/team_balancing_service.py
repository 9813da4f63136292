"""
Team balancing domain service.

Handles group weight sums and balance scoring.
"""

import math
from dataclasses import dataclass

from domain.models.composition import Composition

# Ratings carry at most one or two decimals; rounding sums keeps float noise
# from turning equal totals into a spurious spread.
SUM_PRECISION = 6


@dataclass(frozen=True)
class BalanceScore:
    """Balance of a composition. Lower is better on both axes."""

    spread: float
    variance: float
    sums: tuple[float, ...]

    @property
    def sort_key(self) -> tuple[float, float]:
        """Spread first, variance as the tie-break."""
        return (self.spread, self.variance)

    def is_better_than(self, other: "BalanceScore") -> bool:
        return self.sort_key < other.sort_key


class TeamBalancingService:
    """
    Pure domain service for team balancing logic.

    Responsibilities:
    - Calculate per-group weight sums
    - Score how evenly weight is spread across the three groups
    """

    def calculate_group_sums(self, composition: Composition, weights: dict[str, float]) -> tuple[float, ...]:
        """
        Sum the weight of every group.

        Args:
            composition: Composition to evaluate
            weights: Weight per name (missing names count as 0)

        Returns:
            One sum per group, in slot order
        """
        return tuple(
            round(math.fsum(weights.get(name, 0.0) for name in group), SUM_PRECISION)
            for group in composition.groups
        )

    def score(self, composition: Composition, weights: dict[str, float]) -> BalanceScore:
        """
        Score a composition by spread and population variance of group sums.

        Args:
            composition: Composition to evaluate
            weights: Weight per name

        Returns:
            BalanceScore (lower = more balanced)
        """
        sums = self.calculate_group_sums(composition, weights)
        spread = round(max(sums) - min(sums), SUM_PRECISION)
        mean = math.fsum(sums) / len(sums)
        variance = round(math.fsum((s - mean) ** 2 for s in sums) / len(sums), SUM_PRECISION)
        return BalanceScore(spread=spread, variance=variance, sums=sums)
