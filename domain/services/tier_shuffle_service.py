"""
Tier shuffling: reorder a strength ranking without breaking its tiers.

Used to get new snake-draft compositions for "shuffle again" while keeping
the draft balanced.
"""

import random

from domain.models.roster import GROUP_COUNT


class TierShuffleService:
    """
    Perturbs a strongest-to-weakest ordering.

    Two strategies:
    - Tie shuffle: permute only inside runs of exactly equal weight. Balance
      depends only on summed weights, so this never changes any score.
    - Block shuffle: permute inside consecutive blocks of three (one snake
      round), regardless of weight. Always applicable, including ranked
      rosters whose synthetic weights never tie.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def shuffle_within_ties(self, order: list[str], weights: dict[str, float]) -> list[str]:
        """
        Shuffle names only within maximal runs of equal weight.

        Args:
            order: Names strongest-to-weakest
            weights: Weight per name

        Returns:
            New ordering with the same weight sequence
        """
        result: list[str] = []
        i = 0
        while i < len(order):
            weight = weights.get(order[i])
            run = []
            while i < len(order) and weights.get(order[i]) == weight:
                run.append(order[i])
                i += 1
            self.rng.shuffle(run)
            result.extend(run)
        return result

    def shuffle_blocks(self, order: list[str], block_size: int = GROUP_COUNT) -> list[str]:
        """
        Shuffle names inside consecutive fixed-size blocks.

        Args:
            order: Names strongest-to-weakest
            block_size: Block width (defaults to the number of groups)

        Returns:
            New ordering where every name stays inside its block
        """
        if block_size < 1:
            raise ValueError(f"block_size must be positive, got {block_size}")
        result: list[str] = []
        for start in range(0, len(order), block_size):
            block = list(order[start : start + block_size])
            self.rng.shuffle(block)
            result.extend(block)
        return result
