"""
Three-team shuffling: random partitions and balanced snake drafts.
"""

import logging
import random
from collections.abc import Collection
from dataclasses import dataclass

from config import SHUFFLER_SETTINGS
from domain.models.composition import Composition, CompositionSignature
from domain.models.roster import GROUP_COUNT, GROUP_SIZE, ROSTER_SIZE
from domain.services.team_balancing_service import BalanceScore, TeamBalancingService
from domain.services.tier_shuffle_service import TierShuffleService

logger = logging.getLogger("snake_teams.shuffler")

ROUNDS = ROSTER_SIZE // GROUP_COUNT


@dataclass(frozen=True)
class SnakeCandidate:
    """One snake-draft composition and how balanced it is."""

    composition: Composition
    score: BalanceScore
    start_group: int
    reverse_first_round: bool

    @property
    def signature(self) -> CompositionSignature:
        return self.composition.signature


def build_snake_order(start_group: int = 0, reverse_first_round: bool = False) -> list[int]:
    """
    Group index receiving each pick of a 3 x 5 snake draft.

    Round r visits groups 0, 1, 2 when (r is even) XOR reverse_first_round,
    otherwise 2, 1, 0. Every index is rotated by start_group.

    Args:
        start_group: Rotation applied to every group index (0-2)
        reverse_first_round: Whether round 0 runs backwards

    Returns:
        Fifteen group indices, one per pick
    """
    order = []
    for round_num in range(ROUNDS):
        forward = (round_num % 2 == 0) != reverse_first_round
        sequence = range(GROUP_COUNT) if forward else reversed(range(GROUP_COUNT))
        order.extend((group + start_group) % GROUP_COUNT for group in sequence)
    return order


class ThreeTeamShuffler:
    """
    Splits fifteen players into three teams of five.

    Random mode deals a uniform partition. Snake mode enumerates the six
    start-group/direction variants of a snake draft and keeps the best
    balanced one, optionally steering away from compositions already shown.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        new_composition_attempts: int | None = None,
        perturb_chance: float | None = None,
        balancing_service: TeamBalancingService | None = None,
        tier_shuffler: TierShuffleService | None = None,
    ):
        """
        Initialize the shuffler.

        Args:
            rng: Random source (a fresh random.Random when omitted)
            new_composition_attempts: Attempt budget for select_new_balanced (default 80)
            perturb_chance: Probability of block-shuffling the order on each attempt (default 0.5)
            balancing_service: Scorer for compositions
            tier_shuffler: Ordering perturbation strategies (shares rng when omitted)
        """
        settings = SHUFFLER_SETTINGS
        self.rng = rng or random.Random()
        self.new_composition_attempts = (
            new_composition_attempts
            if new_composition_attempts is not None
            else settings["new_composition_attempts"]
        )
        self.perturb_chance = (
            perturb_chance if perturb_chance is not None else settings["perturb_chance"]
        )
        self.balancing_service = balancing_service or TeamBalancingService()
        self.tier_shuffler = tier_shuffler or TierShuffleService(self.rng)

    def random_partition(self, names: list[str]) -> Composition:
        """
        Deal names into three random teams of five.

        Shuffles a copy uniformly and slices it at 0-4, 5-9 and 10-14. The
        caller guarantees fifteen unique names.

        Args:
            names: Exactly fifteen unique names

        Returns:
            A uniformly random Composition
        """
        dealt = list(names)
        self.rng.shuffle(dealt)
        return Composition(
            groups=tuple(tuple(dealt[i : i + GROUP_SIZE]) for i in range(0, ROSTER_SIZE, GROUP_SIZE))
        )

    def snake_composition(
        self, order: list[str], start_group: int = 0, reverse_first_round: bool = False
    ) -> Composition:
        """Assign the i-th strongest name to the group picking i-th in the snake."""
        picks = build_snake_order(start_group, reverse_first_round)
        groups: list[list[str]] = [[] for _ in range(GROUP_COUNT)]
        for name, group in zip(order, picks):
            groups[group].append(name)
        return Composition(groups=tuple(tuple(g) for g in groups))

    def snake_candidates(self, order: list[str], weights: dict[str, float]) -> list[SnakeCandidate]:
        """
        Build and score all six snake-draft variants of an ordering.

        Deterministic: the same ordering and weights always give the same
        candidates in the same order (start group 0-2, forward before reverse).

        Args:
            order: Names strongest-to-weakest
            weights: Weight per name

        Returns:
            Six scored candidates
        """
        candidates = []
        for start_group in range(GROUP_COUNT):
            for reverse_first_round in (False, True):
                composition = self.snake_composition(order, start_group, reverse_first_round)
                candidates.append(
                    SnakeCandidate(
                        composition=composition,
                        score=self.balancing_service.score(composition, weights),
                        start_group=start_group,
                        reverse_first_round=reverse_first_round,
                    )
                )
        return candidates

    def select_best(self, candidates: list[SnakeCandidate]) -> SnakeCandidate:
        """
        Pick the candidate with the lowest (spread, variance).

        Ties keep the first candidate encountered.

        Raises:
            ValueError: If candidates is empty
        """
        if not candidates:
            raise ValueError("No candidates to select from")
        best = candidates[0]
        for candidate in candidates[1:]:
            if candidate.score.is_better_than(best.score):
                best = candidate
        return best

    def best_for_order(self, order: list[str], weights: dict[str, float]) -> SnakeCandidate:
        """Best balanced snake draft for a fixed ordering."""
        best = self.select_best(self.snake_candidates(order, weights))
        logger.debug(
            f"Best snake for order: start_group={best.start_group}, "
            f"reverse_first_round={best.reverse_first_round}, "
            f"spread={best.score.spread:.1f}, variance={best.score.variance:.2f}"
        )
        return best

    def select_new_balanced(
        self,
        base_order: list[str],
        weights: dict[str, float],
        seen_signatures: Collection[CompositionSignature],
        max_attempts: int | None = None,
    ) -> SnakeCandidate:
        """
        Find a balanced snake draft that has not been produced before.

        Each attempt block-shuffles the base order with probability
        perturb_chance (otherwise keeps it), takes the best of the six snake
        variants, and returns it if its signature is unseen. When the budget
        runs out, the best candidate for the unperturbed base order is
        returned even if it repeats.

        Args:
            base_order: Names strongest-to-weakest
            weights: Weight per name
            seen_signatures: Signatures already shown for this roster
            max_attempts: Attempt budget (defaults to new_composition_attempts)

        Returns:
            A new candidate, or a repeat once the budget is exhausted
        """
        attempts = max_attempts if max_attempts is not None else self.new_composition_attempts
        for attempt in range(attempts):
            order = base_order
            if self.rng.random() < self.perturb_chance:
                order = self.tier_shuffler.shuffle_blocks(base_order)
            best = self.select_best(self.snake_candidates(order, weights))
            if best.signature not in seen_signatures:
                logger.info(
                    f"New balanced composition found on attempt {attempt + 1} "
                    f"(spread={best.score.spread:.1f}, seen={len(seen_signatures)})"
                )
                return best

        logger.info(
            f"No unseen composition within {attempts} attempts "
            f"(seen={len(seen_signatures)}), repeating best for base order"
        )
        return self.best_for_order(base_order, weights)
