"""
Composition domain model: three disjoint groups of five.
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.models.roster import GROUP_COUNT, GROUP_SIZE

CompositionSignature = frozenset[frozenset[str]]


def composition_signature(groups) -> CompositionSignature:
    """
    Canonical key for a set of groups.

    Invariant to the order of names inside a group and to which slot holds
    which group, so two compositions with the same member partition share a
    signature.
    """
    return frozenset(frozenset(group) for group in groups)


@dataclass(frozen=True)
class Composition:
    """
    An ordered triple of groups that together cover the roster exactly once.

    This is a pure domain model with no infrastructure dependencies.
    """

    groups: tuple[tuple[str, ...], ...]

    def __post_init__(self):
        groups = tuple(tuple(group) for group in self.groups)
        if len(groups) != GROUP_COUNT:
            raise ValueError(f"Composition must have exactly {GROUP_COUNT} groups, got {len(groups)}")
        for group in groups:
            if len(group) != GROUP_SIZE:
                raise ValueError(f"Each group must have exactly {GROUP_SIZE} players, got {len(group)}")
        members = [name for group in groups for name in group]
        if len(set(members)) != len(members):
            raise ValueError("Groups must be disjoint")
        object.__setattr__(self, "groups", groups)

    @property
    def signature(self) -> CompositionSignature:
        return composition_signature(self.groups)
