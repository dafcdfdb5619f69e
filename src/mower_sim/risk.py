"""Risk tiers for the eight candidate moves around a mower.

Slots are indexed clockwise from North (0) to North-West (7), matching
``Direction.slot``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence

from .errors import InvariantViolation
from .mower import VIEW_SIZE, SelfIndex, SelfIndexKind
from .world import SquareContent

ALL_SLOTS: FrozenSet[int] = frozenset(range(VIEW_SIZE))

# Slots whose recorded content no longer lines up with the mower once it has
# stepped into the keyed slot.
STALE_SLOTS_AFTER_MOVE: Dict[int, FrozenSet[int]] = {
    0: frozenset({0, 1, 7}),
    1: frozenset({0, 1, 2, 3, 7}),
    2: frozenset({1, 2, 3}),
    3: frozenset({1, 2, 3, 4, 5}),
    4: frozenset({3, 4, 5}),
    5: frozenset({3, 4, 5, 6, 7}),
    6: frozenset({5, 6, 7}),
    7: frozenset({0, 1, 5, 6, 7}),
}

# Slots a mower seen in the keyed slot could have reached in one step.
MOWER_REACH: Dict[int, FrozenSet[int]] = {
    0: frozenset({1, 2, 6, 7}),
    1: frozenset({0, 2}),
    2: frozenset({0, 1, 3, 4}),
    3: frozenset({2, 4}),
    4: frozenset({2, 3, 5, 6}),
    5: frozenset({4, 6}),
    6: frozenset({0, 4, 5, 7}),
    7: frozenset({0, 6}),
}


@dataclass(frozen=True)
class RiskTiers:
    forbidden: FrozenSet[int]
    high_risk: FrozenSet[int]
    medium_risk: FrozenSet[int]
    preferred: FrozenSet[int]
    unknown: FrozenSet[int]

    def slots(self) -> FrozenSet[int]:
        return self.forbidden | self.high_risk | self.medium_risk | self.preferred


def stale_slots(self_index: SelfIndex) -> FrozenSet[int]:
    if self_index.kind == SelfIndexKind.UNKNOWN:
        return ALL_SLOTS
    if self_index.kind == SelfIndexKind.CENTER:
        return frozenset()
    return STALE_SLOTS_AFTER_MOVE[self_index.slot]


def classify_moves(view: Sequence[Optional[SquareContent]], self_index: SelfIndex) -> RiskTiers:
    """Partition the present view slots into forbidden/high/medium/preferred.

    Unknown slots (never seen, or shifted by the mower's own motion) count as
    high risk whatever the view recorded for them. Medium risk is derived only
    from slots that still show another mower.
    """
    if len(view) == 0:
        empty: FrozenSet[int] = frozenset()
        return RiskTiers(empty, empty, empty, empty, empty)
    if len(view) != VIEW_SIZE:
        raise InvariantViolation(f"A view must hold 0 or {VIEW_SIZE} slots, got {len(view)}")

    stale = stale_slots(self_index)
    unknown = set()
    forbidden = set()
    mowers = set()
    for slot, content in enumerate(view):
        if content is None or slot in stale:
            unknown.add(slot)
        elif content.is_obstacle:
            forbidden.add(slot)
        elif content == SquareContent.MOWER:
            mowers.add(slot)

    high_risk = unknown | mowers
    medium_risk = set()
    for slot in mowers:
        medium_risk.update(MOWER_REACH[slot] - forbidden - high_risk)

    preferred = ALL_SLOTS - forbidden - high_risk - medium_risk
    return RiskTiers(
        forbidden=frozenset(forbidden),
        high_risk=frozenset(high_risk),
        medium_risk=frozenset(medium_risk),
        preferred=frozenset(preferred),
        unknown=frozenset(unknown),
    )
