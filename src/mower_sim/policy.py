from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

import numpy as np

from .mower import Action, Mower, MowerMove
from .risk import classify_moves
from .world import Direction, SquareContent


class RiskProfile(Enum):
    CAUTIOUS = "cautious"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"
    NO_RISK = "no_risk"  # single-mower runs


@dataclass(frozen=True)
class ProfileParams:
    max_unknown_slots: int
    max_turns_since_scan: int
    medium_scan_probability: float


PROFILE_PARAMS: Dict[RiskProfile, ProfileParams] = {
    RiskProfile.CAUTIOUS: ProfileParams(max_unknown_slots=3, max_turns_since_scan=2, medium_scan_probability=0.5),
    RiskProfile.MODERATE: ProfileParams(max_unknown_slots=4, max_turns_since_scan=3, medium_scan_probability=0.25),
    RiskProfile.AGGRESSIVE: ProfileParams(max_unknown_slots=6, max_turns_since_scan=4, medium_scan_probability=0.0),
    RiskProfile.NO_RISK: ProfileParams(max_unknown_slots=3, max_turns_since_scan=2, medium_scan_probability=0.0),
}


def select_profile(remaining_turns: int, active_mowers: int, remaining_grass: int) -> Optional[RiskProfile]:
    """Pick the global profile from the remaining budget per blade of grass.

    Returns None once there is no grass left; the run is over at that point.
    """
    if remaining_grass <= 0:
        return None
    risk_factor = (remaining_turns * active_mowers) // remaining_grass
    if risk_factor >= 5:
        return RiskProfile.CAUTIOUS
    if risk_factor >= 3:
        return RiskProfile.MODERATE
    return RiskProfile.AGGRESSIVE


def decide_move(
    mower: Mower,
    profile: RiskProfile,
    rng: np.random.Generator,
    move_eligible: bool = True,
    params: Optional[ProfileParams] = None,
) -> MowerMove:
    """Choose the mower's next move from its cached view.

    Never returns an Advance into a forbidden or high-risk slot. The mower is
    not mutated; randomness is drawn only from ``rng``.
    """
    params = params or PROFILE_PARAMS[profile]
    view = mower.view
    tiers = classify_moves(view, mower.self_index)

    if (
        not view
        or len(tiers.unknown) >= params.max_unknown_slots
        or mower.turns_since_scan >= params.max_turns_since_scan
    ):
        return _scan(mower)
    if not move_eligible:
        return _scan(mower)

    facing = mower.facing_slot
    if facing in tiers.preferred and view[facing] == SquareContent.GRASS:
        return _advance(mower)

    if tiers.preferred:
        grass_slots = [slot for slot in tiers.preferred if view[slot] == SquareContent.GRASS]
        if grass_slots:
            return _turn(mower, _pick(grass_slots, rng))
        if facing in tiers.preferred:
            return _advance(mower)
        return _turn(mower, _pick(tiers.preferred, rng))

    if tiers.medium_risk:
        if rng.random() < params.medium_scan_probability:
            return _scan(mower)
        if facing in tiers.medium_risk:
            return _advance(mower)
        return _turn(mower, _pick(tiers.medium_risk, rng))

    # Only forbidden and high-risk squares around.
    return _scan(mower)


def passive_move(mower: Mower) -> MowerMove:
    return MowerMove(mower.name, Action.WAIT, mower.heading, mower.position)


def _pick(slots: Iterable[int], rng: np.random.Generator) -> int:
    ordered = sorted(slots)
    return ordered[int(rng.integers(len(ordered)))]


def _scan(mower: Mower) -> MowerMove:
    return MowerMove(mower.name, Action.SCAN, mower.heading, mower.position)


def _turn(mower: Mower, slot: int) -> MowerMove:
    return MowerMove(mower.name, Action.TURN, Direction.from_slot(slot), mower.position)


def _advance(mower: Mower) -> MowerMove:
    return MowerMove(mower.name, Action.ADVANCE, mower.heading, mower.position, mower.next_position())
