from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .errors import AgentFault, InvariantViolation
from .mower import Action, Mower, MowerMove, MowerStrategy
from .policy import PROFILE_PARAMS, ProfileParams, RiskProfile, decide_move, passive_move, select_profile
from .scenarios import ScenarioSpec
from .world import Coordinate, Lawn, SquareContent

logger = logging.getLogger(__name__)


@dataclass
class SimConfig:
    seed: Optional[int] = None
    risk_profile: Optional[RiskProfile] = None  # pins the profile instead of recomputing it
    throttle_moves: bool = False  # after a cautious advance, later mowers that turn may only scan
    log_path: Optional[str] = None  # append the final report as one JSON line
    profile_params: Dict[RiskProfile, ProfileParams] = field(default_factory=lambda: dict(PROFILE_PARAMS))


@dataclass(frozen=True)
class MowerStatus:
    name: str
    active: bool
    position: Optional[Tuple[int, int]]
    heading: str


@dataclass(frozen=True)
class SimulationReport:
    lawn_area: int
    grass_target: int
    grass_cut: int
    turns_taken: int
    mowers: List[MowerStatus]

    def to_dict(self) -> Dict:
        return {
            "lawn_area": self.lawn_area,
            "grass_target": self.grass_target,
            "grass_cut": self.grass_cut,
            "turns_taken": self.turns_taken,
            "mowers": [
                {
                    "name": status.name,
                    "active": status.active,
                    "position": list(status.position) if status.position is not None else None,
                    "heading": status.heading,
                }
                for status in self.mowers
            ],
        }


class Simulation:
    """Owns the lawn and the mowers and plays the turn loop."""

    def __init__(
        self,
        scenario: ScenarioSpec,
        config: Optional[SimConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        scenario.validate()
        self.scenario = scenario
        self.config = config or SimConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.max_turns = scenario.max_turns
        self.turns_taken = 0
        self.grass_cut = 0
        self.history: List[List[MowerMove]] = []
        self.risk_profile: Optional[RiskProfile] = None
        self._move_eligible = True

        self.lawn = Lawn(scenario.width, scenario.height)
        for x, y in scenario.obstacles:
            self.lawn.set(Coordinate(x, y), SquareContent.CRATER)
        self.grass_target = self.lawn.grass_count()

        self.mowers: List[Mower] = []
        for idx, spec in enumerate(scenario.mowers):
            mower = Mower(
                name=f"mower_{idx + 1}",
                heading=spec.heading,
                position=spec.position,
                strategy=spec.strategy,
            )
            # Starting squares are mowed before the first turn.
            if self.lawn.lookup(mower.position) == SquareContent.GRASS:
                self.grass_cut += 1
            self.lawn.set(mower.position, SquareContent.MOWER)
            self.mowers.append(mower)

        self._update_risk_profile()
        logger.info(
            "Starting %s: lawn %dx%d, grass to cut %d, mowers %d, turn limit %d",
            scenario.name,
            self.lawn.width,
            self.lawn.height,
            self.grass_target,
            len(self.mowers),
            self.max_turns,
        )

    # Read-only counters ------------------------------------------------------
    @property
    def active_mowers(self) -> int:
        return sum(1 for mower in self.mowers if mower.active)

    @property
    def remaining_grass(self) -> int:
        return self.grass_target - self.grass_cut

    @property
    def is_finished(self) -> bool:
        return self.turns_taken >= self.max_turns or self.remaining_grass <= 0 or self.active_mowers == 0

    # Turn loop ---------------------------------------------------------------
    def run(self) -> SimulationReport:
        while not self.is_finished:
            self.step()
        return self.finish()

    def finish(self) -> SimulationReport:
        """Build the final report and append it to ``config.log_path`` if set."""
        report = self.report()
        logger.info(
            "Simulation ended after %d turns: cut %d of %d, %d mowers active",
            report.turns_taken,
            report.grass_cut,
            report.grass_target,
            self.active_mowers,
        )
        if self.config.log_path:
            with open(self.config.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(report.to_dict()) + "\n")
        return report

    def step(self) -> List[MowerMove]:
        """Play one turn: every active mower acts once, in registration order."""
        self.turns_taken += 1
        self._move_eligible = True
        moves: List[MowerMove] = []
        for mower in self.mowers:
            if mower.active:
                move = self.decide(mower)
                moves.append(move)
                self.apply_move(mower, move)
                self._update_risk_profile()
            if self.remaining_grass <= 0 or self.active_mowers == 0:
                break
        self.history.append(moves)
        return moves

    def decide(self, mower: Mower) -> MowerMove:
        if mower.strategy == MowerStrategy.PASSIVE:
            return passive_move(mower)
        profile = self.risk_profile or RiskProfile.AGGRESSIVE
        move = decide_move(
            mower,
            profile,
            self.rng,
            move_eligible=self._move_eligible,
            params=self.config.profile_params.get(profile),
        )
        if self.config.throttle_moves and move.action == Action.ADVANCE and profile == RiskProfile.CAUTIOUS:
            self._move_eligible = False
        return move

    def apply_move(self, mower: Mower, move: MowerMove) -> bool:
        """Carry out ``move`` for ``mower``; returns False if the mower was lost."""
        if not mower.active:
            raise InvariantViolation(f"{mower.name} is inactive and cannot move")
        logger.debug("Turn %d: %s %s %s", self.turns_taken, mower.name, move.action.name, move.heading.name)

        if move.action == Action.SCAN:
            mower.scan(self.lawn)
        elif move.action == Action.TURN:
            mower.turn(move.heading)
        elif move.action == Action.WAIT:
            mower.wait()
        elif move.action == Action.ADVANCE:
            try:
                self._resolve_advance(mower, move)
            except AgentFault as fault:
                logger.info("Turn %d: %s", self.turns_taken, fault)
                for name in fault.mower_names:
                    self.mower_by_name(name).deactivate()
                return False
        return True

    def _resolve_advance(self, mower: Mower, move: MowerMove) -> None:
        if move.destination is None or move.origin != mower.position:
            raise InvariantViolation(f"Malformed advance for {mower.name}: {move}")
        destination = move.destination
        content = self.lawn.lookup(destination)

        # The mower leaves its square whatever happens next.
        self.lawn.set(move.origin, SquareContent.EMPTY)

        if content == SquareContent.FENCE:
            raise AgentFault([mower.name], f"collided with a fence at {tuple(destination)}", content)
        if content == SquareContent.CRATER:
            self.lawn.set(destination, SquareContent.EMPTY)
            raise AgentFault([mower.name], f"fell into a crater at {tuple(destination)}", content)
        if content == SquareContent.MOWER:
            victims = [mower.name]
            victims += [other.name for other in self.mowers if other.active and other.position == destination]
            self.lawn.set(destination, SquareContent.EMPTY)
            raise AgentFault(victims, f"collided with another mower at {tuple(destination)}", content)

        if content == SquareContent.GRASS:
            self.grass_cut += 1
        self.lawn.set(destination, SquareContent.MOWER)
        mower.advance()

    def mower_by_name(self, name: str) -> Mower:
        for mower in self.mowers:
            if mower.name == name:
                return mower
        raise KeyError(name)

    def _update_risk_profile(self) -> None:
        if self.config.risk_profile is not None:
            new_profile: Optional[RiskProfile] = self.config.risk_profile
        else:
            new_profile = select_profile(
                remaining_turns=self.max_turns - self.turns_taken,
                active_mowers=self.active_mowers,
                remaining_grass=self.remaining_grass,
            )
            if new_profile is None:
                return
        if new_profile != self.risk_profile:
            logger.info("Setting the risk profile to %s", new_profile.name)
            self.risk_profile = new_profile

    def report(self) -> SimulationReport:
        return SimulationReport(
            lawn_area=self.lawn.area,
            grass_target=self.grass_target,
            grass_cut=self.grass_cut,
            turns_taken=self.turns_taken,
            mowers=[
                MowerStatus(
                    name=mower.name,
                    active=mower.active,
                    position=tuple(mower.position) if mower.position is not None else None,
                    heading=mower.heading.name,
                )
                for mower in self.mowers
            ],
        )
