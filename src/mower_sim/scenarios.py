from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .errors import ConfigurationError
from .mower import MowerStrategy
from .world import Coordinate, Direction


@dataclass
class MowerSpec:
    x: int
    y: int
    heading: Direction
    strategy: MowerStrategy = MowerStrategy.ADAPTIVE

    @property
    def position(self) -> Coordinate:
        return Coordinate(self.x, self.y)


@dataclass
class ScenarioSpec:
    width: int
    height: int
    mowers: List[MowerSpec]
    obstacles: List[Tuple[int, int]] = field(default_factory=list)
    max_turns: int = 100
    name: str = "custom"

    def validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"Lawn dimensions must be positive, got {self.width}x{self.height}")
        if not self.mowers:
            raise ConfigurationError("A scenario needs at least one mower")
        if self.max_turns < 0:
            raise ConfigurationError(f"Turn budget cannot be negative, got {self.max_turns}")

        seen = set()
        for spec in self.mowers:
            if not self._in_bounds(spec.x, spec.y):
                raise ConfigurationError(f"Mower at ({spec.x},{spec.y}) is outside the lawn")
            if (spec.x, spec.y) in seen:
                raise ConfigurationError(f"Two mowers start at ({spec.x},{spec.y})")
            seen.add((spec.x, spec.y))
        for x, y in self.obstacles:
            if not self._in_bounds(x, y):
                raise ConfigurationError(f"Obstacle at ({x},{y}) is outside the lawn")
            if (x, y) in seen:
                raise ConfigurationError(f"Obstacle at ({x},{y}) sits on a mower")

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


def parse_scenario(text: str, name: str = "custom") -> ScenarioSpec:
    """Parse the line-oriented scenario format.

    Layout (blank lines ignored): width, height, mower count, one
    ``x,y,HEADING[,strategy]`` line per mower, obstacle count, one ``x,y``
    line per obstacle, turn budget.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    cursor = _LineCursor(lines)

    width = cursor.integer("lawn width")
    height = cursor.integer("lawn height")

    mowers: List[MowerSpec] = []
    for idx in range(cursor.count("mower count")):
        fields = cursor.fields(f"mower {idx + 1}", 3, 4)
        strategy = MowerStrategy.ADAPTIVE
        if len(fields) == 4:
            try:
                strategy = MowerStrategy(int(fields[3]))
            except ValueError:
                raise ConfigurationError(
                    f"Line {cursor.line_no}: unknown strategy flag {fields[3]!r}"
                ) from None
        mowers.append(
            MowerSpec(
                x=cursor.to_int(fields[0]),
                y=cursor.to_int(fields[1]),
                heading=Direction.from_name(fields[2]),
                strategy=strategy,
            )
        )

    obstacles: List[Tuple[int, int]] = []
    for idx in range(cursor.count("obstacle count")):
        fields = cursor.fields(f"obstacle {idx + 1}", 2, 2)
        obstacles.append((cursor.to_int(fields[0]), cursor.to_int(fields[1])))

    max_turns = cursor.integer("turn budget")
    if cursor.remaining():
        raise ConfigurationError(f"Unexpected trailing content after line {cursor.line_no}")

    spec = ScenarioSpec(width=width, height=height, mowers=mowers, obstacles=obstacles, max_turns=max_turns, name=name)
    spec.validate()
    return spec


def load_scenario(path: Union[str, Path]) -> ScenarioSpec:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read scenario file {path}: {exc}") from exc
    return parse_scenario(text, name=path.stem)


class _LineCursor:
    def __init__(self, lines: List[str]):
        self.lines = lines
        self.line_no = 0

    def remaining(self) -> bool:
        return self.line_no < len(self.lines)

    def next(self, what: str) -> str:
        if not self.remaining():
            raise ConfigurationError(f"Scenario ended early; expected {what}")
        line = self.lines[self.line_no]
        self.line_no += 1
        return line

    def integer(self, what: str) -> int:
        return self.to_int(self.next(what))

    def count(self, what: str) -> int:
        value = self.integer(what)
        if value < 0:
            raise ConfigurationError(f"Line {self.line_no}: {what} cannot be negative, got {value}")
        return value

    def fields(self, what: str, min_count: int, max_count: int) -> List[str]:
        fields = [part.strip() for part in self.next(what).split(",")]
        if not min_count <= len(fields) <= max_count:
            raise ConfigurationError(f"Line {self.line_no}: malformed {what} entry {','.join(fields)!r}")
        return fields

    def to_int(self, raw: str) -> int:
        try:
            return int(raw.strip())
        except ValueError:
            raise ConfigurationError(f"Line {self.line_no}: expected an integer, got {raw!r}") from None


def scenario_presets() -> Dict[str, ScenarioSpec]:
    """Return named scenarios used for demos and regression runs."""
    return {
        "single_mower_3x3": ScenarioSpec(
            name="single_mower_3x3",
            width=3,
            height=3,
            mowers=[MowerSpec(x=1, y=1, heading=Direction.NORTH)],
            obstacles=[],
            max_turns=200,
        ),
        "crater_corner": ScenarioSpec(
            name="crater_corner",
            width=2,
            height=2,
            mowers=[MowerSpec(x=0, y=0, heading=Direction.EAST)],
            obstacles=[(1, 0)],
            max_turns=50,
        ),
        "two_mower_field": ScenarioSpec(
            name="two_mower_field",
            width=8,
            height=6,
            mowers=[
                MowerSpec(x=0, y=0, heading=Direction.NORTH),
                MowerSpec(x=7, y=5, heading=Direction.SOUTH),
            ],
            obstacles=[(3, 2), (4, 3), (6, 1)],
            max_turns=300,
        ),
        "crowded_yard": ScenarioSpec(
            name="crowded_yard",
            width=10,
            height=10,
            mowers=[
                MowerSpec(x=0, y=0, heading=Direction.NORTHEAST),
                MowerSpec(x=9, y=0, heading=Direction.NORTHWEST),
                MowerSpec(x=0, y=9, heading=Direction.SOUTHEAST),
                MowerSpec(x=9, y=9, heading=Direction.SOUTHWEST),
                MowerSpec(x=5, y=5, heading=Direction.WEST, strategy=MowerStrategy.PASSIVE),
            ],
            obstacles=[(2, 2), (7, 2), (2, 7), (7, 7), (4, 0), (5, 9)],
            max_turns=150,
        ),
    }
