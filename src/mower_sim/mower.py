from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from .errors import InvariantViolation
from .world import Coordinate, Direction, Lawn, SquareContent

VIEW_SIZE = 8


class Action(Enum):
    ADVANCE = auto()
    TURN = auto()
    SCAN = auto()
    WAIT = auto()


class MowerStrategy(Enum):
    ADAPTIVE = 0  # follows the active risk profile
    PASSIVE = 1  # holds position and waits every turn


class SelfIndexKind(Enum):
    UNKNOWN = auto()
    CENTER = auto()
    SLOT = auto()


@dataclass(frozen=True)
class SelfIndex:
    """Where the mower itself sits inside the view it last scanned.

    ``CENTER`` right after a scan, ``SLOT`` after one advance (the slot it
    moved into), ``UNKNOWN`` before the first scan or once it has moved again.
    """

    kind: SelfIndexKind
    slot: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind == SelfIndexKind.SLOT:
            if self.slot is None or not 0 <= self.slot < VIEW_SIZE:
                raise InvariantViolation(f"Self index slot must be in 0..7, got {self.slot!r}")
        elif self.slot is not None:
            raise InvariantViolation(f"{self.kind.name} self index cannot carry a slot")

    @classmethod
    def unknown(cls) -> "SelfIndex":
        return cls(SelfIndexKind.UNKNOWN)

    @classmethod
    def center(cls) -> "SelfIndex":
        return cls(SelfIndexKind.CENTER)

    @classmethod
    def at(cls, slot: int) -> "SelfIndex":
        return cls(SelfIndexKind.SLOT, slot)

    def __str__(self) -> str:
        if self.kind == SelfIndexKind.SLOT:
            return str(self.slot)
        return self.kind.name


@dataclass(frozen=True)
class MowerMove:
    mower_name: str
    action: Action
    heading: Direction
    origin: Coordinate
    destination: Optional[Coordinate] = None

    def to_dict(self) -> dict:
        return {
            "mower": self.mower_name,
            "action": self.action.name,
            "heading": self.heading.name,
            "origin": list(self.origin),
            "destination": list(self.destination) if self.destination is not None else None,
        }


@dataclass
class Mower:
    name: str
    heading: Direction
    position: Optional[Coordinate]
    strategy: MowerStrategy = MowerStrategy.ADAPTIVE
    active: bool = True
    view: List[Optional[SquareContent]] = field(default_factory=list)
    turns_since_scan: int = 0
    self_index: SelfIndex = field(default_factory=SelfIndex.unknown)

    @property
    def facing_slot(self) -> int:
        return self.heading.slot

    def next_position(self) -> Coordinate:
        return self._require_position().step(self.heading)

    def scan(self, lawn: Lawn) -> List[Optional[SquareContent]]:
        """Read the 8 neighbouring squares clockwise from North."""
        origin = self._require_position()
        self.view = [lawn.lookup(origin.step(direction)) for direction in Direction]
        self.turns_since_scan = 0
        self.self_index = SelfIndex.center()
        return self.view

    def advance(self) -> Coordinate:
        """Step forward and shift the cached view into the new position's frame.

        Slots with no counterpart in the old view become unknown, the facing
        slot always among them. A second advance without a rescan leaves the
        self index UNKNOWN rather than the facing slot.
        """
        dx, dy = self.heading.delta
        self.position = self.next_position()
        self.check_view()
        if self.view:
            self.view = _shift_view(self.view, dx, dy)
        if self.self_index.kind == SelfIndexKind.CENTER:
            self.self_index = SelfIndex.at(self.facing_slot)
        else:
            self.self_index = SelfIndex.unknown()
        self.turns_since_scan += 1
        return self.position

    def turn(self, heading: Direction) -> None:
        if heading is None:
            raise InvariantViolation(f"{self.name} cannot turn to a missing heading")
        self.heading = heading
        self.turns_since_scan += 1

    def wait(self) -> None:
        self.turns_since_scan += 1

    def deactivate(self) -> None:
        self.active = False
        self.position = None

    def check_view(self) -> None:
        if len(self.view) not in (0, VIEW_SIZE):
            raise InvariantViolation(f"{self.name} holds a view of length {len(self.view)}")

    def _require_position(self) -> Coordinate:
        if self.position is None:
            raise InvariantViolation(f"{self.name} has no position; it was deactivated")
        return self.position


_SLOT_BY_DELTA = {direction.delta: direction.slot for direction in Direction}


def _shift_view(view: List[Optional[SquareContent]], dx: int, dy: int) -> List[Optional[SquareContent]]:
    """Re-express ``view`` as seen from one step of ``(dx, dy)`` further on."""
    shifted: List[Optional[SquareContent]] = []
    for direction in Direction:
        ox, oy = direction.delta
        old_offset = (ox + dx, oy + dy)
        if old_offset == (0, 0):
            # The square just left.
            shifted.append(SquareContent.EMPTY)
        elif old_offset in _SLOT_BY_DELTA:
            shifted.append(view[_SLOT_BY_DELTA[old_offset]])
        else:
            shifted.append(None)
    return shifted
