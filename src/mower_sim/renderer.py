from __future__ import annotations

from typing import Dict

from .mower import Action, MowerMove
from .simulation import SimulationReport
from .world import Coordinate, Lawn, SquareContent

_CONTENT_CHARS: Dict[SquareContent, str] = {
    SquareContent.GRASS: "g",
    SquareContent.EMPTY: ".",
    SquareContent.CRATER: "c",
    SquareContent.FENCE: "#",
    SquareContent.MOWER: "M",
}


def render_lawn(lawn: Lawn) -> str:
    """Return an ASCII rendering of the lawn with North at the top."""
    rows = []
    for y in reversed(range(lawn.height)):
        rows.append("".join(_CONTENT_CHARS[lawn.lookup(Coordinate(x, y))] for x in range(lawn.width)))
    return "\n".join(rows)


def describe_move(move: MowerMove) -> str:
    origin = f"({move.origin.x},{move.origin.y})" if move.origin is not None else "(?)"
    if move.action == Action.ADVANCE:
        dest = move.destination
        return f"{move.mower_name} is moving {move.heading.name} from {origin} to ({dest.x},{dest.y})"
    if move.action == Action.SCAN:
        return f"{move.mower_name} is scanning while located at {origin}"
    if move.action == Action.TURN:
        return f"{move.mower_name} is changing directions at {origin} to face {move.heading.name}"
    return f"{move.mower_name} is waiting at {origin}"


def render_report(report: SimulationReport) -> str:
    lines = [
        "The simulation has ended, the final results are:",
        "",
        f"Total Lawn Area: {report.lawn_area}",
        f"Grass To Cut: {report.grass_target}",
        f"Grass Cut: {report.grass_cut}",
        f"Turns: {report.turns_taken}",
    ]
    for status in report.mowers:
        where = f"at {status.position} facing {status.heading}" if status.active else "disabled"
        lines.append(f"  {status.name}: {where}")
    return "\n".join(lines)
