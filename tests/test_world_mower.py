import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from mower_sim import ConfigurationError, Coordinate, Direction, InvariantViolation, Lawn, SquareContent  # noqa: E402
from mower_sim.mower import Mower, SelfIndex, SelfIndexKind  # noqa: E402
from mower_sim.risk import classify_moves  # noqa: E402


def test_out_of_bounds_lookup_is_always_an_obstacle():
    lawn = Lawn(width=4, height=3)
    outside = [(-1, 0), (0, -1), (4, 0), (0, 3), (-5, -5), (100, 2), (3, 3), (4, 3)]
    for x, y in outside:
        content = lawn.lookup(Coordinate(x, y))
        assert content == SquareContent.FENCE
        assert content.is_obstacle
    assert lawn.lookup(Coordinate(3, 2)) == SquareContent.GRASS


def test_set_rejects_out_of_bounds_and_regrowth():
    lawn = Lawn(width=2, height=2)
    with pytest.raises(InvariantViolation):
        lawn.set(Coordinate(2, 0), SquareContent.EMPTY)
    lawn.set(Coordinate(1, 1), SquareContent.EMPTY)
    with pytest.raises(InvariantViolation):
        lawn.set(Coordinate(1, 1), SquareContent.GRASS)
    assert lawn.grass_count() == 3
    assert lawn.area == 4


def test_lawn_requires_positive_dimensions():
    with pytest.raises(ConfigurationError):
        Lawn(width=0, height=3)


def test_direction_helpers():
    assert Direction.from_name(" northEast ") == Direction.NORTHEAST
    assert Direction.from_slot(6) == Direction.WEST
    assert [d.slot for d in Direction] == list(range(8))
    assert Coordinate(2, 2).step(Direction.SOUTHWEST) == Coordinate(1, 1)
    with pytest.raises(ConfigurationError):
        Direction.from_name("up")


def test_fresh_scan_centres_the_mower_and_clears_unknowns():
    lawn = Lawn(width=3, height=3)
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(1, 1))
    mower.turns_since_scan = 4
    view = mower.scan(lawn)
    assert view == [SquareContent.GRASS] * 8
    assert mower.self_index == SelfIndex.center()
    assert mower.turns_since_scan == 0
    assert classify_moves(mower.view, mower.self_index).unknown == frozenset()


def test_corner_scan_sees_fences_clockwise_from_north():
    lawn = Lawn(width=3, height=3)
    mower = Mower(name="m", heading=Direction.EAST, position=Coordinate(0, 0))
    view = mower.scan(lawn)
    assert view[:3] == [SquareContent.GRASS] * 3
    assert view[3:] == [SquareContent.FENCE] * 5


def test_advance_invalidates_facing_slot_and_decays_self_index():
    lawn = Lawn(width=3, height=3)
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(1, 0))
    mower.scan(lawn)
    assert mower.advance() == Coordinate(1, 1)
    assert mower.view[0] is None
    assert mower.view[2] == SquareContent.GRASS
    assert mower.view[4] == SquareContent.EMPTY
    assert mower.self_index == SelfIndex.at(0)
    assert classify_moves(mower.view, mower.self_index).unknown == {0, 1, 7}
    assert mower.turns_since_scan == 1

    mower.advance()
    assert mower.self_index.kind == SelfIndexKind.UNKNOWN
    assert mower.turns_since_scan == 2


def test_advance_shifts_view_into_new_frame():
    lawn = Lawn(width=3, height=2)
    lawn.set(Coordinate(2, 1), SquareContent.CRATER)
    lawn.set(Coordinate(0, 1), SquareContent.CRATER)
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(1, 0))
    mower.scan(lawn)
    mower.advance()
    # The crater seen to the north-east now sits due east, and so on round.
    G, E, C = SquareContent.GRASS, SquareContent.EMPTY, SquareContent.CRATER
    assert mower.view == [None, None, C, G, E, G, C, None]
    tiers = classify_moves(mower.view, mower.self_index)
    assert tiers.forbidden == {2, 6}
    assert tiers.preferred == {3, 4, 5}


def test_diagonal_advance_keeps_only_overlapping_slots():
    lawn = Lawn(width=5, height=5)
    mower = Mower(name="m", heading=Direction.NORTHEAST, position=Coordinate(2, 2))
    mower.scan(lawn)
    mower.advance()
    unknown = {slot for slot, content in enumerate(mower.view) if content is None}
    assert unknown == {0, 1, 2, 3, 7}
    assert mower.view[5] == SquareContent.EMPTY


def test_turn_changes_heading_only():
    lawn = Lawn(width=3, height=3)
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(1, 1))
    mower.scan(lawn)
    before = list(mower.view)
    mower.turn(Direction.SOUTHWEST)
    assert mower.heading == Direction.SOUTHWEST
    assert mower.position == Coordinate(1, 1)
    assert mower.view == before
    assert mower.self_index == SelfIndex.center()


def test_deactivated_mower_has_no_position():
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(0, 0))
    mower.deactivate()
    assert not mower.active
    assert mower.position is None
    with pytest.raises(InvariantViolation):
        mower.next_position()


def test_self_index_and_view_shape_are_checked():
    with pytest.raises(InvariantViolation):
        SelfIndex.at(8)
    mower = Mower(name="m", heading=Direction.NORTH, position=Coordinate(0, 0))
    mower.view = [None] * 5
    with pytest.raises(InvariantViolation):
        mower.check_view()
