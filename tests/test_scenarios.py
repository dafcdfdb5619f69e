import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from mower_sim import (  # noqa: E402
    ConfigurationError,
    Direction,
    MowerStrategy,
    SimConfig,
    Simulation,
    SquareContent,
    load_scenario,
    parse_scenario,
    scenario_presets,
)
from mower_sim.renderer import describe_move, render_lawn, render_report  # noqa: E402

VALID = """
5
4

2
0,0, north
4,3,SouthWest,1
1
2,2

40
"""


def test_parse_valid_scenario():
    spec = parse_scenario(VALID)
    assert (spec.width, spec.height, spec.max_turns) == (5, 4, 40)
    assert spec.mowers[0].heading == Direction.NORTH
    assert spec.mowers[0].strategy == MowerStrategy.ADAPTIVE
    assert spec.mowers[1].heading == Direction.SOUTHWEST
    assert spec.mowers[1].strategy == MowerStrategy.PASSIVE
    assert spec.obstacles == [(2, 2)]


@pytest.mark.parametrize(
    "text",
    [
        "5\n4\n1\n0,0,up\n0\n10\n",  # unknown heading
        "5\n4\n1\n0,0,north\n0\n",  # missing turn budget
        "5\nfour\n1\n0,0,north\n0\n10\n",  # non-integer
        "5\n4\n1\n9,0,north\n0\n10\n",  # mower off the lawn
        "5\n4\n1\n0,0,north\n1\n0,0\n10\n",  # obstacle on a mower
        "5\n4\n2\n0,0,north\n0,0,east\n0\n10\n",  # shared start square
        "5\n4\n1\n0,0\n0\n10\n",  # malformed mower line
        "5\n4\n1\n0,0,north,7\n0\n10\n",  # unknown strategy flag
        "5\n4\n1\n0,0,north\n0\n10\n11\n",  # trailing content
        "5\n4\n0\n0\n10\n",  # no mowers
        "0\n4\n1\n0,0,north\n0\n10\n",  # empty lawn
    ],
)
def test_malformed_scenarios_are_rejected(text):
    with pytest.raises(ConfigurationError):
        parse_scenario(text)


@pytest.mark.parametrize(
    "text, what",
    [
        ("5\n4\n-1\n0\n10\n", "mower count"),
        ("5\n4\n1\n0,0,north\n-3\n10\n", "obstacle count"),
    ],
)
def test_negative_counts_are_rejected(text, what):
    with pytest.raises(ConfigurationError, match=f"{what} cannot be negative"):
        parse_scenario(text)


def test_load_scenario_from_file(tmp_path):
    path = tmp_path / "yard.csv"
    path.write_text(VALID, encoding="utf-8")
    spec = load_scenario(path)
    assert spec.name == "yard"
    with pytest.raises(ConfigurationError):
        load_scenario(tmp_path / "missing.csv")


def test_bundled_scenario_file_parses():
    spec = load_scenario(ROOT / "scenarios" / "backyard.csv")
    assert len(spec.mowers) == 2
    assert spec.max_turns == 300


@pytest.mark.parametrize("name", list(scenario_presets().keys()))
def test_presets_keep_lawn_and_counters_consistent(name):
    spec = scenario_presets()[name]
    sim = Simulation(spec, config=SimConfig(seed=0))
    while not sim.is_finished:
        sim.step()
        assert sim.lawn.grass_count() == sim.grass_target - sim.grass_cut
        on_lawn = int((sim.lawn.squares == SquareContent.MOWER).sum())
        assert on_lawn == sim.active_mowers
        for mower in sim.mowers:
            assert mower.active == (mower.position is not None)
    report = sim.finish()
    assert 0 <= report.grass_cut <= report.grass_target
    assert report.turns_taken <= spec.max_turns


def test_renderer_output():
    spec = scenario_presets()["crater_corner"]
    sim = Simulation(spec, config=SimConfig(seed=0))
    assert render_lawn(sim.lawn) == "gg\nMc"
    moves = sim.step()
    assert describe_move(moves[0]) == "mower_1 is scanning while located at (0,0)"
    text = render_report(sim.finish())
    assert "Grass To Cut: 3" in text
    assert "mower_1: at (0, 0) facing EAST" in text
