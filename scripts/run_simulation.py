import argparse
import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "src"))

from mower_sim import (  # noqa: E402
    ConfigurationError,
    RiskProfile,
    SimConfig,
    Simulation,
    load_scenario,
    scenario_presets,
)
from mower_sim.renderer import describe_move, render_lawn, render_report  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Run a lawn-mower swarm simulation.")
    parser.add_argument("scenario", nargs="?", default=None, help="Scenario file; omit to use --preset.")
    parser.add_argument("--preset", type=str, default="two_mower_field", choices=list(scenario_presets().keys()))
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        choices=[profile.value for profile in RiskProfile],
        help="Pin the risk profile instead of recomputing it every move.",
    )
    parser.add_argument("--throttle_moves", action="store_true", help="Allow one cautious advance per turn.")
    parser.add_argument("--log_path", type=str, default=None, help="Optional JSONL file for the final report.")
    parser.add_argument("--render_every", type=int, default=0, help="If >0, draw the lawn every N turns.")
    parser.add_argument("--quiet", action="store_true", help="Only print the final report.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        scenario = load_scenario(args.scenario) if args.scenario else scenario_presets()[args.preset]
        config = SimConfig(
            seed=args.seed,
            risk_profile=RiskProfile(args.profile) if args.profile else None,
            throttle_moves=args.throttle_moves,
            log_path=args.log_path,
        )
        sim = Simulation(scenario, config=config)
    except ConfigurationError as exc:
        print(f"Invalid scenario: {exc}", file=sys.stderr)
        sys.exit(2)

    print(f"Starting {scenario.name}: area {sim.lawn.area}, grass to cut {sim.grass_target}, "
          f"mowers {len(sim.mowers)}, turn limit {sim.max_turns}")
    while not sim.is_finished:
        moves = sim.step()
        if not args.quiet:
            print(f"Turn {sim.turns_taken} ({sim.risk_profile.name if sim.risk_profile else '-'}):")
            for move in moves:
                print(f"  {describe_move(move)}")
        if args.render_every and sim.turns_taken % args.render_every == 0:
            print(render_lawn(sim.lawn))

    print(render_report(sim.finish()))


if __name__ == "__main__":
    main()
