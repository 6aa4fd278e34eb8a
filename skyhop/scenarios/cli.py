"""skyhop/scenarios/cli — Command-line runner for scenario files.

Usage::

    skyhop-scenarios scenarios/climber_reaches_300.yaml
    skyhop-scenarios --all
    skyhop-scenarios --all --agent idle --seed 7
    skyhop-scenarios --all -o results/run_001.json --trajectory

Exits 0 when every scenario passes, 1 when any fails, 2 on bad usage.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from skyhop.debug import DEBUG
from skyhop.scenarios.loader import ScenarioDef, load_scenarios
from skyhop.scenarios.output import print_outcome, print_summary, save_results
from skyhop.scenarios.runner import run_scenario

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skyhop-scenarios", description="Run Skyhop scenarios headlessly",
    )
    parser.add_argument("scenarios", nargs="*", type=Path, help="Scenario YAML files")
    parser.add_argument("--all", action="store_true", help="Run every scenario in scenarios/")
    parser.add_argument("--agent", help="Play every scenario with this agent instead")
    parser.add_argument("--seed", type=int, help="Play every scenario on this ladder seed")
    parser.add_argument("--output", "-o", type=Path, help="Write results JSON here")
    parser.add_argument(
        "--trajectory", action="store_true", help="Include per-frame records in the JSON",
    )
    return parser


def _apply_overrides(sd: ScenarioDef, args: argparse.Namespace) -> ScenarioDef:
    changes: dict = {}
    if args.agent:
        changes.update(agent=args.agent, agent_params=None)
    if args.seed is not None:
        changes["seed"] = args.seed
    return dataclasses.replace(sd, **changes) if changes else sd


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.scenarios and not args.all:
        parser.print_usage(sys.stderr)
        sys.exit(2)

    defs = load_scenarios(paths=args.scenarios or None, run_all=args.all)
    results = []
    for sd in defs:
        sd = _apply_overrides(sd, args)
        logger.debug("running %s (agent=%s seed=%s)", sd.name, sd.agent, sd.seed)
        outcome = run_scenario(sd)
        print_outcome(outcome)
        results.append(outcome)
    print_summary(results)

    if args.output:
        save_results(results, args.output, include_trajectory=args.trajectory)

    sys.exit(0 if all(r.success for r in results) else 1)


if __name__ == "__main__":
    main()
