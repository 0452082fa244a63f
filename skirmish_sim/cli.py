from __future__ import annotations
import argparse, logging, sys
from typing import Any, Dict, List

import yaml

from .analysis import generate_unit_analysis
from .batch import score_engagement
from .config import DEFAULT_ENV_PREFIX, EngagementSettings, resolve_settings
from .engagement import simulate_engagement
from .parser import load_units
from .reports.run_report import EngagementReport, format_analysis, format_odds
from .units import UnitProfile

logger = logging.getLogger(__name__)

NOT_ENOUGH_UNITS = "Not enough units for combat simulation (requires at least 2)."


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m skirmish_sim.cli",
        description="Skirmish engagement simulator"
    )
    sub = p.add_subparsers(dest="cmd")

    # analyze
    an = sub.add_parser("analyze", help="Print probability tables for every unit")
    _add_common_args(an)

    # simulate
    sm = sub.add_parser("simulate", help="Analyse all units, then fight the first two")
    _add_common_args(sm)
    _add_engagement_args(sm)
    sm.add_argument("--report", type=str, default=None, help="Path to save report (.json or .md)")
    sm.add_argument("--print-md", action="store_true", help="Print Markdown report to stdout")

    # bench
    bn = sub.add_parser("bench", help="Run many seeded engagements and report the odds")
    _add_common_args(bn)
    _add_engagement_args(bn)
    bn.add_argument("--sims", type=int, default=None, help="Number of engagements")

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("units_file", help="Stat-block text file")
    ap.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    ap.add_argument("--env-prefix", type=str, default=DEFAULT_ENV_PREFIX, help="Env prefix for overrides")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def _add_engagement_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--distance", type=float, default=None, help="Starting distance in inches")
    ap.add_argument("--defender-first", action="store_true", help="Second unit acts first each turn")
    ap.add_argument("--seed", type=int, default=None)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    eng: Dict[str, Any] = {}
    if getattr(args, "distance", None) is not None:
        eng["starting_distance"] = args.distance
    if getattr(args, "defender_first", False):
        eng["attacker_first"] = False
    if getattr(args, "seed", None) is not None:
        eng["seed"] = args.seed
    out: Dict[str, Any] = {"engagement": eng}
    if args.cmd == "bench":
        bench: Dict[str, Any] = {}
        if args.sims is not None:
            bench["n_sims"] = args.sims
        if args.seed is not None:
            bench["seed"] = args.seed
        out["bench"] = bench
    return out


def _print_analysis(units: List[UnitProfile]) -> None:
    print("===============================")
    print("= UNIT PROBABILITY ANALYSIS =")
    print("===============================")
    for unit in units:
        print()
        print(format_analysis(unit, generate_unit_analysis(unit)))


def cmd_analyze(args: argparse.Namespace, units: List[UnitProfile], settings: EngagementSettings) -> int:
    _print_analysis(units)
    return 0


def cmd_simulate(args: argparse.Namespace, units: List[UnitProfile], settings: EngagementSettings) -> int:
    _print_analysis(units)
    if len(units) < 2:
        print(f"\n{NOT_ENOUGH_UNITS}", file=sys.stderr)
        return 0
    unit_a, unit_b = units[0], units[1]
    result = simulate_engagement(
        unit_a,
        unit_b,
        starting_distance=settings.starting_distance,
        attacker_first=settings.attacker_first,
        seed=settings.seed,
    )
    report = EngagementReport.from_result(
        unit_a,
        unit_b,
        result,
        starting_distance=settings.starting_distance,
        attacker_first=settings.attacker_first,
        seed=settings.seed,
    )
    print("\n\n============================")
    print("= COMBAT SIMULATION      =")
    print("============================")
    print()
    print(report.to_text())
    if args.print_md:
        print()
        print(report.to_markdown())
    if args.report:
        report.save(args.report)
        logger.info("report written to %s", args.report)
    return 0


def cmd_bench(args: argparse.Namespace, units: List[UnitProfile], settings: EngagementSettings) -> int:
    if len(units) < 2:
        print(NOT_ENOUGH_UNITS, file=sys.stderr)
        return 0
    unit_a, unit_b = units[0], units[1]
    odds = score_engagement(
        unit_a,
        unit_b,
        n_sims=settings.n_sims,
        seed=settings.bench_seed,
        starting_distance=settings.starting_distance,
        attacker_first=settings.attacker_first,
    )
    print(format_odds(unit_a, unit_b, odds))
    return 0


_COMMANDS = {
    "analyze": cmd_analyze,
    "simulate": cmd_simulate,
    "bench": cmd_bench,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = resolve_settings(args.config, prefix=args.env_prefix, cli=_cli_overrides(args))
        units = load_units(args.units_file)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    logger.debug("parsed %d units from %s", len(units), args.units_file)
    return _COMMANDS[args.cmd](args, units, settings)


if __name__ == "__main__":
    sys.exit(main())
