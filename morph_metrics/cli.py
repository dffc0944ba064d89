"""Command line front end for the morph generators.

Three subcommands wrap the generators in :mod:`morph_metrics.generators`:

``point``
    Find one morph a given distance from ``--v1``.
``set``
    Find several distinct morphs at that distance.
``path``
    Build a metric path from ``--v1`` to ``--v2``.

Search parameters start from the JSON settings file (see
:mod:`morph_metrics.settings`) and are overridden by command line options.
``--save-settings`` writes the merged values back to that file.
Results are printed as JSON together with the distances actually achieved,
since the searches do not guarantee they meet their targets.

Example
-------
Running ``python -m morph_metrics point --v1 1,2,3,4 --distance 0.5 --seed 7``
prints a morph roughly 0.5 away from ``[1, 2, 3, 4]`` under the Euclidean
metric. Invalid input is logged and the process exits with status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .dist_config import call_metric
from .generators import (
    ConstraintNotSatisfiedError,
    find_point_at_distance,
    metric_path,
    set_at_distance,
)
from .metrics import METRICS, SEARCH_FUNCTIONS, get_metric, get_search_function
from .settings import (
    DEFAULT_SETTINGS_FILE,
    load_settings,
    save_settings,
    search_options_from_settings,
)

__all__ = ["run_cli", "main"]


def _parse_vector(text: str) -> List[float]:
    """Parse a comma-separated list of numbers such as ``"1,2,3.5"``."""

    parts = [part.strip() for part in text.split(",") if part.strip()]
    if not parts:
        raise ValueError("Vectors must contain at least one number.")
    try:
        return [float(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Invalid vector: {text!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--v1", type=str, required=True, help="Reference morph, e.g. 1,2,3,4")
    common.add_argument("--metric", type=str, default="euclidean", help="Registered metric name (default: euclidean)")
    common.add_argument("--engine", type=str, default="hill_climb_stochastic", help="Registered search engine name")
    common.add_argument("--seed", type=int, help="Random seed for reproducible searches")
    common.add_argument("--epsilon", type=float, help="Success threshold for the objective")
    common.add_argument("--min-step", type=float, help="Minimum search step size")
    common.add_argument("--start-step", type=float, help="Initial search step size")
    common.add_argument("--max-iterations", type=int, help="Iteration budget per search")
    common.add_argument("--step-subtract", type=float, help="Linear step decrement for the stochastic engine")
    common.add_argument("--max-retries", type=int, default=100, help="Searches allowed per point before giving up")
    common.add_argument("--allow-duplicates", action="store_true", help="Accept morphs with repeated coordinates")

    parser = argparse.ArgumentParser(
        description="Generate morphs at prescribed distances under a morphological metric."
    )
    parser.add_argument("--list-metrics", action="store_true", help="List registered metrics and search engines and exit")
    parser.add_argument("--settings-file", type=str, help="Path to the JSON settings file")
    parser.add_argument("--save-settings", action="store_true", help="Store the effective search options in the settings file")
    parser.add_argument("--verbose", action="store_true", help="Log search progress")
    sub = parser.add_subparsers(dest="command")

    point = sub.add_parser("point", parents=[common], help="Find one morph at a distance")
    point.add_argument("--distance", type=float, required=True, help="Target distance from --v1")

    points = sub.add_parser("set", parents=[common], help="Find several morphs at a distance")
    points.add_argument("--distance", type=float, required=True, help="Target distance from --v1")
    points.add_argument("--set-size", type=int, default=10, help="Number of morphs to collect (default: 10)")
    points.add_argument("--max-failures", type=int, default=1000, help="Duplicate results tolerated (default: 1000)")

    path = sub.add_parser("path", parents=[common], help="Build a metric path between two morphs")
    path.add_argument("--v2", type=str, required=True, help="Target morph, same length as --v1")
    path.add_argument("--steps", type=int, default=10, help="Morphs generated after --v1 (default: 10)")
    path.add_argument("--tightness", type=float, default=1.0, help="Euclidean tightness (default: 1.0)")
    path.add_argument("--cheat", action="store_true", help="Force the final morph to equal --v2")
    path.add_argument("--stats", action="store_true", help="Log per-step statistics")
    path.add_argument("--reject-duplicates", action="store_true", help="Re-run searches that return repeated coordinates")
    return parser


def _settings_path(args: argparse.Namespace) -> Path:
    return Path(args.settings_file).expanduser() if args.settings_file else DEFAULT_SETTINGS_FILE


def _search_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge saved settings with command line overrides."""

    settings = load_settings(_settings_path(args))
    overrides = {
        "seed": args.seed,
        "epsilon": args.epsilon,
        "min_step_size": args.min_step,
        "start_step_size": args.start_step,
        "max_iterations": args.max_iterations,
        "step_size_subtract": args.step_subtract,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return settings


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    """Parse ``argv`` and run the requested generator.

    Validation problems (malformed vectors, unknown metrics, invalid search
    options) are logged with ``logging.error`` and terminate the process
    with exit status ``1``.
    """

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("morph_metrics").setLevel(logging.DEBUG)

    if args.list_metrics:
        print("metrics: " + ", ".join(sorted(METRICS)))
        print("engines: " + ", ".join(sorted(SEARCH_FUNCTIONS)))
        return
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        metric = get_metric(args.metric)
        engine = get_search_function(args.engine)
    except KeyError as exc:
        logging.error(exc.args[0])
        sys.exit(1)

    try:
        v1 = _parse_vector(args.v1)
        v2 = _parse_vector(args.v2) if args.command == "path" else None
        search_settings = _search_settings(args)
        options = search_options_from_settings(search_settings)
    except (TypeError, ValueError) as exc:
        logging.error(str(exc))
        sys.exit(1)

    if args.save_settings:
        save_settings(search_settings, _settings_path(args))
        logging.info("Settings saved to %s", _settings_path(args))

    if args.seed is not None:
        logging.info("Using random seed %d", args.seed)

    try:
        if args.command == "point":
            point = find_point_at_distance(
                v1,
                args.distance,
                metric,
                search_func=engine,
                search_opts=options,
                allow_duplicates=args.allow_duplicates,
                max_retries=args.max_retries,
            )
            result = {
                "point": point.tolist(),
                "distance": call_metric(metric, v1, point),
            }
        elif args.command == "set":
            points = set_at_distance(
                v1,
                args.distance,
                metric,
                set_size=args.set_size,
                max_failures=args.max_failures,
                search_func=engine,
                search_opts=options,
                allow_duplicates=args.allow_duplicates,
                max_retries=args.max_retries,
            )
            result = {
                "points": [p.tolist() for p in points],
                "distances": [call_metric(metric, v1, p) for p in points],
            }
        else:
            path = metric_path(
                v1,
                v2,
                metric,
                steps=args.steps,
                cheat=args.cheat,
                euclidean_tightness=args.tightness,
                allow_duplicates=not args.reject_duplicates,
                search_func=engine,
                search_opts=options,
                max_retries=args.max_retries,
                print_stats=args.stats,
            )
            result = {
                "path": [p.tolist() for p in path],
                "distances_from_v1": [call_metric(metric, v1, p) for p in path],
            }
    except ValueError as exc:
        logging.error(str(exc))
        sys.exit(1)
    except ConstraintNotSatisfiedError as exc:
        logging.error("Search failed: %s", exc)
        sys.exit(1)

    print(json.dumps(result))
    logging.info("%s search complete.", args.command)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point that configures logging and runs the CLI."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli(argv)
