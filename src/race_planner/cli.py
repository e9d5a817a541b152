import argparse
import logging
import sys

from race_planner import __version__, __version_date__
from race_planner.analyzer import plan_route
from race_planner.checkpoints import uniform_checkpoint_distances
from race_planner.config import _load_config
from race_planner.formatters import (
    format_pace,
    format_split_time,
    format_time,
    parse_pace,
    parse_target_time,
)
from race_planner.models import RoutePlan, TerrainType
from race_planner.pacing import solve_required_pace
from race_planner.profile import ProfileError, load_profile

logger = logging.getLogger(__name__)

# Default values for CLI options
DEFAULTS = {
    "pace": "5:00",
    "uniform_checkpoints": 0,
}


def _config_int(config: dict, key: str) -> int:
    """Integer option from config, falling back to the default when malformed."""
    value = config.get(key, DEFAULTS[key])
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring config %s=%r: not an integer", key, value)
        return DEFAULTS[key]


def build_parser(config: dict | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if config is None:
        config = {}

    parser = argparse.ArgumentParser(
        description="Estimate finish time, checkpoints and terrain splits for a running route."
    )
    parser.add_argument("profile_file", help="Path to a .json or .csv distance/elevation profile")
    pace_group = parser.add_mutually_exclusive_group()
    pace_group.add_argument(
        "--pace",
        default=None,
        help=f"Flat-ground pace as M:SS per km (default: {config.get('pace', DEFAULTS['pace'])})",
    )
    pace_group.add_argument(
        "--target",
        default=None,
        help="Target finish time as H:MM; the required flat-ground pace is solved for",
    )
    parser.add_argument(
        "--checkpoints",
        default="",
        help="Comma-separated checkpoint distances in km, e.g. 10,21.1,30",
    )
    parser.add_argument(
        "--uniform",
        type=int,
        default=_config_int(config, "uniform_checkpoints"),
        help=f"Add N evenly spaced checkpoints (default: {DEFAULTS['uniform_checkpoints']})",
    )
    parser.add_argument(
        "--terrain",
        action="store_true",
        help="List every ascent/descent/flat run, not just the totals",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def parse_distances(value: str) -> list[float]:
    """Parse a comma-separated list of km values; blank items are skipped."""
    distances = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            distances.append(float(item))
        except ValueError:
            raise ValueError(f"Invalid checkpoint distance {item!r}") from None
    return distances


def _resolve_pace_source(args: argparse.Namespace, config: dict) -> tuple[str, str]:
    """Return ("target", H:MM) or ("pace", M:SS); CLI flags win over config."""
    if args.target:
        return "target", args.target
    if args.pace:
        return "pace", args.pace
    if config.get("target"):
        return "target", config["target"]
    return "pace", config.get("pace", DEFAULTS["pace"])


def format_plan_report(plan: RoutePlan, show_runs: bool = False) -> str:
    """Render a route plan as a plain-text report."""
    summary = plan.summary
    total_minutes = plan.total_time.value
    lines = [
        f"Distance:       {summary.total_distance:.2f} km",
        f"Elevation Gain: {summary.elevation_gain:.0f} m",
        f"Elevation Loss: {summary.elevation_loss:.0f} m",
        f"Elevation:      {summary.min_elevation:.0f} - {summary.max_elevation:.0f} m",
        f"Base Pace:      {format_pace(plan.base_pace)}",
        f"Est. Time:      {format_time(total_minutes)}",
        f"Avg Pace:       {format_pace(total_minutes / summary.total_distance)}",
    ]

    if plan.checkpoints:
        lines.append("")
        lines.append("Checkpoints:")
        lines.append(f"  {'km':>7}  {'elev':>6}  {'time':>8}  {'pace':>13}  {'grade':>6}  terrain")
        for cp in plan.checkpoints:
            grade = f"{cp.grade:+.1f}%" if cp.grade is not None else ""
            lines.append(
                f"  {cp.distance:7.2f}  {cp.elevation:6.0f}  {format_time(cp.total_time):>8}  "
                f"{format_pace(cp.pace):>13}  {grade:>6}  {cp.label}"
            )

    lines.append("")
    lines.append("Terrain:")
    for terrain in TerrainType:
        totals = plan.terrain_totals.get(terrain)
        if totals is None:
            continue
        lines.append(
            f"  {terrain.value:<8} {totals.distance:7.2f} km  {totals.elevation:6.0f} m  "
            f"{format_split_time(totals.time):>8}  ({totals.count} runs)"
        )

    if show_runs:
        lines.append("")
        lines.append("Terrain runs:")
        for run in plan.terrain_runs:
            lines.append(
                f"  {run.start_distance:6.2f}-{run.end_distance:6.2f} km  {run.terrain.value:<8} "
                f"{run.elevation_change:+6.0f} m  {run.average_grade:+5.1f}%  "
                f"{format_pace(run.average_pace):>13}  {format_split_time(run.estimated_time):>8}"
            )

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    config = _load_config()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        points = load_profile(args.profile_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.profile_file}", file=sys.stderr)
        sys.exit(1)
    except ProfileError as e:
        print(f"Error reading profile: {e}", file=sys.stderr)
        sys.exit(1)

    if len(points) < 2:
        print("Error: Profile contains fewer than 2 points.", file=sys.stderr)
        sys.exit(1)

    try:
        checkpoint_distances = parse_distances(args.checkpoints)
        source, value = _resolve_pace_source(args, config)
        if source == "target":
            target_minutes = parse_target_time(value)
        else:
            base_pace = parse_pace(value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    target_line = None
    if source == "target":
        solution = solve_required_pace(points, target_minutes)
        if not solution.ok:
            print(f"Error: Cannot solve pace: {solution.reason}", file=sys.stderr)
            sys.exit(1)
        base_pace = solution.pace
        target_line = f"Required pace for {value}: {format_pace(solution.pace)}"
        if not solution.converged:
            target_line += f" (not converged, {format_time(solution.estimated_minutes)})"

    route_km = points[-1].distance
    checkpoint_distances += uniform_checkpoint_distances(route_km, args.uniform)

    plan = plan_route(points, base_pace, checkpoint_distances)
    if not plan.total_time.ok:
        print(f"Error: No estimate: {plan.total_time.reason}", file=sys.stderr)
        sys.exit(1)

    print(f"=== Race Plan {__version__} ({__version_date__}) ===")
    if target_line:
        print(target_line)
    print(format_plan_report(plan, show_runs=args.terrain))


if __name__ == "__main__":
    main()
