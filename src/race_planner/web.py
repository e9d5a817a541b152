"""JSON web API exposing the pacing calculations.

Every endpoint takes a JSON body with the route under "points" (records with
"distance"/"elevation" or "lat"/"lon"/"elevation") and answers with plain
JSON. Malformed input gets a 400 with an "error" message.
"""

import math
import os
from dataclasses import asdict

from flask import Flask, jsonify, request

from race_planner import __version__, __version_date__, get_git_hash
from race_planner.analyzer import plan_route
from race_planner.checkpoints import compute_checkpoints, uniform_checkpoint_distances
from race_planner.config import _load_config
from race_planner.formatters import format_pace, format_time, parse_pace, parse_target_time
from race_planner.models import Checkpoint, ProfilePoint, RoutePlan, TerrainRun
from race_planner.pacing import estimate, solve_required_pace, total_distance
from race_planner.profile import profile_from_records
from race_planner.terrain import segment_terrain, summarize_terrain

DEFAULT_PACE = "5:00"

app = Flask(__name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _read_points(body: dict) -> list[ProfilePoint]:
    if "points" not in body:
        raise ValueError("Missing 'points'")
    return profile_from_records(body["points"])


def _read_pace(body: dict) -> float:
    """Pace from "pace" (M:SS string or number) or "base_pace", else config default."""
    value = body.get("pace", body.get("base_pace"))
    if value is None:
        value = (_load_config() or {}).get("pace", DEFAULT_PACE)
    if isinstance(value, str):
        pace = parse_pace(value)
    else:
        try:
            pace = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid pace {value!r}") from None
    if not math.isfinite(pace) or pace <= 0:
        raise ValueError("pace must be positive")
    return pace


def _read_target_minutes(body: dict) -> float:
    if "target_minutes" in body:
        try:
            return float(body["target_minutes"])
        except (TypeError, ValueError):
            raise ValueError(f"Invalid target_minutes {body['target_minutes']!r}") from None
    if "target_time" in body:
        return parse_target_time(str(body["target_time"]))
    raise ValueError("Missing 'target_time' or 'target_minutes'")


def _read_distances(body: dict, route_distance: float) -> list[float]:
    raw = body.get("distances", [])
    if not isinstance(raw, list):
        raise ValueError("'distances' must be a list of km values")
    try:
        distances = [float(d) for d in raw]
        uniform = int(body.get("uniform", 0))
    except (TypeError, ValueError):
        raise ValueError("Checkpoint distances must be numbers") from None
    return distances + uniform_checkpoint_distances(route_distance, uniform)


def _checkpoint_json(cp: Checkpoint) -> dict:
    data = asdict(cp)
    data["formatted_time"] = format_time(cp.total_time)
    data["formatted_pace"] = format_pace(cp.pace)
    return data


def _run_json(run: TerrainRun) -> dict:
    data = asdict(run)
    data["terrain"] = run.terrain.value
    data["segment_count"] = run.segment_count
    return data


def _totals_json(runs: list[TerrainRun]) -> dict:
    return {
        terrain.value: {
            "distance": t.distance,
            "elevation": t.elevation,
            "time": t.time,
            "count": t.count,
        }
        for terrain, t in summarize_terrain(runs).items()
    }


def _plan_json(plan: RoutePlan) -> dict:
    return {
        "summary": asdict(plan.summary),
        "base_pace": plan.base_pace,
        "status": plan.total_time.status.value,
        "reason": plan.total_time.reason,
        "total_minutes": plan.total_time.value,
        "segments": [asdict(s) for s in plan.segments],
        "checkpoints": [_checkpoint_json(cp) for cp in plan.checkpoints],
        "terrain_runs": [_run_json(r) for r in plan.terrain_runs],
        "terrain_totals": _totals_json(plan.terrain_runs) if plan.terrain_runs else {},
    }


@app.route("/api/health")
def api_health():
    return jsonify({
        "status": "ok",
        "version": __version__,
        "version_date": __version_date__,
        "git_hash": get_git_hash(),
    })


@app.route("/api/estimate", methods=["POST"])
def api_estimate():
    """Total time for a flat-ground pace."""
    try:
        body = _json_body()
        points = _read_points(body)
        pace = _read_pace(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    result = estimate(points, pace)
    return jsonify({
        "status": result.status.value,
        "reason": result.reason,
        "total_minutes": result.value,
        "formatted_time": format_time(result.value) if result.ok else None,
    })


@app.route("/api/required-pace", methods=["POST"])
def api_required_pace():
    """Flat-ground pace needed to hit a target time."""
    try:
        body = _json_body()
        points = _read_points(body)
        target_minutes = _read_target_minutes(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    solution = solve_required_pace(points, target_minutes)
    data = asdict(solution)
    data["status"] = solution.status.value
    data["formatted_pace"] = format_pace(solution.pace) if solution.ok else None
    return jsonify(data)


@app.route("/api/checkpoints", methods=["POST"])
def api_checkpoints():
    try:
        body = _json_body()
        points = _read_points(body)
        pace = _read_pace(body)
        distances = _read_distances(body, total_distance(points))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    checkpoints = compute_checkpoints(points, pace, distances)
    return jsonify({"checkpoints": [_checkpoint_json(cp) for cp in checkpoints]})


@app.route("/api/terrain", methods=["POST"])
def api_terrain():
    try:
        body = _json_body()
        points = _read_points(body)
        pace = _read_pace(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    runs = segment_terrain(points, pace)
    return jsonify({
        "runs": [_run_json(r) for r in runs],
        "totals": _totals_json(runs) if runs else {},
    })


@app.route("/api/plan", methods=["POST"])
def api_plan():
    """Everything at once; solves for pace first when a target time is given."""
    try:
        body = _json_body()
        points = _read_points(body)
        solution = None
        if "target_time" in body or "target_minutes" in body:
            solution = solve_required_pace(points, _read_target_minutes(body))
            if not solution.ok:
                return jsonify({"error": f"Cannot solve pace: {solution.reason}"}), 400
            pace = solution.pace
        else:
            pace = _read_pace(body)
        distances = _read_distances(body, total_distance(points)) if "distances" in body or "uniform" in body else None
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    data = _plan_json(plan_route(points, pace, distances))
    if solution is not None:
        data["converged"] = solution.converged
        data["iterations"] = solution.iterations
    return jsonify(data)


def main():
    """Run the web server."""
    port = int(os.environ.get("PORT", 5050))
    print("Starting Race Planner API server...")
    print(f"Listening on http://localhost:{port}/api/health")
    app.run(host="0.0.0.0", port=port, debug=True)


if __name__ == "__main__":
    main()
