"""Terrain segmentation of a route into ascent, descent and flat runs.

Consecutive segments of the same class are merged into a run. A change of
class only opens a new run when the current run is already long enough or
the transition is steep, so single noisy samples do not fragment the route.
"""

from race_planner.grade import classify_grade, segment_grade
from race_planner.models import ProfilePoint, Segment, TerrainRun, TerrainTotals, TerrainType
from race_planner.pacing import build_segments

# Grade band (percent) treated as flat when classifying segments
TERRAIN_FLAT_THRESHOLD = 1.0

# A class change starts a new run only if the current run holds more than
# this many points...
MIN_RUN_POINTS = 3
# ...or the transition segment is steeper than this (percent)
BREAKAWAY_GRADE = 3.0


def _build_run(
    points: list[ProfilePoint],
    segments: list[Segment],
    terrain: TerrainType,
    start_index: int,
    end_index: int,
    base_pace: float,
) -> TerrainRun:
    first = points[start_index]
    last = points[end_index]
    distance = last.distance - first.distance
    elevation_change = last.elevation - first.elevation

    average_pace = base_pace
    estimated_time = 0.0
    if distance > 0:
        run_segments = segments[start_index:end_index]
        average_pace = sum(s.pace for s in run_segments) / len(run_segments)
        estimated_time = distance * average_pace

    return TerrainRun(
        terrain=terrain,
        start_index=start_index,
        end_index=end_index,
        start_distance=first.distance,
        end_distance=last.distance,
        start_elevation=first.elevation,
        end_elevation=last.elevation,
        distance=distance,
        elevation_change=elevation_change,
        average_grade=segment_grade(distance, elevation_change),
        average_pace=average_pace,
        estimated_time=estimated_time,
    )


def segment_terrain(points: list[ProfilePoint], base_pace: float) -> list[TerrainRun]:
    """Split a profile into contiguous ascent/descent/flat runs.

    Runs share their boundary point, so together they cover every segment
    exactly once. Average pace is the mean of the run's segment paces and
    estimated time is run distance times that pace.

    Returns an empty list for profiles with fewer than 2 points.
    """
    if len(points) < 2:
        return []

    segments = build_segments(points, base_pace)
    runs: list[TerrainRun] = []
    current_type: TerrainType | None = None
    run_start = 0

    for i in range(1, len(points)):
        seg = segments[i - 1]
        seg_type = classify_grade(seg.grade, TERRAIN_FLAT_THRESHOLD)

        if current_type is None:
            current_type = seg_type
            continue

        # Points already in the run: run_start .. i-1
        run_points = i - run_start
        if seg_type != current_type and (run_points > MIN_RUN_POINTS or abs(seg.grade) > BREAKAWAY_GRADE):
            runs.append(_build_run(points, segments, current_type, run_start, i - 1, base_pace))
            current_type = seg_type
            run_start = i - 1

    runs.append(_build_run(points, segments, current_type, run_start, len(points) - 1, base_pace))
    return runs


def summarize_terrain(runs: list[TerrainRun]) -> dict[TerrainType, TerrainTotals]:
    """Total distance, absolute elevation change, time and run count per class."""
    totals = {terrain: TerrainTotals(terrain=terrain) for terrain in TerrainType}
    for run in runs:
        t = totals[run.terrain]
        t.distance += run.distance
        t.elevation += abs(run.elevation_change)
        t.time += run.estimated_time
        t.count += 1
    return totals
