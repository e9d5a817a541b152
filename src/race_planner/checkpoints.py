"""Checkpoint interpolation along a route profile.

Checkpoints are resolved in a single forward pass over the profile: each
query distance is interpolated linearly inside the segment that contains it,
so elevation and elapsed time vary continuously along the route while pace
and grade are those of the owning segment.
"""

import logging

from race_planner.grade import classify_grade, pace_factor, segment_grade
from race_planner.models import Checkpoint, ProfilePoint
from race_planner.pacing import estimate_time, total_distance

logger = logging.getLogger(__name__)

# Grade band (percent) labelled as flat at a checkpoint
CHECKPOINT_FLAT_THRESHOLD = 1.0

FINISH_LABEL = "finish"


def compute_checkpoints(
    points: list[ProfilePoint],
    base_pace: float,
    distances: list[float],
) -> list[Checkpoint]:
    """Interpolate elevation, elapsed time and pace at the given distances.

    Args:
        points: Route profile (km, meters)
        base_pace: Flat-ground pace in min/km
        distances: Query distances in km, in any order

    Returns:
        Checkpoints in ascending distance order, one per distinct query inside
        [0, route length], followed by a "finish" checkpoint unless the last
        query already sits on the finish line. Empty for profiles with fewer
        than 2 points or zero length.
    """
    if len(points) < 2:
        return []
    route_distance = total_distance(points)
    if route_distance <= 0:
        return []

    requested = set(distances)
    queries = sorted(d for d in requested if 0 <= d <= route_distance)
    if len(queries) < len(requested):
        logger.debug(
            "Dropped %d checkpoint distances outside 0-%.2f km",
            len(requested) - len(queries),
            route_distance,
        )

    checkpoints: list[Checkpoint] = []
    next_query = 0
    elapsed = 0.0  # minutes at the start of the current segment

    for i in range(1, len(points)):
        if next_query >= len(queries):
            break

        prev, current = points[i - 1], points[i]
        seg_distance = current.distance - prev.distance
        elevation_change = current.elevation - prev.elevation
        grade = segment_grade(seg_distance, elevation_change)
        pace = base_pace * pace_factor(grade)
        seg_time = seg_distance * pace
        label = classify_grade(grade, CHECKPOINT_FLAT_THRESHOLD).value

        while next_query < len(queries) and queries[next_query] <= current.distance:
            query = queries[next_query]
            if query == current.distance:
                # Exactly on a vertex: no interpolation error
                elevation = current.elevation
                time_at = elapsed + seg_time
            else:
                ratio = (query - prev.distance) / seg_distance if seg_distance > 0 else 0.0
                ratio = max(ratio, 0.0)
                elevation = prev.elevation + ratio * elevation_change
                time_at = elapsed + ratio * seg_time

            checkpoints.append(Checkpoint(
                distance=query,
                elevation=elevation,
                total_time=time_at,
                pace=pace,
                grade=grade,
                label=label,
            ))
            next_query += 1

        elapsed += seg_time

    if not queries or queries[-1] < route_distance:
        finish_time = estimate_time(points, base_pace)
        checkpoints.append(Checkpoint(
            distance=route_distance,
            elevation=points[-1].elevation,
            total_time=finish_time,
            pace=finish_time / route_distance,
            grade=None,
            label=FINISH_LABEL,
        ))

    return checkpoints


def uniform_checkpoint_distances(route_distance: float, count: int) -> list[float]:
    """Return `count` evenly spaced interior distances, rounded to 10 m."""
    if count <= 0 or route_distance <= 0:
        return []
    interval = route_distance / (count + 1)
    return [round(interval * i, 2) for i in range(1, count + 1)]
