"""Segment time accumulation and required-pace solving."""

import logging

from race_planner.grade import pace_factor, segment_grade
from race_planner.models import Estimate, EstimateStatus, PaceSolution, ProfilePoint, Segment

logger = logging.getLogger(__name__)

# Required-pace solver tuning. Both values are arbitrary but kept stable so
# results stay comparable across versions.
MAX_SOLVER_ITERATIONS = 10
SOLVER_TOLERANCE_MINUTES = 0.5  # 30 seconds
SOLVER_DAMPING = 0.5


def total_distance(points: list[ProfilePoint]) -> float:
    """Route length in km (distance of the last point)."""
    return points[-1].distance if points else 0.0


def check_profile(points: list[ProfilePoint]) -> tuple[EstimateStatus, str]:
    """Classify a profile as usable, zero-length or malformed.

    Returns (status, reason); reason is empty for OK profiles.
    """
    if len(points) < 2:
        return EstimateStatus.INVALID, "profile needs at least 2 points"
    for i in range(1, len(points)):
        if points[i].distance < points[i - 1].distance:
            return EstimateStatus.INVALID, f"distance decreases at point {i}"
    if total_distance(points) <= 0:
        return EstimateStatus.EMPTY, "route has zero length"
    return EstimateStatus.OK, ""


def build_segments(points: list[ProfilePoint], base_pace: float) -> list[Segment]:
    """Break a profile into segments with grade, pace and time for each."""
    if len(points) < 2:
        return []

    segments = []
    for i in range(1, len(points)):
        prev, current = points[i - 1], points[i]
        distance = current.distance - prev.distance
        elevation_change = current.elevation - prev.elevation
        grade = segment_grade(distance, elevation_change)
        factor = pace_factor(grade)
        pace = base_pace * factor
        segments.append(Segment(
            start_index=i - 1,
            end_distance=current.distance,
            distance=distance,
            elevation_change=elevation_change,
            grade=grade,
            pace_factor=factor,
            pace=pace,
            time_minutes=distance * pace,
        ))
    return segments


def estimate_time(points: list[ProfilePoint], base_pace: float) -> float:
    """Estimated total time in minutes for a flat-ground pace in min/km.

    Each segment's time is distance * base_pace * pace_factor(grade).
    Returns 0.0 when the profile has fewer than 2 points.
    """
    if len(points) < 2:
        return 0.0

    total_minutes = 0.0
    for i in range(1, len(points)):
        distance = points[i].distance - points[i - 1].distance
        grade = segment_grade(distance, points[i].elevation - points[i - 1].elevation)
        total_minutes += distance * base_pace * pace_factor(grade)
    return total_minutes


def estimate(points: list[ProfilePoint], base_pace: float) -> Estimate:
    """Like estimate_time, but says why no estimate is available."""
    status, reason = check_profile(points)
    if status is EstimateStatus.INVALID:
        return Estimate(status=status, reason=reason)
    if base_pace <= 0:
        return Estimate(status=EstimateStatus.INVALID, reason="pace must be positive")
    if status is EstimateStatus.EMPTY:
        return Estimate(status=status, reason=reason)
    return Estimate(status=EstimateStatus.OK, value=estimate_time(points, base_pace))


def _refine_pace(points: list[ProfilePoint], target_minutes: float) -> tuple[float, float, int, bool]:
    """Damped proportional correction of the flat-terrain pace guess.

    Returns (pace, estimated_minutes, iterations, converged).
    """
    pace = target_minutes / total_distance(points)
    for iteration in range(1, MAX_SOLVER_ITERATIONS + 1):
        estimated = estimate_time(points, pace)
        diff = estimated - target_minutes
        if abs(diff) < SOLVER_TOLERANCE_MINUTES:
            return pace, estimated, iteration, True
        pace *= 1 - (diff / estimated) * SOLVER_DAMPING
    return pace, estimate_time(points, pace), MAX_SOLVER_ITERATIONS, False


def solve_pace(points: list[ProfilePoint], target_minutes: float) -> float:
    """Flat-ground pace (min/km) needed to finish in target_minutes.

    Starts from the flat-terrain guess and applies at most
    MAX_SOLVER_ITERATIONS damped corrections. Whatever pace is reached is
    returned, even if the tolerance was not met. Returns 0.0 for fewer than
    2 points, a non-positive target or a zero-length route.
    """
    if len(points) < 2 or target_minutes <= 0 or total_distance(points) <= 0:
        return 0.0
    pace, _, _, _ = _refine_pace(points, target_minutes)
    return pace


def solve_required_pace(points: list[ProfilePoint], target_minutes: float) -> PaceSolution:
    """Run the required-pace solver and report how it went."""
    status, reason = check_profile(points)
    if status is EstimateStatus.INVALID:
        return PaceSolution(status=status, reason=reason)
    if target_minutes <= 0:
        return PaceSolution(status=EstimateStatus.INVALID, reason="target time must be positive")
    if status is EstimateStatus.EMPTY:
        return PaceSolution(status=status, reason=reason)

    pace, estimated, iterations, converged = _refine_pace(points, target_minutes)
    if not converged:
        logger.warning(
            "Pace solver stopped after %d iterations %.2f min from target",
            iterations,
            estimated - target_minutes,
        )
    return PaceSolution(
        status=EstimateStatus.OK,
        pace=pace,
        estimated_minutes=estimated,
        iterations=iterations,
        converged=converged,
    )
