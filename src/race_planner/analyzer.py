from race_planner.checkpoints import compute_checkpoints
from race_planner.models import ProfilePoint, ProfileSummary, RoutePlan
from race_planner.pacing import build_segments, estimate, total_distance
from race_planner.terrain import segment_terrain, summarize_terrain


def summarize_profile(points: list[ProfilePoint]) -> ProfileSummary:
    """Distance, cumulative gain/loss and elevation range of a profile."""
    if not points:
        return ProfileSummary(
            total_distance=0.0,
            elevation_gain=0.0,
            elevation_loss=0.0,
            max_elevation=0.0,
            min_elevation=0.0,
            point_count=0,
        )

    elevation_gain = 0.0
    elevation_loss = 0.0
    for i in range(1, len(points)):
        delta = points[i].elevation - points[i - 1].elevation
        if delta > 0:
            elevation_gain += delta
        else:
            elevation_loss += abs(delta)

    elevations = [p.elevation for p in points]
    return ProfileSummary(
        total_distance=total_distance(points),
        elevation_gain=elevation_gain,
        elevation_loss=elevation_loss,
        max_elevation=max(elevations),
        min_elevation=min(elevations),
        point_count=len(points),
    )


def plan_route(
    points: list[ProfilePoint],
    base_pace: float,
    checkpoint_distances: list[float] | None = None,
) -> RoutePlan:
    """Run every pacing calculation for a route at one flat-ground pace.

    Checkpoints are only computed when checkpoint_distances is given; pass an
    empty list to get just the finish. Segments, checkpoints and terrain runs
    are left empty when the total time has no valid estimate.
    """
    total_time = estimate(points, base_pace)
    plan = RoutePlan(
        summary=summarize_profile(points),
        base_pace=base_pace,
        total_time=total_time,
    )
    if not total_time.ok:
        return plan

    plan.segments = build_segments(points, base_pace)
    if checkpoint_distances is not None:
        plan.checkpoints = compute_checkpoints(points, base_pace, checkpoint_distances)
    plan.terrain_runs = segment_terrain(points, base_pace)
    plan.terrain_totals = summarize_terrain(plan.terrain_runs)
    return plan
