"""Grade-dependent pace adjustment.

Pace factors multiply the flat-ground pace. Each bucket is listed by its upper
bound; a grade exactly on a bound belongs to the lower, less extreme bucket.
"""

from race_planner.models import TerrainType

# (upper bound in percent, factor); last bucket is open-ended
UPHILL_FACTORS = [
    (5.0, 1.05),
    (10.0, 1.15),
    (15.0, 1.25),
    (20.0, 1.35),
    (float("inf"), 1.50),
]

DOWNHILL_FACTORS = [
    (5.0, 0.95),
    (10.0, 0.90),
    (15.0, 0.85),
    (20.0, 0.82),
    (float("inf"), 0.80),
]

FLAT_FACTOR = 1.0


def _bucket_factor(abs_grade: float, buckets: list[tuple[float, float]]) -> float:
    for upper, factor in buckets:
        if abs_grade <= upper:
            return factor
    return buckets[-1][1]


def pace_factor(grade: float) -> float:
    """Return the pace multiplier for a grade in percent.

    Positive grades slow the runner down (up to +50%), negative grades speed
    them up (down to -20%). A grade of exactly 0 is neutral.
    """
    if grade > 0:
        return _bucket_factor(grade, UPHILL_FACTORS)
    if grade < 0:
        return _bucket_factor(abs(grade), DOWNHILL_FACTORS)
    return FLAT_FACTOR


def segment_grade(distance_km: float, elevation_change_m: float) -> float:
    """Grade in percent, 0 for zero-length segments."""
    if distance_km <= 0:
        return 0.0
    return (elevation_change_m / (distance_km * 1000)) * 100


def classify_grade(grade: float, flat_threshold: float) -> TerrainType:
    """Classify a grade as ascent, descent or flat using a symmetric flat band."""
    if grade > flat_threshold:
        return TerrainType.ASCENT
    if grade < -flat_threshold:
        return TerrainType.DESCENT
    return TerrainType.FLAT
