"""Loading route profiles from already-decoded sample files.

Supported inputs:
- JSON: a list of {"distance": km, "elevation": m} records, or an object
  with such a list under "points"
- JSON records with "lat"/"lon"/"elevation" instead of "distance"; the
  distance is accumulated along the track
- CSV with a "distance,elevation" header
"""

import csv
import json
from pathlib import Path

from geopy.distance import geodesic

from race_planner.models import ProfilePoint


class ProfileError(ValueError):
    """Raised when profile data cannot be turned into a route profile."""


def build_profile(coordinates: list[tuple[float, float, float | None]]) -> list[ProfilePoint]:
    """Build a profile from (lat, lon, elevation) tuples.

    Distance accumulates geodesically from the first coordinate, in km.
    Missing elevations are treated as 0 m.
    """
    points: list[ProfilePoint] = []
    distance_m = 0.0
    for i, (lat, lon, elevation) in enumerate(coordinates):
        if i > 0:
            prev_lat, prev_lon, _ = coordinates[i - 1]
            distance_m += geodesic((prev_lat, prev_lon), (lat, lon)).meters
        points.append(ProfilePoint(distance=distance_m / 1000, elevation=elevation or 0.0))
    return points


def _point_from_record(record: dict, index: int) -> ProfilePoint:
    try:
        return ProfilePoint(distance=float(record["distance"]), elevation=float(record["elevation"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ProfileError(f"Invalid profile sample at index {index}: {record!r}") from e


def profile_from_records(records: list) -> list[ProfilePoint]:
    """Convert decoded records (dicts) into profile points."""
    if not isinstance(records, list):
        raise ProfileError("Profile data must be a list of samples")
    if records and isinstance(records[0], dict) and "distance" not in records[0] and "lat" in records[0]:
        try:
            coords = [(float(r["lat"]), float(r["lon"]), r.get("elevation")) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            raise ProfileError(f"Invalid coordinate sample: {e}") from e
        try:
            return build_profile(coords)
        except ValueError as e:
            # geopy rejects latitudes outside [-90, 90]
            raise ProfileError(f"Invalid coordinates: {e}") from e
    return [_point_from_record(r, i) for i, r in enumerate(records)]


def _load_json(path: Path) -> list[ProfilePoint]:
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProfileError(f"Invalid JSON in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ProfileError(f"{path} is not UTF-8 text: {e}") from e
    if isinstance(data, dict):
        data = data.get("points")
    return profile_from_records(data)


def _load_csv(path: Path) -> list[ProfilePoint]:
    try:
        with path.open(newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None or not {"distance", "elevation"} <= set(reader.fieldnames):
                raise ProfileError(f"{path} needs a 'distance,elevation' header")
            return [_point_from_record(row, i) for i, row in enumerate(reader)]
    except UnicodeDecodeError as e:
        raise ProfileError(f"{path} is not UTF-8 text: {e}") from e


def load_profile(filepath: str) -> list[ProfilePoint]:
    """Load a profile from a .json or .csv file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ProfileError: If the file content is not a valid profile.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(filepath)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return _load_csv(path)
    if suffix == ".json":
        return _load_json(path)
    raise ProfileError(f"Unsupported profile format: {path.suffix or path.name}")
