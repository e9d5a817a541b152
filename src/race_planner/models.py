from dataclasses import dataclass, field
from enum import Enum


@dataclass
class ProfilePoint:
    distance: float  # km from start
    elevation: float  # meters


class TerrainType(str, Enum):
    ASCENT = "ascent"
    DESCENT = "descent"
    FLAT = "flat"


class EstimateStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"  # well-formed route with zero length
    INVALID = "invalid"  # too few points, decreasing distance, bad pace/target


@dataclass
class Estimate:
    """Result of an estimate that may have no meaningful value."""
    status: EstimateStatus
    value: float = 0.0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is EstimateStatus.OK


@dataclass
class PaceSolution:
    status: EstimateStatus
    pace: float = 0.0  # min/km on flat ground
    estimated_minutes: float = 0.0  # total time at the returned pace
    iterations: int = 0
    converged: bool = False
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is EstimateStatus.OK


@dataclass
class Segment:
    start_index: int  # index of the segment's first point
    end_distance: float  # km
    distance: float  # km
    elevation_change: float  # meters
    grade: float  # percent
    pace_factor: float
    pace: float  # min/km
    time_minutes: float


@dataclass
class Checkpoint:
    distance: float  # km
    elevation: float  # meters
    total_time: float  # minutes from start
    pace: float  # min/km
    grade: float | None  # percent; None for the finish
    label: str  # "ascent", "descent", "flat" or "finish"


@dataclass
class TerrainRun:
    terrain: TerrainType
    start_index: int  # first point of the run
    end_index: int  # last point of the run (shared with the next run)
    start_distance: float  # km
    end_distance: float  # km
    start_elevation: float  # meters
    end_elevation: float  # meters
    distance: float  # km
    elevation_change: float  # meters
    average_grade: float  # percent
    average_pace: float  # min/km
    estimated_time: float  # minutes

    @property
    def segment_count(self) -> int:
        return self.end_index - self.start_index


@dataclass
class TerrainTotals:
    terrain: TerrainType
    distance: float = 0.0  # km
    elevation: float = 0.0  # meters, absolute
    time: float = 0.0  # minutes
    count: int = 0


@dataclass
class ProfileSummary:
    total_distance: float  # km
    elevation_gain: float  # meters
    elevation_loss: float  # meters
    max_elevation: float  # meters
    min_elevation: float  # meters
    point_count: int


@dataclass
class RoutePlan:
    summary: ProfileSummary
    base_pace: float  # min/km
    total_time: Estimate
    segments: list[Segment] = field(default_factory=list)
    checkpoints: list[Checkpoint] = field(default_factory=list)
    terrain_runs: list[TerrainRun] = field(default_factory=list)
    terrain_totals: dict[TerrainType, TerrainTotals] = field(default_factory=dict)
