"""Tests for terrain segmentation."""

import math

import pytest
from conftest import make_profile

from race_planner.models import ProfilePoint, TerrainType
from race_planner.terrain import segment_terrain, summarize_terrain


def rolling_profile(n: int = 120) -> list[ProfilePoint]:
    """Hilly route with noisy elevation, 100 m spacing."""
    return make_profile([
        (i * 0.1, 300 + 80 * math.sin(i / 9) + 6 * math.sin(i * 1.7))
        for i in range(n)
    ])


class TestSegmentTerrain:
    def test_climb_plateau_descent(self, hill_profile):
        runs = segment_terrain(hill_profile, 5.0)
        assert [r.terrain for r in runs] == [TerrainType.ASCENT, TerrainType.FLAT, TerrainType.DESCENT]
        assert [(r.start_index, r.end_index) for r in runs] == [(0, 4), (4, 6), (6, 10)]

    def test_run_metrics(self, hill_profile):
        climb = segment_terrain(hill_profile, 5.0)[0]
        assert climb.start_distance == 0.0
        assert climb.end_distance == 2.0
        assert climb.start_elevation == 100.0
        assert climb.end_elevation == 260.0
        assert climb.distance == pytest.approx(2.0)
        assert climb.elevation_change == pytest.approx(160.0)
        assert climb.average_grade == pytest.approx(8.0)
        assert climb.average_pace == pytest.approx(5.0 * 1.15)
        assert climb.estimated_time == pytest.approx(2.0 * 5.0 * 1.15)
        assert climb.segment_count == 4

    def test_gentle_blip_absorbed_into_short_run(self):
        # 2% rise after only 3 points: not long enough, not steep enough
        points = make_profile([(0, 100), (1, 100), (2, 100), (3, 120), (4, 120), (5, 120)])
        runs = segment_terrain(points, 5.0)
        assert len(runs) == 1
        assert runs[0].terrain == TerrainType.FLAT
        assert runs[0].segment_count == 5
        assert runs[0].average_grade == pytest.approx(0.4)

    def test_steep_transition_breaks_short_run(self):
        points = make_profile([(0, 100), (1, 100), (2, 100), (3, 150), (4, 150), (5, 150)])
        runs = segment_terrain(points, 5.0)
        assert [r.terrain for r in runs] == [TerrainType.FLAT, TerrainType.ASCENT]
        assert [(r.start_index, r.end_index) for r in runs] == [(0, 2), (2, 5)]

    def test_breakaway_grade_is_exclusive(self):
        # Exactly 3% after 3 points does not open a new run
        points = make_profile([(0, 100), (1, 100), (2, 100), (3, 130), (4, 130), (5, 130)])
        runs = segment_terrain(points, 5.0)
        assert len(runs) == 1
        assert runs[0].terrain == TerrainType.FLAT
        assert runs[0].segment_count == 5

    def test_just_above_breakaway_grade_splits(self):
        points = make_profile([(0, 100), (1, 100), (2, 100), (3, 131), (4, 131), (5, 131)])
        runs = segment_terrain(points, 5.0)
        assert [r.terrain for r in runs] == [TerrainType.FLAT, TerrainType.ASCENT]
        assert runs[1].start_index == 2

    def test_long_run_accepts_gentle_change(self):
        points = make_profile([(0, 100), (1, 100), (2, 100), (3, 100), (4, 120)])
        runs = segment_terrain(points, 5.0)
        assert [r.terrain for r in runs] == [TerrainType.FLAT, TerrainType.ASCENT]
        assert runs[1].start_index == 3
        assert runs[1].start_elevation == 100

    def test_runs_partition_segments(self):
        points = rolling_profile()
        runs = segment_terrain(points, 5.5)
        assert sum(r.segment_count for r in runs) == len(points) - 1
        assert runs[0].start_index == 0
        assert runs[-1].end_index == len(points) - 1
        for a, b in zip(runs, runs[1:]):
            assert a.end_index == b.start_index
            assert a.end_distance == b.start_distance

    def test_adjacent_runs_differ_in_terrain(self):
        runs = segment_terrain(rolling_profile(), 5.5)
        assert len(runs) > 1
        for a, b in zip(runs, runs[1:]):
            assert a.terrain != b.terrain

    def test_zero_length_run(self):
        runs = segment_terrain(make_profile([(0, 100), (0, 100)]), 5.0)
        assert len(runs) == 1
        assert runs[0].distance == 0
        assert runs[0].average_pace == 5.0
        assert runs[0].estimated_time == 0.0

    def test_too_few_points(self):
        assert segment_terrain(make_profile([(0, 100)]), 5.0) == []


class TestSummarizeTerrain:
    def test_totals_per_class(self, hill_profile):
        totals = summarize_terrain(segment_terrain(hill_profile, 5.0))
        assert set(totals) == set(TerrainType)
        assert totals[TerrainType.ASCENT].distance == pytest.approx(2.0)
        assert totals[TerrainType.ASCENT].elevation == pytest.approx(160.0)
        assert totals[TerrainType.DESCENT].elevation == pytest.approx(160.0)
        assert totals[TerrainType.DESCENT].time == pytest.approx(2.0 * 5.0 * 0.90)
        assert totals[TerrainType.FLAT].time == pytest.approx(5.0)
        assert totals[TerrainType.FLAT].count == 1

    def test_empty(self):
        totals = summarize_terrain([])
        assert all(t.count == 0 and t.distance == 0 for t in totals.values())
