import json

import pytest

from race_planner.profile import ProfileError, build_profile, load_profile, profile_from_records


class TestLoadProfile:
    def test_json_list(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text(json.dumps([
            {"distance": 0, "elevation": 100},
            {"distance": 1.5, "elevation": 180.5},
        ]))
        points = load_profile(str(path))
        assert len(points) == 2
        assert points[1].distance == 1.5
        assert points[1].elevation == 180.5

    def test_json_points_object(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text(json.dumps({"name": "Loop", "points": [
            {"distance": 0, "elevation": 10},
            {"distance": 2, "elevation": 20},
        ]}))
        assert [p.distance for p in load_profile(str(path))] == [0, 2]

    def test_csv(self, tmp_path):
        path = tmp_path / "route.csv"
        path.write_text("distance,elevation\n0,100\n0.5,110\n1.0,105\n")
        points = load_profile(str(path))
        assert [(p.distance, p.elevation) for p in points] == [(0.0, 100.0), (0.5, 110.0), (1.0, 105.0)]

    def test_csv_missing_header(self, tmp_path):
        path = tmp_path / "route.csv"
        path.write_text("km,m\n0,100\n")
        with pytest.raises(ProfileError):
            load_profile(str(path))

    def test_bad_sample(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text(json.dumps([{"distance": 0}]))
        with pytest.raises(ProfileError, match="index 0"):
            load_profile(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text("{not json")
        with pytest.raises(ProfileError):
            load_profile(str(path))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "route.gpx"
        path.write_text("<gpx/>")
        with pytest.raises(ProfileError, match="Unsupported"):
            load_profile(str(path))

    def test_json_not_utf8(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_bytes(b'[{"distance": 0, "elevation": 1\xff}]')
        with pytest.raises(ProfileError, match="not UTF-8"):
            load_profile(str(path))

    def test_csv_not_utf8(self, tmp_path):
        path = tmp_path / "route.csv"
        path.write_bytes(b"distance,elevation\n0,100\xff\n")
        with pytest.raises(ProfileError, match="not UTF-8"):
            load_profile(str(path))

    def test_out_of_range_latitude(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text(json.dumps([
            {"lat": 45.0, "lon": 6.0, "elevation": 500},
            {"lat": 95.0, "lon": 6.0, "elevation": 500},
        ]))
        with pytest.raises(ProfileError, match="Invalid coordinates"):
            load_profile(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_profile(str(tmp_path / "missing.json"))


class TestBuildProfile:
    def test_accumulates_distance_in_km(self):
        # 0.01° of latitude is about 1.11 km
        points = build_profile([(45.0, 6.0, 1000.0), (45.01, 6.0, 1050.0), (45.02, 6.0, None)])
        assert points[0].distance == 0.0
        assert points[1].distance == pytest.approx(1.11, rel=0.01)
        assert points[2].distance == pytest.approx(2 * points[1].distance, rel=1e-3)
        assert points[2].elevation == 0.0

    def test_records_with_coordinates(self):
        points = profile_from_records([
            {"lat": 45.0, "lon": 6.0, "elevation": 500},
            {"lat": 45.0, "lon": 6.01, "elevation": 520},
        ])
        assert points[1].distance == pytest.approx(0.787, rel=0.01)
        assert points[1].elevation == 520

    def test_records_must_be_list(self):
        with pytest.raises(ProfileError):
            profile_from_records({"distance": 0})
