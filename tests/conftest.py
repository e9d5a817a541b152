import pytest

from race_planner.models import ProfilePoint


def make_profile(samples: list[tuple[float, float]]) -> list[ProfilePoint]:
    """Build a profile from (km, meters) pairs."""
    return [ProfilePoint(distance=d, elevation=e) for d, e in samples]


@pytest.fixture
def example_profile():
    """+5%, -5%, then 3 km flat: 25.0 minutes at 5:00/km."""
    return make_profile([(0, 100), (1, 150), (2, 100), (5, 100)])


@pytest.fixture
def flat_profile():
    """10 km dead flat, one sample per km."""
    return make_profile([(float(km), 200.0) for km in range(11)])


@pytest.fixture
def hill_profile():
    """2 km climb at 8%, 1 km flat, 2 km descent at -8%."""
    return make_profile([
        (0.0, 100.0),
        (0.5, 140.0),
        (1.0, 180.0),
        (1.5, 220.0),
        (2.0, 260.0),
        (2.5, 260.0),
        (3.0, 260.0),
        (3.5, 220.0),
        (4.0, 180.0),
        (4.5, 140.0),
        (5.0, 100.0),
    ])
