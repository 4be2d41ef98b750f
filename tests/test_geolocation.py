import pytest

from attendtrack.attendance.model import GeoLocation
from attendtrack.core.exceptions import ValidationError


def test_from_mapping_short_and_long_keys():
    assert GeoLocation.from_mapping({"lat": 1.5, "lng": 2.5, "accuracy": 10}) == GeoLocation(1.5, 2.5, 10.0)
    assert GeoLocation.from_mapping({"latitude": "1.5", "longitude": "2.5"}) == GeoLocation(1.5, 2.5, None)


def test_zero_coordinates_are_kept():
    loc = GeoLocation.from_mapping({"lat": 0, "lng": 0})
    assert loc == GeoLocation(0.0, 0.0)


@pytest.mark.parametrize("data", [None, {}, {"lat": 1.0}, {"lat": "", "lng": ""}])
def test_missing_coordinates_mean_no_location(data):
    assert GeoLocation.from_mapping(data) is None


@pytest.mark.parametrize(
    "data",
    [
        {"lat": "north", "lng": 1},
        {"lat": 91, "lng": 0},
        {"lat": 0, "lng": -181},
        {"lat": 0, "lng": 0, "accuracy": -1},
        {"lat": "nan", "lng": 0},
    ],
)
def test_invalid_locations(data):
    with pytest.raises(ValidationError):
        GeoLocation.from_mapping(data)


@pytest.mark.parametrize("data", ["here", ["1", "2"]])
def test_location_must_be_a_mapping(data):
    with pytest.raises(ValidationError, match="Location must be numeric"):
        GeoLocation.from_mapping(data)
