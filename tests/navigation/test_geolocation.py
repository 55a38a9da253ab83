"""Tests for great-circle distance and nearest-airport lookup."""

import math

import pytest

from airwaves.airports.directory import AirportDirectory
from airwaves.exceptions import NotFound
from airwaves.navigation.geolocation import Position, distance_nm, nearest_airport

KJFK = Position(40.64, -73.78)
KLGA = Position(40.77, -73.87)


class TestDistance:
    """Tests for distance_nm."""

    @pytest.mark.parametrize(
        "position",
        [KJFK, Position(0.0, 0.0), Position(-33.95, 151.18), Position(89.9, 179.9)],
    )
    def test_zero_for_same_position(self, position: Position) -> None:
        """Test distance from a position to itself is zero."""
        assert distance_nm(position, position) == 0.0

    def test_symmetric(self) -> None:
        """Test distance is the same in both directions."""
        assert distance_nm(KJFK, KLGA) == pytest.approx(distance_nm(KLGA, KJFK))

    def test_jfk_to_laguardia(self) -> None:
        """Test a known short distance."""
        assert distance_nm(KJFK, KLGA) == pytest.approx(8.8, abs=0.2)

    def test_one_degree_of_latitude(self) -> None:
        """Test one degree along a meridian is about 60 nm."""
        d = distance_nm(Position(0.0, 0.0), Position(1.0, 0.0))
        assert d == pytest.approx(60.0, abs=0.1)

    def test_antimeridian(self) -> None:
        """Test positions either side of 180 degrees are close."""
        d = distance_nm(Position(0.0, 179.9), Position(0.0, -179.9))
        assert d < 15.0

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (Position(-45.14, -169.0), Position(45.14, 11.0)),
            (Position(0.0, 0.0), Position(0.0, 180.0)),
            (Position(90.0, 0.0), Position(-90.0, 0.0)),
        ],
    )
    def test_antipodal_positions(self, a: Position, b: Position) -> None:
        """Test antipodes give half the circumference instead of a domain error."""
        assert distance_nm(a, b) == pytest.approx(math.pi * 6371.0 / 1.852, rel=1e-6)


class TestNearestAirport:
    """Tests for nearest_airport."""

    @pytest.fixture
    def directory(self) -> AirportDirectory:
        return AirportDirectory({"KJFK": [40.64, -73.78], "KLGA": [40.77, -73.87]})

    def test_returns_closest(self, directory: AirportDirectory) -> None:
        """Test the closest airport is returned with its distance."""
        nearest = nearest_airport(Position(40.76, -73.86), directory)
        assert nearest.code == "KLGA"
        assert nearest.distance_nm < 1.0

    def test_exact_position(self, directory: AirportDirectory) -> None:
        """Test an aircraft on the airport reports zero distance."""
        nearest = nearest_airport(KJFK, directory)
        assert nearest.code == "KJFK"
        assert nearest.distance_nm == 0.0

    def test_tie_goes_to_first_in_order(self) -> None:
        """Test equal distances resolve to the first airport loaded."""
        directory = AirportDirectory({"AAAA": [1.0, 0.0], "BBBB": [-1.0, 0.0]})
        assert nearest_airport(Position(0.0, 0.0), directory).code == "AAAA"

    def test_empty_directory_raises(self) -> None:
        """Test an empty directory raises NotFound."""
        with pytest.raises(NotFound):
            nearest_airport(KJFK, AirportDirectory())
