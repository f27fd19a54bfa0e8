"""Tests for geometry and region models."""

import json

import pytest
from pydantic import ValidationError

from screen_text_reader.models import Point, Rect, Region, SizeIndicator


class TestRegion:
    """Tests for Region model."""

    def test_edges(self) -> None:
        """
        Test right and bottom edges.

        """
        region = Region(x=10, y=20, width=30, height=40)
        assert region.right == 40
        assert region.bottom == 60
        assert region.area() == 1200

    @pytest.mark.parametrize(
        ("width", "height", "expected"),
        [(1, 1, True), (0, 5, False), (5, 0, False)],
    )
    def test_is_valid(self, width: int, height: int, expected: bool) -> None:
        """
        Test that only regions with positive size are valid.

        Args:
            width (int): Region width.
            height (int): Region height.
            expected (bool): Expected validity.

        """
        assert Region(x=0, y=0, width=width, height=height).is_valid() is expected

    def test_negative_values_rejected(self) -> None:
        """
        Test that negative coordinates are rejected.

        """
        with pytest.raises(ValidationError):
            Region(x=-1, y=0, width=10, height=10)

    def test_fits_within(self) -> None:
        """
        Test fitting against image bounds.

        """
        region = Region(x=100, y=50, width=300, height=250)
        assert region.fits_within(400, 300) is True
        assert region.fits_within(399, 300) is False

    def test_format_coordinates(self) -> None:
        """
        Test the copyable JSON form.

        """
        text = Region(x=1, y=2, width=3, height=4).format_coordinates()
        assert json.loads(text) == {"x": 1, "y": 2, "width": 3, "height": 4}
        assert "\n" in text

    def test_frozen(self) -> None:
        """
        Test that regions are immutable.

        """
        region = Region(x=1, y=2, width=3, height=4)
        with pytest.raises(ValidationError):
            region.x = 5


class TestRect:
    """Tests for Rect model."""

    def test_from_points_normalizes(self) -> None:
        """
        Test that corners in any order give a positive size.

        """
        rect = Rect.from_points(Point(x=50, y=10), Point(x=20, y=40))
        assert rect == Rect(left=20, top=10, width=30, height=30)

    def test_contains_is_edge_inclusive(self) -> None:
        """
        Test containment on the edges.

        """
        rect = Rect(left=0, top=0, width=10, height=10)
        assert rect.contains(Point(x=10, y=10)) is True
        assert rect.contains(Point(x=10.1, y=5)) is False

    def test_center(self) -> None:
        """
        Test the center point.

        """
        assert Rect(left=10, top=20, width=30, height=40).center == Point(x=25, y=40)


class TestSizeIndicator:
    """Tests for SizeIndicator model."""

    def test_label(self) -> None:
        """
        Test the size label text.

        """
        indicator = SizeIndicator(position=Point(x=0, y=0), width=417, height=250)
        assert indicator.label == "417 × 250"
