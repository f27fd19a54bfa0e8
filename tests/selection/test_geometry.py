"""Tests for selection geometry rules."""

import pytest

from screen_text_reader.core.settings.app_settings import SelectionSettings
from screen_text_reader.enums import CursorKind, HandleId
from screen_text_reader.models import ContainerSize, Point, Rect, Viewport
from screen_text_reader.selection.geometry import GeometryPolicy, clamp, resize_handle_cursor


@pytest.fixture
def policy() -> GeometryPolicy:
    """
    Policy with the default constants.

    Returns:
        GeometryPolicy: Default policy.
    """
    return GeometryPolicy()


@pytest.fixture
def identity() -> Viewport:
    """
    Viewport with scale 1 and no offset.

    Returns:
        Viewport: Identity viewport over a 1000x1000 source.
    """
    return Viewport(
        container_width=1000,
        container_height=1000,
        source_width=1000,
        source_height=1000,
        padding=0,
    )


class TestClamp:
    """Tests for clamp function."""

    def test_inside_range(self) -> None:
        """
        Test that values inside the range are kept.

        """
        assert clamp(5, 0, 10) == 5

    def test_outside_range(self) -> None:
        """
        Test that values outside the range snap to the nearest bound.

        """
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10

    def test_empty_range_prefers_lower(self) -> None:
        """
        Test that the lower bound wins when the range is empty.

        """
        assert clamp(5, 10, 0) == 10


class TestResizeHandleCursor:
    """Tests for resize_handle_cursor function."""

    @pytest.mark.parametrize(
        ("handle", "cursor"),
        [
            (HandleId.N, CursorKind.VERTICAL),
            (HandleId.S, CursorKind.VERTICAL),
            (HandleId.E, CursorKind.HORIZONTAL),
            (HandleId.W, CursorKind.HORIZONTAL),
            (HandleId.NE, CursorKind.DIAGONAL_1),
            (HandleId.SW, CursorKind.DIAGONAL_1),
            (HandleId.NW, CursorKind.DIAGONAL_2),
            (HandleId.SE, CursorKind.DIAGONAL_2),
        ],
    )
    def test_cursor_for_handle(self, handle: HandleId, cursor: CursorKind) -> None:
        """
        Test the cursor shown over each handle.

        """
        assert resize_handle_cursor(handle) == cursor


class TestGeometryPolicy:
    """Tests for GeometryPolicy class."""

    def test_from_settings(self) -> None:
        """
        Test that settings values are used.

        """
        policy = GeometryPolicy.from_settings(
            SelectionSettings(min_selection_size=20, default_width=300, handle_size=12)
        )
        assert policy.min_selection_size == 20
        assert policy.default_width == 300
        assert policy.default_height == 150
        assert policy.handle_size == 12

    def test_is_degenerate(self, policy: GeometryPolicy) -> None:
        """
        Test that either axis below the minimum marks a gesture degenerate.

        """
        assert policy.is_degenerate(9.9, 50)
        assert policy.is_degenerate(50, 3)
        assert not policy.is_degenerate(10, 10)

    def test_default_box_clamped_inside_container(self, policy: GeometryPolicy) -> None:
        """
        Test the default box for a click near the top-left corner.

        """
        box = policy.default_box(Point(x=103, y=101), ContainerSize(width=900, height=600))
        assert box == Rect(left=0, top=26, width=250, height=150)

    def test_default_box_limited_to_a_third_of_container(self, policy: GeometryPolicy) -> None:
        """
        Test that small containers shrink the default box.

        """
        box = policy.default_box(Point(x=290, y=140), ContainerSize(width=300, height=150))
        assert box.width == pytest.approx(100)
        assert box.height == pytest.approx(50)
        assert box.left == pytest.approx(200)
        assert box.top == pytest.approx(100)

    def test_default_box_centred_on_point(self, policy: GeometryPolicy) -> None:
        """
        Test that a click far from the edges centres the box on the click.

        """
        box = policy.default_box(Point(x=450, y=300), ContainerSize(width=900, height=600))
        assert box.center == Point(x=450, y=300)

    def test_clamp_to_bounds_shrinks(self, policy: GeometryPolicy, identity: Viewport) -> None:
        """
        Test that a rectangle hanging off the image is moved and shrunk.

        """
        rect = policy.clamp_to_bounds(Rect(left=-20, top=950, width=100, height=100), identity)
        assert rect == Rect(left=0, top=950, width=100, height=50)

    def test_clamp_position_keeps_size(self, policy: GeometryPolicy, identity: Viewport) -> None:
        """
        Test that clamping a position translates without resizing.

        """
        rect = policy.clamp_position(Rect(left=950, top=-10, width=100, height=100), identity)
        assert rect == Rect(left=900, top=0, width=100, height=100)

    def test_meets_minimum(self, policy: GeometryPolicy) -> None:
        """
        Test the minimum size check on rectangles.

        """
        assert policy.meets_minimum(Rect(left=0, top=0, width=10, height=10))
        assert not policy.meets_minimum(Rect(left=0, top=0, width=10, height=9))

    def test_handle_layout(self, policy: GeometryPolicy) -> None:
        """
        Test that handles are centred on corners and edge midpoints.

        """
        squares = policy.handle_layout(Rect(left=100, top=100, width=200, height=150))
        assert len(squares) == 8
        assert squares[HandleId.E] == Rect(left=296, top=171, width=8, height=8)
        assert squares[HandleId.NW] == Rect(left=96, top=96, width=8, height=8)
        assert squares[HandleId.SE] == Rect(left=296, top=246, width=8, height=8)
        assert squares[HandleId.N].center == Point(x=200, y=100)
