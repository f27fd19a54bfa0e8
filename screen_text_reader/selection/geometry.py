"""Fixed geometry rules for region selection.

All sizes are in display units.
"""

from screen_text_reader.core.settings.app_settings import SelectionSettings
from screen_text_reader.enums import CursorKind, HandleId
from screen_text_reader.models import ContainerSize, Point, Rect, Viewport
from screen_text_reader.selection.transform import image_bounds

MIN_SELECTION_SIZE = 10.0
DEFAULT_WIDTH = 250.0
DEFAULT_HEIGHT = 150.0
HANDLE_SIZE = 8.0

# Fraction of the container the default box may cover on each axis
DEFAULT_BOX_MAX_FRACTION = 1 / 3

HANDLE_CURSORS: dict[HandleId, CursorKind] = {
    HandleId.N: CursorKind.VERTICAL,
    HandleId.S: CursorKind.VERTICAL,
    HandleId.E: CursorKind.HORIZONTAL,
    HandleId.W: CursorKind.HORIZONTAL,
    HandleId.NE: CursorKind.DIAGONAL_1,
    HandleId.SW: CursorKind.DIAGONAL_1,
    HandleId.NW: CursorKind.DIAGONAL_2,
    HandleId.SE: CursorKind.DIAGONAL_2,
}


def resize_handle_cursor(handle: HandleId) -> CursorKind:
    """
    Cursor kind shown over a resize handle.

    Args:
        handle (HandleId): Handle identifier.

    Returns:
        CursorKind: Vertical, horizontal or one of the two diagonals.
    """
    return HANDLE_CURSORS[handle]


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Clamp a value into ``[lower, upper]``.

    When the range is empty the lower bound wins.

    Args:
        value (float): Value to clamp.
        lower (float): Lower bound.
        upper (float): Upper bound.

    Returns:
        float: Clamped value.
    """
    return max(lower, min(value, upper))


class GeometryPolicy:
    """Selection size rules, default box placement, clamping and handle layout."""

    def __init__(
        self,
        min_selection_size: float = MIN_SELECTION_SIZE,
        default_width: float = DEFAULT_WIDTH,
        default_height: float = DEFAULT_HEIGHT,
        handle_size: float = HANDLE_SIZE,
    ) -> None:
        """
        Initialize the policy.

        Args:
            min_selection_size (float): Smallest intended selection on either axis.
            default_width (float): Width of the substituted default box.
            default_height (float): Height of the substituted default box.
            handle_size (float): Side of a resize handle square.
        """
        self.min_selection_size = min_selection_size
        self.default_width = default_width
        self.default_height = default_height
        self.handle_size = handle_size

    @classmethod
    def from_settings(cls, settings: SelectionSettings) -> "GeometryPolicy":
        """
        Build a policy from selection settings.

        Args:
            settings (SelectionSettings): Selection configuration.

        Returns:
            GeometryPolicy: Configured policy.
        """
        return cls(
            min_selection_size=settings.min_selection_size,
            default_width=settings.default_width,
            default_height=settings.default_height,
            handle_size=settings.handle_size,
        )

    def is_degenerate(self, width: float, height: float) -> bool:
        """
        Check whether a gesture is too small to be an intended rectangle.

        Args:
            width (float): Gesture width.
            height (float): Gesture height.

        Returns:
            bool: True if either axis is below the minimum selection size.
        """
        return width < self.min_selection_size or height < self.min_selection_size

    def default_box(self, center: Point, container: ContainerSize) -> Rect:
        """
        Default selection substituted for a click or a tiny drag.

        The box is at most a third of the container on each axis, centred on the
        gesture end point and clamped inside the container.

        Args:
            center (Point): Gesture end point.
            container (ContainerSize): Container bounding box.

        Returns:
            Rect: Default box in display units.
        """
        width = min(container.width * DEFAULT_BOX_MAX_FRACTION, self.default_width)
        height = min(container.height * DEFAULT_BOX_MAX_FRACTION, self.default_height)
        return Rect(
            left=clamp(center.x - width / 2, 0.0, container.width - width),
            top=clamp(center.y - height / 2, 0.0, container.height - height),
            width=width,
            height=height,
        )

    def clamp_to_bounds(self, rect: Rect, viewport: Viewport) -> Rect:
        """
        Clamp a rectangle inside the displayed image, shrinking it if needed.

        Args:
            rect (Rect): Rectangle in display units.
            viewport (Viewport): Current viewport.

        Returns:
            Rect: Rectangle that does not extend outside the displayed image.
        """
        bounds = image_bounds(viewport)
        left = clamp(rect.left, bounds.left, bounds.right)
        top = clamp(rect.top, bounds.top, bounds.bottom)
        return Rect(
            left=left,
            top=top,
            width=max(0.0, min(rect.width, bounds.right - left)),
            height=max(0.0, min(rect.height, bounds.bottom - top)),
        )

    def clamp_position(self, rect: Rect, viewport: Viewport) -> Rect:
        """
        Translate a fixed-size rectangle so it stays inside the displayed image.

        Args:
            rect (Rect): Rectangle in display units.
            viewport (Viewport): Current viewport.

        Returns:
            Rect: Rectangle with the same size, moved inside the image.
        """
        bounds = image_bounds(viewport)
        return Rect(
            left=clamp(rect.left, bounds.left, bounds.right - rect.width),
            top=clamp(rect.top, bounds.top, bounds.bottom - rect.height),
            width=rect.width,
            height=rect.height,
        )

    def meets_minimum(self, rect: Rect) -> bool:
        """
        Check a rectangle is at least the minimum selection size on both axes.

        Args:
            rect (Rect): Rectangle in display units.

        Returns:
            bool: True if neither axis is below the minimum.
        """
        return not self.is_degenerate(rect.width, rect.height)

    def handle_layout(self, rect: Rect) -> dict[HandleId, Rect]:
        """
        Squares of the eight resize handles around a rectangle.

        Edge handles are centred on the edge midpoints, corner handles on the
        corners.

        Args:
            rect (Rect): Selection rectangle in display units.

        Returns:
            dict[HandleId, Rect]: Handle squares keyed by handle id.
        """
        half = self.handle_size / 2
        mid_x = rect.left + rect.width / 2
        mid_y = rect.top + rect.height / 2
        centers = {
            HandleId.N: (mid_x, rect.top),
            HandleId.NE: (rect.right, rect.top),
            HandleId.E: (rect.right, mid_y),
            HandleId.SE: (rect.right, rect.bottom),
            HandleId.S: (mid_x, rect.bottom),
            HandleId.SW: (rect.left, rect.bottom),
            HandleId.W: (rect.left, mid_y),
            HandleId.NW: (rect.left, rect.top),
        }
        return {
            handle: Rect(
                left=cx - half,
                top=cy - half,
                width=self.handle_size,
                height=self.handle_size,
            )
            for handle, (cx, cy) in centers.items()
        }
