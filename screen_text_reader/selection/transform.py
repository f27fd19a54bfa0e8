"""Mapping between display space and source image space.

The source image is shown uniformly scaled to fit the container, centred, and
shifted by a fixed padding on both axes. Display space is container-relative;
source space is the image's own pixel grid.
"""

import math

from screen_text_reader.models import Rect, Region, Viewport


class InvalidViewportError(ValueError):
    """Raised when a viewport has a zero or negative dimension."""


def _require_valid(viewport: Viewport) -> None:
    if not viewport.is_valid():
        raise InvalidViewportError(
            f"Cannot transform with viewport {viewport.container_width}x"
            f"{viewport.container_height} / source {viewport.source_width}x"
            f"{viewport.source_height}"
        )


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positive values.

    Args:
        value (float): Value to round.

    Returns:
        int: Rounded value.
    """
    return math.floor(value + 0.5)


def scale(viewport: Viewport) -> float:
    """
    Uniform display scale of the source image.

    Args:
        viewport (Viewport): Current viewport.

    Returns:
        float: Display units per source pixel.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    _require_valid(viewport)
    return min(
        viewport.container_width / viewport.source_width,
        viewport.container_height / viewport.source_height,
    )


def display_offset(viewport: Viewport) -> tuple[float, float]:
    """
    Position of the image's top-left corner inside the container.

    Args:
        viewport (Viewport): Current viewport.

    Returns:
        tuple[float, float]: (offset_x, offset_y) in display units.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    s = scale(viewport)
    offset_x = (viewport.container_width - viewport.source_width * s) / 2 + viewport.padding
    offset_y = (viewport.container_height - viewport.source_height * s) / 2 + viewport.padding
    return offset_x, offset_y


def image_bounds(viewport: Viewport) -> Rect:
    """
    Area of the container covered by the displayed image.

    Args:
        viewport (Viewport): Current viewport.

    Returns:
        Rect: Displayed image area in display units.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    s = scale(viewport)
    offset_x, offset_y = display_offset(viewport)
    return Rect(
        left=offset_x,
        top=offset_y,
        width=viewport.source_width * s,
        height=viewport.source_height * s,
    )


def to_source(rect: Rect, viewport: Viewport) -> Region:
    """
    Convert a display rectangle into a source image region.

    The result is clamped so it never extends past the source image.

    Args:
        rect (Rect): Rectangle in display units.
        viewport (Viewport): Current viewport.

    Returns:
        Region: Region in source pixels.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    s = scale(viewport)
    offset_x, offset_y = display_offset(viewport)

    adjusted_left = max(0.0, rect.left - offset_x)
    adjusted_top = max(0.0, rect.top - offset_y)

    x = min(round_half_up(adjusted_left / s), viewport.source_width)
    y = min(round_half_up(adjusted_top / s), viewport.source_height)
    width = max(0, round_half_up(rect.width / s))
    height = max(0, round_half_up(rect.height / s))

    return Region(
        x=x,
        y=y,
        width=min(width, viewport.source_width - x),
        height=min(height, viewport.source_height - y),
    )


def to_display(region: Region, viewport: Viewport) -> Rect:
    """
    Convert a source image region into a display rectangle.

    Args:
        region (Region): Region in source pixels.
        viewport (Viewport): Current viewport.

    Returns:
        Rect: Rectangle in display units.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    s = scale(viewport)
    offset_x, offset_y = display_offset(viewport)
    return Rect(
        left=region.x * s + offset_x,
        top=region.y * s + offset_y,
        width=region.width * s,
        height=region.height * s,
    )


def to_source_length(length: float, viewport: Viewport) -> int:
    """
    Convert a display length into whole source pixels.

    Args:
        length (float): Length in display units.
        viewport (Viewport): Current viewport.

    Returns:
        int: Length in source pixels.

    Raises:
        InvalidViewportError: If the viewport has a non-positive dimension.
    """
    return round_half_up(length / scale(viewport))
