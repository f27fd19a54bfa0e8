"""Region selection engine: coordinate transforms, geometry rules and the pointer state machine."""

from screen_text_reader.selection.geometry import GeometryPolicy, resize_handle_cursor
from screen_text_reader.selection.overlay import OverlayLayout
from screen_text_reader.selection.state_machine import SelectionStateMachine
from screen_text_reader.selection.transform import (
    InvalidViewportError,
    display_offset,
    image_bounds,
    scale,
    to_display,
    to_source,
)

__all__ = [
    "GeometryPolicy",
    "InvalidViewportError",
    "OverlayLayout",
    "SelectionStateMachine",
    "display_offset",
    "image_bounds",
    "resize_handle_cursor",
    "scale",
    "to_display",
    "to_source",
]
