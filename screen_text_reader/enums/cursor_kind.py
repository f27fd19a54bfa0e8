"""Cursor kind enum."""

from enum import StrEnum


class CursorKind(StrEnum):
    """Cursor shown over a resize handle (values are CSS cursor names)."""

    VERTICAL = "ns-resize"
    HORIZONTAL = "ew-resize"
    DIAGONAL_1 = "nesw-resize"
    DIAGONAL_2 = "nwse-resize"
