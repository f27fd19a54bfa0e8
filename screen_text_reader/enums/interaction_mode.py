"""Interaction mode enum."""

from enum import StrEnum


class InteractionMode(StrEnum):
    """Pointer interaction mode of the selection engine."""

    IDLE = "idle"
    SELECTING = "selecting"
    DRAGGING = "dragging"
    RESIZING = "resizing"
