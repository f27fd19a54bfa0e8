"""Data models."""

from screen_text_reader.models.geometry import Point, Rect
from screen_text_reader.models.health_response import HealthResponse
from screen_text_reader.models.interaction import (
    Dragging,
    Idle,
    InteractionState,
    Resizing,
    Selecting,
)
from screen_text_reader.models.ocr_result import OcrResult
from screen_text_reader.models.overlay import HandleBox, OverlayGeometry, SizeIndicator, UiFlags
from screen_text_reader.models.region import Region
from screen_text_reader.models.responses import (
    PointerEventRequest,
    ScreenshotResponse,
    SelectionSnapshot,
    SetRegionRequest,
    StatusResponse,
)
from screen_text_reader.models.selection_event import SelectionEvent
from screen_text_reader.models.viewport import ContainerSize, Viewport

__all__ = [
    "ContainerSize",
    "Dragging",
    "HandleBox",
    "HealthResponse",
    "Idle",
    "InteractionState",
    "OcrResult",
    "OverlayGeometry",
    "Point",
    "PointerEventRequest",
    "Rect",
    "Region",
    "Resizing",
    "ScreenshotResponse",
    "Selecting",
    "SelectionEvent",
    "SelectionSnapshot",
    "SetRegionRequest",
    "SizeIndicator",
    "StatusResponse",
    "UiFlags",
    "Viewport",
]
