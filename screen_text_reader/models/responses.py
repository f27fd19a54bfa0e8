"""Response and request models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from screen_text_reader.enums import InteractionMode, PointerButton, PointerEventKind
from screen_text_reader.models.overlay import OverlayGeometry
from screen_text_reader.models.region import Region
from screen_text_reader.models.selection_event import SelectionEvent
from screen_text_reader.models.viewport import ContainerSize


class StatusResponse(BaseModel):
    """Monitoring status response."""

    is_monitoring: bool = Field(description="Whether the monitoring loop is active")
    region: Region | None = Field(default=None, description="Region being monitored")
    last_text: str = Field(default="", description="Most recently extracted text")
    last_update: datetime | None = Field(
        default=None, description="When the text was last extracted"
    )
    ocr_ready: bool = Field(default=False, description="Whether tesseract is available")
    has_screenshot: bool = Field(default=False, description="Whether a screenshot is loaded")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "is_monitoring": True,
                "region": {"x": 120, "y": 80, "width": 400, "height": 60},
                "last_text": "Order #1234 shipped",
                "last_update": "2026-01-01T12:00:00Z",
                "ocr_ready": True,
                "has_screenshot": True,
            }
        },
    )


class ScreenshotResponse(BaseModel):
    """Loaded screenshot dimensions."""

    width: int = Field(description="Screenshot width in pixels")
    height: int = Field(description="Screenshot height in pixels")


class SetRegionRequest(BaseModel):
    """Request to monitor an explicit region."""

    region: Region = Field(description="Region in screenshot pixels")

    model_config = ConfigDict(extra="forbid")


class PointerEventRequest(BaseModel):
    """One pointer event forwarded from the rendering layer."""

    kind: PointerEventKind = Field(description="Event kind")
    x: float = Field(default=0.0, description="Pointer x in container coordinates")
    y: float = Field(default=0.0, description="Pointer y in container coordinates")
    button: PointerButton = Field(
        default=PointerButton.PRIMARY, description="Pressed button for down events"
    )
    container: ContainerSize | None = Field(
        default=None, description="Container size, required except for leave"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "kind": "down",
                "x": 200.0,
                "y": 150.0,
                "button": 0,
                "container": {"width": 900.0, "height": 600.0},
            }
        },
    )


class SelectionSnapshot(BaseModel):
    """Current selection state for the rendering layer."""

    mode: InteractionMode = Field(description="Current interaction mode")
    region: Region | None = Field(default=None, description="Published region")
    source_width: int = Field(default=0, description="Loaded image width")
    source_height: int = Field(default=0, description="Loaded image height")
    show_instructions: bool = Field(default=False, description="Instructions still shown")
    overlay: OverlayGeometry | None = Field(
        default=None, description="Overlay geometry, None before any container is known"
    )
    events: list[SelectionEvent] = Field(
        default_factory=list, description="Notifications produced by the last event"
    )
