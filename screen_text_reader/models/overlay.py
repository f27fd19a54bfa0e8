"""Presentational overlay models."""

from pydantic import BaseModel, ConfigDict, Field

from screen_text_reader.enums import CursorKind, HandleId, InteractionMode
from screen_text_reader.models.geometry import Point, Rect


class HandleBox(BaseModel):
    """One resize handle square."""

    handle: HandleId = Field(description="Handle identifier")
    rect: Rect = Field(description="Handle square in display units")
    cursor: CursorKind = Field(description="Cursor to show over the handle")

    model_config = ConfigDict(extra="forbid", frozen=True)


class SizeIndicator(BaseModel):
    """Live size label shown next to the selection."""

    position: Point = Field(description="Top-left corner of the label")
    width: int = Field(description="Selection width in source pixels")
    height: int = Field(description="Selection height in source pixels")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def label(self) -> str:
        return f"{self.width} × {self.height}"


class UiFlags(BaseModel):
    """Which selection affordances are visible."""

    show_instructions: bool = Field(default=False, description="Instructions overlay shown")
    show_helper: bool = Field(default=False, description="Idle crosshair shown")
    show_size_indicator: bool = Field(default=False, description="Size label shown")

    model_config = ConfigDict(extra="forbid", frozen=True)


class OverlayGeometry(BaseModel):
    """Everything the rendering layer needs to draw the selection."""

    mode: InteractionMode = Field(description="Current interaction mode")
    selection: Rect | None = Field(default=None, description="Overlay rectangle, None if hidden")
    handles: list[HandleBox] = Field(default_factory=list, description="Visible resize handles")
    size_indicator: SizeIndicator | None = Field(default=None, description="Size label")
    helper: Point | None = Field(default=None, description="Idle crosshair position")
    flags: UiFlags = Field(default_factory=UiFlags, description="Visibility flags")

    model_config = ConfigDict(extra="forbid", frozen=True)
