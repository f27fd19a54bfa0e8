"""Interaction state of the selection engine.

The state is a tagged union keyed on ``mode``: each variant carries only the
gesture points meaningful for that mode, so a state that is both dragging and
resizing cannot be built.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from screen_text_reader.enums import HandleId, InteractionMode
from screen_text_reader.models.geometry import Point


class Idle(BaseModel):
    """No gesture in progress."""

    mode: Literal[InteractionMode.IDLE] = InteractionMode.IDLE

    model_config = ConfigDict(extra="forbid", frozen=True)


class Selecting(BaseModel):
    """A new rectangle is being dragged out."""

    mode: Literal[InteractionMode.SELECTING] = InteractionMode.SELECTING
    start: Point = Field(description="Where the pointer went down")
    current: Point = Field(description="Latest pointer position, clamped to the container")

    model_config = ConfigDict(extra="forbid", frozen=True)


class Dragging(BaseModel):
    """The existing rectangle is being moved."""

    mode: Literal[InteractionMode.DRAGGING] = InteractionMode.DRAGGING
    anchor: Point = Field(description="Where the pointer went down")
    offset: Point = Field(description="Pointer position relative to the rectangle top-left")

    model_config = ConfigDict(extra="forbid", frozen=True)


class Resizing(BaseModel):
    """The existing rectangle is being resized through one handle."""

    mode: Literal[InteractionMode.RESIZING] = InteractionMode.RESIZING
    handle: HandleId = Field(description="Handle being dragged")
    anchor: Point = Field(description="Where the pointer went down")

    model_config = ConfigDict(extra="forbid", frozen=True)


InteractionState = Annotated[
    Idle | Selecting | Dragging | Resizing,
    Field(discriminator="mode"),
]
