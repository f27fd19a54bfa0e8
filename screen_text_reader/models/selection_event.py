"""Selection notification model."""

from pydantic import BaseModel, ConfigDict, Field

from screen_text_reader.enums import SelectionEventKind


class SelectionEvent(BaseModel):
    """A user-facing notification produced by the selection feature."""

    kind: SelectionEventKind = Field(description="Notification kind")
    message: str = Field(description="Short title")
    description: str | None = Field(default=None, description="Longer explanation")
    width: int | None = Field(default=None, description="Selected width in source pixels")
    height: int | None = Field(default=None, description="Selected height in source pixels")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "kind": "region_selected",
                "message": "Region selected",
                "description": "Size: 417×250 pixels",
                "width": 417,
                "height": 250,
            }
        },
    )
