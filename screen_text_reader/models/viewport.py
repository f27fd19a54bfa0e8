"""Viewport model."""

from pydantic import BaseModel, ConfigDict, Field


class ContainerSize(BaseModel):
    """Bounding box of the rendering surface, in display units."""

    width: float = Field(description="Container width")
    height: float = Field(description="Container height")

    model_config = ConfigDict(extra="forbid", frozen=True)


class Viewport(BaseModel):
    """Everything needed to map between display space and source space."""

    container_width: float = Field(description="Container width in display units")
    container_height: float = Field(description="Container height in display units")
    source_width: int = Field(description="Source image width in pixels")
    source_height: int = Field(description="Source image height in pixels")
    padding: float = Field(default=8.0, ge=0, description="Padding around the displayed image")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "container_width": 900,
                "container_height": 600,
                "source_width": 1920,
                "source_height": 1080,
                "padding": 8,
            }
        },
    )

    def is_valid(self) -> bool:
        """
        Check that a transform can be computed for this viewport.

        Returns:
            bool: True if every container and source dimension is positive.
        """
        return (
            self.container_width > 0
            and self.container_height > 0
            and self.source_width > 0
            and self.source_height > 0
        )
