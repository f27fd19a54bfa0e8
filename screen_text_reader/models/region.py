"""Region model in source image pixel space."""

import json

from pydantic import BaseModel, ConfigDict, Field


class Region(BaseModel):
    """A rectangular region of the source image, top-left corner plus size."""

    x: int = Field(ge=0, description="Left x coordinate (pixels)")
    y: int = Field(ge=0, description="Top y coordinate (pixels)")
    width: int = Field(ge=0, description="Width of the region (pixels)")
    height: int = Field(ge=0, description="Height of the region (pixels)")

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        json_schema_extra={
            "example": {
                "x": 120,
                "y": 340,
                "width": 417,
                "height": 250,
            }
        },
    )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def is_valid(self) -> bool:
        """
        Check the region has positive dimensions.

        Returns:
            bool: True if both width and height are positive.
        """
        return self.width > 0 and self.height > 0

    def area(self) -> int:
        """
        Area of the region.

        Returns:
            int: Width times height in pixels.
        """
        return self.width * self.height

    def fits_within(self, width: int, height: int) -> bool:
        """
        Check the region lies inside an image of the given size.

        Args:
            width (int): Image width in pixels.
            height (int): Image height in pixels.

        Returns:
            bool: True if the region does not extend past the image edges.
        """
        return self.right <= width and self.bottom <= height

    def format_coordinates(self) -> str:
        """
        Format the region as indented JSON, suitable for copying.

        Returns:
            str: JSON object with x, y, width and height.
        """
        return json.dumps(
            {"x": self.x, "y": self.y, "width": self.width, "height": self.height},
            indent=2,
        )
