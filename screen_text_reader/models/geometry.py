"""Display space geometry primitives."""

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A position in container-relative display units."""

    x: float = Field(description="Horizontal position")
    y: float = Field(description="Vertical position")

    model_config = ConfigDict(extra="forbid", frozen=True)


class Rect(BaseModel):
    """An axis-aligned rectangle in display units."""

    left: float = Field(description="Left edge")
    top: float = Field(description="Top edge")
    width: float = Field(description="Width")
    height: float = Field(description="Height")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "Rect":
        """
        Build the rectangle spanned by two opposite corners.

        Args:
            a (Point): One corner.
            b (Point): The opposite corner.

        Returns:
            Rect: Normalized rectangle with non-negative size.
        """
        return cls(
            left=min(a.x, b.x),
            top=min(a.y, b.y),
            width=abs(b.x - a.x),
            height=abs(b.y - a.y),
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return Point(x=self.left + self.width / 2, y=self.top + self.height / 2)

    def contains(self, point: Point) -> bool:
        """
        Check whether a point lies inside the rectangle (edges inclusive).

        Args:
            point (Point): Point to test.

        Returns:
            bool: True if the point is inside.
        """
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom
