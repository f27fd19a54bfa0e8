"""Resize handle enum."""

from enum import StrEnum


class HandleId(StrEnum):
    """Resize handle named after the compass direction it sits at."""

    N = "n"
    S = "s"
    E = "e"
    W = "w"
    NE = "ne"
    NW = "nw"
    SE = "se"
    SW = "sw"

    @property
    def moves_top(self) -> bool:
        return "n" in self.value

    @property
    def moves_bottom(self) -> bool:
        return "s" in self.value

    @property
    def moves_left(self) -> bool:
        return "w" in self.value

    @property
    def moves_right(self) -> bool:
        return "e" in self.value
