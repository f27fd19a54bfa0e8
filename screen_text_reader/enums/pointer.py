"""Pointer event enums."""

from enum import IntEnum, StrEnum


class PointerButton(IntEnum):
    """Mouse button, numbered like DOM ``MouseEvent.button``."""

    PRIMARY = 0
    AUXILIARY = 1
    SECONDARY = 2


class PointerEventKind(StrEnum):
    """Kind of raw pointer event delivered by the rendering surface."""

    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


class PointerTarget(StrEnum):
    """What a pointer position falls on."""

    BACKGROUND = "background"
    OVERLAY = "overlay"
    HANDLE = "handle"
