"""Enumerations."""

from screen_text_reader.enums.cursor_kind import CursorKind
from screen_text_reader.enums.handle_id import HandleId
from screen_text_reader.enums.interaction_mode import InteractionMode
from screen_text_reader.enums.pointer import PointerButton, PointerEventKind, PointerTarget
from screen_text_reader.enums.selection_event_kind import SelectionEventKind

__all__ = [
    "CursorKind",
    "HandleId",
    "InteractionMode",
    "PointerButton",
    "PointerEventKind",
    "PointerTarget",
    "SelectionEventKind",
]
