"""Selection notification kind enum."""

from enum import StrEnum


class SelectionEventKind(StrEnum):
    """Notification emitted by the selection feature."""

    DEFAULT_BOX_CREATED = "default_box_created"
    REGION_SELECTED = "region_selected"
    SELECTION_CLEARED = "selection_cleared"
