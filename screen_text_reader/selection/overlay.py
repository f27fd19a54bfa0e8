"""Presentational geometry derived from the selection state.

Nothing here holds state: every value is recomputed from the published region,
the interaction state, the last pointer position and the viewport.
"""

from screen_text_reader.core.settings.app_settings import SelectionSettings
from screen_text_reader.enums import HandleId, InteractionMode, PointerTarget
from screen_text_reader.models import (
    ContainerSize,
    HandleBox,
    InteractionState,
    OverlayGeometry,
    Point,
    Rect,
    Region,
    Selecting,
    SizeIndicator,
    UiFlags,
    Viewport,
)
from screen_text_reader.selection.geometry import GeometryPolicy, resize_handle_cursor
from screen_text_reader.selection.transform import to_display, to_source_length

SIZE_INDICATOR_WIDTH = 70.0
SIZE_INDICATOR_HEIGHT = 25.0
SIZE_INDICATOR_GAP = 5.0

# Corners are tested before edges so small selections resize diagonally
HIT_TEST_ORDER = (
    HandleId.NW,
    HandleId.NE,
    HandleId.SE,
    HandleId.SW,
    HandleId.N,
    HandleId.E,
    HandleId.S,
    HandleId.W,
)


def pointer_in_container(point: Point | None, container: ContainerSize) -> bool:
    """
    Check a pointer position lies within the container.

    Args:
        point (Point | None): Pointer position, None once the pointer left.
        container (ContainerSize): Container bounding box.

    Returns:
        bool: True if the pointer is inside the container.
    """
    if point is None:
        return False
    return 0 <= point.x <= container.width and 0 <= point.y <= container.height


class OverlayLayout:
    """Derives overlay rectangle, handles, size label, helper and flags."""

    def __init__(
        self,
        policy: GeometryPolicy | None = None,
        indicator_width: float = SIZE_INDICATOR_WIDTH,
        indicator_height: float = SIZE_INDICATOR_HEIGHT,
        indicator_gap: float = SIZE_INDICATOR_GAP,
    ) -> None:
        self.policy = policy or GeometryPolicy()
        self.indicator_width = indicator_width
        self.indicator_height = indicator_height
        self.indicator_gap = indicator_gap

    @classmethod
    def from_settings(cls, settings: SelectionSettings) -> "OverlayLayout":
        """
        Build a layout from selection settings.

        Args:
            settings (SelectionSettings): Selection configuration.

        Returns:
            OverlayLayout: Configured layout.
        """
        return cls(
            policy=GeometryPolicy.from_settings(settings),
            indicator_width=settings.size_indicator_width,
            indicator_height=settings.size_indicator_height,
            indicator_gap=settings.size_indicator_gap,
        )

    def selection_rect(
        self,
        region: Region | None,
        state: InteractionState,
        viewport: Viewport,
    ) -> Rect | None:
        """
        Overlay rectangle in display units.

        Args:
            region (Region | None): Published region.
            state (InteractionState): Current interaction state.
            viewport (Viewport): Current viewport.

        Returns:
            Rect | None: Live drag rectangle while selecting, the displayed
            region otherwise, None when nothing is selected.
        """
        if isinstance(state, Selecting):
            return Rect.from_points(state.start, state.current)
        if region is None or not viewport.is_valid():
            return None
        return to_display(region, viewport)

    def handles(
        self,
        region: Region | None,
        state: InteractionState,
        viewport: Viewport,
    ) -> list[HandleBox]:
        """
        Visible resize handles.

        Args:
            region (Region | None): Published region.
            state (InteractionState): Current interaction state.
            viewport (Viewport): Current viewport.

        Returns:
            list[HandleBox]: Eight handles, or none while selecting or without a region.
        """
        if region is None or state.mode == InteractionMode.SELECTING:
            return []
        rect = self.selection_rect(region, state, viewport)
        if rect is None:
            return []
        return [
            HandleBox(handle=handle, rect=square, cursor=resize_handle_cursor(handle))
            for handle, square in self.policy.handle_layout(rect).items()
        ]

    def size_indicator(
        self,
        region: Region | None,
        state: InteractionState,
        viewport: Viewport,
    ) -> SizeIndicator | None:
        """
        Size label placed at the selection's top-right corner.

        The label flips to the other side of the corner on an axis where it
        would overflow the container. Its text is the source pixel size.

        Args:
            region (Region | None): Published region.
            state (InteractionState): Current interaction state.
            viewport (Viewport): Current viewport.

        Returns:
            SizeIndicator | None: Label, or None while idle.
        """
        if state.mode == InteractionMode.IDLE or not viewport.is_valid():
            return None
        rect = self.selection_rect(region, state, viewport)
        if rect is None:
            return None

        anchor_x = rect.right
        anchor_y = rect.top
        left = anchor_x + self.indicator_gap
        top = anchor_y + self.indicator_gap
        if left + self.indicator_width > viewport.container_width:
            left = anchor_x - self.indicator_gap - self.indicator_width
        if top + self.indicator_height > viewport.container_height:
            top = anchor_y - self.indicator_gap - self.indicator_height

        return SizeIndicator(
            position=Point(x=left, y=top),
            width=to_source_length(rect.width, viewport),
            height=to_source_length(rect.height, viewport),
        )

    def helper(
        self,
        state: InteractionState,
        pointer: Point | None,
        container: ContainerSize,
    ) -> Point | None:
        """
        Crosshair position shown while idle.

        Args:
            state (InteractionState): Current interaction state.
            pointer (Point | None): Last pointer position.
            container (ContainerSize): Container bounding box.

        Returns:
            Point | None: Pointer position, or None outside idle or the container.
        """
        if state.mode != InteractionMode.IDLE:
            return None
        if not pointer_in_container(pointer, container):
            return None
        return pointer

    def flags(
        self,
        state: InteractionState,
        pointer: Point | None,
        container: ContainerSize,
        show_instructions: bool = False,
    ) -> UiFlags:
        """
        Visibility flags for the selection affordances.

        Args:
            state (InteractionState): Current interaction state.
            pointer (Point | None): Last pointer position.
            container (ContainerSize): Container bounding box.
            show_instructions (bool): Whether the instructions are still shown.

        Returns:
            UiFlags: Derived flags.
        """
        return UiFlags(
            show_instructions=show_instructions,
            show_helper=self.helper(state, pointer, container) is not None,
            show_size_indicator=state.mode != InteractionMode.IDLE,
        )

    def hit_test(
        self,
        point: Point,
        region: Region | None,
        state: InteractionState,
        viewport: Viewport,
    ) -> tuple[PointerTarget, HandleId | None]:
        """
        Resolve what a pointer position falls on.

        Args:
            point (Point): Pointer position.
            region (Region | None): Published region.
            state (InteractionState): Current interaction state.
            viewport (Viewport): Current viewport.

        Returns:
            tuple[PointerTarget, HandleId | None]: Target, plus the handle id
            when the target is a handle.
        """
        squares = {box.handle: box.rect for box in self.handles(region, state, viewport)}
        for handle in HIT_TEST_ORDER:
            square = squares.get(handle)
            if square is not None and square.contains(point):
                return PointerTarget.HANDLE, handle

        if region is not None and state.mode != InteractionMode.SELECTING:
            rect = self.selection_rect(region, state, viewport)
            if rect is not None and rect.contains(point):
                return PointerTarget.OVERLAY, None

        return PointerTarget.BACKGROUND, None

    def build(
        self,
        region: Region | None,
        state: InteractionState,
        pointer: Point | None,
        viewport: Viewport,
        show_instructions: bool = False,
    ) -> OverlayGeometry:
        """
        Derive the complete overlay for one render.

        Args:
            region (Region | None): Published region.
            state (InteractionState): Current interaction state.
            pointer (Point | None): Last pointer position.
            viewport (Viewport): Current viewport.
            show_instructions (bool): Whether the instructions are still shown.

        Returns:
            OverlayGeometry: Overlay description.
        """
        container = ContainerSize(
            width=viewport.container_width,
            height=viewport.container_height,
        )
        return OverlayGeometry(
            mode=state.mode,
            selection=self.selection_rect(region, state, viewport),
            handles=self.handles(region, state, viewport),
            size_indicator=self.size_indicator(region, state, viewport),
            helper=self.helper(state, pointer, container),
            flags=self.flags(state, pointer, container, show_instructions),
        )
