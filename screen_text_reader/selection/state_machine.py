"""Pointer-driven selection state machine.

Pointer events arrive in container-relative display units together with the
current container size. The machine owns the interaction state, a tagged union
of Idle / Selecting / Dragging / Resizing, and the published source-space
region. Only Idle may start a gesture and every gesture ends back in Idle.
"""

import logging
from collections.abc import Callable

from screen_text_reader.core.settings.app_settings import SelectionSettings
from screen_text_reader.enums import (
    HandleId,
    InteractionMode,
    PointerButton,
    PointerEventKind,
    PointerTarget,
    SelectionEventKind,
)
from screen_text_reader.models import (
    ContainerSize,
    Dragging,
    Idle,
    InteractionState,
    OverlayGeometry,
    Point,
    Rect,
    Region,
    Resizing,
    Selecting,
    SelectionEvent,
    Viewport,
)
from screen_text_reader.selection.geometry import GeometryPolicy, clamp
from screen_text_reader.selection.overlay import OverlayLayout
from screen_text_reader.selection.transform import image_bounds, to_display, to_source

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 8.0

RegionListener = Callable[[Region | None], None]
EventListener = Callable[[SelectionEvent], None]


class SelectionStateMachine:
    """Interaction engine turning pointer events into a selected region."""

    def __init__(
        self,
        policy: GeometryPolicy | None = None,
        layout: OverlayLayout | None = None,
        padding: float = DEFAULT_PADDING,
    ) -> None:
        """
        Initialize the engine in Idle with no source image.

        Args:
            policy (GeometryPolicy | None): Geometry rules, defaults if omitted.
            layout (OverlayLayout | None): Overlay derivation, built on the policy if omitted.
            padding (float): Padding around the displayed image.
        """
        self.policy = policy or GeometryPolicy()
        self.layout = layout or OverlayLayout(policy=self.policy)
        self.padding = padding

        self._state: InteractionState = Idle()
        self._region: Region | None = None
        self._pointer: Point | None = None
        self._container: ContainerSize | None = None
        self._source_width = 0
        self._source_height = 0

        self._region_listeners: list[RegionListener] = []
        self._event_listeners: list[EventListener] = []

    @classmethod
    def from_settings(cls, settings: SelectionSettings) -> "SelectionStateMachine":
        """
        Build an engine from selection settings.

        Args:
            settings (SelectionSettings): Selection configuration.

        Returns:
            SelectionStateMachine: Configured engine.
        """
        layout = OverlayLayout.from_settings(settings)
        return cls(policy=layout.policy, layout=layout, padding=settings.padding)

    # ---- read access ----

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def mode(self) -> InteractionMode:
        return self._state.mode

    @property
    def region(self) -> Region | None:
        return self._region

    @property
    def pointer(self) -> Point | None:
        return self._pointer

    @property
    def source_size(self) -> tuple[int, int]:
        return self._source_width, self._source_height

    def viewport(self, container: ContainerSize) -> Viewport:
        """
        Combine a container size with the loaded source dimensions.

        Args:
            container (ContainerSize): Container bounding box.

        Returns:
            Viewport: Viewport for this frame (may be invalid).
        """
        return Viewport(
            container_width=container.width,
            container_height=container.height,
            source_width=self._source_width,
            source_height=self._source_height,
            padding=self.padding,
        )

    def overlay(self, container: ContainerSize, show_instructions: bool = False) -> OverlayGeometry:
        """
        Derive the overlay for the current state.

        Args:
            container (ContainerSize): Container bounding box.
            show_instructions (bool): Whether the instructions are still shown.

        Returns:
            OverlayGeometry: Overlay description.
        """
        return self.layout.build(
            region=self._region,
            state=self._state,
            pointer=self._pointer,
            viewport=self.viewport(container),
            show_instructions=show_instructions,
        )

    # ---- subscriptions ----

    def add_region_listener(self, listener: RegionListener) -> None:
        """
        Subscribe to region changes.

        Args:
            listener (RegionListener): Called with the new region, or None on reset.
        """
        self._region_listeners.append(listener)

    def add_event_listener(self, listener: EventListener) -> None:
        """
        Subscribe to selection notifications.

        Args:
            listener (EventListener): Called with each emitted event.
        """
        self._event_listeners.append(listener)

    # ---- lifecycle ----

    def load_source(self, width: int, height: int) -> None:
        """
        Switch to a new source image, dropping any region and gesture.

        Args:
            width (int): Source image width in pixels.
            height (int): Source image height in pixels.
        """
        self.reset()
        self._source_width = width
        self._source_height = height
        logger.debug(f"Loaded source image {width}x{height}")

    def reset(self) -> None:
        """Return to Idle with no region and no gesture points."""
        had_region = self._region is not None
        self._state = Idle()
        self._region = None
        self._pointer = None
        if had_region:
            logger.info("Selection cleared")
            self._notify_region(None)

    def set_region(self, region: Region) -> bool:
        """
        Replace the region from outside a gesture.

        Args:
            region (Region): Region in source pixels.

        Returns:
            bool: True if the region was accepted.
        """
        if self.mode != InteractionMode.IDLE:
            logger.debug(f"Ignoring external region while {self.mode}")
            return False
        if not region.is_valid() or not region.fits_within(self._source_width, self._source_height):
            logger.debug(f"Ignoring external region outside the source image: {region}")
            return False
        self._publish(region)
        return True

    # ---- pointer events ----

    def handle(
        self,
        kind: PointerEventKind,
        x: float = 0.0,
        y: float = 0.0,
        container: ContainerSize | None = None,
        button: PointerButton = PointerButton.PRIMARY,
    ) -> list[SelectionEvent]:
        """
        Dispatch one raw pointer event.

        Args:
            kind (PointerEventKind): Event kind.
            x (float): Pointer x in container coordinates.
            y (float): Pointer y in container coordinates.
            container (ContainerSize | None): Container size, required except for leave.
            button (PointerButton): Button for down events.

        Returns:
            list[SelectionEvent]: Notifications produced by the event.

        Raises:
            ValueError: If a container is missing for a positional event.
        """
        if kind == PointerEventKind.LEAVE:
            return self.pointer_leave()
        if container is None:
            raise ValueError(f"Pointer {kind} event requires a container size")
        if kind == PointerEventKind.DOWN:
            return self.pointer_down(x, y, container, button)
        if kind == PointerEventKind.MOVE:
            return self.pointer_move(x, y, container)
        return self.pointer_up(x, y, container)

    def pointer_down(
        self,
        x: float,
        y: float,
        container: ContainerSize,
        button: PointerButton = PointerButton.PRIMARY,
    ) -> list[SelectionEvent]:
        """
        Start a selection, drag or resize depending on what is under the pointer.

        Args:
            x (float): Pointer x in container coordinates.
            y (float): Pointer y in container coordinates.
            container (ContainerSize): Container size.
            button (PointerButton): Pressed button.

        Returns:
            list[SelectionEvent]: Always empty; gestures only notify when they end.
        """
        if button != PointerButton.PRIMARY:
            logger.debug(f"Ignoring pointer down with button {button}")
            return []
        if self.mode != InteractionMode.IDLE:
            logger.debug(f"Ignoring pointer down while {self.mode}")
            return []

        viewport = self.viewport(container)
        if not viewport.is_valid():
            logger.debug("Ignoring pointer down without a valid viewport")
            return []

        self._container = container
        point = Point(x=x, y=y)
        self._pointer = point
        target, handle = self.layout.hit_test(point, self._region, self._state, viewport)

        if target == PointerTarget.HANDLE and handle is not None and self._region is not None:
            self._state = Resizing(handle=handle, anchor=point)
            logger.debug(f"Resize started with handle {handle}")
        elif target == PointerTarget.OVERLAY and self._region is not None:
            rect = to_display(self._region, viewport)
            self._state = Dragging(
                anchor=point,
                offset=Point(x=x - rect.left, y=y - rect.top),
            )
            logger.debug("Drag started")
        else:
            self._state = Selecting(start=point, current=point)
            logger.debug(f"Selection started at ({x:.1f}, {y:.1f})")
        return []

    def pointer_move(self, x: float, y: float, container: ContainerSize) -> list[SelectionEvent]:
        """
        Track the pointer and update the active gesture.

        Args:
            x (float): Pointer x in container coordinates.
            y (float): Pointer y in container coordinates.
            container (ContainerSize): Container size.

        Returns:
            list[SelectionEvent]: Always empty.
        """
        self._container = container
        self._pointer = Point(x=x, y=y)
        state = self._state

        if isinstance(state, Selecting):
            self._state = state.model_copy(update={"current": self._clamp_to_container(x, y, container)})
        elif isinstance(state, Dragging):
            self._update_drag(state, x, y, container)
        elif isinstance(state, Resizing):
            self._update_resize(state, x, y, container)
        return []

    def pointer_up(self, x: float, y: float, container: ContainerSize) -> list[SelectionEvent]:
        """
        Finish the active gesture at the given position.

        Args:
            x (float): Pointer x in container coordinates.
            y (float): Pointer y in container coordinates.
            container (ContainerSize): Container size.

        Returns:
            list[SelectionEvent]: Notifications for a finalized selection.
        """
        if self.mode == InteractionMode.IDLE:
            logger.debug("Ignoring pointer up without an active gesture")
            return []
        self.pointer_move(x, y, container)
        return self._commit(container)

    def pointer_leave(self) -> list[SelectionEvent]:
        """
        Handle the pointer leaving the container.

        An active gesture is committed at the last known pointer position.

        Returns:
            list[SelectionEvent]: Notifications for a finalized selection.
        """
        events: list[SelectionEvent] = []
        # A gesture only starts after a pointer down recorded the container
        if self.mode != InteractionMode.IDLE and self._container is not None:
            events = self._commit(self._container)
        self._pointer = None
        return events

    # ---- transitions ----

    def _commit(self, container: ContainerSize) -> list[SelectionEvent]:
        state = self._state
        self._state = Idle()
        if isinstance(state, Selecting):
            return self._finalize_selection(state, container)
        logger.debug(f"{state.mode.capitalize()} finished")
        return []

    def _finalize_selection(self, state: Selecting, container: ContainerSize) -> list[SelectionEvent]:
        viewport = self.viewport(container)
        if not viewport.is_valid():
            logger.warning("Discarding selection: viewport became invalid")
            return []

        events: list[SelectionEvent] = []
        drag = Rect.from_points(state.start, state.current)
        rect: Rect | None = None
        if not self.policy.is_degenerate(drag.width, drag.height):
            clamped = self.policy.clamp_to_bounds(drag, viewport)
            if self.policy.meets_minimum(clamped):
                rect = clamped
        if rect is None:
            rect = self.policy.default_box(state.current, container)
            events.append(
                SelectionEvent(
                    kind=SelectionEventKind.DEFAULT_BOX_CREATED,
                    message="Created default selection box",
                    description="You can now move or resize this selection area",
                )
            )

        region = to_source(rect, viewport)
        if not region.is_valid():
            logger.info("Selection does not overlap the image, keeping previous region")
            return []

        self._publish(region)
        events.append(
            SelectionEvent(
                kind=SelectionEventKind.REGION_SELECTED,
                message="Region selected",
                description=f"Size: {region.width}×{region.height} pixels",
                width=region.width,
                height=region.height,
            )
        )
        for event in events:
            self._notify_event(event)
        return events

    def _update_drag(self, state: Dragging, x: float, y: float, container: ContainerSize) -> None:
        viewport = self.viewport(container)
        if self._region is None or not viewport.is_valid():
            return
        rect = to_display(self._region, viewport)
        moved = Rect(
            left=x - state.offset.x,
            top=y - state.offset.y,
            width=rect.width,
            height=rect.height,
        )
        self._publish(to_source(self.policy.clamp_position(moved, viewport), viewport))

    def _update_resize(self, state: Resizing, x: float, y: float, container: ContainerSize) -> None:
        viewport = self.viewport(container)
        if self._region is None or not viewport.is_valid():
            return
        bounds = image_bounds(viewport)
        rect = to_display(self._region, viewport)
        left, top, width, height = rect.left, rect.top, rect.width, rect.height
        minimum = self.policy.min_selection_size

        mouse_x = clamp(x, bounds.left, bounds.right)
        mouse_y = clamp(y, bounds.top, bounds.bottom)
        handle: HandleId = state.handle

        if handle.moves_top:
            new_height = height + (top - mouse_y)
            if new_height >= minimum:
                height = new_height
                top = mouse_y
        if handle.moves_bottom:
            new_height = mouse_y - top
            if new_height >= minimum:
                height = new_height
        if handle.moves_left:
            new_width = width + (left - mouse_x)
            if new_width >= minimum:
                width = new_width
                left = mouse_x
        if handle.moves_right:
            new_width = mouse_x - left
            if new_width >= minimum:
                width = new_width

        resized = self.policy.clamp_to_bounds(
            Rect(left=left, top=top, width=width, height=height),
            viewport,
        )
        if not self.policy.meets_minimum(resized):
            logger.debug("Refusing resize: clamped selection would fall below the minimum size")
            return
        self._publish(to_source(resized, viewport))

    # ---- helpers ----

    @staticmethod
    def _clamp_to_container(x: float, y: float, container: ContainerSize) -> Point:
        return Point(
            x=clamp(x, 0.0, container.width),
            y=clamp(y, 0.0, container.height),
        )

    def _publish(self, region: Region) -> None:
        if region == self._region:
            return
        self._region = region
        logger.debug(f"Region updated: {region.x},{region.y} {region.width}x{region.height}")
        self._notify_region(region)

    def _notify_region(self, region: Region | None) -> None:
        for listener in self._region_listeners:
            listener(region)

    def _notify_event(self, event: SelectionEvent) -> None:
        for listener in self._event_listeners:
            listener(event)
