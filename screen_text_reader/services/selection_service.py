"""Selection session - the UI-facing owner of the selection engine."""

import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Protocol

from screen_text_reader.core.settings import AppSettings
from screen_text_reader.enums import (
    InteractionMode,
    PointerButton,
    PointerEventKind,
    SelectionEventKind,
)
from screen_text_reader.models import ContainerSize, Region, SelectionEvent, SelectionSnapshot
from screen_text_reader.selection import SelectionStateMachine

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    """A started deferred action that can be cancelled."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


def _thread_timer(delay: float, action: Callable[[], None]) -> Cancellable:
    timer = threading.Timer(delay, action)
    timer.daemon = True
    return timer


class InstructionsTimer:
    """One-shot deferred dismissal of the selection instructions."""

    def __init__(
        self,
        delay: float,
        on_expire: Callable[[], None],
        timer_factory: TimerFactory = _thread_timer,
        lock: AbstractContextManager | None = None,
    ) -> None:
        """
        Initialize the timer without arming it.

        Args:
            delay (float): Seconds until the instructions are dismissed.
            on_expire (Callable[[], None]): Action run when the delay elapses.
            timer_factory (TimerFactory): Builds the underlying deferred action.
            lock (AbstractContextManager | None): Lock shared with the owner of the instructions.
        """
        self.delay = delay
        self._on_expire = on_expire
        self._timer_factory = timer_factory
        self._lock = lock or threading.RLock()
        self._timer: Cancellable | None = None

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def arm(self) -> None:
        """Start the countdown, replacing any countdown already running."""
        with self._lock:
            self.cancel()
            timer = self._timer_factory(self.delay, lambda: self._expire(timer))
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Stop the countdown if it is running."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _expire(self, timer: Cancellable) -> None:
        with self._lock:
            # A countdown replaced or cancelled while firing must not act
            if self._timer is not timer:
                logger.debug("Ignoring superseded instructions timer")
                return
            self._timer = None
            self._on_expire()


class SelectionSession:
    """Serialises pointer events into the engine and tracks UI-only state."""

    def __init__(
        self,
        settings: AppSettings,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        """
        Initialize the session with an empty engine.

        Args:
            settings (AppSettings): Application settings instance.
            timer_factory (TimerFactory): Builds the instructions countdown.
        """
        self.settings = settings
        self.engine = SelectionStateMachine.from_settings(settings.selection)
        self._lock = threading.RLock()
        self._container: ContainerSize | None = None
        self._show_instructions = False
        self._instructions_timer = InstructionsTimer(
            delay=settings.selection.instructions_timeout,
            on_expire=self.dismiss_instructions,
            timer_factory=timer_factory,
            lock=self._lock,
        )
        self._event_listeners: list[Callable[[SelectionEvent], None]] = []

    @property
    def show_instructions(self) -> bool:
        return self._show_instructions

    @property
    def region(self) -> Region | None:
        return self.engine.region

    def add_region_listener(self, listener: Callable[[Region | None], None]) -> None:
        """
        Forward every published region to a collaborator.

        Args:
            listener (Callable[[Region | None], None]): Receives the region, or None on reset.
        """
        self.engine.add_region_listener(listener)

    def add_event_listener(self, listener: Callable[[SelectionEvent], None]) -> None:
        """
        Forward every notification to a collaborator.

        Args:
            listener (Callable[[SelectionEvent], None]): Receives each event.
        """
        self._event_listeners.append(listener)

    def load_source(self, width: int, height: int) -> None:
        """
        Reset the session for a newly captured image.

        Args:
            width (int): Image width in pixels.
            height (int): Image height in pixels.
        """
        with self._lock:
            self.engine.load_source(width, height)
            self._show_instructions = True
            if self.settings.selection.instructions_timeout > 0:
                self._instructions_timer.arm()
        logger.info(f"Selection session ready for a {width}x{height} image")

    def reset(self) -> list[SelectionEvent]:
        """
        Clear the selection and any gesture in progress.

        Returns:
            list[SelectionEvent]: A cleared notification if a region existed.
        """
        with self._lock:
            had_region = self.engine.region is not None
            self.engine.reset()
        if not had_region:
            return []
        event = SelectionEvent(
            kind=SelectionEventKind.SELECTION_CLEARED,
            message="Selection cleared",
            description="Selection has been removed",
        )
        self._notify(event)
        return [event]

    def set_region(self, region: Region) -> bool:
        """
        Show an externally chosen region as the current selection.

        Args:
            region (Region): Region in source pixels.

        Returns:
            bool: True if the engine accepted the region.
        """
        with self._lock:
            return self.engine.set_region(region)

    def dismiss_instructions(self) -> None:
        """Hide the instructions and cancel the pending auto-dismiss."""
        with self._lock:
            self._instructions_timer.cancel()
            if self._show_instructions:
                logger.debug("Instructions dismissed")
            self._show_instructions = False

    def handle_pointer(
        self,
        kind: PointerEventKind,
        x: float = 0.0,
        y: float = 0.0,
        container: ContainerSize | None = None,
        button: PointerButton = PointerButton.PRIMARY,
    ) -> list[SelectionEvent]:
        """
        Feed one pointer event to the engine.

        Args:
            kind (PointerEventKind): Event kind.
            x (float): Pointer x in container coordinates.
            y (float): Pointer y in container coordinates.
            container (ContainerSize | None): Container size, required except for leave.
            button (PointerButton): Button for down events.

        Returns:
            list[SelectionEvent]: Notifications produced by the event.
        """
        with self._lock:
            if container is not None:
                self._container = container
            was_idle = self.engine.mode == InteractionMode.IDLE
            events = self.engine.handle(kind=kind, x=x, y=y, container=container, button=button)
            if was_idle and self.engine.mode != InteractionMode.IDLE and self._show_instructions:
                self.dismiss_instructions()
        for event in events:
            self._notify(event)
        return events

    def snapshot(
        self,
        container: ContainerSize | None = None,
        events: list[SelectionEvent] | None = None,
    ) -> SelectionSnapshot:
        """
        Describe the current selection for the rendering layer.

        Args:
            container (ContainerSize | None): Container size, the last seen one if omitted.
            events (list[SelectionEvent] | None): Events to report with the snapshot.

        Returns:
            SelectionSnapshot: Mode, region and overlay geometry.
        """
        with self._lock:
            container = container or self._container
            source_width, source_height = self.engine.source_size
            overlay = None
            if container is not None:
                overlay = self.engine.overlay(container, show_instructions=self._show_instructions)
            return SelectionSnapshot(
                mode=self.engine.mode,
                region=self.engine.region,
                source_width=source_width,
                source_height=source_height,
                show_instructions=self._show_instructions,
                overlay=overlay,
                events=events or [],
            )

    def close(self) -> None:
        """Cancel pending deferred actions."""
        self._instructions_timer.cancel()

    def _notify(self, event: SelectionEvent) -> None:
        logger.info(f"{event.message}: {event.description}")
        for listener in self._event_listeners:
            listener(event)
