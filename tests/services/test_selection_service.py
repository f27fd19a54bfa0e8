"""Tests for the selection session service."""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from screen_text_reader.core.settings import AppSettings
from screen_text_reader.core.settings.app_settings import SelectionSettings
from screen_text_reader.enums import InteractionMode, PointerEventKind, SelectionEventKind
from screen_text_reader.models import ContainerSize, Region
from screen_text_reader.services.selection_service import InstructionsTimer, SelectionSession

CONTAINER = ContainerSize(width=1000, height=1000)


@pytest.fixture
def session(
    mock_settings: AppSettings,
    timer_factory: Callable[[float, Callable[[], None]], Any],
) -> SelectionSession:
    """
    Session with a loaded 1000x1000 source and manual timers.

    Args:
        mock_settings (AppSettings): Mock settings instance.
        timer_factory (Callable): Fake timer factory.

    Returns:
        SelectionSession: Session ready for pointer events.
    """
    mock_settings.selection = SelectionSettings(padding=0)
    session = SelectionSession(mock_settings, timer_factory=timer_factory)
    session.load_source(1000, 1000)
    return session


def select(session: SelectionSession) -> list:
    session.handle_pointer(PointerEventKind.DOWN, 100, 100, CONTAINER)
    session.handle_pointer(PointerEventKind.MOVE, 300, 250, CONTAINER)
    return session.handle_pointer(PointerEventKind.UP, 300, 250, CONTAINER)


class TestInstructionsTimer:
    """Tests for InstructionsTimer class."""

    def test_arm_starts_timer(
        self,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that arming starts a timer with the configured delay.

        """
        timer = InstructionsTimer(8.0, MagicMock(), timer_factory=timer_factory)
        timer.arm()
        assert timer.armed
        assert timers[0].started
        assert timers[0].delay == 8.0

    def test_expire_runs_action(
        self,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that the action runs when the timer fires.

        """
        action = MagicMock()
        timer = InstructionsTimer(8.0, action, timer_factory=timer_factory)
        timer.arm()
        timers[0].fire()
        action.assert_called_once()
        assert not timer.armed

    def test_rearm_cancels_previous(
        self,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that arming again replaces the running countdown.

        """
        timer = InstructionsTimer(8.0, MagicMock(), timer_factory=timer_factory)
        timer.arm()
        timer.arm()
        assert timers[0].cancelled
        assert not timers[1].cancelled

    def test_superseded_expiry_ignored(
        self,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that a replaced countdown neither runs the action nor disarms the new one.

        """
        action = MagicMock()
        timer = InstructionsTimer(8.0, action, timer_factory=timer_factory)
        timer.arm()
        timer.arm()

        timers[0].action()

        action.assert_not_called()
        assert timer.armed

    def test_cancel(
        self,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that a cancelled timer never runs its action.

        """
        action = MagicMock()
        timer = InstructionsTimer(8.0, action, timer_factory=timer_factory)
        timer.arm()
        timer.cancel()
        timers[0].fire()
        action.assert_not_called()
        assert not timer.armed

    def test_default_factory_uses_thread_timer(self) -> None:
        """
        Test that the default factory builds a daemon threading.Timer.

        """
        timer = InstructionsTimer(60.0, MagicMock())
        timer.arm()
        try:
            assert timer.armed
        finally:
            timer.cancel()


class TestSelectionSession:
    """Tests for SelectionSession class."""

    def test_load_source_shows_instructions(
        self,
        session: SelectionSession,
        timers: list[Any],
    ) -> None:
        """
        Test that loading an image shows instructions and arms the timer.

        """
        assert session.show_instructions
        assert timers[0].started
        assert timers[0].delay == 8.0

    def test_timer_dismisses_instructions(
        self,
        session: SelectionSession,
        timers: list[Any],
    ) -> None:
        """
        Test that the instructions hide when the timer fires.

        """
        timers[0].fire()
        assert not session.show_instructions

    def test_stale_timer_keeps_new_instructions(
        self,
        session: SelectionSession,
        timers: list[Any],
    ) -> None:
        """
        Test that a countdown firing after a new image was loaded is ignored.

        """
        session.load_source(800, 600)
        assert timers[0].cancelled

        # The first countdown was already running its callback when cancelled
        timers[0].action()

        assert session.show_instructions
        timers[1].fire()
        assert not session.show_instructions

    def test_starting_selection_dismisses_instructions(
        self,
        session: SelectionSession,
        timers: list[Any],
    ) -> None:
        """
        Test that the first gesture hides instructions and cancels the timer.

        """
        session.handle_pointer(PointerEventKind.DOWN, 100, 100, CONTAINER)
        assert not session.show_instructions
        assert timers[0].cancelled

    def test_zero_timeout_disables_auto_dismiss(
        self,
        mock_settings: AppSettings,
        timer_factory: Callable[[float, Callable[[], None]], Any],
        timers: list[Any],
    ) -> None:
        """
        Test that a zero timeout keeps the instructions until dismissed.

        """
        mock_settings.selection = SelectionSettings(instructions_timeout=0)
        session = SelectionSession(mock_settings, timer_factory=timer_factory)
        session.load_source(100, 100)
        assert session.show_instructions
        assert timers == []

    def test_selection_events_forwarded(self, session: SelectionSession) -> None:
        """
        Test that gestures notify event and region listeners.

        """
        on_event = MagicMock()
        on_region = MagicMock()
        session.add_event_listener(on_event)
        session.add_region_listener(on_region)

        events = select(session)

        assert [event.kind for event in events] == [SelectionEventKind.REGION_SELECTED]
        on_event.assert_called_once_with(events[0])
        on_region.assert_called_once_with(Region(x=100, y=100, width=200, height=150))

    def test_reset_emits_cleared(self, session: SelectionSession) -> None:
        """
        Test that clearing a selection emits one cleared event.

        """
        select(session)
        events = session.reset()
        assert [event.kind for event in events] == [SelectionEventKind.SELECTION_CLEARED]
        assert session.region is None
        assert session.reset() == []

    def test_set_region(self, session: SelectionSession) -> None:
        """
        Test that external regions are shown as the selection.

        """
        assert session.set_region(Region(x=10, y=10, width=50, height=50))
        assert session.region == Region(x=10, y=10, width=50, height=50)

    def test_snapshot_without_container(self, mock_settings: AppSettings) -> None:
        """
        Test that no overlay is derived before any container is known.

        """
        session = SelectionSession(mock_settings)
        snapshot = session.snapshot()
        assert snapshot.mode == InteractionMode.IDLE
        assert snapshot.overlay is None
        assert (snapshot.source_width, snapshot.source_height) == (0, 0)

    def test_snapshot_uses_last_container(self, session: SelectionSession) -> None:
        """
        Test that snapshots reuse the container of the last pointer event.

        """
        select(session)
        snapshot = session.snapshot()
        assert snapshot.region == Region(x=100, y=100, width=200, height=150)
        assert snapshot.overlay is not None
        assert len(snapshot.overlay.handles) == 8
        assert snapshot.show_instructions is False

    def test_dismiss_instructions(self, session: SelectionSession, timers: list[Any]) -> None:
        """
        Test manual dismissal.

        """
        session.dismiss_instructions()
        assert not session.show_instructions
        assert timers[0].cancelled

    def test_close_cancels_timer(self, session: SelectionSession, timers: list[Any]) -> None:
        """
        Test that closing cancels the pending auto-dismiss.

        """
        session.close()
        assert timers[0].cancelled
