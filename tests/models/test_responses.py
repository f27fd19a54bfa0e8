"""Tests for response models."""

from datetime import UTC, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from screen_text_reader import models
from screen_text_reader.enums import InteractionMode, PointerButton, PointerEventKind
from screen_text_reader.models import (
    ContainerSize,
    HealthResponse,
    InteractionState,
    OcrResult,
    PointerEventRequest,
    Region,
    Resizing,
    SelectionSnapshot,
    StatusResponse,
)


class TestModelExports:
    """Tests for the public models package."""

    def test_api_bodies_exported(self) -> None:
        """
        Test that the request and response bodies used by the API are exported.

        """
        suffixes = ("Response", "Request", "Snapshot")
        exported = {name for name in models.__all__ if name.endswith(suffixes)}
        assert exported == {
            "HealthResponse",
            "PointerEventRequest",
            "ScreenshotResponse",
            "SelectionSnapshot",
            "SetRegionRequest",
            "StatusResponse",
        }


class TestHealthResponse:
    """Tests for HealthResponse model."""

    def test_create_health_response(self) -> None:
        """
        Test creating a HealthResponse.

        """
        response = HealthResponse(
            status="healthy",
            version="1.0.0",
            ocr_ready=True,
        )
        assert response.status == "healthy"
        assert response.version == "1.0.0"
        assert response.is_monitoring is False

    def test_health_response_rejects_unknown_status(self) -> None:
        """
        Test that only healthy and degraded are accepted.

        """
        with pytest.raises(ValidationError):
            HealthResponse(status="broken", version="1.0.0", ocr_ready=False)

    def test_health_response_rejects_extra_fields(self) -> None:
        """
        Test that unknown fields are rejected.

        """
        with pytest.raises(ValidationError):
            HealthResponse(status="healthy", version="1.0.0", ocr_ready=True, uptime=3)


class TestStatusResponse:
    """Tests for StatusResponse model."""

    def test_defaults(self) -> None:
        """
        Test an idle status.

        """
        response = StatusResponse(is_monitoring=False)
        assert response.region is None
        assert response.last_text == ""
        assert response.last_update is None
        assert response.ocr_ready is False
        assert response.has_screenshot is False

    def test_serializes_region(self) -> None:
        """
        Test that the region is serialized as a nested object.

        """
        response = StatusResponse(
            is_monitoring=True,
            region=Region(x=1, y=2, width=3, height=4),
            last_text="hello",
            last_update=datetime(2026, 1, 1, tzinfo=UTC),
        )
        data = response.model_dump(mode="json")
        assert data["region"] == {"x": 1, "y": 2, "width": 3, "height": 4}
        assert data["last_text"] == "hello"
        assert data["last_update"].startswith("2026-01-01T00:00:00")


class TestPointerEventRequest:
    """Tests for PointerEventRequest model."""

    def test_defaults(self) -> None:
        """
        Test that a leave event needs no coordinates.

        """
        request = PointerEventRequest(kind="leave")
        assert request.kind == PointerEventKind.LEAVE
        assert request.x == 0
        assert request.button == PointerButton.PRIMARY
        assert request.container is None

    def test_parses_full_event(self) -> None:
        """
        Test parsing a down event from JSON data.

        """
        request = PointerEventRequest.model_validate(
            {
                "kind": "down",
                "x": 12.5,
                "y": 40,
                "button": 2,
                "container": {"width": 900, "height": 600},
            }
        )
        assert request.button == PointerButton.SECONDARY
        assert request.container == ContainerSize(width=900, height=600)

    def test_unknown_kind_raises(self) -> None:
        """
        Test that an unknown event kind is rejected.

        """
        with pytest.raises(ValidationError):
            PointerEventRequest(kind="wheel")


class TestSelectionSnapshot:
    """Tests for SelectionSnapshot model."""

    def test_defaults(self) -> None:
        """
        Test an empty snapshot.

        """
        snapshot = SelectionSnapshot(mode=InteractionMode.IDLE)
        assert snapshot.region is None
        assert snapshot.overlay is None
        assert snapshot.events == []
        assert snapshot.model_dump(mode="json")["mode"] == "idle"


class TestInteractionState:
    """Tests for the InteractionState tagged union."""

    def test_discriminates_on_mode(self) -> None:
        """
        Test that the mode field selects the variant.

        """
        adapter = TypeAdapter(InteractionState)
        state = adapter.validate_python(
            {"mode": "resizing", "handle": "se", "anchor": {"x": 1, "y": 2}}
        )
        assert isinstance(state, Resizing)
        assert state.handle == "se"

    def test_rejects_fields_of_other_modes(self) -> None:
        """
        Test that a variant cannot carry another mode's data.

        """
        adapter = TypeAdapter(InteractionState)
        with pytest.raises(ValidationError):
            adapter.validate_python({"mode": "idle", "start": {"x": 0, "y": 0}})


class TestOcrResult:
    """Tests for OcrResult model."""

    def test_timestamp_is_utc(self) -> None:
        """
        Test that results are stamped in UTC.

        """
        result = OcrResult(text="abc")
        assert result.timestamp.tzinfo is UTC
