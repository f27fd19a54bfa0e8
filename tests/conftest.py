"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from unittest.mock import MagicMock, patch

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from screen_text_reader.api.dependencies import clear_dependency_caches
from screen_text_reader.api.server import app, limiter
from screen_text_reader.core.settings import AppSettings, reload_settings
from screen_text_reader.core.settings.app_settings import (
    APIServerSettings,
    LoggingSettings,
    OCRSettings,
)


class FakeTimer:
    """Manually fired stand-in for threading.Timer."""

    def __init__(self, delay: float, action: Callable[[], None]) -> None:
        self.delay = delay
        self.action = action
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.action()


@pytest.fixture
def mock_settings() -> AppSettings:
    """
    Create mock application settings for testing.

    Returns:
        AppSettings: Mock settings instance.
    """
    return AppSettings(
        api_server=APIServerSettings(
            host="127.0.0.1",
            port=8000,
            cors_allow_origins=["http://localhost:3000"],
            max_upload_size=50 * 1024 * 1024,
            rate_limit="100/minute",
        ),
        ocr=OCRSettings(
            tesseract_cmd=None,
            language="eng",
        ),
        logging=LoggingSettings(
            log_level="DEBUG",
            log_format="%(message)s",
        ),
    )


@pytest.fixture
def timers() -> list[FakeTimer]:
    """
    Collect the fake timers created by ``timer_factory``.

    Returns:
        list[FakeTimer]: Timers in creation order.
    """
    return []


@pytest.fixture
def timer_factory(timers: list[FakeTimer]) -> Callable[[float, Callable[[], None]], FakeTimer]:
    """
    Timer factory producing manually fired timers.

    Args:
        timers (list[FakeTimer]): Collector for created timers.

    Returns:
        Callable[[float, Callable[[], None]], FakeTimer]: The factory.
    """

    def factory(delay: float, action: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, action)
        timers.append(timer)
        return timer

    return factory


@pytest.fixture
def sample_image() -> np.ndarray:
    """
    Create a 400x300 white BGR image with a black block.

    Returns:
        np.ndarray: Image array.
    """
    img = np.ones((300, 400, 3), dtype=np.uint8) * 255
    img[100:150, 50:200] = 0
    return img


@pytest.fixture
def sample_image_bytes(sample_image: np.ndarray) -> bytes:
    """
    Encode the sample image as PNG.

    Args:
        sample_image (np.ndarray): Image array.

    Returns:
        bytes: PNG image bytes.
    """
    _, buffer = cv2.imencode(".png", sample_image)
    return buffer.tobytes()


@pytest.fixture
def invalid_image_bytes() -> bytes:
    """
    Create invalid image bytes for testing error handling.

    Returns:
        bytes: Invalid image data.
    """
    return b"not a valid image"


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    """
    Reset settings cache before each test.

    """
    reload_settings()


@pytest.fixture(autouse=True)
def reset_dependency_caches() -> Generator[None, None, None]:
    """
    Give every test fresh service singletons.

    Yields:
        None
    """
    clear_dependency_caches()
    yield
    clear_dependency_caches()


@pytest.fixture
def mock_tesseract_available() -> Generator[MagicMock, None, None]:
    """
    Mock tesseract as available.

    Yields:
        MagicMock: The mock object.
    """
    with patch(
        "screen_text_reader.core.utils.shutil.which",
        return_value="/usr/bin/tesseract",
    ) as mock_which:
        with patch("screen_text_reader.core.utils.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(
                stdout="tesseract 5.0.0\n leptonica-1.80.0",
                stderr="",
                returncode=0,
            )
            yield mock_which


@pytest.fixture
def mock_tesseract_unavailable() -> Generator[MagicMock, None, None]:
    """
    Mock tesseract as unavailable.

    Yields:
        MagicMock: The mock object.
    """
    with patch(
        "screen_text_reader.core.utils.shutil.which",
        return_value=None,
    ) as mock_which:
        yield mock_which


@pytest.fixture
def test_client(mock_tesseract_available: MagicMock) -> TestClient:
    """
    Create a test client for the FastAPI application.

    Args:
        mock_tesseract_available (MagicMock): Mock for tesseract availability.

    Returns:
        TestClient: FastAPI test client.
    """
    limiter.reset()
    return TestClient(app)
