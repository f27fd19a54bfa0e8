"""Monitoring service - repeated OCR of the selected screenshot region."""

import asyncio
import hashlib
import logging
import threading

from cv2.typing import MatLike

from screen_text_reader.core.settings import AppSettings
from screen_text_reader.models import OcrResult, Region, StatusResponse
from screen_text_reader.services.ocr_service import (
    OcrService,
    crop_region,
    decode_image,
    encode_png,
)

logger = logging.getLogger(__name__)

# Every Nth pixel on each axis feeds the change detection digest
HASH_SAMPLE_STEP = 4


def region_digest(image: MatLike) -> str:
    """
    Cheap fingerprint of an image crop used to skip unchanged OCR passes.

    Args:
        image (MatLike): Cropped region.

    Returns:
        str: Hex digest of a sampled subset of the pixels.
    """
    sampled = image[::HASH_SAMPLE_STEP, ::HASH_SAMPLE_STEP]
    digest = hashlib.blake2b(digest_size=16)
    digest.update(str(image.shape).encode())
    digest.update(sampled.tobytes())
    return digest.hexdigest()


class MonitoringService:
    """Holds the latest screenshot and region, and reads text from it."""

    def __init__(self, settings: AppSettings, ocr_service: OcrService) -> None:
        """
        Initialize the monitoring service with nothing loaded.

        Args:
            settings (AppSettings): Application settings instance.
            ocr_service (OcrService): Service performing the OCR.
        """
        self.settings = settings
        self.ocr_service = ocr_service
        self._lock = threading.Lock()
        self._image: MatLike | None = None
        self._region: Region | None = None
        self._is_monitoring = False
        self._ocr_ready = False
        self._result: OcrResult | None = None
        self._last_digest: str | None = None

    @property
    def is_monitoring(self) -> bool:
        return self._is_monitoring

    @property
    def region(self) -> Region | None:
        return self._region

    @property
    def has_screenshot(self) -> bool:
        return self._image is not None

    @property
    def ocr_ready(self) -> bool:
        return self._ocr_ready

    @ocr_ready.setter
    def ocr_ready(self, value: bool) -> None:
        self._ocr_ready = value

    @property
    def result(self) -> OcrResult | None:
        return self._result

    def set_screenshot(self, image_bytes: bytes) -> tuple[int, int]:
        """
        Replace the monitored screenshot.

        Args:
            image_bytes (bytes): Encoded image bytes.

        Returns:
            tuple[int, int]: (width, height) of the decoded screenshot.

        Raises:
            ValueError: If the bytes are not a decodable image.
        """
        image = decode_image(image_bytes)
        height, width = image.shape[:2]
        with self._lock:
            self._image = image
            self._last_digest = None
        logger.info(f"Screenshot loaded: {width}x{height}")
        return width, height

    def set_region(self, region: Region | None) -> None:
        """
        Replace the region of interest.

        Clearing the region while monitoring stops the monitoring.

        Args:
            region (Region | None): Region in screenshot pixels, None to clear.

        Raises:
            ValueError: If the region has a non-positive dimension.
        """
        if region is not None and not region.is_valid():
            raise ValueError("Region must have positive width and height")
        with self._lock:
            self._region = region
            self._last_digest = None
            if region is None and self._is_monitoring:
                self._is_monitoring = False
                logger.info("Region cleared, monitoring stopped")
        if region is not None:
            logger.info(f"Monitoring region set: {region.format_coordinates()}")

    def follow_selection(self, region: Region | None) -> None:
        """
        Region listener for the selection session.

        Empty regions published mid-gesture are ignored.

        Args:
            region (Region | None): Published region, None when cleared.
        """
        if region is not None and not region.is_valid():
            logger.debug(f"Ignoring empty selection region: {region}")
            return
        self.set_region(region)

    def start(self) -> None:
        """
        Start monitoring the current region.

        Raises:
            ValueError: If monitoring is already active or no region is selected.
        """
        with self._lock:
            if self._is_monitoring:
                raise ValueError("Already monitoring")
            if self._region is None:
                raise ValueError("No region selected")
            self._is_monitoring = True
            self._last_digest = None
        logger.info("Monitoring started")

    def stop(self) -> None:
        """Stop monitoring, clearing the text but keeping its timestamp."""
        with self._lock:
            self._is_monitoring = False
            if self._result is not None:
                self._result = self._result.model_copy(update={"text": ""})
        logger.info("Monitoring stopped")

    def scan(self, force: bool = False) -> OcrResult | None:
        """
        Run one OCR pass over the region of the current screenshot.

        Args:
            force (bool): Run OCR even if the region did not change.

        Returns:
            OcrResult | None: New result, or None if the region was unchanged.

        Raises:
            ValueError: If no screenshot or region is loaded.
            RuntimeError: If image processing or OCR fails.
        """
        with self._lock:
            image = self._image
            region = self._region
            last_digest = self._last_digest
            was_monitoring = self._is_monitoring

        if image is None:
            raise ValueError("No screenshot loaded")
        if region is None:
            raise ValueError("No region selected")

        crop = crop_region(image, region)
        if crop.size == 0:
            raise ValueError("Region lies outside the screenshot")

        digest = region_digest(crop)
        if not force and digest == last_digest:
            return None

        text = self.ocr_service.extract_text(crop)
        result = OcrResult(text=text)
        with self._lock:
            if was_monitoring and not self._is_monitoring:
                logger.debug("Monitoring stopped during OCR pass, result discarded")
                return None
            self._result = result
            self._last_digest = digest
        logger.info(f"Extracted {len(text)} characters from region")
        return result

    def screenshot_png(self) -> bytes | None:
        """
        Encode the current screenshot as PNG.

        Returns:
            bytes | None: PNG bytes, or None if no screenshot is loaded.
        """
        image = self._image
        if image is None:
            return None
        return encode_png(image)

    def region_preview_png(self) -> bytes | None:
        """
        Encode the selected region of the current screenshot as PNG.

        Returns:
            bytes | None: PNG bytes, or None without a screenshot or region.
        """
        with self._lock:
            image = self._image
            region = self._region
        if image is None or region is None:
            return None
        crop = crop_region(image, region)
        if crop.size == 0:
            return None
        return encode_png(crop)

    def status(self) -> StatusResponse:
        """
        Describe the current monitoring state.

        Returns:
            StatusResponse: Monitoring flags, region and latest text.
        """
        with self._lock:
            result = self._result
            return StatusResponse(
                is_monitoring=self._is_monitoring,
                region=self._region,
                last_text=result.text if result is not None else "",
                last_update=result.timestamp if result is not None else None,
                ocr_ready=self._ocr_ready,
                has_screenshot=self._image is not None,
            )

    async def run(self) -> None:
        """
        Poll the region while monitoring is active.

        Runs until cancelled. OCR runs in a worker thread; failed passes are
        logged and retried after a back-off.
        """
        monitoring = self.settings.monitoring
        logger.info("Monitoring loop started")
        try:
            while True:
                if not self._is_monitoring or self._image is None:
                    await asyncio.sleep(monitoring.idle_interval_ms / 1000)
                    continue
                try:
                    await asyncio.to_thread(self.scan)
                except (ValueError, RuntimeError) as e:
                    logger.warning(f"Monitoring pass failed: {e}")
                    await asyncio.sleep(monitoring.error_backoff_ms / 1000)
                    continue
                await asyncio.sleep(monitoring.interval_ms / 1000)
        finally:
            logger.info("Monitoring loop stopped")
