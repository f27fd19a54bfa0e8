"""OCR service - text extraction from a screenshot region."""

import logging

import cv2
import numpy as np
import pytesseract
from cv2.typing import MatLike

from screen_text_reader.core.settings import AppSettings
from screen_text_reader.models import Region

logger = logging.getLogger(__name__)


def decode_image(image_bytes: bytes) -> MatLike:
    """
    Decode an encoded image (PNG, JPEG, ...) into a BGR array.

    Args:
        image_bytes (bytes): Encoded image bytes.

    Returns:
        MatLike: Decoded image.

    Raises:
        ValueError: If the bytes are not a decodable image.
    """
    if not image_bytes:
        raise ValueError("Empty image")
    nparr = np.frombuffer(buffer=image_bytes, dtype=np.uint8)
    try:
        image = cv2.imdecode(buf=nparr, flags=cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ValueError("Failed to decode image") from e
    if image is None:
        raise ValueError("Failed to decode image")
    return image


def encode_png(image: MatLike) -> bytes:
    """
    Encode an image as PNG.

    Args:
        image (MatLike): Image to encode.

    Returns:
        bytes: PNG bytes.

    Raises:
        RuntimeError: If encoding fails.
    """
    ok, buffer = cv2.imencode(ext=".png", img=image)
    if not ok:
        raise RuntimeError("Failed to encode image")
    return buffer.tobytes()


def crop_region(image: MatLike, region: Region) -> MatLike:
    """
    Crop a region out of an image, clipped to the image bounds.

    Args:
        image (MatLike): Source image.
        region (Region): Region in image pixels.

    Returns:
        MatLike: Cropped view, empty if the region lies outside the image.
    """
    height, width = image.shape[:2]
    x1 = min(region.x, width)
    y1 = min(region.y, height)
    x2 = min(region.right, width)
    y2 = min(region.bottom, height)
    return image[y1:y2, x1:x2]


class OcrService:
    """Service extracting text from image regions with tesseract."""

    def __init__(self, settings: AppSettings) -> None:
        """
        Initialize the OCR service.

        Args:
            settings (AppSettings): Application settings instance.
        """
        self.settings = settings
        if settings.ocr.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = settings.ocr.tesseract_cmd

        # Cache CLAHE object for image enhancement
        self.clahe = cv2.createCLAHE(
            clipLimit=settings.ocr.clahe_clip_limit,
            tileGridSize=(
                settings.ocr.clahe_grid_size,
                settings.ocr.clahe_grid_size,
            ),
        )

    def preprocess(self, image: MatLike) -> MatLike:
        """
        Prepare an image for tesseract.

        Upscales, converts to grayscale, enhances contrast and optionally
        inverts colors.

        Args:
            image (MatLike): BGR image.

        Returns:
            MatLike: Single channel image ready for OCR.
        """
        scale_factor = self.settings.ocr.scale_factor
        if scale_factor > 1:
            image = cv2.resize(
                src=image,
                dsize=None,
                fx=scale_factor,
                fy=scale_factor,
                interpolation=cv2.INTER_CUBIC,
            )

        gray = cv2.cvtColor(src=image, code=cv2.COLOR_BGR2GRAY)
        enhanced = self.clahe.apply(gray)

        if self.settings.ocr.use_invert:
            return cv2.bitwise_not(enhanced)
        return enhanced

    def _image_to_text(self, image: MatLike) -> str:
        if image is None or image.size == 0:
            return ""
        processed = self.preprocess(image)
        text: str = pytesseract.image_to_string(
            image=processed,
            config=f"--psm {self.settings.ocr.psm}",
            lang=self.settings.ocr.language,
        )
        return text.strip()

    def extract_text(self, image: MatLike, region: Region | None = None) -> str:
        """
        Extract text from an image, or from one region of it.

        Args:
            image (MatLike): Decoded BGR image.
            region (Region | None): Region to read, the whole image if omitted.

        Returns:
            str: Extracted text, stripped.

        Raises:
            RuntimeError: If image processing or OCR fails.
        """
        try:
            target = crop_region(image, region) if region is not None else image
            return self._image_to_text(target)
        except cv2.error as e:
            logger.error(f"OpenCV error during OCR: {e}")
            raise RuntimeError("Image processing error") from e
        except pytesseract.TesseractError as e:
            logger.error(f"Tesseract OCR error: {e}")
            raise RuntimeError("OCR processing error") from e
        except pytesseract.TesseractNotFoundError as e:
            logger.error(f"Tesseract not available: {e}")
            raise RuntimeError("Tesseract is not installed") from e

    def extract_text_from_bytes(self, image_bytes: bytes, region: Region | None = None) -> str:
        """
        Decode an encoded image and extract text from it.

        Args:
            image_bytes (bytes): Encoded image bytes.
            region (Region | None): Region to read, the whole image if omitted.

        Returns:
            str: Extracted text, stripped.

        Raises:
            ValueError: If the image cannot be decoded.
            RuntimeError: If image processing or OCR fails.
        """
        logger.info("Processing image for OCR")
        image = decode_image(image_bytes)
        return self.extract_text(image, region)
