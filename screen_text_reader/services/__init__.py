"""Business logic services."""

from screen_text_reader.services.monitoring_service import MonitoringService
from screen_text_reader.services.ocr_service import OcrService
from screen_text_reader.services.selection_service import InstructionsTimer, SelectionSession

__all__ = [
    "InstructionsTimer",
    "MonitoringService",
    "OcrService",
    "SelectionSession",
]
