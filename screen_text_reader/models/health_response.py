"""Health response model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Service liveness plus whether text extraction is usable."""

    status: Literal["healthy", "degraded"] = Field(
        description="healthy, or degraded while OCR is unavailable"
    )
    version: str = Field(description="Application version")
    ocr_ready: bool = Field(description="Whether tesseract was found at startup")
    is_monitoring: bool = Field(default=False, description="Whether the monitoring loop is active")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "ocr_ready": True,
                "is_monitoring": False,
            }
        },
    )
