"""OCR result model."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class OcrResult(BaseModel):
    """Text extracted from the monitored region."""

    text: str = Field(default="", description="Extracted text")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the text was extracted"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "text": "Hello world",
                "timestamp": "2024-05-01T12:00:00Z",
            }
        },
    )
