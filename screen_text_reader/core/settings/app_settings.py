"""Application settings using pydantic-settings."""

import os

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIServerSettings(BaseModel):
    """API server configuration."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")
    cors_allow_origins: list[str] = Field(
        default_factory=list, description="CORS allowed origins (empty = no CORS)"
    )
    max_upload_size: int = Field(
        default=50 * 1024 * 1024, description="Max screenshot upload size in bytes (default 50MB)"
    )
    rate_limit: str = Field(default="30/minute", description="Rate limit for the scan endpoint")
    api_key: str | None = Field(
        default=None, description="API key for authentication (None = auth disabled)"
    )


class SelectionSettings(BaseModel):
    """Region selection geometry configuration (display units)."""

    min_selection_size: float = Field(
        default=10.0, gt=0, description="Smallest drag treated as an intended selection"
    )
    default_width: float = Field(default=250.0, gt=0, description="Default box width")
    default_height: float = Field(default=150.0, gt=0, description="Default box height")
    padding: float = Field(default=8.0, ge=0, description="Padding around the displayed image")
    handle_size: float = Field(default=8.0, gt=0, description="Resize handle square size")
    instructions_timeout: float = Field(
        default=8.0, ge=0, description="Seconds before the instructions auto-dismiss"
    )
    size_indicator_width: float = Field(default=70.0, gt=0, description="Size label width")
    size_indicator_height: float = Field(default=25.0, gt=0, description="Size label height")
    size_indicator_gap: float = Field(
        default=5.0, ge=0, description="Gap between the selection and the size label"
    )


class OCRSettings(BaseModel):
    """OCR processing configuration."""

    tesseract_cmd: str | None = Field(
        default=None, description="Path to tesseract binary (None = auto-detect)"
    )
    language: str = Field(default="eng", description="Tesseract language codes (+ separated)")
    psm: int = Field(default=6, ge=0, le=13, description="Tesseract page segmentation mode")
    scale_factor: int = Field(
        default=2, ge=1, le=10, description="Upscale factor applied before OCR"
    )
    clahe_clip_limit: float = Field(
        default=2.0, ge=0.1, le=10.0, description="CLAHE clip limit for contrast enhancement"
    )
    clahe_grid_size: int = Field(
        default=8, ge=2, le=32, description="CLAHE grid size for contrast enhancement"
    )
    use_invert: bool = Field(default=False, description="Invert colors before OCR")

    @field_validator("tesseract_cmd")
    @classmethod
    def validate_tesseract_cmd(cls, v: str | None) -> str | None:
        """Validate tesseract command path exists and is executable."""
        if v is None:
            return v
        if not os.path.isfile(v):
            raise ValueError(f"Tesseract binary not found: {v}")
        if not os.access(v, os.X_OK):
            raise ValueError(f"Tesseract binary not executable: {v}")
        return v

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate language string is not empty."""
        if not v or not v.strip():
            raise ValueError("Language string cannot be empty")
        return v.strip()


class MonitoringSettings(BaseModel):
    """Background monitoring loop configuration."""

    interval_ms: int = Field(
        default=200, ge=10, description="Minimum time between two OCR passes"
    )
    idle_interval_ms: int = Field(
        default=500, ge=10, description="Poll interval while monitoring is inactive"
    )
    error_backoff_ms: int = Field(
        default=1000, ge=10, description="Delay after a failed OCR pass"
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    loggers: dict[str, str] = Field(default={}, description="Loggers and their levels")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        description="Log format",
    )
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Log date format")
    rotate_logs: bool = Field(default=False, description="Rotate logs daily")
    log_file: str | None = Field(default=None, description="Log file to write to")


class AppSettings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="STR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_server: APIServerSettings = Field(default_factory=APIServerSettings)
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    ocr: OCRSettings = Field(default_factory=OCRSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
