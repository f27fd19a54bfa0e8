"""Screen Text Reader - region selection and OCR monitoring service."""

__version__ = "1.0.0"
