"""Dependency injection providers."""

from functools import lru_cache

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from screen_text_reader.core.settings import get_settings
from screen_text_reader.services import MonitoringService, OcrService, SelectionSession

# API key header scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@lru_cache
def get_ocr_service() -> OcrService:
    """
    Get cached OCR service singleton.

    Returns:
        OcrService: The OCR service instance.
    """
    settings = get_settings()
    return OcrService(settings)


@lru_cache
def get_monitoring_service() -> MonitoringService:
    """
    Get cached monitoring service singleton.

    Returns:
        MonitoringService: The monitoring service instance.
    """
    settings = get_settings()
    return MonitoringService(settings, ocr_service=get_ocr_service())


@lru_cache
def get_selection_session() -> SelectionSession:
    """
    Get cached selection session singleton, wired to the monitoring service.

    Returns:
        SelectionSession: The selection session instance.
    """
    settings = get_settings()
    session = SelectionSession(settings)
    session.add_region_listener(get_monitoring_service().follow_selection)
    return session


def verify_api_key(api_key: str | None = Security(api_key_header)) -> str | None:
    """
    Verify API key from request header.

    Args:
        api_key: API key from X-API-Key header.

    Returns:
        str | None: The validated API key, or None if auth is disabled.

    Raises:
        HTTPException: 401 if API key is required but missing/invalid.
    """
    settings = get_settings()
    configured_key = settings.api_server.api_key

    # If no API key is configured, auth is disabled
    if configured_key is None:
        return None

    if api_key is None:
        raise HTTPException(
            status_code=401,
            detail="API key required",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != configured_key:
        raise HTTPException(
            status_code=401,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


def clear_dependency_caches() -> None:
    """Clear all dependency caches, cancelling the session's pending timers."""
    if get_selection_session.cache_info().currsize:
        get_selection_session().close()
    get_selection_session.cache_clear()
    get_monitoring_service.cache_clear()
    get_ocr_service.cache_clear()
