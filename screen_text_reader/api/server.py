"""FastAPI application server."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from screen_text_reader import __version__
from screen_text_reader.api.dependencies import (
    get_monitoring_service,
    get_selection_session,
    verify_api_key,
)
from screen_text_reader.core.settings import get_settings
from screen_text_reader.core.utils import get_tesseract_version, setup_logging
from screen_text_reader.models import (
    ContainerSize,
    HealthResponse,
    PointerEventRequest,
    ScreenshotResponse,
    SelectionSnapshot,
    SetRegionRequest,
    StatusResponse,
)
from screen_text_reader.services import MonitoringService, SelectionSession

logger = logging.getLogger(__name__)

# Rate limiter instance
limiter = Limiter(key_func=get_remote_address)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Add security headers to response."""
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # Only add HSTS if behind HTTPS proxy (check X-Forwarded-Proto)
        if request.headers.get("X-Forwarded-Proto") == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Please try again later."},
    )


def log_monitor_task_exit(task: asyncio.Task[None]) -> None:
    """
    Report a monitoring loop that ended by anything other than cancellation.

    Args:
        task (asyncio.Task[None]): The finished monitoring task.
    """
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Monitoring loop crashed: {exc!r}", exc_info=exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Args:
        app (FastAPI): The FastAPI application instance.

    Yields:
        None
    """
    settings = get_settings()

    # Setup logging
    setup_logging(settings=settings.logging)

    logger.info(f"Starting Screen Text Reader v{__version__}")

    monitoring = get_monitoring_service()

    # Region selection works without tesseract; only OCR needs it
    tesseract_version = get_tesseract_version()
    if tesseract_version is None:
        logger.warning(
            "Tesseract OCR is not installed or not accessible, text extraction is disabled. "
            "Install tesseract:\n"
            "  Ubuntu/Debian: sudo apt-get install tesseract-ocr\n"
            "  macOS: brew install tesseract"
        )
    else:
        logger.info(f"Tesseract available: {tesseract_version}")
    monitoring.ocr_ready = tesseract_version is not None

    monitor_task = asyncio.create_task(monitoring.run())
    monitor_task.add_done_callback(log_monitor_task_exit)

    yield

    logger.info("Shutting down Screen Text Reader")
    if not monitor_task.done():
        monitor_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await monitor_task
    get_selection_session().close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Screen Text Reader",
        description="Select a screenshot region and read its text with OCR",
        version=__version__,
        lifespan=lifespan,
    )

    # Add rate limiter state and exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware - only add if origins are specified
    if settings.api_server.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api_server.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    return app


app = create_app()


def _container_from_query(width: float | None, height: float | None) -> ContainerSize | None:
    if width is None or height is None:
        return None
    return ContainerSize(width=width, height=height)


@app.get("/", include_in_schema=False)
async def index() -> dict[str, str]:
    """
    Service banner.

    Returns:
        dict[str, str]: Service name and docs link.
    """
    return {"message": "Screen Text Reader", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse)
async def health_check(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
) -> HealthResponse:
    """
    Health check endpoint (no auth required).

    Reports the tesseract availability found at startup instead of probing again.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        HealthResponse: Health status including version and OCR readiness.
    """
    return HealthResponse(
        status="healthy" if monitoring.ocr_ready else "degraded",
        version=__version__,
        ocr_ready=monitoring.ocr_ready,
        is_monitoring=monitoring.is_monitoring,
    )


@app.post("/api/screenshot", response_model=ScreenshotResponse)
async def upload_screenshot(
    image: Annotated[UploadFile, File(description="Captured screenshot")],
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
    session: Annotated[SelectionSession, Depends(get_selection_session)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> ScreenshotResponse:
    """
    Load a captured screenshot as the selection and monitoring source.

    The current selection is discarded.

    Requires API key authentication if configured.

    Args:
        image (UploadFile): Encoded screenshot.
        monitoring (MonitoringService): Injected monitoring service.
        session (SelectionSession): Injected selection session.

    Returns:
        ScreenshotResponse: Screenshot dimensions.
    """
    max_size = get_settings().api_server.max_upload_size
    image_bytes = await image.read()
    if len(image_bytes) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds maximum size of {max_size // (1024 * 1024)}MB",
        )

    try:
        width, height = monitoring.set_screenshot(image_bytes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    session.load_source(width, height)
    return ScreenshotResponse(width=width, height=height)


@app.get("/api/screenshot/latest", response_class=Response)
async def latest_screenshot(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
) -> Response:
    """
    Latest screenshot as PNG.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        Response: PNG image.
    """
    try:
        png = monitoring.screenshot_png()
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    if png is None:
        raise HTTPException(status_code=404, detail="No screenshot available")
    return Response(content=png, media_type="image/png")


@app.get("/api/region/preview", response_class=Response)
async def region_preview(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
) -> Response:
    """
    Selected region of the latest screenshot as PNG.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        Response: PNG image.
    """
    try:
        png = monitoring.region_preview_png()
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    if png is None:
        raise HTTPException(status_code=404, detail="No region preview available")
    return Response(content=png, media_type="image/png")


@app.post("/api/region", response_model=StatusResponse)
async def set_region(
    body: SetRegionRequest,
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
    session: Annotated[SelectionSession, Depends(get_selection_session)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> StatusResponse:
    """
    Set the monitored region directly.

    Requires API key authentication if configured.

    Args:
        body (SetRegionRequest): Region to monitor.
        monitoring (MonitoringService): Injected monitoring service.
        session (SelectionSession): Injected selection session.

    Returns:
        StatusResponse: Monitoring status after the change.
    """
    try:
        monitoring.set_region(body.region)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if not session.set_region(body.region):
        logger.info("Region set for monitoring only; it does not fit the current selection")
    return monitoring.status()


@app.get("/api/status", response_model=StatusResponse)
async def get_status(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
) -> StatusResponse:
    """
    Current monitoring status.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        StatusResponse: Monitoring flags, region and latest text.
    """
    return monitoring.status()


@app.post("/api/monitor/start", response_model=StatusResponse)
async def start_monitoring(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> StatusResponse:
    """
    Start monitoring the selected region and read it once right away.

    Requires API key authentication if configured.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        StatusResponse: Monitoring status after the initial scan.
    """
    try:
        monitoring.start()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if monitoring.has_screenshot:
        try:
            await asyncio.to_thread(monitoring.scan, True)
        except (ValueError, RuntimeError) as e:
            logger.warning(f"Initial scan failed: {e}")
    return monitoring.status()


@app.post("/api/monitor/stop", response_model=StatusResponse)
async def stop_monitoring(
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> StatusResponse:
    """
    Stop monitoring.

    Requires API key authentication if configured.

    Args:
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        StatusResponse: Monitoring status after stopping.
    """
    monitoring.stop()
    return monitoring.status()


@app.post("/api/monitor/scan", response_model=StatusResponse)
@limiter.limit(lambda: get_settings().api_server.rate_limit)
async def scan_now(
    request: Request,
    monitoring: Annotated[MonitoringService, Depends(get_monitoring_service)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> StatusResponse:
    """
    Run one OCR pass over the selected region now.

    Requires API key authentication if configured.

    Args:
        request (Request): The request object (required for rate limiting).
        monitoring (MonitoringService): Injected monitoring service.

    Returns:
        StatusResponse: Monitoring status including the new text.
    """
    try:
        await asyncio.to_thread(monitoring.scan, True)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return monitoring.status()


@app.get("/api/selection", response_model=SelectionSnapshot)
async def get_selection(
    session: Annotated[SelectionSession, Depends(get_selection_session)],
    width: Annotated[float | None, Query(gt=0, description="Container width")] = None,
    height: Annotated[float | None, Query(gt=0, description="Container height")] = None,
) -> SelectionSnapshot:
    """
    Current selection state and overlay geometry.

    Args:
        session (SelectionSession): Injected selection session.
        width (float | None): Container width, the last known one if omitted.
        height (float | None): Container height, the last known one if omitted.

    Returns:
        SelectionSnapshot: Selection snapshot.
    """
    return session.snapshot(container=_container_from_query(width, height))


@app.post("/api/selection/pointer", response_model=SelectionSnapshot)
async def pointer_event(
    body: PointerEventRequest,
    session: Annotated[SelectionSession, Depends(get_selection_session)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> SelectionSnapshot:
    """
    Feed one pointer event to the selection engine.

    Requires API key authentication if configured.

    Args:
        body (PointerEventRequest): Pointer event.
        session (SelectionSession): Injected selection session.

    Returns:
        SelectionSnapshot: Snapshot after the event, with the events it produced.
    """
    try:
        events = session.handle_pointer(
            kind=body.kind,
            x=body.x,
            y=body.y,
            container=body.container,
            button=body.button,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return session.snapshot(container=body.container, events=events)


@app.post("/api/selection/reset", response_model=SelectionSnapshot)
async def reset_selection(
    session: Annotated[SelectionSession, Depends(get_selection_session)],
    _api_key: Annotated[str | None, Depends(verify_api_key)],
) -> SelectionSnapshot:
    """
    Clear the selection.

    Requires API key authentication if configured.

    Args:
        session (SelectionSession): Injected selection session.

    Returns:
        SelectionSnapshot: Snapshot after the reset.
    """
    events = session.reset()
    return session.snapshot(events=events)


@app.post("/api/selection/instructions/dismiss", response_model=SelectionSnapshot)
async def dismiss_instructions(
    session: Annotated[SelectionSession, Depends(get_selection_session)],
) -> SelectionSnapshot:
    """
    Hide the selection instructions.

    Args:
        session (SelectionSession): Injected selection session.

    Returns:
        SelectionSnapshot: Snapshot after dismissing.
    """
    session.dismiss_instructions()
    return session.snapshot()
