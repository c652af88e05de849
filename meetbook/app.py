"""FastAPI application: HTTP endpoints for the calling agent.

Endpoints:

  GET  /health              Health check
  POST /api/availability    Next open slots (earliest first)
  POST /api/suggest         Open slots closest to a requested time
  POST /api/book            Create an event with a Google Meet link
  POST /api/cancel          Delete an event
  POST /api/webhook         Relay an inbound lead to Bland AI

Every /api route except the webhook requires the ``x-api-key`` header.
Errors are returned as ``{"error": message}``; request bodies that fail
validation get a 400 with the pydantic error list under ``details``.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

# Configure root logger early so all meetbook loggers have a handler
# when run via `uvicorn meetbook.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from meetbook.auth import get_settings, require_api_key
from meetbook.availability.timeutils import now
from meetbook.calendar_providers.base import CalendarProvider
from meetbook.config import Settings
from meetbook.config import settings as default_settings
from meetbook.errors import SchedulerError
from meetbook.models import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingRequest,
    BookingResponse,
    CancelRequest,
    CancelResponse,
    LeadWebhook,
    SuggestRequest,
    SuggestResponse,
    WebhookResponse,
)
from meetbook.services import AvailabilityService, BookingService, LeadRelay
from meetbook.services.availability import Clock

log = logging.getLogger("meetbook.app")

_START_TIME = time.time()


# ── Dependencies ──────────────────────────────────────────────────

async def get_calendar_provider(request: Request) -> CalendarProvider:
    """Return the app's calendar provider, building the Google one on first use.

    Runs on the event loop so concurrent requests never build two providers.
    """
    state = request.app.state
    if state.calendar_provider is None:
        from meetbook.calendar_providers.google import GoogleCalendarProvider

        state.calendar_provider = GoogleCalendarProvider.from_settings(state.settings)
    return state.calendar_provider


def get_availability_service(
    request: Request,
    provider: CalendarProvider = Depends(get_calendar_provider),
    settings: Settings = Depends(get_settings),
) -> AvailabilityService:
    return AvailabilityService(provider, settings, clock=request.app.state.clock)


def get_booking_service(
    provider: CalendarProvider = Depends(get_calendar_provider),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(provider, settings)


def get_lead_relay(request: Request) -> LeadRelay:
    return LeadRelay(request.app.state.settings, client=request.app.state.relay_client)


# ── Application factory ──────────────────────────────────────────

def create_app(
    settings: Optional[Settings] = None,
    calendar_provider: Optional[CalendarProvider] = None,
    clock: Optional[Clock] = None,
    relay_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-derived settings.
        calendar_provider: Provider to use instead of building the Google one.
        clock: ``clock(tz)`` returning the current instant in ``tz``.
        relay_client: httpx client for the Bland AI relay.
    """
    settings = settings or default_settings
    logging.getLogger().setLevel(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    )
    for warning in settings.validate_startup():
        log.warning(warning)

    app = FastAPI(
        title="Meeting Booker",
        description="Slot search and booking on a Google Calendar for a calling agent",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.calendar_provider = calendar_provider
    app.state.clock = clock or now
    app.state.relay_client = relay_client

    # ── Error handlers ─────────────────────────────────────────

    @app.exception_handler(SchedulerError)
    async def scheduler_error(request: Request, exc: SchedulerError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            {"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log.exception("%s %s crashed", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check: confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Scheduling ─────────────────────────────────────────────

    @app.post(
        "/api/availability",
        response_model=AvailabilityResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def availability(
        body: AvailabilityRequest,
        service: AvailabilityService = Depends(get_availability_service),
    ) -> AvailabilityResponse:
        """Return the next three open slots."""
        return await service.next_available(body)

    @app.post(
        "/api/suggest",
        response_model=SuggestResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def suggest(
        body: SuggestRequest,
        service: AvailabilityService = Depends(get_availability_service),
    ) -> SuggestResponse:
        """Return open slots ranked by distance to the requested start."""
        return await service.suggest(body)

    @app.post(
        "/api/book",
        response_model=BookingResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def book(
        body: BookingRequest,
        service: BookingService = Depends(get_booking_service),
    ) -> BookingResponse:
        return await service.book(body)

    @app.post(
        "/api/cancel",
        response_model=CancelResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def cancel(
        body: CancelRequest,
        service: BookingService = Depends(get_booking_service),
    ) -> CancelResponse:
        return await service.cancel(body)

    # ── Lead webhook ───────────────────────────────────────────

    @app.post("/api/webhook", response_model=WebhookResponse)
    async def webhook(
        body: LeadWebhook,
        relay: LeadRelay = Depends(get_lead_relay),
    ) -> WebhookResponse:
        """Start an outbound call for a lead pushed by the form automation."""
        return await relay.start_call(body)

    return app


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "meetbook.app:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_config=log_config,
    )
