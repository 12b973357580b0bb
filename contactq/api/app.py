"""FastAPI status surface for the contact saver"""

from __future__ import annotations

import importlib
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from contactq.api.dashboard import render_dashboard
from contactq.api.models import (
    FlushResponse,
    HealthResponse,
    InitResponse,
    SessionInfoResponse,
    StatusResponse,
)
from contactq.config import APP_VERSION, Settings
from contactq.contacts.flush import FlushResult, FlushStatus
from contactq.observability.logging import get_logger
from contactq.service import ContactSaverService
from contactq.transport.events import EventQueue, MessagingTransport
from contactq.transport.supervisor import TransportSupervisor

logger = get_logger(__name__)


def _flush_response(result: FlushResult) -> JSONResponse:
    body = FlushResponse(
        ok=result.ok, status=result.status.value, count=result.count, message=result.message
    )
    code = (
        status.HTTP_500_INTERNAL_SERVER_ERROR
        if result.status is FlushStatus.FAILED
        else status.HTTP_200_OK
    )
    return JSONResponse(status_code=code, content=body.model_dump())


def create_app(
    service: ContactSaverService, supervisor: TransportSupervisor | None = None
) -> FastAPI:
    """
    Build the HTTP app around an already-wired service.

    When a supervisor is given, the app lifespan starts the intake consumer
    and the transport retry loop, and stops both on shutdown.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if supervisor is not None:
            supervisor.queue.start()
            supervisor.start()
        try:
            yield
        finally:
            if supervisor is not None:
                await supervisor.stop()
                await supervisor.queue.stop()

    app = FastAPI(title="contactq", version=APP_VERSION, lifespan=lifespan)
    app.state.service = service
    app.state.supervisor = supervisor

    def connected() -> bool:
        return supervisor is not None and supervisor.connected

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        snapshot = service.status()
        return render_dashboard(
            connected=connected(),
            batch_size=snapshot["batch_size"],
            ledger_size=snapshot["ledger_size"],
            threshold=snapshot["threshold"],
        )

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(ok=True, connected=connected())

    @app.get("/me", response_model=SessionInfoResponse)
    async def me() -> SessionInfoResponse:
        info = supervisor.session_info() if supervisor is not None else None
        return SessionInfoResponse(ok=True, info=info)

    @app.get("/status", response_model=StatusResponse)
    async def status_view() -> StatusResponse:
        return StatusResponse(connected=connected(), version=APP_VERSION, **service.status())

    @app.api_route("/send-batch", methods=["GET", "POST"])
    async def send_batch(request: Request) -> JSONResponse:
        logger.info("Manual flush requested via %s", request.method)
        result = await service.send_batch()
        return _flush_response(result)

    @app.post("/init", response_model=InitResponse)
    async def init() -> JSONResponse:
        if supervisor is None:
            body = InitResponse(ok=False, error="No messaging transport configured")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump()
            )
        try:
            await supervisor.restart()
        except Exception as e:
            logger.error("Manual transport init failed: %s", e)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=InitResponse(ok=False, error=str(e) or type(e).__name__).model_dump(),
            )
        return JSONResponse(content=InitResponse(ok=True).model_dump())

    return app


def load_transport(spec: str, settings: Settings) -> MessagingTransport:
    """
    Import a transport factory given as ``"package.module:factory"``.

    The factory is called with the settings and must return a
    MessagingTransport.
    """
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Transport must look like 'module:factory', got {spec!r}")
    factory = getattr(importlib.import_module(module_name), attr)
    return factory(settings)


def build_app(settings: Settings) -> FastAPI:
    """Build service, optional transport supervisor and app from settings."""
    missing = settings.validate()
    if missing:
        logger.warning("Missing one or more email environment variables: %s", ", ".join(missing))

    service = ContactSaverService.from_settings(settings)

    supervisor = None
    transport_spec = os.getenv("CONTACTQ_TRANSPORT")
    if transport_spec:
        transport = load_transport(transport_spec, settings)
        supervisor = TransportSupervisor(
            transport, EventQueue(service.intake), allowed_account=settings.allowed_account
        )
    else:
        logger.warning("CONTACTQ_TRANSPORT not set; running status surface without a session")

    return create_app(service, supervisor)


def main() -> None:
    import uvicorn

    load_dotenv()
    settings = Settings.from_env()
    app = build_app(settings)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(app, host=os.getenv("API_HOST", "0.0.0.0"), port=settings.port)


if __name__ == "__main__":
    main()
