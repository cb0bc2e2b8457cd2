"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from replay_acquisition.api.admin import require_admin
from replay_acquisition.api.admin import router as admin_router
from replay_acquisition.app_logging import configure_logging
from replay_acquisition.containers import AppContainer
from replay_acquisition.domain.errors import (
    AcquisitionError,
    CopyTimeoutError,
    NotFoundError,
)
from replay_acquisition.domain.recordings import AcquisitionRequest


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(AcquisitionError)
    async def acquisition_error_handler(
        request: Request, exc: AcquisitionError
    ) -> JSONResponse:
        logger.warning("Request %s failed: %s", request.url.path, exc)
        return JSONResponse(
            status_code=_status_for(exc),
            content={"success": False, "error": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recordings/acquire", dependencies=[Depends(require_admin)])
    async def acquire_recording(
        payload: AcquisitionRequest, request: Request
    ) -> dict[str, object]:
        """Locate a booking's recording and copy it into delivery storage."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.acquisition_service.acquire(payload)
        return {
            "success": True,
            "filename": result.filename,
            "source_path": result.source_path,
            "destination_path": result.destination_path,
        }

    return app


def _status_for(exc: AcquisitionError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, CopyTimeoutError):
        return 504
    return 502
