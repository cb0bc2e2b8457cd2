"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    status,
)

from replay_acquisition.domain.bookings import at_clock

if TYPE_CHECKING:
    from replay_acquisition.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health(request: Request) -> dict[str, object]:
    """Check that the surveillance system accepts a catalog login."""
    container: AppContainer = request.app.state.container
    info = await container.recording_locator.check_connection()
    return {"status": "ok", "apis": sorted(info)}


@router.get("/cameras", dependencies=[Depends(require_admin)])
async def list_cameras(request: Request) -> dict[str, object]:
    """Return the cameras known to the surveillance system."""
    container: AppContainer = request.app.state.container
    cameras = await container.recording_locator.list_cameras()
    return {"cameras": [camera.model_dump() for camera in cameras]}


@router.get("/recordings", dependencies=[Depends(require_admin)])
async def list_recordings(  # noqa: PLR0913
    request: Request,
    camera_id: str,
    start_time: str,
    end_time: str,
    day: date = Query(alias="date"),
) -> dict[str, object]:
    """Return the catalog listing of a camera for a local time window."""
    container: AppContainer = request.app.state.container
    locator = container.recording_locator
    try:
        start, end = at_clock(day, start_time), at_clock(day, end_time)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    query = locator.build_query(camera_id, start, end)
    recordings = await locator.list_recordings(query)
    return {
        "from_time": query.from_time,
        "to_time": query.to_time,
        "recordings": [recording.model_dump() for recording in recordings],
    }
