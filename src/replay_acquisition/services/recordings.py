"""Recording lookup against the surveillance catalog."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
from pydantic import ValidationError

from replay_acquisition.domain.errors import ApiError, NotFoundError
from replay_acquisition.domain.recordings import Camera, RecordingMatch, RecordingQuery
from replay_acquisition.domain.synology import ApiResponse
from replay_acquisition.services.sessions import (
    SessionKind,
    SessionManager,
    SessionToken,
)

_logger = logging.getLogger(__name__)


@dataclass
class RecordingLocator:
    """Finds the recording of a camera for a time window.

    The catalog returns every recording overlapping the window in an order it
    controls. The first one is picked without scoring the overlap, so two
    recordings straddling a booking yield whichever the catalog lists first.
    """

    sessions: SessionManager
    timezone: str = "Europe/Rome"

    def build_query(
        self, camera_id: int | str, start_local: datetime, end_local: datetime
    ) -> RecordingQuery:
        """Convert local bounds to an epoch-seconds query."""
        return RecordingQuery(
            camera_id=camera_id,
            from_time=self._to_epoch(start_local),
            to_time=self._to_epoch(end_local),
        )

    async def locate(
        self, camera_id: int | str, start_local: datetime, end_local: datetime
    ) -> RecordingMatch:
        """Return the first catalog recording overlapping the window."""
        query = self.build_query(camera_id, start_local, end_local)
        items = await self._recording_items(query)
        if not items:
            raise NotFoundError(
                f"No recordings for camera {camera_id} between "
                f"{start_local.isoformat()} and {end_local.isoformat()}"
            )
        try:
            match = RecordingMatch.model_validate(items[0])
        except ValidationError as exc:
            raise NotFoundError(
                f"Recording file path not found for camera {camera_id}"
            ) from exc
        if not match.folder or not match.path:
            raise NotFoundError(f"Recording file path not found for camera {camera_id}")
        _logger.info(
            "Recording located: camera=%s candidates=%s path=%s",
            camera_id,
            len(items),
            match.source_path,
        )
        return match

    async def list_recordings(self, query: RecordingQuery) -> list[RecordingMatch]:
        """Return the catalog listing for a query, in catalog order."""
        items = await self._recording_items(query)
        try:
            return [RecordingMatch.model_validate(item) for item in items]
        except ValidationError as exc:
            raise ApiError("list recordings", None, detail=str(exc)) from exc

    async def list_cameras(self) -> list[Camera]:
        """Return the cameras known to the surveillance system."""

        async def _list(token: SessionToken) -> dict[str, object]:
            return await self.sessions.client.list_cameras(token.sid)

        data = await self._catalog("list cameras", _list)
        try:
            return [Camera.model_validate(item) for item in data.get("cameras", [])]
        except ValidationError as exc:
            raise ApiError("list cameras", None, detail=str(exc)) from exc

    async def check_connection(self) -> dict[str, object]:
        """Verify a catalog login works and return the API description."""
        await self.sessions.acquire(SessionKind.CATALOG)
        try:
            payload = await self.sessions.client.api_info()
            response = ApiResponse.model_validate(payload)
        except (httpx.HTTPError, ValueError) as exc:
            raise ApiError("api info", None, detail=str(exc)) from exc
        return response.unwrap("api info")

    async def _recording_items(self, query: RecordingQuery) -> list[object]:
        async def _list(token: SessionToken) -> dict[str, object]:
            return await self.sessions.client.list_recordings(
                token.sid, query.camera_id, query.from_time, query.to_time
            )

        data = await self._catalog("list recordings", _list)
        items = data.get("events") or data.get("recordings") or []
        if not isinstance(items, list):
            raise ApiError("list recordings", None, detail="recording list malformed")
        return items

    async def _catalog(
        self,
        action: str,
        call: Callable[[SessionToken], Awaitable[dict[str, object]]],
    ) -> dict[str, object]:
        async def _run(token: SessionToken) -> dict[str, object]:
            try:
                payload = await call(token)
                response = ApiResponse.model_validate(payload)
            except (httpx.HTTPError, ValueError) as exc:
                _logger.error("Catalog call failed: action=%s error=%s", action, exc)
                raise ApiError(action, None, detail=str(exc)) from exc
            return response.unwrap(action)

        return await self.sessions.run(SessionKind.CATALOG, _run)

    def _to_epoch(self, value: datetime) -> int:
        if value.tzinfo is None:
            value = value.replace(tzinfo=ZoneInfo(self.timezone))
        return int(value.timestamp())
