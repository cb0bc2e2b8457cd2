"""Surveillance NAS web API client."""

import json
from dataclasses import dataclass
from typing import Protocol

import httpx

_AUTH_API = "SYNO.API.Auth"
_RECORDING_API = "SYNO.SurveillanceStation.Recording"
_CAMERA_API = "SYNO.SurveillanceStation.Camera"
_COPY_API = "SYNO.FileStation.CopyMove"


class SurveillanceClient(Protocol):
    """Interface for the surveillance NAS web API."""

    async def login(self, account: str, password: str, session: str) -> dict[str, object]:
        """Open a session and return the raw response."""

    async def logout(self, sid: str, session: str) -> dict[str, object]:
        """Close a session and return the raw response."""

    async def api_info(self) -> dict[str, object]:
        """Return the surveillance API description."""

    async def list_cameras(self, sid: str) -> dict[str, object]:
        """Return the raw camera list response."""

    async def list_recordings(
        self, sid: str, camera_id: int | str, from_time: int, to_time: int
    ) -> dict[str, object]:
        """Return recordings of a camera overlapping an epoch window."""

    async def start_copy(  # noqa: PLR0913
        self,
        sid: str,
        source_paths: list[str],
        dest_folder: str,
        *,
        overwrite: bool,
        remove_src: bool,
    ) -> dict[str, object]:
        """Start a copy task and return the raw response."""

    async def copy_status(self, sid: str, task_id: str) -> dict[str, object]:
        """Return the raw status of a copy task."""


@dataclass
class HttpxSurveillanceClient(SurveillanceClient):
    """Surveillance client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    copy_start_timeout: float = 120

    @classmethod
    def create(
        cls, base_url: str, verify_ssl: bool = False, copy_start_timeout: float = 120
    ) -> "HttpxSurveillanceClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(verify=verify_ssl),
            copy_start_timeout=copy_start_timeout,
        )

    async def login(self, account: str, password: str, session: str) -> dict[str, object]:
        """Log in with `format=sid` so the session id is returned."""
        return await self._get(
            "auth.cgi",
            {
                "api": _AUTH_API,
                "version": "3",
                "method": "login",
                "account": account,
                "passwd": password,
                "session": session,
                "format": "sid",
            },
        )

    async def logout(self, sid: str, session: str) -> dict[str, object]:
        """Log out of a session."""
        return await self._get(
            "auth.cgi",
            {
                "api": _AUTH_API,
                "version": "3",
                "method": "logout",
                "session": session,
                "_sid": sid,
            },
        )

    async def api_info(self) -> dict[str, object]:
        """Query the API description for surveillance endpoints."""
        return await self._get(
            "query.cgi",
            {
                "api": "SYNO.API.Info",
                "version": "1",
                "method": "query",
                "query": "SYNO.SurveillanceStation.*",
            },
        )

    async def list_cameras(self, sid: str) -> dict[str, object]:
        """List cameras."""
        return await self._get(
            "entry.cgi",
            {"api": _CAMERA_API, "version": "9", "method": "List", "_sid": sid},
        )

    async def list_recordings(
        self, sid: str, camera_id: int | str, from_time: int, to_time: int
    ) -> dict[str, object]:
        """List recordings of one camera within a time window."""
        return await self._get(
            "entry.cgi",
            {
                "api": _RECORDING_API,
                "version": "5",
                "method": "List",
                "cameraIds": str(camera_id),
                "fromTime": from_time,
                "toTime": to_time,
                "_sid": sid,
            },
        )

    async def start_copy(  # noqa: PLR0913
        self,
        sid: str,
        source_paths: list[str],
        dest_folder: str,
        *,
        overwrite: bool,
        remove_src: bool,
    ) -> dict[str, object]:
        """Start a server-side copy task."""
        return await self._get(
            "entry.cgi",
            {
                "api": _COPY_API,
                "version": "3",
                "method": "start",
                "path": json.dumps(source_paths),
                "dest_folder_path": dest_folder,
                "overwrite": overwrite,
                "remove_src": remove_src,
                "_sid": sid,
            },
            timeout=self.copy_start_timeout,
        )

    async def copy_status(self, sid: str, task_id: str) -> dict[str, object]:
        """Query a copy task."""
        return await self._get(
            "entry.cgi",
            {
                "api": _COPY_API,
                "version": "3",
                "method": "status",
                "taskid": task_id,
                "_sid": sid,
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(
        self, script: str, params: dict[str, object], timeout: float = 15
    ) -> dict[str, object]:
        url = f"{self.base_url}/webapi/{script}"
        response = await self.http_client.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()
