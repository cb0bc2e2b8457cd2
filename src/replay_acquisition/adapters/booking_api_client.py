"""Booking collaborator API client."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

import httpx
from pydantic import ValidationError

from replay_acquisition.domain.bookings import AutoDownloadResult, Booking
from replay_acquisition.domain.errors import FatalSourceError

_logger = logging.getLogger(__name__)


class BookingSource(Protocol):
    """Interface for the booking collaborator."""

    async def list_bookings_for_date(self, booking_date: date) -> list[Booking]:
        """Return the recordable bookings of a date."""

    async def auto_download(self, booking_id: int | str) -> AutoDownloadResult:
        """Ask the collaborator to fetch and store a booking's recording."""


@dataclass
class HttpxBookingApiClient(BookingSource):
    """Booking collaborator client authenticated with a service credential."""

    base_url: str
    http_client: httpx.AsyncClient
    auto_download_timeout: float = 300
    timezone: str = "Europe/Rome"

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        base_url: str,
        user: str,
        password: str,
        auto_download_timeout: float = 300,
        timezone: str = "Europe/Rome",
    ) -> "HttpxBookingApiClient":
        """Create a client with a managed httpx session using Basic auth."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(auth=httpx.BasicAuth(user, password)),
            auto_download_timeout=auto_download_timeout,
            timezone=timezone,
        )

    async def list_bookings_for_date(self, booking_date: date) -> list[Booking]:
        """Fetch bookings; an unreachable source is fatal, bad rows are skipped."""
        url = f"{self.base_url}/bookings-for-date"
        try:
            response = await self.http_client.get(
                url, params={"date": booking_date.isoformat()}, timeout=15
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise FatalSourceError(f"Booking source unavailable: {exc}") from exc
        if not isinstance(payload, dict) or not payload.get("success"):
            raise FatalSourceError(f"Booking source refused request: {payload}")
        items = payload.get("bookings", [])
        if not isinstance(items, list):
            raise FatalSourceError(f"Malformed booking payload: {payload}")
        context = {"default_date": booking_date, "timezone": self.timezone}
        bookings = []
        for item in items:
            try:
                bookings.append(Booking.model_validate(item, context=context))
            except ValidationError as exc:
                booking_id = item.get("booking_id") if isinstance(item, dict) else None
                _logger.warning(
                    "Skipping unreadable booking %s: %s",
                    booking_id,
                    exc.errors(include_url=False),
                )
        return bookings

    async def auto_download(self, booking_id: int | str) -> AutoDownloadResult:
        """Trigger the auto-download operation for a booking."""
        url = f"{self.base_url}/videos/auto-download"
        response = await self.http_client.post(
            url,
            json={"booking_id": booking_id},
            timeout=self.auto_download_timeout,
        )
        if response.is_error:
            return AutoDownloadResult(success=False, error=_error_message(response))
        return AutoDownloadResult.model_validate(response.json())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Prefer the `error` field of a JSON error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"
