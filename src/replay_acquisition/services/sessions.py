"""Session management for the surveillance NAS.

The NAS keeps recording-catalog and file-transfer operations in separate
login contexts. A valid session id of one kind says nothing about the other,
so each kind has its own cached slot.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

import httpx

from replay_acquisition.adapters.surveillance_client import SurveillanceClient
from replay_acquisition.domain.errors import AuthError, SessionRejectedError
from replay_acquisition.domain.synology import ApiResponse

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionKind(str, Enum):
    """Login context; the value is the session label sent on login."""

    CATALOG = "SurveillanceStation"
    TRANSFER = "FileStation"


@dataclass(frozen=True)
class SessionToken:
    """An authenticated session id."""

    sid: str
    account: str
    kind: SessionKind


@dataclass
class SessionManager:
    """Owns the cached catalog and transfer sessions."""

    client: SurveillanceClient
    account: str
    password: str
    _tokens: dict[SessionKind, SessionToken] = field(default_factory=dict)

    def cached(self, kind: SessionKind) -> SessionToken | None:
        """Return the cached token for a kind, if any."""
        return self._tokens.get(kind)

    async def acquire(self, kind: SessionKind) -> SessionToken:
        """Return the cached token or log in for a new one."""
        token = self._tokens.get(kind)
        if token is not None:
            return token

        try:
            payload = await self.client.login(self.account, self.password, kind.value)
            response = ApiResponse.model_validate(payload)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.error("Login failed: session=%s error=%s", kind.value, exc)
            raise AuthError(f"{kind.value} login failed: {exc}") from exc
        sid = (response.data or {}).get("sid") if response.success else None
        if not sid:
            _logger.error(
                "Login rejected: session=%s account=%s code=%s",
                kind.value,
                self.account,
                response.error_code,
            )
            raise AuthError(
                f"{kind.value} login rejected for {self.account}",
                code=response.error_code,
            )
        token = SessionToken(sid=str(sid), account=self.account, kind=kind)
        self._tokens[kind] = token
        _logger.info("Session opened: session=%s account=%s", kind.value, self.account)
        return token

    def invalidate(self, kind: SessionKind) -> None:
        """Forget the cached token so the next acquire logs in again."""
        if self._tokens.pop(kind, None) is not None:
            _logger.info("Session invalidated: session=%s", kind.value)

    async def run(
        self, kind: SessionKind, operation: Callable[[SessionToken], Awaitable[T]]
    ) -> T:
        """Run an operation with a session, re-authenticating once if rejected."""
        token = await self.acquire(kind)
        try:
            return await operation(token)
        except SessionRejectedError as exc:
            _logger.warning(
                "Session rejected, logging in again: session=%s code=%s",
                kind.value,
                exc.code,
            )
            self.invalidate(kind)

        token = await self.acquire(kind)
        try:
            return await operation(token)
        except SessionRejectedError as exc:
            self.invalidate(kind)
            raise AuthError(
                f"{kind.value} session rejected after fresh login", code=exc.code
            ) from exc

    async def logout(self, kind: SessionKind) -> None:
        """Log out remotely and drop the cached token."""
        token = self._tokens.get(kind)
        if token is None:
            return
        try:
            await self.client.logout(token.sid, kind.value)
        except httpx.HTTPError as exc:
            _logger.warning("Logout failed: session=%s error=%s", kind.value, exc)
        self.invalidate(kind)

    async def logout_all(self) -> None:
        """Log out of every open session."""
        for kind in list(self._tokens):
            await self.logout(kind)
