"""Server-side file copy with bounded status polling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from replay_acquisition.domain.errors import CopyError, CopyTimeoutError
from replay_acquisition.domain.synology import COPY_FAILURE_CODES, ApiResponse
from replay_acquisition.domain.transfers import (
    CopyPhase,
    CopyState,
    CopyTask,
    PollResult,
)
from replay_acquisition.services.sessions import (
    SessionKind,
    SessionManager,
    SessionToken,
)

_logger = logging.getLogger(__name__)


def step(state: CopyState, result: PollResult, max_attempts: int) -> CopyState:
    """Advance a copy state by one status poll."""
    if state.is_terminal:
        return state
    attempt = state.attempt + 1
    if result.error_code is not None:
        return CopyState(
            CopyPhase.FAILED, state.task_id, attempt, error_code=result.error_code
        )
    if result.finished:
        return CopyState(CopyPhase.FINISHED, state.task_id, attempt)
    if attempt >= max_attempts:
        return CopyState(CopyPhase.TIMED_OUT, state.task_id, attempt)
    return CopyState(CopyPhase.POLLING, state.task_id, attempt)


@dataclass
class TransferOrchestrator:
    """Copies a file inside the NAS and waits for the task to finish.

    The copy never removes the source recording. A timed-out task is left
    running on the NAS; the caller simply stops waiting for it.
    """

    sessions: SessionManager
    poll_interval_seconds: float = 1.0
    max_attempts: int = 120
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def copy(self, source_path: str, dest_folder: str) -> CopyTask:
        """Copy `source_path` into `dest_folder` and wait for completion."""
        if not source_path.startswith("/"):
            raise CopyError(f"Source path must be absolute: {source_path}")

        _logger.info("Copy starting: %s -> %s", source_path, dest_folder)
        task_id = await self._start(source_path, dest_folder)
        state = CopyState(CopyPhase.STARTED, task_id)
        while not state.is_terminal:
            await self.sleep(self.poll_interval_seconds)
            result = await self._poll(task_id)
            state = step(state, result, self.max_attempts)
            _logger.debug(
                "Copy status: task=%s attempt=%s phase=%s",
                task_id,
                state.attempt,
                state.phase.value,
            )

        if state.phase is CopyPhase.TIMED_OUT:
            _logger.warning(
                "Copy timed out: task=%s attempts=%s", task_id, state.attempt
            )
            raise CopyTimeoutError(task_id, state.attempt)
        if state.phase is CopyPhase.FAILED:
            _logger.error(
                "Copy failed: task=%s code=%s", task_id, state.error_code
            )
            raise CopyError(f"Copy task {task_id} failed", code=state.error_code)

        _logger.info("Copy finished: task=%s attempts=%s", task_id, state.attempt)
        return CopyTask(
            task_id=task_id,
            source_path=source_path,
            dest_folder=dest_folder,
            attempts=state.attempt,
        )

    async def _start(self, source_path: str, dest_folder: str) -> str:
        async def _call(token: SessionToken) -> ApiResponse:
            try:
                payload = await self.sessions.client.start_copy(
                    token.sid,
                    [source_path],
                    dest_folder,
                    overwrite=True,
                    remove_src=False,
                )
                response = ApiResponse.model_validate(payload)
            except (httpx.HTTPError, ValueError) as exc:
                raise CopyError(f"Copy start failed for {source_path}: {exc}") from exc
            if response.session_rejected:
                response.unwrap("start copy")
            return response

        response = await self.sessions.run(SessionKind.TRANSFER, _call)
        if not response.success:
            raise CopyError(
                f"Copy start rejected for {source_path}", code=response.error_code
            )
        task_id = (response.data or {}).get("taskid")
        if not task_id:
            raise CopyError(f"Copy start returned no task id for {source_path}")
        return str(task_id)

    async def _poll(self, task_id: str) -> PollResult:
        async def _call(token: SessionToken) -> PollResult:
            try:
                payload = await self.sessions.client.copy_status(token.sid, task_id)
                response = ApiResponse.model_validate(payload)
            except (httpx.HTTPError, ValueError) as exc:
                raise CopyError(
                    f"Copy status failed for task {task_id}: {exc}"
                ) from exc
            if response.session_rejected:
                response.unwrap("copy status")
            if response.error_code in COPY_FAILURE_CODES:
                return PollResult(finished=False, error_code=response.error_code)
            if not response.success:
                _logger.debug(
                    "Copy status not readable: task=%s code=%s",
                    task_id,
                    response.error_code,
                )
                return PollResult(finished=False)
            return PollResult(finished=bool((response.data or {}).get("finished")))

        return await self.sessions.run(SessionKind.TRANSFER, _call)
