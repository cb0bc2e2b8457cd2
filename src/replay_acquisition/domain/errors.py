"""Error taxonomy for the recording acquisition pipeline."""


class AcquisitionError(Exception):
    """Base class for pipeline errors."""


class ApiError(AcquisitionError):
    """A surveillance call failed or answered with success=false."""

    def __init__(
        self, action: str, code: int | None, detail: str | None = None
    ) -> None:
        message = f"{action} failed (code={code})"
        super().__init__(f"{message}: {detail}" if detail else message)
        self.action = action
        self.code = code


class SessionRejectedError(ApiError):
    """The surveillance system no longer accepts the session id."""


class AuthError(AcquisitionError):
    """Login to the surveillance system was rejected."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class NotFoundError(AcquisitionError):
    """No recording is available for the requested window yet."""


class CopyError(AcquisitionError):
    """The surveillance system reported a failed copy."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class CopyTimeoutError(AcquisitionError, TimeoutError):
    """A copy task did not finish within the polling window."""

    def __init__(self, task_id: str, attempts: int) -> None:
        super().__init__(f"Copy task {task_id} not finished after {attempts} polls")
        self.task_id = task_id
        self.attempts = attempts


class FatalSourceError(AcquisitionError):
    """The booking source could not be reached."""
