"""Response envelope returned by the surveillance NAS web API."""

from pydantic import BaseModel, ConfigDict

from replay_acquisition.domain.errors import ApiError, SessionRejectedError

# 105 insufficient privilege, 106 session timeout,
# 107 session interrupted by duplicate login, 119 SID not found.
SESSION_ERROR_CODES = frozenset({105, 106, 107, 119})

# File operation errors that end a copy task: 400 invalid parameter,
# 401 unknown file operation error, 408 no such file, 1000-1007 copy failures.
# Other codes, such as 402 system too busy, leave the task running.
COPY_FAILURE_CODES = frozenset(
    {400, 401, 408, 1000, 1001, 1002, 1003, 1004, 1006, 1007}
)


class ApiErrorBody(BaseModel):
    """Error detail of a failed call."""

    model_config = ConfigDict(extra="ignore")

    code: int | None = None


class ApiResponse(BaseModel):
    """Generic `{success, data, error}` envelope."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: dict[str, object] | None = None
    error: ApiErrorBody | None = None

    @property
    def error_code(self) -> int | None:
        return self.error.code if self.error else None

    @property
    def session_rejected(self) -> bool:
        return not self.success and self.error_code in SESSION_ERROR_CODES

    def unwrap(self, action: str) -> dict[str, object]:
        """Return `data` or raise the matching error."""
        if self.success:
            return self.data or {}
        if self.session_rejected:
            raise SessionRejectedError(action, self.error_code)
        raise ApiError(action, self.error_code)
