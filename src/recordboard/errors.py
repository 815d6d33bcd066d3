"""Domain exceptions.

Each error carries the HTTP status the API maps it to, so services can raise
them without knowing about FastAPI.
"""

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
    _HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:
    _HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class RecordBoardError(Exception):
    """Base class for record board errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "record_board_error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationFailed(RecordBoardError):
    """Single-entity input that cannot be saved."""

    status_code = _HTTP_422
    detail = "validation_failed"


class DuplicateSlugError(RecordBoardError):
    """A club or record list slug is already taken in its scope."""

    status_code = status.HTTP_409_CONFLICT
    detail = "A record with this URL slug already exists. Please choose a different one."


class PermissionDenied(RecordBoardError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "You do not have permission to do that"


class NotFoundError(RecordBoardError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "not_found"


class DataStoreError(RecordBoardError):
    """Any other data store failure; the message is passed through verbatim."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "data_store_error"
