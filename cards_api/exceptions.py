"""
API exceptions and the handler that renders them.

Every error the service layer raises on purpose derives from
``CardsAPIException`` and carries its own HTTP status and a stable,
machine-readable ``code``.  Anything else (database failures, bugs) is left
to FastAPI's default 500 handling.
"""
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CardsAPIException(Exception):
    """Base exception for the cards API."""

    def __init__(
        self,
        message: str,
        code: str = "CARDS_API_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# ---------------------------------------------------------------------------
# Not found (404)
# ---------------------------------------------------------------------------

class NotFoundError(CardsAPIException):
    """A requested resource does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND", **kwargs: Any):
        super().__init__(message, code=code, status_code=404, **kwargs)


class CardNotFoundError(NotFoundError):
    """Raised when a card ID doesn't exist."""

    def __init__(self, card_id: str):
        super().__init__(
            f"Card with ID {card_id} not found",
            code="CARD_NOT_FOUND",
            suggestion="Check that the card ID is correct and the card hasn't been deleted",
            details={"card_id": card_id},
        )


class CardFileNotFoundError(NotFoundError):
    """Raised when a file URL is requested for a card without a file."""

    def __init__(self, card_id: str):
        super().__init__(
            "Card does not have a file",
            code="CARD_FILE_NOT_FOUND",
            suggestion="Upload a file first using POST /api/v1/cards/{id}/upload",
            details={"card_id": card_id},
        )


# ---------------------------------------------------------------------------
# Invalid argument (400)
# ---------------------------------------------------------------------------

class InvalidArgumentError(CardsAPIException):
    """The request is well-formed but its arguments are unusable."""

    def __init__(self, message: str, code: str = "INVALID_ARGUMENT", status_code: int = 400, **kwargs: Any):
        super().__init__(message, code=code, status_code=status_code, **kwargs)


class MissingFileError(InvalidArgumentError):
    """Raised when an upload request carries no file."""

    def __init__(self):
        super().__init__(
            "File is required",
            code="FILE_REQUIRED",
            suggestion="Send the file as multipart/form-data in the 'file' field",
        )


class FileTooLargeError(InvalidArgumentError):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File too large: {size} bytes (max: {max_size} bytes)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_size} bytes",
            details={"size": size, "max_size": max_size},
        )


# ---------------------------------------------------------------------------
# Object storage (502)
# ---------------------------------------------------------------------------

class StorageError(CardsAPIException):
    """Raised when the object store rejects or fails an operation."""

    def __init__(self, operation: str, key: str, error: str):
        super().__init__(
            f"Storage {operation} failed for key {key}: {error}",
            code="STORAGE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"operation": operation, "key": key, "error": error},
        )
        self.operation = operation
        self.key = key


# ---------------------------------------------------------------------------
# Exception handler
# ---------------------------------------------------------------------------

async def cards_api_exception_handler(
    request: Request,
    exc: CardsAPIException,
) -> JSONResponse:
    """Convert a CardsAPIException to its JSON error response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )
