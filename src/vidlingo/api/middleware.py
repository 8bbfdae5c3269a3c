"""Error handling middleware."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from vidlingo.models.errors import (
    ErrorResponse,
    ProviderError,
    ResourceError,
    ValidationError,
    VidlingoError,
)

logger = logging.getLogger(__name__)


async def vidlingo_error_handler(request: Request, exc: VidlingoError) -> JSONResponse:
    """Handle VidlingoError exceptions."""
    response = ErrorResponse.from_exception(
        exc, guidance=_get_guidance(exc), retry=_is_retryable(exc)
    )
    status_code = _get_status_code(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content=response.model_dump())


def _get_status_code(exc: VidlingoError) -> int:
    """Map error type to HTTP status code."""
    if isinstance(exc, ValidationError):
        return 400
    elif isinstance(exc, ResourceError):
        return 503
    elif isinstance(exc, ProviderError):
        return 502
    return 500


def _get_guidance(exc: VidlingoError) -> str:
    """Generate actionable guidance based on error type."""
    if isinstance(exc, ValidationError):
        return "Check your video file type and size, and pick two different languages."
    if isinstance(exc, ProviderError):
        return "The AI service did not respond as expected. Please try again."
    return "Please try again or contact support."


def _is_retryable(exc: VidlingoError) -> bool:
    """Determine if the error is retryable."""
    return isinstance(exc, (ResourceError, ProviderError))
