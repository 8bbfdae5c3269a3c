"""Error hierarchy and error response models."""

from pydantic import BaseModel, Field


class VidlingoError(Exception):
    """Base error for all Vidlingo errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class ValidationError(VidlingoError):
    """Input validation errors (file type, size, language selection)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="validation", details=details)


class ExtractionError(VidlingoError):
    """The uploaded container has no decodable audio track."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="extraction", details=details)


class EncodingError(VidlingoError):
    """Resampling or WAV serialization failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="encoding", details=details)


class ProviderError(VidlingoError):
    """A remote inference call failed.

    ``status`` is the HTTP status returned by the provider, or ``None`` when
    the request never got a response. ``detail`` carries the response body.
    """

    component_name = "provider"

    def __init__(self, message: str, status: int | None = None, detail: str = ""):
        super().__init__(
            message,
            component=self.component_name,
            details={"status": status, "detail": detail},
        )
        self.status = status
        self.detail = detail


class TranscriptionError(ProviderError):
    component_name = "transcription"


class TranslationError(ProviderError):
    component_name = "translation"


class SynthesisError(ProviderError):
    component_name = "synthesis"


class PipelineError(VidlingoError):
    """Orchestration failures (illegal transitions, unexpected stage errors)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="pipeline", details=details)


class ResourceError(VidlingoError):
    """Resource-related errors (disk, missing media, unreachable sources)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="resource", details=details)


class ErrorResponse(BaseModel):
    """Standardized error response for API."""

    error_type: str = Field(..., description="Error category")
    component: str = Field(default="", description="Component that raised the error")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict)
    actionable_guidance: str = Field(default="", description="Suggested user action")
    retry_possible: bool = Field(default=False)

    @classmethod
    def from_exception(
        cls, exc: VidlingoError, guidance: str = "", retry: bool = False
    ) -> "ErrorResponse":
        return cls(
            error_type=type(exc).__name__,
            component=exc.component,
            message=exc.message,
            details=exc.details,
            actionable_guidance=guidance,
            retry_possible=retry,
        )
