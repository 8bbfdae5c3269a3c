"""Data models for Vidlingo."""

from vidlingo.models.audio import CanonicalAudio, DecodedAudio, SynthesizedAudio
from vidlingo.models.errors import (
    EncodingError,
    ErrorResponse,
    ExtractionError,
    PipelineError,
    ProviderError,
    ResourceError,
    SynthesisError,
    TranscriptionError,
    TranslationError,
    ValidationError,
    VidlingoError,
)
from vidlingo.models.language import Language, LanguageProfile, RequestShape
from vidlingo.models.media import MediaAsset
from vidlingo.models.pipeline import (
    STAGE_INFO,
    PipelineStage,
    PipelineState,
    ProcessStep,
    ProcessVideoRequest,
    ProcessVideoResult,
    StageInfo,
    StepStatus,
)

__all__ = [
    "STAGE_INFO",
    "CanonicalAudio",
    "DecodedAudio",
    "EncodingError",
    "ErrorResponse",
    "ExtractionError",
    "Language",
    "LanguageProfile",
    "MediaAsset",
    "PipelineError",
    "PipelineStage",
    "PipelineState",
    "ProcessStep",
    "ProcessVideoRequest",
    "ProcessVideoResult",
    "ProviderError",
    "RequestShape",
    "ResourceError",
    "StageInfo",
    "StepStatus",
    "SynthesisError",
    "SynthesizedAudio",
    "TranscriptionError",
    "TranslationError",
    "ValidationError",
    "VidlingoError",
]
