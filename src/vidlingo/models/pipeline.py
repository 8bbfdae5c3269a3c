"""Pipeline state and stage models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

from vidlingo.models.language import Language
from vidlingo.models.media import MediaAsset


class PipelineStage(StrEnum):
    """Stages of the translation pipeline, in execution order."""

    UPLOAD = "upload"
    TRANSCRIBING = "transcribing"
    TRANSLATING = "translating"
    GENERATING_AUDIO = "generating_audio"
    PROCESSING_VIDEO = "processing_video"
    COMPLETED = "completed"

    @property
    def successor(self) -> "PipelineStage | None":
        order = list(PipelineStage)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None


class StepStatus(StrEnum):
    WAITING = "waiting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class StageInfo(BaseModel):
    title: str
    description: str


STAGE_INFO: dict[PipelineStage, StageInfo] = {
    PipelineStage.UPLOAD: StageInfo(
        title="Upload Video",
        description="Select a video file to upload and translate",
    ),
    PipelineStage.TRANSCRIBING: StageInfo(
        title="Transcribing",
        description="Converting speech to text using AI...",
    ),
    PipelineStage.TRANSLATING: StageInfo(
        title="Translating",
        description="Translating the text to your selected language...",
    ),
    PipelineStage.GENERATING_AUDIO: StageInfo(
        title="Generating Audio",
        description="Converting translated text to speech...",
    ),
    PipelineStage.PROCESSING_VIDEO: StageInfo(
        title="Processing Video",
        description="Synchronizing the translated audio with the video...",
    ),
    PipelineStage.COMPLETED: StageInfo(
        title="Translation Complete",
        description="Your video is ready to play with translated audio",
    ),
}


class PipelineState(BaseModel):
    """Current state of one translation session."""

    stage: PipelineStage = Field(default=PipelineStage.UPLOAD)
    progress: float = Field(default=0.0, ge=0, le=100)
    progress_indeterminate: bool = False
    source_language: Language | None = None
    target_language: Language | None = None
    video_asset: MediaAsset | None = None
    transcript: str | None = None
    translated_text: str | None = None
    result_audio_url: str | None = None
    video_url: str | None = None
    error_message: str | None = None
    failed_stage: PipelineStage | None = None
    warning_message: str | None = None
    updated_at: datetime | None = None

    @computed_field
    @property
    def degraded(self) -> bool:
        """Completed with text artifacts but without synthesized audio."""
        return self.stage == PipelineStage.COMPLETED and self.result_audio_url is None


class ProcessStep(BaseModel):
    """View projection of one pipeline stage."""

    id: PipelineStage
    title: str
    description: str
    status: StepStatus = StepStatus.WAITING


class ProcessVideoRequest(BaseModel):
    """Input of the one-shot orchestration boundary."""

    video_url: str = Field(default="")
    source_language: str = Field(default="")
    target_language: str = Field(default="")


class ProcessVideoResult(BaseModel):
    """Output of the one-shot orchestration boundary."""

    message: str = "Video processed successfully"
    transcription: str
    translation: str
    processed_video_url: str
    audio_url: str | None = None
    degraded: bool = False
