"""Pipeline orchestrator: the stage machine behind one translation session."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import BinaryIO

from vidlingo.config import Settings, get_settings
from vidlingo.encoding.wav import encode_canonical_audio
from vidlingo.extractors.audio_extractor import AudioExtractor
from vidlingo.extractors.validators import validate_upload
from vidlingo.gateway.client import InferenceGateway
from vidlingo.languages import get_language
from vidlingo.models.audio import SynthesizedAudio
from vidlingo.models.errors import (
    PipelineError,
    SynthesisError,
    TranscriptionError,
    TranslationError,
    ValidationError,
    VidlingoError,
)
from vidlingo.models.media import MediaAsset
from vidlingo.models.pipeline import (
    PipelineStage,
    PipelineState,
    ProcessStep,
    StepStatus,
)
from vidlingo.pipeline.progress import StageProgress
from vidlingo.playback.synchronizer import MediaElement, PlaybackSynchronizer
from vidlingo.storage.media_store import MediaStore

logger = logging.getLogger(__name__)

SYNTHESIS_WARNING = (
    "Note: Text translation succeeded but audio generation failed. "
    "You can still read the translation above."
)

PlayerFactory = Callable[[str, str], tuple[MediaElement, MediaElement]]

STEP_STAGES = (
    PipelineStage.TRANSCRIBING,
    PipelineStage.TRANSLATING,
    PipelineStage.GENERATING_AUDIO,
    PipelineStage.PROCESSING_VIDEO,
)


class PipelineOrchestrator:
    """Owns one PipelineState and mutates it only through named commands.

    Stages run strictly in order: upload, transcribing, translating,
    generating_audio, processing_video, completed. A fatal failure at any
    stage records the error and returns the session to upload. A synthesis
    failure is not fatal: the run completes with the text artifacts and a
    warning instead of an audio track.
    """

    def __init__(
        self,
        session_id: str,
        gateway: InferenceGateway,
        media_store: MediaStore,
        extractor: AudioExtractor | None = None,
        synchronizer: PlaybackSynchronizer | None = None,
        player_factory: PlayerFactory | None = None,
        on_change: Callable[[PipelineState], None] | None = None,
        settings: Settings | None = None,
    ):
        self.session_id = session_id
        self.settings = settings or get_settings()
        self.gateway = gateway
        self.media_store = media_store
        self.extractor = extractor or AudioExtractor()
        self.synchronizer = synchronizer or PlaybackSynchronizer()
        self.player_factory = player_factory
        self.on_change = on_change
        self._progress = StageProgress(self._on_progress)
        self._state = self._initial_state()
        self._active_run: asyncio.Task | None = None

    # --- read side ---

    def snapshot(self) -> PipelineState:
        """Read-only copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def stage(self) -> PipelineStage:
        return self._state.stage

    @property
    def is_running(self) -> bool:
        return self._active_run is not None and not self._active_run.done()

    def can_translate(self) -> bool:
        state = self._state
        return (
            state.video_asset is not None
            and state.source_language is not None
            and state.target_language is not None
            and state.source_language.code != state.target_language.code
            and state.stage == PipelineStage.UPLOAD
        )

    def process_steps(self) -> list[ProcessStep]:
        """Derive the step list shown alongside the progress bar."""
        state = self._state
        source = state.source_language.name if state.source_language else "source"
        target = state.target_language.name if state.target_language else "target"
        steps = [
            ProcessStep(
                id=PipelineStage.TRANSCRIBING,
                title="Speech to Text",
                description="Converting speech to text using AI",
            ),
            ProcessStep(
                id=PipelineStage.TRANSLATING,
                title="Translation",
                description=f"Translating from {source} to {target}",
            ),
            ProcessStep(
                id=PipelineStage.GENERATING_AUDIO,
                title="Text to Speech",
                description="Converting translated text to speech",
            ),
            ProcessStep(
                id=PipelineStage.PROCESSING_VIDEO,
                title="Video Processing",
                description="Synchronizing the translated audio with the video",
            ),
        ]

        if state.stage == PipelineStage.COMPLETED:
            for step in steps:
                step.status = StepStatus.COMPLETED
                if step.id == PipelineStage.GENERATING_AUDIO and state.degraded:
                    step.status = StepStatus.ERROR
            return steps

        if state.stage == PipelineStage.UPLOAD:
            failed = state.failed_stage if state.error_message else None
            if failed is None:
                return steps
            current, current_status = failed, StepStatus.ERROR
        else:
            current, current_status = state.stage, StepStatus.PROCESSING

        order = list(PipelineStage)
        for step in steps:
            if step.id == current:
                step.status = current_status
            elif order.index(step.id) < order.index(current):
                step.status = StepStatus.COMPLETED
            if (
                step.id == PipelineStage.GENERATING_AUDIO
                and state.warning_message
                and step.status == StepStatus.COMPLETED
            ):
                step.status = StepStatus.ERROR
        return steps

    # --- commands ---

    def select_video(
        self,
        filename: str,
        content_type: str,
        source: bytes | BinaryIO,
        size_bytes: int | None = None,
    ) -> MediaAsset:
        """Validate and attach a video, replacing any previous one.

        Invalid uploads raise ``ValidationError`` and leave the state untouched.
        """
        self._require_upload_stage("change the video")
        if size_bytes is None:
            if not isinstance(source, bytes):
                raise ValidationError("Upload size is unknown")
            size_bytes = len(source)
        validate_upload(content_type, size_bytes)

        asset = self.media_store.save_upload(self.session_id, filename, content_type, source)
        # The declared size can lie for streamed uploads
        if asset.size_bytes != size_bytes:
            try:
                validate_upload(content_type, asset.size_bytes)
            except ValidationError:
                asset.release()
                raise

        self._release_media()
        self._state.video_asset = asset
        self._state.video_url = self.media_store.register(
            self.session_id, asset.path, asset.content_type
        )
        self._state.error_message = None
        self._state.failed_stage = None
        self._touch()
        logger.info(
            f"Session {self.session_id}: selected {filename} ({asset.size_bytes} bytes)"
        )
        return asset

    def set_source_language(self, code: str | None) -> None:
        self._require_upload_stage("change languages")
        self._state.source_language = get_language(code) if code else None
        self._touch()

    def set_target_language(self, code: str | None) -> None:
        self._require_upload_stage("change languages")
        self._state.target_language = get_language(code) if code else None
        self._touch()

    async def start(self) -> PipelineState:
        """Run the whole pipeline once. A no-op unless ``can_translate()`` holds."""
        if not self.can_translate() or self.is_running:
            logger.info(f"Session {self.session_id}: not ready to translate, ignoring start")
            return self.snapshot()

        self._active_run = asyncio.current_task()
        try:
            await self._run()
        except asyncio.CancelledError:
            logger.info(f"Session {self.session_id}: run cancelled")
            raise
        except VidlingoError as e:
            self._fail(e)
        except Exception as e:
            logger.exception(f"Session {self.session_id}: unexpected pipeline failure")
            self._fail(PipelineError(f"Pipeline failed: {e}"))
        finally:
            if self._active_run is asyncio.current_task():
                self._active_run = None
        return self.snapshot()

    def reset(self) -> None:
        """Abort any in-flight run, release held media and restore the initial state."""
        run = self._active_run
        if run is not None and not run.done() and run is not asyncio.current_task():
            run.cancel()
        self._active_run = None
        self._release_media()
        self._progress.reset()
        self._state = self._initial_state()
        self._touch()
        logger.info(f"Session {self.session_id}: reset")

    def close(self) -> None:
        """Reset and drop the session's media directory."""
        self.reset()
        self.media_store.cleanup_session(self.session_id)

    # --- stages ---

    async def _run(self) -> None:
        state = self._state
        state.error_message = None
        state.warning_message = None
        state.failed_stage = None
        state.transcript = None
        state.translated_text = None
        state.result_audio_url = None

        asset = state.video_asset
        source = state.source_language
        target = state.target_language
        logger.info(
            f"Session {self.session_id}: translating {asset.filename} "
            f"{source.code}->{target.code}"
        )

        # Transcribing: extract, encode, recognize
        self._transition(PipelineStage.TRANSCRIBING)
        decoded = await asyncio.to_thread(self.extractor.extract, asset)
        self._progress.advance(40)
        canonical = await asyncio.to_thread(
            encode_canonical_audio, decoded, self.settings.downmix
        )
        del decoded
        self._progress.advance(70)
        self._progress.mark_indeterminate()
        transcript = await self.gateway.transcribe(canonical)
        del canonical
        if not transcript:
            raise TranscriptionError("No speech was recognized in the video", detail="empty text")
        state.transcript = transcript
        self._progress.complete()

        # Translating
        self._transition(PipelineStage.TRANSLATING)
        self._progress.mark_indeterminate()
        translated = await self.gateway.translate(transcript, source.code, target.code)
        if not translated:
            raise TranslationError("Translation returned no text", detail="empty text")
        state.translated_text = translated
        self._progress.complete()

        # Generating audio; failure here degrades the run instead of ending it
        self._transition(PipelineStage.GENERATING_AUDIO)
        self._progress.mark_indeterminate()
        speech: SynthesizedAudio | None = None
        try:
            speech = await self.gateway.synthesize_speech(translated, target.code)
        except SynthesisError as e:
            logger.warning(
                f"Session {self.session_id}: speech synthesis failed "
                f"(status={e.status}), completing with text only"
            )
            state.warning_message = SYNTHESIS_WARNING
        self._progress.complete()

        # Processing video: publish the dub and couple it to the video
        self._transition(PipelineStage.PROCESSING_VIDEO)
        if speech is not None:
            state.result_audio_url = self.media_store.publish(
                self.session_id, speech.content, speech.content_type, speech.suffix
            )
            del speech
            self._progress.advance(50)
            if self.player_factory is not None and state.video_url:
                video, audio = self.player_factory(state.video_url, state.result_audio_url)
                outcome = await self.synchronizer.sync(video, audio)
                if not outcome.synchronized:
                    logger.warning(
                        f"Session {self.session_id}: playback not synchronized ({outcome.reason})"
                    )
        self._progress.complete()

        self._transition(PipelineStage.COMPLETED)
        self._progress.complete()
        logger.info(
            f"Session {self.session_id}: completed"
            + (" without synthesized audio" if state.degraded else "")
        )

    def _transition(self, stage: PipelineStage) -> None:
        """Advance to the next stage; skipping or re-entering a stage is a bug."""
        current = self._state.stage
        if current.successor != stage:
            raise PipelineError(
                f"Illegal stage transition {current.value} -> {stage.value}",
                details={"from": current.value, "to": stage.value},
            )
        self._state.stage = stage
        self._progress.reset()
        self._state.progress = 0.0
        self._state.progress_indeterminate = False
        self._touch()
        logger.info(f"Session {self.session_id}: stage {stage.value}")

    def _fail(self, error: VidlingoError) -> None:
        state = self._state
        failed = state.stage
        logger.error(
            f"Session {self.session_id}: {type(error).__name__} during {failed.value}: "
            f"{error.message}"
        )
        self.media_store.revoke(state.result_audio_url)
        state.result_audio_url = None
        state.failed_stage = failed if failed != PipelineStage.UPLOAD else None
        state.error_message = f"Translation failed: {error.message}"
        state.stage = PipelineStage.UPLOAD
        self._progress.reset()
        state.progress = 0.0
        state.progress_indeterminate = False
        self._touch()

    # --- helpers ---

    def _initial_state(self) -> PipelineState:
        return PipelineState(
            source_language=get_language(self.settings.default_source_language),
            target_language=get_language(self.settings.default_target_language),
            updated_at=datetime.now(UTC),
        )

    def _require_upload_stage(self, action: str) -> None:
        if self._state.stage != PipelineStage.UPLOAD:
            raise ValidationError(
                f"Cannot {action} while the session is {self._state.stage.value}",
                details={"stage": self._state.stage.value},
            )

    def _release_media(self) -> None:
        state = self._state
        self.media_store.revoke(state.result_audio_url)
        self.media_store.revoke(state.video_url)
        if state.video_asset is not None:
            state.video_asset.release()
        state.result_audio_url = None
        state.video_url = None
        state.video_asset = None

    def _on_progress(self, value: float, indeterminate: bool) -> None:
        self._state.progress = value
        self._state.progress_indeterminate = indeterminate
        self._touch()

    def _touch(self) -> None:
        self._state.updated_at = datetime.now(UTC)
        if self.on_change:
            self.on_change(self.snapshot())
