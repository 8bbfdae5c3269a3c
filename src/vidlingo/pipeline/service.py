"""One-shot translation of a video addressed by URL."""

import asyncio
import logging
import uuid
from pathlib import Path

import httpx

from vidlingo.encoding.wav import encode_canonical_audio
from vidlingo.extractors.audio_extractor import AudioExtractor
from vidlingo.extractors.validators import validate_media_size, validate_media_type
from vidlingo.gateway.client import InferenceGateway
from vidlingo.languages import get_language
from vidlingo.models.errors import ResourceError, ValidationError, VidlingoError
from vidlingo.models.pipeline import ProcessVideoRequest, ProcessVideoResult
from vidlingo.storage.media_store import MEDIA_URL_PREFIX, MediaStore

logger = logging.getLogger(__name__)

MOCK_TRANSCRIPTION = "This is a mock transcription for testing purposes."
MOCK_TRANSLATION = "This is a mock translation for testing the interface."
WORK_PREFIX = "process-"


class TranslationService:
    """Runs extract, transcribe, translate and synthesize for one video URL.

    Provider failures never abort the response: the caller always gets a
    payload, flagged ``degraded`` when any part of it is a fallback. Each call
    works in its own ``process-<id>`` media directory; directories older than
    ``media_ttl_seconds`` are swept at the start of the next call.
    """

    def __init__(
        self,
        gateway: InferenceGateway,
        media_store: MediaStore,
        extractor: AudioExtractor | None = None,
    ):
        self.gateway = gateway
        self.media_store = media_store
        self.extractor = extractor or AudioExtractor()

    async def process_video(self, request: ProcessVideoRequest) -> ProcessVideoResult:
        if not request.video_url or not request.source_language or not request.target_language:
            raise ValidationError(
                "Missing required parameters",
                details={"required": ["video_url", "source_language", "target_language"]},
            )
        source = get_language(request.source_language)
        target = get_language(request.target_language)

        logger.info(f"Processing video: {request.video_url}")
        logger.info(f"Source language: {source.code}, Target language: {target.code}")

        settings = self.gateway.settings
        self.media_store.cleanup_expired(settings.media_ttl_seconds, prefix=WORK_PREFIX)

        transcription: str | None = None
        translation: str | None = None
        audio_url: str | None = None
        work_id = f"{WORK_PREFIX}{uuid.uuid4().hex}"
        video_path: Path | None = None

        try:
            video_path = await self.fetch_video(request.video_url, work_id)
            decoded = await asyncio.to_thread(self.extractor.extract_file, video_path)
            canonical = await asyncio.to_thread(
                encode_canonical_audio, decoded, settings.downmix
            )
            del decoded

            transcription = await self.gateway.transcribe(canonical)
            translation = await self.gateway.translate(transcription, source.code, target.code)
            speech = await self.gateway.synthesize_speech(translation, target.code)
            audio_url = self.media_store.publish(
                work_id, speech.content, speech.content_type, speech.suffix
            )
        except VidlingoError as e:
            logger.warning(
                f"Falling back after {type(e).__name__} ({e.component}): {e.message}"
            )
        finally:
            if audio_url is None:
                self.media_store.cleanup_session(work_id)
            elif video_path is not None and video_path.parent.name == work_id:
                video_path.unlink(missing_ok=True)

        if not transcription or not translation:
            return ProcessVideoResult(
                message="Video processed with fallback results",
                transcription=MOCK_TRANSCRIPTION,
                translation=MOCK_TRANSLATION,
                processed_video_url=request.video_url,
                degraded=True,
            )

        return ProcessVideoResult(
            message=(
                "Video processed successfully"
                if audio_url
                else "Video processed without translated audio"
            ),
            transcription=transcription,
            translation=translation,
            processed_video_url=request.video_url,
            audio_url=audio_url,
            degraded=audio_url is None,
        )

    async def fetch_video(self, video_url: str, work_id: str) -> Path:
        """Resolve a media-store URL locally or download a remote one."""
        if video_url.startswith(f"{MEDIA_URL_PREFIX}/"):
            path, _ = self.media_store.resolve(video_url)
            return path

        logger.info("Fetching video...")
        settings = self.gateway.settings
        suffix = Path(httpx.URL(video_url).path).suffix or ".mp4"
        path = self.media_store.session_dir(work_id) / f"source{suffix}"
        try:
            async with self.gateway.client.stream(
                "GET", video_url, follow_redirects=True
            ) as response:
                response.raise_for_status()
                content_type = response.headers.get("content-type", "")
                # Non-video types such as application/octet-stream are not checked
                if content_type.startswith("video/"):
                    validate_media_type(content_type, settings.accepted_mime_types)
                declared = response.headers.get("content-length", "")
                if declared.isdigit():
                    validate_media_size(int(declared), settings.upload_max_size_mb)

                received = 0
                with open(path, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        received += len(chunk)
                        validate_media_size(received, settings.upload_max_size_mb)
                        f.write(chunk)
            validate_media_size(received, settings.upload_max_size_mb)
        except httpx.HTTPStatusError as e:
            raise ResourceError(
                f"Failed to fetch video: {e.response.reason_phrase}",
                details={"status": e.response.status_code},
            )
        except httpx.RequestError as e:
            raise ResourceError(
                "Failed to fetch video", details={"error": type(e).__name__}
            )
        except ValidationError:
            path.unlink(missing_ok=True)
            raise
        logger.info(f"Fetched {received} bytes of video")
        return path
