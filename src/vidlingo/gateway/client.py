"""Inference gateway: async adapters for transcription, translation and speech synthesis."""

import json
import logging

import httpx

from vidlingo.config import Settings, get_settings
from vidlingo.gateway.payloads import (
    normalize_content_type,
    parse_transcription,
    parse_translation,
    synthesis_payload,
    transcription_payload,
    translation_model,
    translation_payload,
)
from vidlingo.languages import get_profile
from vidlingo.models.audio import CanonicalAudio, SynthesizedAudio
from vidlingo.models.errors import (
    ProviderError,
    SynthesisError,
    TranscriptionError,
    TranslationError,
)

logger = logging.getLogger(__name__)


class InferenceGateway:
    """Stateless request/response adapters to the remote AI models.

    Every provider request carries the bearer token from settings. The token
    is attached per request, so other calls on the shared client go without
    it, and it is never logged or echoed back in error details.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.inference_base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout_seconds, connect=10.0)
        )
        token = self.settings.hf_api_token.get_secret_value()
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def __aenter__(self) -> "InferenceGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def model_url(self, model: str) -> str:
        return f"{self.base_url}/{model}"

    async def _post(
        self, model: str, payload: dict, error_cls: type[ProviderError], operation: str
    ) -> httpx.Response:
        url = self.model_url(model)
        try:
            response = await self.client.post(url, json=payload, headers=self._headers)
        except httpx.RequestError as e:
            logger.error(f"{operation} request to {model} failed: {type(e).__name__}")
            raise error_cls(
                f"{operation} service is unreachable",
                status=None,
                detail=str(e),
            )

        if not response.is_success:
            logger.error(f"{operation} failed with status {response.status_code} ({model})")
            raise error_cls(
                f"{operation} failed with status: {response.status_code}",
                status=response.status_code,
                detail=response.text[:2000],
            )
        return response

    async def transcribe(self, audio: CanonicalAudio) -> str:
        """Convert canonical speech audio to text."""
        model = self.settings.transcription_model
        logger.info(f"Transcribing {audio.duration:.2f}s of audio with {model}")
        response = await self._post(
            model, transcription_payload(audio), TranscriptionError, "Transcription"
        )
        try:
            return parse_transcription(response.text)
        except (ValueError, json.JSONDecodeError) as e:
            raise TranscriptionError(
                "Transcription returned an unexpected payload",
                status=response.status_code,
                detail=str(e),
            )

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate text between two catalog languages."""
        source = get_profile(source_lang)
        target = get_profile(target_lang)
        model = translation_model(target, source.code)
        logger.info(f"Translating {len(text)} chars {source.code}->{target.code} with {model}")
        response = await self._post(
            model, translation_payload(text, source, target), TranslationError, "Translation"
        )
        try:
            return parse_translation(response.text)
        except (ValueError, json.JSONDecodeError) as e:
            raise TranslationError(
                "Translation returned an unexpected payload",
                status=response.status_code,
                detail=str(e),
            )

    async def synthesize_speech(self, text: str, target_lang: str) -> SynthesizedAudio:
        """Generate speech for text in the target language."""
        profile = get_profile(target_lang)
        logger.info(f"Synthesizing {len(text)} chars of {profile.code} speech with {profile.tts_model}")
        response = await self._post(
            profile.tts_model, synthesis_payload(text, profile), SynthesisError, "Speech generation"
        )
        if not response.content:
            raise SynthesisError(
                "Speech generation returned no audio",
                status=response.status_code,
                detail="empty body",
            )
        content_type = normalize_content_type(
            response.headers.get("content-type"), profile.default_audio_type
        )
        return SynthesizedAudio(content=response.content, content_type=content_type)
