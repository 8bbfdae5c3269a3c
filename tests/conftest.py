"""Shared test fixtures, fakes and test media generators."""

import asyncio
import base64
import json
from pathlib import Path

import httpx
import numpy as np
import pytest

from vidlingo.config import Settings
from vidlingo.gateway.client import InferenceGateway
from vidlingo.models.audio import DecodedAudio
from vidlingo.pipeline.orchestrator import PipelineOrchestrator
from vidlingo.storage.media_store import MediaStore

TEST_TOKEN = "hf_test_token_do_not_log"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every directory at the test's tmp_path."""
    return Settings(
        hf_api_token=TEST_TOKEN,
        inference_base_url="https://inference.test/models",
        media_dir=tmp_path / "media",
        playback_ready_timeout_seconds=0.2,
    )


@pytest.fixture
def media_store(settings):
    return MediaStore(settings.media_dir)


def generate_sine(
    duration: float = 1.0,
    sample_rate: int = 16000,
    channels: int = 1,
    freq: float = 440.0,
    amplitude: float = 0.5,
) -> DecodedAudio:
    """Decoded audio holding a sine wave on every channel."""
    n_samples = int(round(duration * sample_rate))
    t = np.arange(n_samples) / sample_rate
    wave = (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)
    samples = np.tile(wave, (channels, 1))
    # Make channels distinguishable
    for ch in range(1, channels):
        samples[ch] *= 0.5
    return DecodedAudio(samples=samples, sample_rate=sample_rate, channels=channels)


class FakeExtractor:
    """Stands in for AudioExtractor; returns fixed decoded audio."""

    def __init__(self, audio: DecodedAudio | None = None, error: Exception | None = None):
        self.audio = audio or generate_sine(duration=0.5, sample_rate=44100, channels=2)
        self.error = error
        self.calls: list[Path] = []

    def extract(self, asset):
        return self.extract_file(asset.path)

    def extract_file(self, file_path: Path) -> DecodedAudio:
        self.calls.append(file_path)
        if self.error:
            raise self.error
        return self.audio


def _respond(status: int, body) -> httpx.Response:
    if isinstance(body, str):
        return httpx.Response(status, text=body)
    return httpx.Response(status, json=body)


class ProviderStub:
    """httpx handler imitating the inference endpoints.

    Each operation may be configured with a status code and body; requests are
    recorded for inspection.
    """

    def __init__(
        self,
        transcription=(200, {"text": "Hello world"}),
        translation=(200, [{"translation_text": "Hola mundo"}]),
        synthesis=(200, b"RIFF-fake-audio", "audio/wav"),
    ):
        self.transcription = transcription
        self.translation = translation
        self.synthesis = synthesis
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if "whisper" in path:
            return _respond(*self.transcription)
        if "opus-mt" in path or "indictrans" in path:
            return _respond(*self.translation)
        if "mms-tts" in path or "indic-tts" in path:
            status, content, content_type = self.synthesis
            return httpx.Response(status, content=content, headers={"content-type": content_type})
        return httpx.Response(404, text="unknown model")

    def requests_to(self, fragment: str) -> list[httpx.Request]:
        return [r for r in self.requests if fragment in r.url.path]

    def json_body(self, fragment: str) -> dict:
        return json.loads(self.requests_to(fragment)[-1].content)

    def transcribed_wav(self) -> bytes:
        return base64.b64decode(self.json_body("whisper")["inputs"])


@pytest.fixture
def provider():
    return ProviderStub()


@pytest.fixture
def gateway(provider, settings):
    client = httpx.AsyncClient(transport=httpx.MockTransport(provider))
    return InferenceGateway(client=client, settings=settings)


def make_orchestrator(gateway, media_store, settings, extractor=None, **kwargs):
    return PipelineOrchestrator(
        "session-1",
        gateway=gateway,
        media_store=media_store,
        extractor=extractor or FakeExtractor(),
        settings=settings,
        **kwargs,
    )


def video_bytes(size: int = 1024) -> bytes:
    return b"\x00" * size


def run(coro):
    return asyncio.run(coro)


class FakeMediaElement:
    """A media player double for the playback synchronizer."""

    def __init__(self, name: str, ready: bool = True, log: list | None = None):
        self.name = name
        self.muted = False
        self.position = None
        self.ready = ready
        self.log = log if log is not None else []
        self._ended = []

    def seek(self, seconds: float) -> None:
        self.position = seconds

    async def wait_until_ready(self) -> None:
        if not self.ready:
            await asyncio.Event().wait()

    def play(self) -> None:
        self.log.append(("play", self.name))

    def add_ended_listener(self, callback) -> None:
        self._ended.append(callback)

    def finish(self) -> None:
        for callback in self._ended:
            callback()
