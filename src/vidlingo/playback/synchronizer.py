"""Coupled playback of the muted source video and the synthesized speech track."""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from pydantic import BaseModel

from vidlingo.config import get_settings

logger = logging.getLogger(__name__)


class MediaElement(Protocol):
    """The slice of a media player the synchronizer drives."""

    muted: bool

    def seek(self, seconds: float) -> None: ...

    async def wait_until_ready(self) -> None: ...

    def play(self) -> None: ...

    def add_ended_listener(self, callback: Callable[[], None]) -> None: ...


class SyncOutcome(BaseModel):
    synchronized: bool
    reason: str = ""


class PlaybackSynchronizer:
    """Starts video and dubbed audio together and keeps the video muted until the dub ends.

    Readiness is awaited for at most ``ready_timeout`` seconds. On timeout the
    video's own audio is restored and the video plays alone.
    """

    def __init__(self, ready_timeout: float | None = None):
        self.ready_timeout = (
            ready_timeout
            if ready_timeout is not None
            else get_settings().playback_ready_timeout_seconds
        )

    async def sync(self, video: MediaElement, audio: MediaElement) -> SyncOutcome:
        video.muted = True
        video.seek(0.0)

        try:
            await asyncio.wait_for(
                asyncio.gather(video.wait_until_ready(), audio.wait_until_ready()),
                timeout=self.ready_timeout,
            )
        except TimeoutError:
            logger.warning(
                f"Media not ready after {self.ready_timeout}s, playing video without dubbed audio"
            )
            video.muted = False
            video.play()
            return SyncOutcome(synchronized=False, reason="timeout")

        def restore_native_audio() -> None:
            video.muted = False
            logger.info("Dubbed audio ended, video audio restored")

        audio.add_ended_listener(restore_native_audio)
        video.play()
        audio.play()
        logger.info("Started synchronized playback")
        return SyncOutcome(synchronized=True)
