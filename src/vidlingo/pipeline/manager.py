"""Session manager: one pipeline orchestrator per translation session."""

import logging
import uuid
from datetime import UTC, datetime

from vidlingo.config import Settings, get_settings
from vidlingo.extractors.audio_extractor import AudioExtractor
from vidlingo.gateway.client import InferenceGateway
from vidlingo.models.errors import ValidationError
from vidlingo.models.pipeline import PipelineState
from vidlingo.pipeline.orchestrator import PipelineOrchestrator
from vidlingo.pipeline.service import TranslationService
from vidlingo.playback.synchronizer import PlaybackSynchronizer
from vidlingo.storage.media_store import MediaStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, looks up and tears down translation sessions.

    Sessions are created without a ``player_factory``: over HTTP the client
    owns the video and audio elements and couples their playback itself, so
    the orchestrator's synchronizer runs only for embedders that pass one.
    Sessions idle for longer than ``session_ttl_seconds`` are expired when
    the next session is created.
    """

    def __init__(
        self,
        gateway: InferenceGateway | None = None,
        media_store: MediaStore | None = None,
        extractor: AudioExtractor | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.gateway = gateway or InferenceGateway(settings=self.settings)
        self.media_store = media_store or MediaStore(self.settings.media_dir)
        self.extractor = extractor or AudioExtractor()
        self.synchronizer = PlaybackSynchronizer(self.settings.playback_ready_timeout_seconds)
        self.service = TranslationService(self.gateway, self.media_store, self.extractor)
        self._sessions: dict[str, PipelineOrchestrator] = {}

    def create_session(self) -> PipelineOrchestrator:
        """Create a new session in the upload stage."""
        self.expire_idle()
        session_id = str(uuid.uuid4())
        orchestrator = PipelineOrchestrator(
            session_id,
            gateway=self.gateway,
            media_store=self.media_store,
            extractor=self.extractor,
            synchronizer=self.synchronizer,
            settings=self.settings,
        )
        self._sessions[session_id] = orchestrator
        logger.info(f"Created session {session_id}")
        return orchestrator

    def get_session(self, session_id: str) -> PipelineOrchestrator:
        orchestrator = self._sessions.get(session_id)
        if orchestrator is None:
            raise ValidationError(f"Session {session_id} not found")
        return orchestrator

    def get_state(self, session_id: str) -> PipelineState:
        return self.get_session(session_id).snapshot()

    async def start(self, session_id: str) -> PipelineState:
        """Run the pipeline for a session (no-op if it is not ready)."""
        return await self.get_session(session_id).start()

    def reset(self, session_id: str) -> PipelineState:
        orchestrator = self.get_session(session_id)
        orchestrator.reset()
        return orchestrator.snapshot()

    def delete_session(self, session_id: str) -> None:
        """Delete all data for a session."""
        orchestrator = self._sessions.pop(session_id, None)
        if orchestrator is not None:
            orchestrator.close()

    def expire_idle(self, ttl_seconds: int | None = None) -> int:
        """Delete sessions not updated within the TTL. Running sessions are kept."""
        ttl = self.settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = datetime.now(UTC)
        expired = [
            session_id
            for session_id, orchestrator in self._sessions.items()
            if not orchestrator.is_running
            and (now - orchestrator.snapshot().updated_at).total_seconds() > ttl
        ]
        for session_id in expired:
            self.delete_session(session_id)
            logger.info(f"Expired idle session {session_id}")
        return len(expired)

    async def aclose(self) -> None:
        for session_id in list(self._sessions):
            self.delete_session(session_id)
        await self.gateway.aclose()
