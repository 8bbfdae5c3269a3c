"""Per-session media files and revocable object URLs."""

import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import BinaryIO

from vidlingo.config import get_settings
from vidlingo.models.errors import ResourceError
from vidlingo.models.media import MediaAsset

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/api/v1/media"
UPLOAD_PREFIX = "upload-"

_VIDEO_TYPES = {".mp4": "video/mp4", ".webm": "video/webm", ".ogg": "video/ogg"}
_AUDIO_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
}


def guess_content_type(name: str) -> str:
    """Content type of a stored file, from its name alone."""
    suffix = Path(name).suffix.lower()
    table = _VIDEO_TYPES if name.startswith(UPLOAD_PREFIX) else _AUDIO_TYPES
    return table.get(suffix, "application/octet-stream")


class MediaStore:
    """Holds uploaded videos and published result audio under per-session directories.

    Published buffers are addressed by object URLs of the form
    ``/api/v1/media/<session_id>/<name>``; revoking a URL deletes its file.
    A URL published by another process sharing ``base_dir`` (a Celery
    worker) resolves from disk.
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or get_settings().media_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._published: dict[str, tuple[Path, str]] = {}
        self._created: dict[str, float] = {}

    def session_dir(self, session_id: str) -> Path:
        d = self.base_dir / session_id
        d.mkdir(parents=True, exist_ok=True)
        self._created.setdefault(session_id, time.time())
        return d

    def save_upload(
        self, session_id: str, filename: str, content_type: str, source: bytes | BinaryIO
    ) -> MediaAsset:
        """Persist an uploaded video and wrap it in a MediaAsset."""
        suffix = Path(filename).suffix.lower()
        path = self.session_dir(session_id) / f"{UPLOAD_PREFIX}{uuid.uuid4().hex}{suffix}"
        if isinstance(source, bytes):
            path.write_bytes(source)
        else:
            with open(path, "wb") as f:
                shutil.copyfileobj(source, f)
        return MediaAsset(
            filename=filename,
            content_type=content_type,
            size_bytes=path.stat().st_size,
            path=path,
        )

    def register(self, session_id: str, path: Path, content_type: str) -> str:
        """Expose an existing session file under an object URL."""
        url = f"{MEDIA_URL_PREFIX}/{session_id}/{path.name}"
        self._published[url] = (path, content_type)
        return url

    def publish(self, session_id: str, content: bytes, content_type: str, suffix: str) -> str:
        """Write a buffer to the session directory and return its object URL."""
        path = self.session_dir(session_id) / f"{uuid.uuid4().hex}{suffix}"
        path.write_bytes(content)
        url = self.register(session_id, path, content_type)
        logger.info(f"Published {len(content)} bytes of {content_type} at {url}")
        return url

    def resolve(self, url: str) -> tuple[Path, str]:
        """Return (path, content_type) for a live object URL."""
        entry = self._published.get(url)
        if entry is None:
            path = self._disk_path(url)
            if path is not None:
                entry = (path, guess_content_type(path.name))
        if entry is None or not entry[0].exists():
            raise ResourceError("Media not found or already released", details={"url": url})
        return entry

    def revoke(self, url: str | None) -> None:
        """Release an object URL. Unknown or already revoked URLs are ignored."""
        if not url:
            return
        entry = self._published.pop(url, None)
        path = entry[0] if entry is not None else self._disk_path(url)
        if path is not None and path.exists():
            path.unlink(missing_ok=True)
            logger.info(f"Revoked {url}")

    def cleanup_session(self, session_id: str) -> None:
        """Revoke every URL of a session and remove its directory."""
        prefix = f"{MEDIA_URL_PREFIX}/{session_id}/"
        for url in [u for u in self._published if u.startswith(prefix)]:
            self.revoke(url)
        self._created.pop(session_id, None)
        job_dir = self.base_dir / session_id
        if job_dir.exists():
            shutil.rmtree(job_dir, ignore_errors=True)
            logger.info(f"Cleaned up media for session {session_id}")

    def cleanup_expired(self, ttl_seconds: int | None = None, prefix: str = "") -> int:
        """Remove directories whose name starts with ``prefix`` and that are older than the TTL.

        Directories this store did not create are aged by their mtime.
        """
        ttl = get_settings().media_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = time.time()
        cleaned = 0
        for job_dir in list(self.base_dir.iterdir()):
            if not job_dir.is_dir() or not job_dir.name.startswith(prefix):
                continue
            created = self._created.get(job_dir.name)
            if created is None:
                created = job_dir.stat().st_mtime
            if now - created > ttl:
                self.cleanup_session(job_dir.name)
                cleaned += 1
        if cleaned:
            logger.info(f"Expired {cleaned} media directories")
        return cleaned

    def _disk_path(self, url: str) -> Path | None:
        if not url.startswith(f"{MEDIA_URL_PREFIX}/"):
            return None
        parts = url[len(MEDIA_URL_PREFIX) + 1 :].split("/")
        if len(parts) != 2 or any(p in ("", ".", "..") or "\\" in p for p in parts):
            return None
        path = self.base_dir / parts[0] / parts[1]
        if not path.resolve().is_relative_to(self.base_dir.resolve()):
            return None
        return path
