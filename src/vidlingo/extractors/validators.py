"""Upload type, size, and container integrity validation."""

import json
import subprocess
from pathlib import Path

from vidlingo.config import get_settings
from vidlingo.models.errors import ValidationError

INVALID_TYPE_MESSAGE = "Invalid file type. Please upload an MP4, WebM, or OGG video."
TOO_LARGE_MESSAGE = "File is too large. Maximum size is {max_mb}MB."


def validate_media_type(content_type: str, accepted: list[str] | None = None) -> None:
    """Validate that the declared MIME type is on the allow-list."""
    allowed = accepted or get_settings().accepted_mime_types
    # Browsers may append codec parameters, e.g. "video/webm;codecs=vp9"
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in allowed:
        raise ValidationError(
            INVALID_TYPE_MESSAGE,
            details={"content_type": content_type, "allowed": allowed},
        )


def validate_media_size(size_bytes: int, max_size_mb: int | None = None) -> None:
    """Validate that the upload fits under the size ceiling."""
    max_mb = max_size_mb or get_settings().upload_max_size_mb
    if size_bytes > max_mb * 1024 * 1024:
        raise ValidationError(
            TOO_LARGE_MESSAGE.format(max_mb=max_mb),
            details={"size_mb": round(size_bytes / (1024 * 1024), 1), "max_mb": max_mb},
        )
    if size_bytes == 0:
        raise ValidationError("File is empty.", details={"size_bytes": 0})


def validate_upload(content_type: str, size_bytes: int) -> None:
    """Full validation for a video selected by the user."""
    validate_media_type(content_type)
    validate_media_size(size_bytes)


def probe_media(file_path: Path, timeout: float | None = None) -> dict:
    """Inspect a media file with ffprobe. Returns probe data.

    Raises ``ValidationError`` when the file cannot be read as media at all;
    callers that need a stage-specific error translate it.
    """
    if not file_path.exists():
        raise ValidationError(f"File not found: {file_path}")
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "quiet",
                "-print_format",
                "json",
                "-show_format",
                "-show_streams",
                str(file_path),
            ],
            capture_output=True,
            text=True,
            timeout=timeout or get_settings().probe_timeout_seconds,
        )
        if result.returncode != 0:
            raise ValidationError(
                "File appears to be corrupted or unreadable",
                details={"stderr": result.stderr[:500]},
            )
        probe_data = json.loads(result.stdout)
        if not probe_data.get("streams"):
            raise ValidationError(
                "No media streams found in file",
                details={"file": str(file_path)},
            )
        return probe_data
    except FileNotFoundError:
        raise ValidationError(
            "ffprobe not found. Please install FFmpeg.",
            details={"command": "ffprobe"},
        )
    except subprocess.TimeoutExpired:
        raise ValidationError(
            "File probe timed out, file may be corrupted",
            details={"file": str(file_path)},
        )
    except json.JSONDecodeError:
        raise ValidationError(
            "Failed to parse ffprobe output",
            details={"file": str(file_path)},
        )


def find_audio_stream(probe_data: dict) -> dict | None:
    """Return the first audio stream from ffprobe output, if any."""
    for stream in probe_data.get("streams", []):
        if stream.get("codec_type") == "audio":
            return stream
    return None
