"""Audio track extraction using ffprobe/ffmpeg."""

import logging
import subprocess
from pathlib import Path

import numpy as np

from vidlingo.config import get_settings
from vidlingo.extractors.validators import find_audio_stream, probe_media
from vidlingo.models.audio import DecodedAudio
from vidlingo.models.errors import ExtractionError, ValidationError
from vidlingo.models.media import MediaAsset

logger = logging.getLogger(__name__)


class AudioExtractor:
    """Decodes the first audio track of a video into float32 samples.

    Samples keep the track's native sample rate and channel layout;
    resampling and down-mixing belong to the encoder.
    """

    def __init__(self, decode_timeout: float = 300.0):
        self.decode_timeout = decode_timeout
        self.settings = get_settings()

    def extract(self, asset: MediaAsset) -> DecodedAudio:
        """Decode the audio track of an uploaded asset."""
        return self.extract_file(asset.path)

    def extract_file(self, file_path: Path) -> DecodedAudio:
        sample_rate, channels, stream_index = self.probe_audio(file_path)
        samples = self.decode(file_path, stream_index, sample_rate, channels)
        if samples.shape[1] == 0:
            raise ExtractionError(
                "Audio track decoded to zero samples",
                details={"file": file_path.name},
            )

        logger.info(
            f"Extracted {samples.shape[1]} samples "
            f"({channels}ch @ {sample_rate}Hz) from {file_path.name}"
        )
        return DecodedAudio(samples=samples, sample_rate=sample_rate, channels=channels)

    def probe_audio(self, file_path: Path) -> tuple[int, int, int]:
        """Return (sample_rate, channels, stream_index) of the first audio stream."""
        try:
            probe_data = probe_media(file_path, timeout=self.settings.probe_timeout_seconds)
        except ValidationError as e:
            raise ExtractionError(e.message, details=e.details)

        stream = find_audio_stream(probe_data)
        if stream is None:
            raise ExtractionError(
                "No audio track found in video",
                details={"file": file_path.name},
            )

        try:
            sample_rate = int(stream["sample_rate"])
            channels = int(stream["channels"])
        except (KeyError, TypeError, ValueError):
            raise ExtractionError(
                "Audio track has no usable sample rate or channel layout",
                details={"codec": stream.get("codec_name", "unknown")},
            )
        if sample_rate <= 0 or channels <= 0:
            raise ExtractionError(
                "Unsupported audio layout",
                details={"sample_rate": sample_rate, "channels": channels},
            )
        return sample_rate, channels, int(stream.get("index", 0))

    def decode(
        self, file_path: Path, stream_index: int, sample_rate: int, channels: int
    ) -> np.ndarray:
        """Decode one stream to a (channels, n) float32 array at its native rate."""
        cmd = [
            "ffmpeg",
            "-v",
            "error",
            "-i",
            str(file_path),
            "-map",
            f"0:{stream_index}",
            "-vn",
            "-f",
            "f32le",
            "-acodec",
            "pcm_f32le",
            "-ac",
            str(channels),
            "-ar",
            str(sample_rate),
            "pipe:1",
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.decode_timeout)
        except FileNotFoundError:
            raise ExtractionError(
                "ffmpeg not found. Please install FFmpeg.",
                details={"command": "ffmpeg"},
            )
        except subprocess.TimeoutExpired:
            raise ExtractionError(
                "Audio decoding timed out",
                details={"file": file_path.name, "timeout": self.decode_timeout},
            )

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise ExtractionError(
                "Audio decoding is not supported for this file",
                details={"stderr": stderr[:500]},
            )

        interleaved = np.frombuffer(result.stdout, dtype="<f4")
        usable = len(interleaved) - len(interleaved) % channels
        return interleaved[:usable].reshape(-1, channels).T.astype(np.float32)
