"""Canonical audio encoder: resample to 16 kHz mono and serialize as PCM WAV."""

import logging
import struct

import librosa
import numpy as np

from vidlingo.models.audio import WAV_HEADER_SIZE, CanonicalAudio, DecodedAudio
from vidlingo.models.errors import EncodingError

logger = logging.getLogger(__name__)

CANONICAL_SAMPLE_RATE = 16000
CANONICAL_CHANNELS = 1
BYTES_PER_SAMPLE = 2
PCM_FORMAT_TAG = 1
PCM_SCALE = 32767

# RIFF header, fmt chunk and data chunk header, all little-endian
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")

DOWNMIX_MODES = ("first", "average")


def downmix(samples: np.ndarray, mode: str = "first") -> np.ndarray:
    """Reduce a (channels, n) array to a single channel.

    ``first`` keeps channel 0 as captured; ``average`` takes the mean of all
    channels.
    """
    if samples.ndim == 1:
        return samples
    if mode == "first":
        return samples[0]
    if mode == "average":
        return samples.mean(axis=0, dtype=np.float64).astype(np.float32)
    raise EncodingError(f"Unknown downmix mode: {mode}", details={"allowed": DOWNMIX_MODES})


def target_length(n_samples: int, source_rate: int, target_rate: int = CANONICAL_SAMPLE_RATE) -> int:
    """Sample count that preserves duration at the target rate."""
    return int(round(n_samples * target_rate / source_rate))


def resample(
    y: np.ndarray, source_rate: int, target_rate: int = CANONICAL_SAMPLE_RATE
) -> np.ndarray:
    """Band-limited resampling with an exact, duration-preserving output length."""
    if source_rate == target_rate:
        return y
    size = target_length(len(y), source_rate, target_rate)
    if size == 0:
        return np.zeros(0, dtype=np.float32)
    resampled = librosa.resample(
        y, orig_sr=source_rate, target_sr=target_rate, res_type="soxr_hq"
    )
    return librosa.util.fix_length(resampled, size=size).astype(np.float32)


def to_pcm16(y: np.ndarray) -> np.ndarray:
    """Convert float samples to int16 via round(clamp(s, -1, 1) * 32767)."""
    clean = np.nan_to_num(np.asarray(y, dtype=np.float64), nan=0.0, posinf=1.0, neginf=-1.0)
    return np.round(np.clip(clean, -1.0, 1.0) * PCM_SCALE).astype("<i2")


def build_wav_header(
    payload_length: int,
    sample_rate: int = CANONICAL_SAMPLE_RATE,
    channels: int = CANONICAL_CHANNELS,
) -> bytes:
    return _HEADER.pack(
        b"RIFF",
        36 + payload_length,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channels,
        sample_rate,
        sample_rate * channels * BYTES_PER_SAMPLE,
        channels * BYTES_PER_SAMPLE,
        8 * BYTES_PER_SAMPLE,
        b"data",
        payload_length,
    )


def read_wav_header(data: bytes) -> dict:
    """Parse the 44-byte header written by :func:`build_wav_header`."""
    if len(data) < WAV_HEADER_SIZE:
        raise EncodingError("WAV data is shorter than its header", details={"length": len(data)})
    (
        riff,
        chunk_size,
        wave,
        fmt,
        fmt_size,
        format_tag,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        payload_length,
    ) = _HEADER.unpack_from(data)
    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_tag != b"data":
        raise EncodingError("Not a canonical PCM WAV header")
    return {
        "chunk_size": chunk_size,
        "fmt_size": fmt_size,
        "format_tag": format_tag,
        "channels": channels,
        "sample_rate": sample_rate,
        "byte_rate": byte_rate,
        "block_align": block_align,
        "bits_per_sample": bits_per_sample,
        "payload_length": payload_length,
    }


def encode_canonical_audio(audio: DecodedAudio, downmix_mode: str = "first") -> CanonicalAudio:
    """Turn decoded samples into canonical 16 kHz mono PCM WAV.

    The result is byte-stable: the same input always yields the same bytes.
    """
    if audio.sample_count == 0:
        raise EncodingError("Source audio buffer is empty")

    mono = downmix(audio.samples, downmix_mode)
    resampled = resample(mono, audio.sample_rate)
    if len(resampled) == 0:
        raise EncodingError(
            "Resampling produced no samples",
            details={"source_samples": audio.sample_count, "source_rate": audio.sample_rate},
        )

    payload = to_pcm16(resampled).tobytes()
    data = build_wav_header(len(payload)) + payload

    logger.info(
        f"Encoded {audio.duration:.2f}s of audio "
        f"({audio.channels}ch @ {audio.sample_rate}Hz -> mono @ {CANONICAL_SAMPLE_RATE}Hz, "
        f"{len(data)} bytes)"
    )
    return CanonicalAudio(
        data=data,
        sample_rate=CANONICAL_SAMPLE_RATE,
        channels=CANONICAL_CHANNELS,
        sample_count=len(resampled),
    )
