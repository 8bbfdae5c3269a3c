"""Audio data models."""

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator

WAV_HEADER_SIZE = 44


class DecodedAudio(BaseModel):
    """Raw samples decoded from a media container at their native rate."""

    model_config = {"arbitrary_types_allowed": True}

    samples: np.ndarray = Field(..., description="float32 samples shaped (channels, n)")
    sample_rate: int = Field(..., gt=0)
    channels: int = Field(..., gt=0)

    @field_validator("samples")
    @classmethod
    def validate_samples(cls, v: np.ndarray) -> np.ndarray:
        if v.ndim == 1:
            v = v[np.newaxis, :]
        if v.ndim != 2:
            raise ValueError(f"Samples must be 1-D or 2-D, got {v.ndim} dimensions")
        return np.ascontiguousarray(v, dtype=np.float32)

    @model_validator(mode="after")
    def validate_channel_count(self) -> "DecodedAudio":
        if self.samples.shape[0] != self.channels:
            raise ValueError(
                f"Sample array has {self.samples.shape[0]} channels, declared {self.channels}"
            )
        return self

    @property
    def sample_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        return self.sample_count / self.sample_rate


class CanonicalAudio(BaseModel):
    """16 kHz mono 16-bit PCM audio serialized as a RIFF/WAVE byte string."""

    model_config = {"frozen": True}

    data: bytes = Field(..., min_length=WAV_HEADER_SIZE)
    sample_rate: int = Field(default=16000, gt=0)
    channels: int = Field(default=1, ge=1)
    bits_per_sample: int = Field(default=16)
    sample_count: int = Field(..., ge=0)
    content_type: str = "audio/wav"

    @model_validator(mode="after")
    def validate_payload_length(self) -> "CanonicalAudio":
        expected = self.sample_count * self.channels * (self.bits_per_sample // 8)
        if len(self.data) - WAV_HEADER_SIZE != expected:
            raise ValueError(
                f"Payload is {len(self.data) - WAV_HEADER_SIZE} bytes, expected {expected}"
            )
        return self

    @property
    def payload(self) -> bytes:
        return self.data[WAV_HEADER_SIZE:]

    @property
    def duration(self) -> float:
        return self.sample_count / self.sample_rate


class SynthesizedAudio(BaseModel):
    """Speech returned by the synthesis provider, in whatever container it chose."""

    content: bytes = Field(..., min_length=1)
    content_type: str = Field(default="audio/wav")

    @property
    def suffix(self) -> str:
        return {
            "audio/wav": ".wav",
            "audio/x-wav": ".wav",
            "audio/wave": ".wav",
            "audio/mpeg": ".mp3",
            "audio/mp3": ".mp3",
            "audio/flac": ".flac",
            "audio/ogg": ".ogg",
            "audio/webm": ".webm",
        }.get(self.content_type, ".bin")
