"""Hypothesis strategies for property-based testing."""

import numpy as np
from hypothesis import strategies as st

from vidlingo.languages import SUPPORTED_LANGUAGES
from vidlingo.models.audio import DecodedAudio

SOURCE_RATES = [8000, 11025, 16000, 22050, 32000, 44100, 48000]

LANGUAGE_CODES = [lang.code for lang in SUPPORTED_LANGUAGES]


@st.composite
def generate_decoded_audio(draw, max_samples: int = 2000):
    """Generate random decoded audio at a common source rate.

    Values may exceed [-1, 1] to exercise clamping.
    """
    sample_rate = draw(st.sampled_from(SOURCE_RATES))
    channels = draw(st.integers(min_value=1, max_value=2))
    n_samples = draw(st.integers(min_value=4, max_value=max_samples))
    values = draw(
        st.lists(
            st.floats(min_value=-1.5, max_value=1.5, allow_nan=False, width=32),
            min_size=n_samples,
            max_size=n_samples,
        )
    )
    mono = np.array(values, dtype=np.float32)
    samples = np.stack([mono * (0.5**ch) for ch in range(channels)])
    return DecodedAudio(samples=samples, sample_rate=sample_rate, channels=channels)


def optional_language_code():
    return st.one_of(st.none(), st.sampled_from(LANGUAGE_CODES))


def video_content_types():
    return st.sampled_from(["video/mp4", "video/webm", "video/ogg"])
