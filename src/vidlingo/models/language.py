"""Language and per-language provider profile models."""

from enum import StrEnum

from pydantic import BaseModel, Field


class Language(BaseModel):
    """A language the user can pick as source or target."""

    model_config = {"frozen": True}

    code: str = Field(..., min_length=2, max_length=3, description="ISO 639-1 code")
    name: str = Field(..., min_length=1)


class RequestShape(StrEnum):
    """Payload variant sent to a provider endpoint."""

    MINIMAL = "minimal"
    EXTENDED = "extended"


class LanguageProfile(BaseModel):
    """Provider routing for one target language.

    Translation endpoints for the minimal shape are templated on the language
    pair, so ``translation_model`` may contain ``{source}`` and ``{target}``.
    """

    model_config = {"frozen": True}

    code: str
    iso3: str = Field(..., min_length=3, max_length=3)
    translation_model: str = "Helsinki-NLP/opus-mt-{source}-{target}"
    translation_shape: RequestShape = RequestShape.MINIMAL
    translation_parameters: dict = Field(default_factory=dict)
    tts_model: str
    tts_shape: RequestShape = RequestShape.MINIMAL
    tts_parameters: dict = Field(default_factory=dict)
    default_audio_type: str = "audio/mpeg"
