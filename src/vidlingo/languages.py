"""Language catalog and per-language provider table."""

from vidlingo.config import get_settings
from vidlingo.models.errors import ValidationError
from vidlingo.models.language import Language, LanguageProfile, RequestShape

SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language(code="en", name="English"),
    Language(code="es", name="Spanish"),
    Language(code="fr", name="French"),
    Language(code="de", name="German"),
    Language(code="it", name="Italian"),
    Language(code="pt", name="Portuguese"),
    Language(code="nl", name="Dutch"),
    Language(code="ru", name="Russian"),
    Language(code="zh", name="Chinese"),
    Language(code="ja", name="Japanese"),
    Language(code="ko", name="Korean"),
    Language(code="ar", name="Arabic"),
    Language(code="hi", name="Hindi"),
    Language(code="tr", name="Turkish"),
    Language(code="pl", name="Polish"),
    Language(code="vi", name="Vietnamese"),
    Language(code="te", name="Telugu"),
)

_BY_CODE = {lang.code: lang for lang in SUPPORTED_LANGUAGES}

# ISO 639-3 codes used by the MMS speech models and the IndicTrans request shape
_ISO3 = {
    "en": "eng",
    "es": "spa",
    "fr": "fra",
    "de": "deu",
    "it": "ita",
    "pt": "por",
    "nl": "nld",
    "ru": "rus",
    "zh": "cmn",
    "ja": "jpn",
    "ko": "kor",
    "ar": "ara",
    "hi": "hin",
    "tr": "tur",
    "pl": "pol",
    "vi": "vie",
    "te": "tel",
}

_INDIC_TRANSLATION_PARAMETERS = {
    "max_length": 400,
    "num_beams": 5,
    "length_penalty": 1.0,
    "temperature": 0.6,
}

_INDIC_TTS_PARAMETERS = {
    "speed": 0.9,
    "energy": 1.2,
    "do_sample": False,
}


def _default_profile(code: str) -> LanguageProfile:
    iso3 = _ISO3[code]
    return LanguageProfile(code=code, iso3=iso3, tts_model=f"facebook/mms-tts-{iso3}")


def _indic_profile(code: str) -> LanguageProfile:
    return LanguageProfile(
        code=code,
        iso3=_ISO3[code],
        translation_model="ai4bharat/indictrans-v2-all-indic",
        translation_shape=RequestShape.EXTENDED,
        translation_parameters=dict(_INDIC_TRANSLATION_PARAMETERS),
        tts_model=f"ai4bharat/indic-tts-coqui-{code}",
        tts_shape=RequestShape.EXTENDED,
        tts_parameters={
            "language": code,
            "speaker_id": f"{code}_female",
            **_INDIC_TTS_PARAMETERS,
        },
        default_audio_type="audio/wav",
    )


LANGUAGE_PROFILES: dict[str, LanguageProfile] = {
    code: _indic_profile(code) if code in ("hi", "te") else _default_profile(code)
    for code in _BY_CODE
}


def get_language(code: str) -> Language:
    """Look up a catalog language by its code."""
    lang = _BY_CODE.get(code.lower())
    if lang is None:
        raise ValidationError(
            f"Unsupported language: {code}",
            details={"code": code, "supported": sorted(_BY_CODE)},
        )
    return lang


def get_profile(code: str) -> LanguageProfile:
    """Return the provider profile for a target language."""
    return LANGUAGE_PROFILES[get_language(code).code]


def default_languages() -> tuple[Language, Language]:
    """Initial (source, target) selection: English to Spanish."""
    settings = get_settings()
    return (
        get_language(settings.default_source_language),
        get_language(settings.default_target_language),
    )
