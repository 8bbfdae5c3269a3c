"""Provider request shaping and response normalization."""

import base64
import json
import re

from vidlingo.models.audio import CanonicalAudio
from vidlingo.models.language import LanguageProfile, RequestShape


def transcription_payload(audio: CanonicalAudio) -> dict:
    """JSON body carrying base64-encoded WAV bytes."""
    return {"inputs": base64.b64encode(audio.data).decode("ascii")}


def translation_model(profile: LanguageProfile, source_code: str) -> str:
    return profile.translation_model.format(source=source_code, target=profile.code)


def translation_payload(text: str, source: LanguageProfile, target: LanguageProfile) -> dict:
    if target.translation_shape == RequestShape.MINIMAL:
        return {"inputs": text}
    return {
        "inputs": text,
        "parameters": {
            "source_language": source.iso3,
            "target_language": target.iso3,
            **target.translation_parameters,
        },
    }


def synthesis_payload(text: str, profile: LanguageProfile) -> dict:
    if profile.tts_shape == RequestShape.MINIMAL:
        return {"inputs": text}
    return {"inputs": text, "parameters": dict(profile.tts_parameters)}


def _first(result):
    if isinstance(result, list):
        if not result:
            return None
        return result[0]
    return result


def parse_transcription(body: str) -> str:
    """Extract text from ``{"text": ...}`` or ``[{"text": ...}]``."""
    result = _first(json.loads(body))
    if isinstance(result, dict):
        text = result.get("text")
        if isinstance(text, str):
            return text.strip()
    raise ValueError(f"Unexpected transcription payload: {body[:200]}")


def parse_translation(body: str) -> str:
    """Extract text from a bare object or the first element of a result array."""
    result = _first(json.loads(body))
    if isinstance(result, dict):
        for key in ("translation_text", "generated_text", "text"):
            value = result.get(key)
            if isinstance(value, str):
                return value.strip()
    if isinstance(result, str):
        return result.strip()
    raise ValueError(f"Unexpected translation payload: {body[:200]}")


def normalize_content_type(header: str | None, fallback: str) -> str:
    """Strip parameters from a Content-Type header; fall back for non-audio types."""
    mime = re.split(r"[;,]", header or "")[0].strip().lower()
    if not mime.startswith("audio/"):
        return fallback
    return mime
