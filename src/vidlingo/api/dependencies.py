"""Dependency injection providers for FastAPI."""

from functools import lru_cache

from fastapi import Depends

from vidlingo.config import Settings, get_settings
from vidlingo.pipeline.manager import SessionManager
from vidlingo.storage.media_store import MediaStore


@lru_cache
def get_session_manager() -> SessionManager:
    return SessionManager()


def get_media_store(manager: SessionManager = Depends(get_session_manager)) -> MediaStore:
    return manager.media_store


def get_app_settings() -> Settings:
    return get_settings()
