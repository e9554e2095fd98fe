"""
Core utilities package.
"""
from gameframe.core.config import settings, get_settings
from gameframe.core.database import Base, init_db, engine, SessionLocal
from gameframe.core.storage import AudioStorage, get_audio_storage

__all__ = [
    "settings",
    "get_settings",
    "Base",
    "init_db",
    "engine",
    "SessionLocal",
    "AudioStorage",
    "get_audio_storage",
]
