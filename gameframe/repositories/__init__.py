"""
Store contracts and their implementations.
"""
from gameframe.repositories.base import (
    TeamStore,
    PlayerStore,
    UserStore,
    CoachStore,
    GameStore,
    KeyMomentStore,
    TranscriptStore,
    PlayerTeamInfoStore,
    InviteStore,
    FullGameRecordingStore,
)
from gameframe.repositories.stores import Stores, random_access_code
from gameframe.repositories.memory import MemoryDatabase, build_memory_stores
from gameframe.repositories.sql import build_sql_stores

__all__ = [
    "TeamStore",
    "PlayerStore",
    "UserStore",
    "CoachStore",
    "GameStore",
    "KeyMomentStore",
    "TranscriptStore",
    "PlayerTeamInfoStore",
    "InviteStore",
    "FullGameRecordingStore",
    "Stores",
    "random_access_code",
    "MemoryDatabase",
    "build_memory_stores",
    "build_sql_stores",
]
