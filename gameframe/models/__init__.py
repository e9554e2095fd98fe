"""
Database models package.
"""
from gameframe.models.team import TeamRecord
from gameframe.models.user import UserRecord, PlayerRecord, CoachRecord, PlayerTeamInfoRecord
from gameframe.models.game import (
    GameRecord,
    KeyMomentRecord,
    TranscriptRecord,
    FullGameRecordingRecord,
)
from gameframe.models.invite import InviteRecord

__all__ = [
    "TeamRecord",
    "UserRecord",
    "PlayerRecord",
    "CoachRecord",
    "PlayerTeamInfoRecord",
    "GameRecord",
    "KeyMomentRecord",
    "TranscriptRecord",
    "FullGameRecordingRecord",
    "InviteRecord",
]
