"""
Pydantic schemas package.
"""
from gameframe.schemas.team import (
    Team,
    TeamCreate,
    TeamUpdate,
    JoinTeamRequest,
)
from gameframe.schemas.user import (
    UserType,
    User,
    Player,
    Coach,
    PlayerTeamInfo,
)
from gameframe.schemas.game import (
    Game,
    KeyMoment,
    Transcript,
    FullGameRecording,
)
from gameframe.schemas.invite import InviteStatus, Invite
from gameframe.schemas.transcript import (
    PlayerTranscriptInfo,
    PlayerNameAndPhoto,
    KeyMomentTranscript,
    GameTranscriptsResponse,
    TranscriptUpdate,
    AudioLink,
)

__all__ = [
    # Team
    "Team",
    "TeamCreate",
    "TeamUpdate",
    "JoinTeamRequest",
    # User
    "UserType",
    "User",
    "Player",
    "Coach",
    "PlayerTeamInfo",
    # Game
    "Game",
    "KeyMoment",
    "Transcript",
    "FullGameRecording",
    # Invite
    "InviteStatus",
    "Invite",
    # Transcript views
    "PlayerTranscriptInfo",
    "PlayerNameAndPhoto",
    "KeyMomentTranscript",
    "GameTranscriptsResponse",
    "TranscriptUpdate",
    "AudioLink",
]
