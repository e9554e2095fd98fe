"""
The collaborator set handed to every service.
"""
from dataclasses import dataclass
import secrets

from gameframe.core.config import settings
from gameframe.repositories.base import (
    CoachStore,
    FullGameRecordingStore,
    GameStore,
    InviteStore,
    KeyMomentStore,
    PlayerStore,
    PlayerTeamInfoStore,
    TeamStore,
    TranscriptStore,
    UserStore,
)


@dataclass
class Stores:
    """One store per collection, built together for one backend."""

    teams: TeamStore
    players: PlayerStore
    users: UserStore
    coaches: CoachStore
    games: GameStore
    key_moments: KeyMomentStore
    transcripts: TranscriptStore
    player_team_info: PlayerTeamInfoStore
    invites: InviteStore
    full_game_recordings: FullGameRecordingStore


def random_access_code() -> str:
    """Random access code candidate; uniqueness is checked by the team store."""
    return "".join(
        secrets.choice(settings.ACCESS_CODE_ALPHABET) for _ in range(settings.ACCESS_CODE_LENGTH)
    )
