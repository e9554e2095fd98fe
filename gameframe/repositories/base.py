"""Store contracts consumed by the services.

Each store covers one collection of the document database. Two
implementations exist: :mod:`gameframe.repositories.memory` (local, used by
tests and the ``memory`` backend) and :mod:`gameframe.repositories.sql`
(SQLAlchemy). Services only depend on the shapes below.

Conventions:
- ``get_*`` methods return ``None`` when the document does not exist, except
  ``TeamStore.get_by_doc_id`` which raises ``TeamNotFoundError``.
- ``get_all`` methods for key moments and transcripts return ``None`` when a
  game has none, mirroring a missing sub-collection.
- List additions (roster, invites, enrolments) never create duplicates.
- Each single-document write is atomic; nothing spans several documents.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from gameframe.schemas import (
    Coach,
    FullGameRecording,
    Game,
    Invite,
    KeyMoment,
    Player,
    PlayerTeamInfo,
    Team,
    TeamCreate,
    Transcript,
    User,
)

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
]


@runtime_checkable
class TeamStore(Protocol):
    async def get_by_team_id(self, team_id: str) -> Optional[Team]: ...

    async def get_by_doc_id(self, doc_id: str) -> Team: ...

    async def get_by_access_code(self, access_code: str) -> Optional[Team]: ...

    async def get_all(self, team_ids: Sequence[str]) -> List[Team]: ...

    async def get_roster_size(self, team_id: str) -> Optional[int]: ...

    async def create(self, coach_id: str, data: TeamCreate, access_code: str) -> Team: ...

    async def add_player(self, doc_id: str, player_id: str) -> None: ...

    async def remove_player(self, doc_id: str, player_id: str) -> None: ...

    async def add_coach(self, doc_id: str, coach_id: str) -> None: ...

    async def remove_coach(self, doc_id: str, coach_id: str) -> None: ...

    async def add_invite(self, doc_id: str, invite_id: str) -> None: ...

    async def remove_invite(self, doc_id: str, invite_id: str) -> None: ...

    async def generate_unique_access_code(self) -> str: ...

    async def update_settings(
        self,
        doc_id: str,
        name: Optional[str] = None,
        nickname: Optional[str] = None,
        age_grp: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> None: ...

    async def delete(self, doc_id: str) -> None: ...


@runtime_checkable
class PlayerStore(Protocol):
    async def get_by_player_id(self, player_id: str) -> Optional[Player]: ...

    async def get_by_doc_id(self, doc_id: str) -> Optional[Player]: ...

    async def create(self, player: Player) -> Player: ...

    async def add_team(self, doc_id: str, team_id: str) -> None: ...

    async def remove_team(self, doc_id: str, team_id: str) -> None: ...

    async def is_enrolled(self, player_id: str, team_id: str) -> bool: ...


@runtime_checkable
class UserStore(Protocol):
    async def get_by_user_id(self, user_id: str) -> Optional[User]: ...

    async def create(self, user: User) -> User: ...


@runtime_checkable
class CoachStore(Protocol):
    async def get_by_coach_id(self, coach_id: str) -> Optional[Coach]: ...

    async def create(self, coach: Coach) -> Coach: ...

    async def add_team(self, coach_id: str, team_id: str) -> None: ...

    async def remove_team(self, coach_id: str, team_id: str) -> None: ...


@runtime_checkable
class GameStore(Protocol):
    async def get(self, team_doc_id: str, game_id: str) -> Optional[Game]: ...

    async def get_all(self, team_id: str) -> List[Game]: ...

    async def create(self, team_doc_id: str, game: Game) -> Game: ...

    async def delete_all(self, team_doc_id: str) -> None:
        """Delete every game of the team with its key moments and transcripts."""
        ...


@runtime_checkable
class KeyMomentStore(Protocol):
    async def get(self, team_doc_id: str, game_id: str, key_moment_id: str) -> Optional[KeyMoment]: ...

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[KeyMoment]]: ...

    async def create(self, team_doc_id: str, key_moment: KeyMoment) -> KeyMoment: ...

    async def get_audio_url(self, team_doc_id: str, game_id: str, key_moment_id: str) -> Optional[str]: ...

    async def add_players_to_feedback(
        self, team_doc_id: str, game_id: str, key_moment_id: str, player_ids: Sequence[str]
    ) -> None: ...

    async def assign_player_to_full_team_moments(
        self, team_doc_id: str, game_id: str, roster_count: int, player_id: str
    ) -> int:
        """
        Add ``player_id`` to every key moment of the game whose recipient
        list holds exactly ``roster_count`` players. Returns how many key
        moments changed.
        """
        ...

    async def remove(self, team_doc_id: str, game_id: str, key_moment_id: str) -> None: ...

    async def delete_all(self, team_doc_id: str, game_id: str) -> None: ...


@runtime_checkable
class TranscriptStore(Protocol):
    async def get(self, team_doc_id: str, game_id: str, transcript_id: str) -> Optional[Transcript]: ...

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[Transcript]]: ...

    async def get_preview(self, team_doc_id: str, game_id: str, limit: int = 3) -> Optional[List[Transcript]]:
        """First ``limit`` transcripts of the game in storage order."""
        ...

    async def create(self, team_doc_id: str, transcript: Transcript) -> Transcript: ...

    async def update(self, team_doc_id: str, game_id: str, transcript_id: str, text: str) -> None: ...

    async def remove(self, team_doc_id: str, game_id: str, transcript_id: str) -> None: ...

    async def delete_all(self, team_doc_id: str, game_id: str) -> None: ...


@runtime_checkable
class PlayerTeamInfoStore(Protocol):
    async def get(self, player_doc_id: str, team_id: str) -> Optional[PlayerTeamInfo]: ...

    async def save(self, info: PlayerTeamInfo) -> PlayerTeamInfo: ...


@runtime_checkable
class InviteStore(Protocol):
    async def get(self, invite_id: str) -> Optional[Invite]: ...

    async def create(self, invite: Invite) -> Invite: ...

    async def delete(self, invite_id: str) -> None: ...


@runtime_checkable
class FullGameRecordingStore(Protocol):
    async def get_by_game_id(self, team_doc_id: str, game_id: str) -> Optional[FullGameRecording]: ...

    async def create(self, team_doc_id: str, recording: FullGameRecording) -> FullGameRecording: ...
