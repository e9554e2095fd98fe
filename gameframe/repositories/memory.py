"""
In-memory stores.

All stores of one :class:`MemoryDatabase` share its dictionaries, so a
cascade performed through one store (e.g. deleting games) is visible to the
others. Documents are copied on the way in and out; callers never hold a
reference to stored state.
"""
import logging
import uuid
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from gameframe.core.exceptions import (
    CoachNotFoundError,
    KeyMomentNotFoundError,
    PlayerNotFoundError,
    TeamNotFoundError,
    TranscriptNotFoundError,
)
from gameframe.repositories.stores import Stores, random_access_code
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

logger = logging.getLogger(__name__)

GameKey = Tuple[str, str]  # (team_doc_id, game_id)


def _copy(doc):
    return doc.model_copy(deep=True) if doc is not None else None


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryDatabase:
    """Collections of the local document store."""

    def __init__(self):
        self.teams: Dict[str, Team] = {}
        self.users: Dict[str, User] = {}
        self.players: Dict[str, Player] = {}
        self.coaches: Dict[str, Coach] = {}
        self.player_team_info: Dict[Tuple[str, str], PlayerTeamInfo] = {}
        self.games: Dict[str, Dict[str, Game]] = defaultdict(dict)
        self.key_moments: Dict[GameKey, Dict[str, KeyMoment]] = defaultdict(dict)
        self.transcripts: Dict[GameKey, Dict[str, Transcript]] = defaultdict(dict)
        self.invites: Dict[str, Invite] = {}
        self.recordings: Dict[GameKey, FullGameRecording] = {}


class MemoryTeamStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _team(self, doc_id: str) -> Team:
        team = self.db.teams.get(doc_id)
        if team is None:
            raise TeamNotFoundError(f"Team not found with id: {doc_id}")
        return team

    async def get_by_team_id(self, team_id: str) -> Optional[Team]:
        for team in self.db.teams.values():
            if team.team_id == team_id:
                return _copy(team)
        return None

    async def get_by_doc_id(self, doc_id: str) -> Team:
        return _copy(self._team(doc_id))

    async def get_by_access_code(self, access_code: str) -> Optional[Team]:
        for team in self.db.teams.values():
            if team.access_code == access_code:
                return _copy(team)
        return None

    async def get_all(self, team_ids: Sequence[str]) -> List[Team]:
        wanted = set(team_ids)
        return [_copy(t) for t in self.db.teams.values() if t.team_id in wanted]

    async def get_roster_size(self, team_id: str) -> Optional[int]:
        team = await self.get_by_team_id(team_id)
        if team is None:
            logger.debug("Team not found with team id: %s", team_id)
            return None
        return team.roster_size

    async def create(self, coach_id: str, data: TeamCreate, access_code: str) -> Team:
        team = Team(
            id=_new_id(),
            team_id=_new_id(),
            access_code=access_code,
            coaches=[coach_id],
            **data.model_dump(),
        )
        self.db.teams[team.id] = team
        return _copy(team)

    async def add_player(self, doc_id: str, player_id: str) -> None:
        team = self._team(doc_id)
        if player_id not in team.players:
            team.players.append(player_id)

    async def remove_player(self, doc_id: str, player_id: str) -> None:
        team = self._team(doc_id)
        team.players = [p for p in team.players if p != player_id]

    async def add_coach(self, doc_id: str, coach_id: str) -> None:
        team = self._team(doc_id)
        if coach_id not in team.coaches:
            team.coaches.append(coach_id)

    async def remove_coach(self, doc_id: str, coach_id: str) -> None:
        team = self._team(doc_id)
        team.coaches = [c for c in team.coaches if c != coach_id]

    async def add_invite(self, doc_id: str, invite_id: str) -> None:
        team = self._team(doc_id)
        if invite_id not in team.invites:
            team.invites.append(invite_id)

    async def remove_invite(self, doc_id: str, invite_id: str) -> None:
        team = self._team(doc_id)
        team.invites = [i for i in team.invites if i != invite_id]

    async def generate_unique_access_code(self) -> str:
        taken = {t.access_code for t in self.db.teams.values()}
        while True:
            code = random_access_code()
            if code not in taken:
                return code

    async def update_settings(self, doc_id, name=None, nickname=None, age_grp=None, gender=None) -> None:
        team = self._team(doc_id)
        if name is not None:
            team.name = name
        if nickname is not None:
            team.team_nickname = nickname
        if age_grp is not None:
            team.age_grp = age_grp
        if gender is not None:
            team.gender = gender

    async def delete(self, doc_id: str) -> None:
        self._team(doc_id)
        del self.db.teams[doc_id]


class MemoryPlayerStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _player(self, doc_id: str) -> Player:
        player = self.db.players.get(doc_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found with id: {doc_id}")
        return player

    async def get_by_player_id(self, player_id: str) -> Optional[Player]:
        for player in self.db.players.values():
            if player.player_id == player_id:
                return _copy(player)
        return None

    async def get_by_doc_id(self, doc_id: str) -> Optional[Player]:
        return _copy(self.db.players.get(doc_id))

    async def create(self, player: Player) -> Player:
        self.db.players[player.id] = _copy(player)
        return _copy(player)

    async def add_team(self, doc_id: str, team_id: str) -> None:
        player = self._player(doc_id)
        if team_id not in player.teams_enrolled:
            player.teams_enrolled.append(team_id)

    async def remove_team(self, doc_id: str, team_id: str) -> None:
        player = self._player(doc_id)
        player.teams_enrolled = [t for t in player.teams_enrolled if t != team_id]

    async def is_enrolled(self, player_id: str, team_id: str) -> bool:
        player = await self.get_by_player_id(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found with player id: {player_id}")
        return team_id in player.teams_enrolled


class MemoryUserStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get_by_user_id(self, user_id: str) -> Optional[User]:
        return _copy(self.db.users.get(user_id))

    async def create(self, user: User) -> User:
        self.db.users[user.user_id] = _copy(user)
        return _copy(user)


class MemoryCoachStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _coach(self, coach_id: str) -> Coach:
        coach = self.db.coaches.get(coach_id)
        if coach is None:
            raise CoachNotFoundError(f"Coach not found with id: {coach_id}")
        return coach

    async def get_by_coach_id(self, coach_id: str) -> Optional[Coach]:
        return _copy(self.db.coaches.get(coach_id))

    async def create(self, coach: Coach) -> Coach:
        self.db.coaches[coach.coach_id] = _copy(coach)
        return _copy(coach)

    async def add_team(self, coach_id: str, team_id: str) -> None:
        coach = self._coach(coach_id)
        if team_id not in coach.teams_coaching:
            coach.teams_coaching.append(team_id)

    async def remove_team(self, coach_id: str, team_id: str) -> None:
        coach = self._coach(coach_id)
        coach.teams_coaching = [t for t in coach.teams_coaching if t != team_id]


class MemoryGameStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get(self, team_doc_id: str, game_id: str) -> Optional[Game]:
        return _copy(self.db.games.get(team_doc_id, {}).get(game_id))

    async def get_all(self, team_id: str) -> List[Game]:
        for doc_id, team in self.db.teams.items():
            if team.team_id == team_id:
                return [_copy(g) for g in self.db.games.get(doc_id, {}).values()]
        logger.debug("No team with team id %s, so no games", team_id)
        return []

    async def create(self, team_doc_id: str, game: Game) -> Game:
        self.db.games[team_doc_id][game.game_id] = _copy(game)
        return _copy(game)

    async def delete_all(self, team_doc_id: str) -> None:
        games = self.db.games.pop(team_doc_id, {})
        for game_id in games:
            key = (team_doc_id, game_id)
            self.db.key_moments.pop(key, None)
            self.db.transcripts.pop(key, None)
            self.db.recordings.pop(key, None)
        logger.debug("Deleted %d games of team %s", len(games), team_doc_id)


class MemoryKeyMomentStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _key_moment(self, team_doc_id: str, game_id: str, key_moment_id: str) -> KeyMoment:
        key_moment = self.db.key_moments.get((team_doc_id, game_id), {}).get(key_moment_id)
        if key_moment is None:
            raise KeyMomentNotFoundError(f"Key moment not found with id: {key_moment_id}")
        return key_moment

    async def get(self, team_doc_id, game_id, key_moment_id) -> Optional[KeyMoment]:
        return _copy(self.db.key_moments.get((team_doc_id, game_id), {}).get(key_moment_id))

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[KeyMoment]]:
        moments = self.db.key_moments.get((team_doc_id, game_id))
        if not moments:
            return None
        return [_copy(k) for k in moments.values()]

    async def create(self, team_doc_id: str, key_moment: KeyMoment) -> KeyMoment:
        self.db.key_moments[(team_doc_id, key_moment.game_id)][key_moment.key_moment_id] = _copy(key_moment)
        return _copy(key_moment)

    async def get_audio_url(self, team_doc_id, game_id, key_moment_id) -> Optional[str]:
        key_moment = await self.get(team_doc_id, game_id, key_moment_id)
        return key_moment.audio_url if key_moment else None

    async def add_players_to_feedback(self, team_doc_id, game_id, key_moment_id, player_ids) -> None:
        key_moment = self._key_moment(team_doc_id, game_id, key_moment_id)
        for player_id in player_ids:
            if player_id not in key_moment.feedback_for:
                key_moment.feedback_for.append(player_id)

    async def assign_player_to_full_team_moments(self, team_doc_id, game_id, roster_count, player_id) -> int:
        changed = 0
        for key_moment in self.db.key_moments.get((team_doc_id, game_id), {}).values():
            if len(key_moment.feedback_for) == roster_count and player_id not in key_moment.feedback_for:
                key_moment.feedback_for.append(player_id)
                changed += 1
        return changed

    async def remove(self, team_doc_id, game_id, key_moment_id) -> None:
        self._key_moment(team_doc_id, game_id, key_moment_id)
        del self.db.key_moments[(team_doc_id, game_id)][key_moment_id]

    async def delete_all(self, team_doc_id: str, game_id: str) -> None:
        self.db.key_moments.pop((team_doc_id, game_id), None)


class MemoryTranscriptStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    def _transcript(self, team_doc_id: str, game_id: str, transcript_id: str) -> Transcript:
        transcript = self.db.transcripts.get((team_doc_id, game_id), {}).get(transcript_id)
        if transcript is None:
            raise TranscriptNotFoundError(f"Transcript not found with id: {transcript_id}")
        return transcript

    async def get(self, team_doc_id, game_id, transcript_id) -> Optional[Transcript]:
        return _copy(self.db.transcripts.get((team_doc_id, game_id), {}).get(transcript_id))

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[Transcript]]:
        transcripts = self.db.transcripts.get((team_doc_id, game_id))
        if not transcripts:
            return None
        return [_copy(t) for t in transcripts.values()]

    async def get_preview(self, team_doc_id, game_id, limit: int = 3) -> Optional[List[Transcript]]:
        transcripts = await self.get_all(team_doc_id, game_id)
        if transcripts is None:
            return None
        return transcripts[:limit]

    async def create(self, team_doc_id: str, transcript: Transcript) -> Transcript:
        self.db.transcripts[(team_doc_id, transcript.game_id)][transcript.transcript_id] = _copy(transcript)
        return _copy(transcript)

    async def update(self, team_doc_id, game_id, transcript_id, text: str) -> None:
        self._transcript(team_doc_id, game_id, transcript_id).transcript = text

    async def remove(self, team_doc_id, game_id, transcript_id) -> None:
        self._transcript(team_doc_id, game_id, transcript_id)
        del self.db.transcripts[(team_doc_id, game_id)][transcript_id]

    async def delete_all(self, team_doc_id: str, game_id: str) -> None:
        self.db.transcripts.pop((team_doc_id, game_id), None)


class MemoryPlayerTeamInfoStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get(self, player_doc_id: str, team_id: str) -> Optional[PlayerTeamInfo]:
        return _copy(self.db.player_team_info.get((player_doc_id, team_id)))

    async def save(self, info: PlayerTeamInfo) -> PlayerTeamInfo:
        self.db.player_team_info[(info.player_doc_id, info.team_id)] = _copy(info)
        return _copy(info)


class MemoryInviteStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get(self, invite_id: str) -> Optional[Invite]:
        return _copy(self.db.invites.get(invite_id))

    async def create(self, invite: Invite) -> Invite:
        self.db.invites[invite.id] = _copy(invite)
        return _copy(invite)

    async def delete(self, invite_id: str) -> None:
        if self.db.invites.pop(invite_id, None) is None:
            logger.debug("Invite %s was already deleted", invite_id)


class MemoryFullGameRecordingStore:
    def __init__(self, db: MemoryDatabase):
        self.db = db

    async def get_by_game_id(self, team_doc_id: str, game_id: str) -> Optional[FullGameRecording]:
        return _copy(self.db.recordings.get((team_doc_id, game_id)))

    async def create(self, team_doc_id: str, recording: FullGameRecording) -> FullGameRecording:
        self.db.recordings[(team_doc_id, recording.game_id)] = _copy(recording)
        return _copy(recording)


def build_memory_stores(db: Optional[MemoryDatabase] = None) -> Stores:
    """Stores sharing one in-memory database."""
    db = db or MemoryDatabase()
    return Stores(
        teams=MemoryTeamStore(db),
        players=MemoryPlayerStore(db),
        users=MemoryUserStore(db),
        coaches=MemoryCoachStore(db),
        games=MemoryGameStore(db),
        key_moments=MemoryKeyMomentStore(db),
        transcripts=MemoryTranscriptStore(db),
        player_team_info=MemoryPlayerTeamInfoStore(db),
        invites=MemoryInviteStore(db),
        full_game_recordings=MemoryFullGameRecordingStore(db),
    )
