"""
SQLAlchemy-backed stores.

Every write commits on its own, matching the one-document-per-write
guarantee of the remote store. JSON list columns are always reassigned
(never mutated in place) so SQLAlchemy notices the change.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from gameframe.core.exceptions import (
    CoachNotFoundError,
    KeyMomentNotFoundError,
    PlayerNotFoundError,
    TeamNotFoundError,
    TranscriptNotFoundError,
)
from gameframe.models import (
    CoachRecord,
    FullGameRecordingRecord,
    GameRecord,
    InviteRecord,
    KeyMomentRecord,
    PlayerRecord,
    PlayerTeamInfoRecord,
    TeamRecord,
    TranscriptRecord,
    UserRecord,
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


def _with(items: Optional[list], value: str) -> list:
    items = list(items or [])
    if value not in items:
        items.append(value)
    return items


def _without(items: Optional[list], value: str) -> list:
    return [i for i in (items or []) if i != value]


class SqlStore:
    """Shared session handling."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        self.db.commit()


class SqlTeamStore(SqlStore):
    def _row(self, doc_id: str) -> TeamRecord:
        row = self.db.get(TeamRecord, doc_id)
        if row is None:
            raise TeamNotFoundError(f"Team not found with id: {doc_id}")
        return row

    async def get_by_team_id(self, team_id: str) -> Optional[Team]:
        row = self.db.query(TeamRecord).filter(TeamRecord.team_id == team_id).first()
        return Team.model_validate(row) if row else None

    async def get_by_doc_id(self, doc_id: str) -> Team:
        return Team.model_validate(self._row(doc_id))

    async def get_by_access_code(self, access_code: str) -> Optional[Team]:
        row = self.db.query(TeamRecord).filter(TeamRecord.access_code == access_code).first()
        return Team.model_validate(row) if row else None

    async def get_all(self, team_ids: Sequence[str]) -> List[Team]:
        if not team_ids:
            return []
        rows = self.db.query(TeamRecord).filter(TeamRecord.team_id.in_(list(team_ids))).all()
        return [Team.model_validate(r) for r in rows]

    async def get_roster_size(self, team_id: str) -> Optional[int]:
        team = await self.get_by_team_id(team_id)
        if team is None:
            logger.debug("Team not found with team id: %s", team_id)
            return None
        return team.roster_size

    async def create(self, coach_id: str, data: TeamCreate, access_code: str) -> Team:
        row = TeamRecord(
            team_id=str(uuid.uuid4()),
            access_code=access_code,
            coaches=[coach_id],
            players=[],
            invites=[],
            **data.model_dump(),
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return Team.model_validate(row)

    async def add_player(self, doc_id: str, player_id: str) -> None:
        row = self._row(doc_id)
        row.players = _with(row.players, player_id)
        self._commit()

    async def remove_player(self, doc_id: str, player_id: str) -> None:
        row = self._row(doc_id)
        row.players = _without(row.players, player_id)
        self._commit()

    async def add_coach(self, doc_id: str, coach_id: str) -> None:
        row = self._row(doc_id)
        row.coaches = _with(row.coaches, coach_id)
        self._commit()

    async def remove_coach(self, doc_id: str, coach_id: str) -> None:
        row = self._row(doc_id)
        row.coaches = _without(row.coaches, coach_id)
        self._commit()

    async def add_invite(self, doc_id: str, invite_id: str) -> None:
        row = self._row(doc_id)
        row.invites = _with(row.invites, invite_id)
        self._commit()

    async def remove_invite(self, doc_id: str, invite_id: str) -> None:
        row = self._row(doc_id)
        row.invites = _without(row.invites, invite_id)
        self._commit()

    async def generate_unique_access_code(self) -> str:
        while True:
            code = random_access_code()
            taken = self.db.query(TeamRecord.id).filter(TeamRecord.access_code == code).first()
            if taken is None:
                return code

    async def update_settings(self, doc_id, name=None, nickname=None, age_grp=None, gender=None) -> None:
        row = self._row(doc_id)
        if name is not None:
            row.name = name
        if nickname is not None:
            row.team_nickname = nickname
        if age_grp is not None:
            row.age_grp = age_grp
        if gender is not None:
            row.gender = gender
        self._commit()

    async def delete(self, doc_id: str) -> None:
        self.db.delete(self._row(doc_id))
        self._commit()


class SqlPlayerStore(SqlStore):
    def _row(self, doc_id: str) -> PlayerRecord:
        row = self.db.get(PlayerRecord, doc_id)
        if row is None:
            raise PlayerNotFoundError(f"Player not found with id: {doc_id}")
        return row

    async def get_by_player_id(self, player_id: str) -> Optional[Player]:
        row = self.db.query(PlayerRecord).filter(PlayerRecord.player_id == player_id).first()
        return Player.model_validate(row) if row else None

    async def get_by_doc_id(self, doc_id: str) -> Optional[Player]:
        row = self.db.get(PlayerRecord, doc_id)
        return Player.model_validate(row) if row else None

    async def create(self, player: Player) -> Player:
        row = PlayerRecord(**player.model_dump())
        self.db.add(row)
        self._commit()
        return Player.model_validate(row)

    async def add_team(self, doc_id: str, team_id: str) -> None:
        row = self._row(doc_id)
        row.teams_enrolled = _with(row.teams_enrolled, team_id)
        self._commit()

    async def remove_team(self, doc_id: str, team_id: str) -> None:
        row = self._row(doc_id)
        row.teams_enrolled = _without(row.teams_enrolled, team_id)
        self._commit()

    async def is_enrolled(self, player_id: str, team_id: str) -> bool:
        player = await self.get_by_player_id(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found with player id: {player_id}")
        return team_id in player.teams_enrolled


class SqlUserStore(SqlStore):
    async def get_by_user_id(self, user_id: str) -> Optional[User]:
        row = self.db.query(UserRecord).filter(UserRecord.user_id == user_id).first()
        return User.model_validate(row) if row else None

    async def create(self, user: User) -> User:
        data = user.model_dump()
        data["user_type"] = user.user_type.value
        row = UserRecord(**data)
        self.db.add(row)
        self._commit()
        return User.model_validate(row)


class SqlCoachStore(SqlStore):
    def _row(self, coach_id: str) -> CoachRecord:
        row = self.db.query(CoachRecord).filter(CoachRecord.coach_id == coach_id).first()
        if row is None:
            raise CoachNotFoundError(f"Coach not found with id: {coach_id}")
        return row

    async def get_by_coach_id(self, coach_id: str) -> Optional[Coach]:
        row = self.db.query(CoachRecord).filter(CoachRecord.coach_id == coach_id).first()
        return Coach.model_validate(row) if row else None

    async def create(self, coach: Coach) -> Coach:
        row = CoachRecord(**coach.model_dump())
        self.db.add(row)
        self._commit()
        return Coach.model_validate(row)

    async def add_team(self, coach_id: str, team_id: str) -> None:
        row = self._row(coach_id)
        row.teams_coaching = _with(row.teams_coaching, team_id)
        self._commit()

    async def remove_team(self, coach_id: str, team_id: str) -> None:
        row = self._row(coach_id)
        row.teams_coaching = _without(row.teams_coaching, team_id)
        self._commit()


class SqlGameStore(SqlStore):
    async def get(self, team_doc_id: str, game_id: str) -> Optional[Game]:
        row = (
            self.db.query(GameRecord)
            .filter(GameRecord.team_doc_id == team_doc_id, GameRecord.game_id == game_id)
            .first()
        )
        return Game.model_validate(row) if row else None

    async def get_all(self, team_id: str) -> List[Game]:
        rows = self.db.query(GameRecord).filter(GameRecord.team_id == team_id).all()
        return [Game.model_validate(r) for r in rows]

    async def create(self, team_doc_id: str, game: Game) -> Game:
        row = GameRecord(team_doc_id=team_doc_id, **game.model_dump())
        self.db.add(row)
        self._commit()
        return Game.model_validate(row)

    async def delete_all(self, team_doc_id: str) -> None:
        game_ids = [
            g for (g,) in self.db.query(GameRecord.game_id).filter(GameRecord.team_doc_id == team_doc_id)
        ]
        for game_id in game_ids:
            for model in (KeyMomentRecord, TranscriptRecord, FullGameRecordingRecord):
                self.db.query(model).filter(
                    model.team_doc_id == team_doc_id, model.game_id == game_id
                ).delete(synchronize_session=False)
            self.db.query(GameRecord).filter(GameRecord.game_id == game_id).delete(
                synchronize_session=False
            )
            self._commit()
        logger.debug("Deleted %d games of team %s", len(game_ids), team_doc_id)


class SqlKeyMomentStore(SqlStore):
    def _query(self, team_doc_id: str, game_id: str):
        return self.db.query(KeyMomentRecord).filter(
            KeyMomentRecord.team_doc_id == team_doc_id, KeyMomentRecord.game_id == game_id
        )

    def _row(self, team_doc_id: str, game_id: str, key_moment_id: str) -> KeyMomentRecord:
        row = self._query(team_doc_id, game_id).filter(KeyMomentRecord.key_moment_id == key_moment_id).first()
        if row is None:
            raise KeyMomentNotFoundError(f"Key moment not found with id: {key_moment_id}")
        return row

    async def get(self, team_doc_id, game_id, key_moment_id) -> Optional[KeyMoment]:
        row = self._query(team_doc_id, game_id).filter(KeyMomentRecord.key_moment_id == key_moment_id).first()
        return KeyMoment.model_validate(row) if row else None

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[KeyMoment]]:
        rows = self._query(team_doc_id, game_id).all()
        if not rows:
            return None
        return [KeyMoment.model_validate(r) for r in rows]

    async def create(self, team_doc_id: str, key_moment: KeyMoment) -> KeyMoment:
        row = KeyMomentRecord(team_doc_id=team_doc_id, **key_moment.model_dump())
        self.db.add(row)
        self._commit()
        return KeyMoment.model_validate(row)

    async def get_audio_url(self, team_doc_id, game_id, key_moment_id) -> Optional[str]:
        key_moment = await self.get(team_doc_id, game_id, key_moment_id)
        return key_moment.audio_url if key_moment else None

    async def add_players_to_feedback(self, team_doc_id, game_id, key_moment_id, player_ids) -> None:
        row = self._row(team_doc_id, game_id, key_moment_id)
        feedback_for = list(row.feedback_for or [])
        for player_id in player_ids:
            feedback_for = _with(feedback_for, player_id)
        row.feedback_for = feedback_for
        self._commit()

    async def assign_player_to_full_team_moments(self, team_doc_id, game_id, roster_count, player_id) -> int:
        changed = 0
        for row in self._query(team_doc_id, game_id).all():
            feedback_for = row.feedback_for or []
            if len(feedback_for) == roster_count and player_id not in feedback_for:
                row.feedback_for = feedback_for + [player_id]
                self._commit()
                changed += 1
        return changed

    async def remove(self, team_doc_id, game_id, key_moment_id) -> None:
        self.db.delete(self._row(team_doc_id, game_id, key_moment_id))
        self._commit()

    async def delete_all(self, team_doc_id: str, game_id: str) -> None:
        self._query(team_doc_id, game_id).delete(synchronize_session=False)
        self._commit()


class SqlTranscriptStore(SqlStore):
    def _query(self, team_doc_id: str, game_id: str):
        return self.db.query(TranscriptRecord).filter(
            TranscriptRecord.team_doc_id == team_doc_id, TranscriptRecord.game_id == game_id
        )

    def _row(self, team_doc_id: str, game_id: str, transcript_id: str) -> TranscriptRecord:
        row = self._query(team_doc_id, game_id).filter(TranscriptRecord.transcript_id == transcript_id).first()
        if row is None:
            raise TranscriptNotFoundError(f"Transcript not found with id: {transcript_id}")
        return row

    async def get(self, team_doc_id, game_id, transcript_id) -> Optional[Transcript]:
        row = self._query(team_doc_id, game_id).filter(TranscriptRecord.transcript_id == transcript_id).first()
        return Transcript.model_validate(row) if row else None

    async def get_all(self, team_doc_id: str, game_id: str) -> Optional[List[Transcript]]:
        rows = self._query(team_doc_id, game_id).order_by(
            TranscriptRecord.created_at, TranscriptRecord.transcript_id
        ).all()
        if not rows:
            return None
        return [Transcript.model_validate(r) for r in rows]

    async def get_preview(self, team_doc_id, game_id, limit: int = 3) -> Optional[List[Transcript]]:
        rows = (
            self._query(team_doc_id, game_id)
            .order_by(TranscriptRecord.created_at, TranscriptRecord.transcript_id)
            .limit(limit)
            .all()
        )
        if not rows:
            return None
        return [Transcript.model_validate(r) for r in rows]

    async def create(self, team_doc_id: str, transcript: Transcript) -> Transcript:
        data = transcript.model_dump()
        data["created_at"] = data.get("created_at") or datetime.utcnow()
        row = TranscriptRecord(team_doc_id=team_doc_id, **data)
        self.db.add(row)
        self._commit()
        return Transcript.model_validate(row)

    async def update(self, team_doc_id, game_id, transcript_id, text: str) -> None:
        self._row(team_doc_id, game_id, transcript_id).transcript = text
        self._commit()

    async def remove(self, team_doc_id, game_id, transcript_id) -> None:
        self.db.delete(self._row(team_doc_id, game_id, transcript_id))
        self._commit()

    async def delete_all(self, team_doc_id: str, game_id: str) -> None:
        self._query(team_doc_id, game_id).delete(synchronize_session=False)
        self._commit()


class SqlPlayerTeamInfoStore(SqlStore):
    async def get(self, player_doc_id: str, team_id: str) -> Optional[PlayerTeamInfo]:
        row = self.db.get(PlayerTeamInfoRecord, (player_doc_id, team_id))
        return PlayerTeamInfo.model_validate(row) if row else None

    async def save(self, info: PlayerTeamInfo) -> PlayerTeamInfo:
        row = self.db.merge(PlayerTeamInfoRecord(**info.model_dump()))
        self._commit()
        return PlayerTeamInfo.model_validate(row)


class SqlInviteStore(SqlStore):
    async def get(self, invite_id: str) -> Optional[Invite]:
        row = self.db.get(InviteRecord, invite_id)
        return Invite.model_validate(row) if row else None

    async def create(self, invite: Invite) -> Invite:
        data = invite.model_dump()
        data["status"] = invite.status.value
        row = InviteRecord(**data)
        self.db.add(row)
        self._commit()
        return Invite.model_validate(row)

    async def delete(self, invite_id: str) -> None:
        row = self.db.get(InviteRecord, invite_id)
        if row is None:
            logger.debug("Invite %s was already deleted", invite_id)
            return
        self.db.delete(row)
        self._commit()


class SqlFullGameRecordingStore(SqlStore):
    async def get_by_game_id(self, team_doc_id: str, game_id: str) -> Optional[FullGameRecording]:
        row = (
            self.db.query(FullGameRecordingRecord)
            .filter(
                FullGameRecordingRecord.team_doc_id == team_doc_id,
                FullGameRecordingRecord.game_id == game_id,
            )
            .first()
        )
        return FullGameRecording.model_validate(row) if row else None

    async def create(self, team_doc_id: str, recording: FullGameRecording) -> FullGameRecording:
        row = FullGameRecordingRecord(team_doc_id=team_doc_id, **recording.model_dump())
        self.db.add(row)
        self._commit()
        return FullGameRecording.model_validate(row)


def build_sql_stores(db: Session) -> Stores:
    """Stores sharing one database session."""
    return Stores(
        teams=SqlTeamStore(db),
        players=SqlPlayerStore(db),
        users=SqlUserStore(db),
        coaches=SqlCoachStore(db),
        games=SqlGameStore(db),
        key_moments=SqlKeyMomentStore(db),
        transcripts=SqlTranscriptStore(db),
        player_team_info=SqlPlayerTeamInfoStore(db),
        invites=SqlInviteStore(db),
        full_game_recordings=SqlFullGameRecordingStore(db),
    )
