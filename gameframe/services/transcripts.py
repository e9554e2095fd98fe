"""
Transcript aggregation.

Joins the transcripts of a game with their key moments and with the
players each key moment is addressed to, then filters the result by the
requesting user's role:

- coaches see every transcript with every recipient
- players see only the transcripts addressed to them, and only themselves
  as recipient

Results are ordered by the key moment's ``frame_start``.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from gameframe.core.config import settings
from gameframe.core.exceptions import TranscriptNotFoundError, UnknownRoleError
from gameframe.core.storage import AudioStorage
from gameframe.repositories import Stores
from gameframe.schemas import (
    KeyMoment,
    KeyMomentTranscript,
    PlayerNameAndPhoto,
    PlayerTranscriptInfo,
    Transcript,
    User,
    UserType,
)

logger = logging.getLogger(__name__)

TranscriptLists = Tuple[Optional[List[KeyMomentTranscript]], Optional[List[KeyMomentTranscript]]]


@dataclass(frozen=True)
class CoachRole:
    pass


@dataclass(frozen=True)
class PlayerRole:
    player_id: str


Role = Union[CoachRole, PlayerRole]


def role_for(user: User) -> Role:
    """Map a user to the role that decides what they may see."""
    if user.user_type == UserType.COACH:
        return CoachRole()
    if user.user_type == UserType.PLAYER:
        return PlayerRole(player_id=user.user_id)
    raise UnknownRoleError(f"User {user.user_id} has unknown user type")


def _enumerate(records: List[KeyMomentTranscript]) -> List[KeyMomentTranscript]:
    ordered = sorted(records, key=lambda r: r.frame_start)
    for local_id, record in enumerate(ordered):
        record.local_id = local_id
    return ordered


class TranscriptAggregator:
    """Builds the transcript views of a game for one requesting user."""

    def __init__(
        self,
        stores: Stores,
        storage: Optional[AudioStorage] = None,
        preview_limit: Optional[int] = None,
    ):
        self.stores = stores
        self.storage = storage
        self.preview_limit = settings.TRANSCRIPT_PREVIEW_LIMIT if preview_limit is None else preview_limit

    async def get_all_transcripts(
        self, game_id: str, team_doc_id: str, user_id: str
    ) -> Optional[List[KeyMomentTranscript]]:
        """
        Every transcript of the game the user may see.

        Returns None when the game has no transcripts (or key moments) at
        all, and an empty list when there are some but none is visible.
        """
        transcripts = await self.stores.transcripts.get_all(team_doc_id, game_id)
        if transcripts is None:
            logger.debug("No transcripts for game %s", game_id)
            return None
        records, _ = await self._aggregate(game_id, team_doc_id, user_id, transcripts)
        return records

    async def get_all_transcripts_and_key_moments(
        self, game_id: str, team_doc_id: str, user_id: str
    ) -> TranscriptLists:
        """
        Visible transcripts of the game, plus the ones that are also markers
        inside the game's full recording.
        """
        transcripts = await self.stores.transcripts.get_all(team_doc_id, game_id)
        if transcripts is None:
            logger.debug("No transcripts for game %s", game_id)
            return None, None
        return await self._aggregate(game_id, team_doc_id, user_id, transcripts, with_full_game=True)

    async def get_preview_transcripts_and_key_moments(
        self, game_id: str, team_doc_id: str, user_id: str
    ) -> TranscriptLists:
        """Same as get_all_transcripts_and_key_moments over the first few transcripts only."""
        transcripts = await self.stores.transcripts.get_preview(
            team_doc_id, game_id, limit=self.preview_limit
        )
        if transcripts is None:
            logger.debug("No transcripts for game %s", game_id)
            return None, None
        return await self._aggregate(
            game_id, team_doc_id, user_id, transcripts[: self.preview_limit], with_full_game=True
        )

    async def _aggregate(
        self,
        game_id: str,
        team_doc_id: str,
        user_id: str,
        transcripts: Sequence[Transcript],
        with_full_game: bool = False,
    ) -> TranscriptLists:
        user = await self.stores.users.get_by_user_id(user_id)
        if user is None:
            logger.warning("Could not resolve requesting user %s", user_id)
            return None, None
        role = role_for(user)

        key_moments = await self.stores.key_moments.get_all(team_doc_id, game_id)
        if key_moments is None:
            logger.debug("No key moments for game %s", game_id)
            return None, None
        by_id: Dict[str, KeyMoment] = {k.key_moment_id: k for k in key_moments}

        full_game_available = False
        if with_full_game:
            recording = await self.stores.full_game_recordings.get_by_game_id(team_doc_id, game_id)
            full_game_available = recording is not None and recording.file_url is not None

        if isinstance(role, PlayerRole):
            wanted = {role.player_id} if any(role.player_id in k.feedback_for for k in key_moments) else set()
        else:
            wanted = {pid for k in key_moments for pid in k.feedback_for}
        players = await self._resolve_players(team_doc_id, wanted)

        records: List[KeyMomentTranscript] = []
        full_game: List[KeyMomentTranscript] = []
        for transcript in transcripts:
            key_moment = by_id.get(transcript.key_moment_id)
            if key_moment is None:
                logger.warning(
                    "Transcript %s refers to missing key moment %s, skipping",
                    transcript.transcript_id,
                    transcript.key_moment_id,
                )
                continue

            if isinstance(role, PlayerRole):
                if role.player_id not in key_moment.feedback_for:
                    continue
                recipients = [role.player_id]
            elif isinstance(role, CoachRole):
                recipients = key_moment.feedback_for
            else:
                raise UnknownRoleError()

            feedback = [players[pid] for pid in recipients if pid in players]
            records.append(self._record(transcript, key_moment, feedback))
            if full_game_available and key_moment.full_game_id is not None:
                full_game.append(self._record(transcript, key_moment, feedback))

        return _enumerate(records), (_enumerate(full_game) if with_full_game else None)

    @staticmethod
    def _record(
        transcript: Transcript, key_moment: KeyMoment, feedback: List[PlayerTranscriptInfo]
    ) -> KeyMomentTranscript:
        return KeyMomentTranscript(
            local_id=0,
            key_moment_id=key_moment.key_moment_id,
            transcript_id=transcript.transcript_id,
            transcript=transcript.transcript,
            frame_start=key_moment.frame_start,
            frame_end=key_moment.frame_end,
            feedback_for=list(feedback),
        )

    async def _resolve_players(
        self, team_doc_id: str, player_ids: Iterable[str]
    ) -> Dict[str, PlayerTranscriptInfo]:
        """Resolve every recipient once; unresolvable ones are left out."""
        player_ids = list(player_ids)
        if not player_ids:
            return {}
        team = await self.stores.teams.get_by_doc_id(team_doc_id)
        infos = await asyncio.gather(*(self.load_player_info(pid, team.team_id) for pid in player_ids))
        return {info.player_id: info for info in infos if info is not None}

    async def load_player_info(self, player_id: str, team_id: str) -> Optional[PlayerTranscriptInfo]:
        """Name, team nickname and jersey of one player."""
        user = await self.stores.users.get_by_user_id(player_id)
        if user is None:
            logger.warning("No user found for feedback recipient %s", player_id)
            return None
        player = await self.stores.players.get_by_player_id(player_id)
        if player is None:
            logger.warning("No player found for feedback recipient %s", player_id)
            return None
        team_info = await self.stores.player_team_info.get(player.id, team_id)
        return PlayerTranscriptInfo(
            player_id=player_id,
            first_name=user.first_name,
            last_name=user.last_name,
            nickname=team_info.nickname if team_info else None,
            jersey=team_info.jersey_num if team_info else None,
        )

    async def get_audio_url(self, team_doc_id: str, game_id: str, key_moment_id: str) -> Optional[str]:
        """
        Link to a key moment's audio.

        With storage configured the stored key is signed; without it the key
        is returned as stored.
        """
        key = await self.stores.key_moments.get_audio_url(team_doc_id, game_id, key_moment_id)
        if key is None or self.storage is None:
            return key
        return self.storage.generate_presigned_url(key)

    async def get_feedback_for(self, player_ids: Sequence[str]) -> List[PlayerNameAndPhoto]:
        """Display names of the given players, skipping unknown ids."""
        results = []
        for player_id in player_ids:
            user = await self.stores.users.get_by_user_id(player_id)
            if user is None:
                logger.debug("No user for player %s", player_id)
                continue
            results.append(PlayerNameAndPhoto(player_id=player_id, name=user.full_name, photo_url=user.photo_url))
        return results

    async def update_transcript_info(
        self,
        team_doc_id: str,
        game_id: str,
        transcript_id: str,
        feedback_for: Optional[Sequence[str]] = None,
        transcript: Optional[str] = None,
    ) -> Transcript:
        """
        Add recipients to the transcript's key moment and/or replace its text.

        Only the parts that are given are applied.
        """
        existing = await self.stores.transcripts.get(team_doc_id, game_id, transcript_id)
        if existing is None:
            raise TranscriptNotFoundError(f"Transcript not found with id: {transcript_id}")

        if feedback_for:
            await self.stores.key_moments.add_players_to_feedback(
                team_doc_id, game_id, existing.key_moment_id, feedback_for
            )
        if transcript is not None:
            await self.stores.transcripts.update(team_doc_id, game_id, transcript_id, transcript)

        return await self.stores.transcripts.get(team_doc_id, game_id, transcript_id)
