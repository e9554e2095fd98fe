"""
Team roster workflows: creating, joining, updating and deleting teams.

Both cascades here (join and delete) are a sequence of single-document
writes. Nothing is transactional and nothing is rolled back: the first
failure propagates and leaves the steps already applied in place.
"""
import logging
from typing import List, Optional

from fastapi import BackgroundTasks

from gameframe.core.exceptions import (
    AlreadyEnrolledError,
    CoachNotFoundError,
    InvalidAccessCodeError,
    PlayerNotFoundError,
    TeamNotFoundError,
    UserNotFoundError,
)
from gameframe.core.storage import AudioStorage
from gameframe.repositories import Stores
from gameframe.schemas import Team, TeamCreate
from gameframe.services.transcripts import CoachRole, role_for

logger = logging.getLogger(__name__)


class TeamRosterWorkflow:
    """Team lifecycle operations over one set of stores."""

    def __init__(self, stores: Stores, storage: Optional[AudioStorage] = None):
        self.stores = stores
        self.storage = storage

    async def create_team(self, coach_id: str, data: TeamCreate) -> Team:
        """Create a team coached by ``coach_id`` with a fresh access code."""
        coach = await self.stores.coaches.get_by_coach_id(coach_id)
        if coach is None:
            raise CoachNotFoundError(f"Coach not found with id: {coach_id}")

        access_code = await self.stores.teams.generate_unique_access_code()
        team = await self.stores.teams.create(coach_id, data, access_code)
        await self.stores.coaches.add_team(coach_id, team.team_id)
        logger.info("Coach %s created team %s", coach_id, team.team_id)
        return team

    async def get_team(self, team_doc_id: str) -> Team:
        return await self.stores.teams.get_by_doc_id(team_doc_id)

    async def load_all_teams(self, user_id: str) -> List[Team]:
        """Teams a coach coaches, or teams a player is enrolled in."""
        user = await self.stores.users.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found with id: {user_id}")

        role = role_for(user)
        if isinstance(role, CoachRole):
            coach = await self.stores.coaches.get_by_coach_id(user_id)
            if coach is None:
                raise CoachNotFoundError(f"Coach not found with id: {user_id}")
            return await self.stores.teams.get_all(coach.teams_coaching)

        player = await self.stores.players.get_by_player_id(role.player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found with id: {role.player_id}")
        return await self.stores.teams.get_all(player.teams_enrolled)

    async def validate_team_access_code(self, access_code: str) -> Team:
        team = await self.stores.teams.get_by_access_code(access_code)
        if team is None:
            raise InvalidAccessCodeError()
        return team

    async def join_team_with_access_code(self, access_code: str, user_id: str) -> Team:
        """
        Enroll the player ``user_id`` in the team holding ``access_code``.

        Key moments addressed to the whole team (as many recipients as the
        roster had before the join) get the new player added, in every game
        of the team. The roster size is therefore read before the player is
        added to the roster.

        Two players joining the same team at the same time can both read the
        same roster size; key moments may then be fixed up for only one of
        them. This race is accepted: no lock or transaction guards it.
        """
        team = await self.validate_team_access_code(access_code)

        player = await self.stores.players.get_by_player_id(user_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found with id: {user_id}")
        if await self.stores.players.is_enrolled(user_id, team.team_id):
            raise AlreadyEnrolledError()

        roster_count = await self.stores.teams.get_roster_size(team.team_id)
        if roster_count is None:
            raise TeamNotFoundError(f"Team not found with team id: {team.team_id}")

        await self.add_player_to_all_team_feedback(roster_count, team.id, team.team_id, user_id)
        await self.stores.teams.add_player(team.id, user_id)
        await self.stores.players.add_team(player.id, team.team_id)

        logger.info("Player %s joined team %s", user_id, team.team_id)
        return await self.stores.teams.get_by_doc_id(team.id)

    async def add_player_to_all_team_feedback(
        self, roster_count: int, team_doc_id: str, team_id: str, player_id: str
    ) -> int:
        """Add ``player_id`` to every whole-team key moment of every game."""
        games = await self.stores.games.get_all(team_id)
        if not games:
            logger.debug("Team %s has no games, no feedback to update", team_id)
            return 0

        changed = 0
        for game in games:
            changed += await self.stores.key_moments.assign_player_to_full_team_moments(
                team_doc_id, game.game_id, roster_count, player_id
            )
        logger.debug("Added player %s to %d key moments", player_id, changed)
        return changed

    async def update_team_settings(
        self,
        team_doc_id: str,
        name: Optional[str] = None,
        nickname: Optional[str] = None,
        age_grp: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> Team:
        await self.stores.teams.update_settings(
            team_doc_id, name=name, nickname=nickname, age_grp=age_grp, gender=gender
        )
        return await self.stores.teams.get_by_doc_id(team_doc_id)

    async def delete_team(self, team_doc_id: str, background_tasks: BackgroundTasks) -> None:
        """
        Delete a team and unlink everything that points at it.

        Games (with their key moments and transcripts), coach and player
        links and invites are removed before the team document, which is
        still needed to read the roster and invite lists. Removing the
        team's audio files is added to ``background_tasks`` and runs after
        the caller is done.
        """
        team = await self.stores.teams.get_by_doc_id(team_doc_id)

        await self.stores.games.delete_all(team_doc_id)

        for coach_id in team.coaches:
            await self.stores.coaches.remove_team(coach_id, team.team_id)

        for player_id in team.players:
            player = await self.stores.players.get_by_player_id(player_id)
            if player is not None:
                await self.stores.players.remove_team(player.id, team.team_id)

        for invite_id in team.invites:
            await self.stores.invites.delete(invite_id)

        await self.stores.teams.delete(team_doc_id)
        logger.info("Deleted team %s (%s)", team.name, team.team_id)

        if self.storage is None:
            logger.debug("No audio storage configured, skipping cleanup for team %s", team.team_id)
            return
        background_tasks.add_task(self.delete_team_audio, team.team_id)

    def delete_team_audio(self, team_id: str) -> bool:
        """Remove every audio file of a team. Failures are logged, never raised."""
        prefix = self.storage.team_prefix(team_id)
        try:
            deleted = self.storage.delete_folder(prefix)
        except Exception as e:
            logger.warning("Failed to delete audio files under %s: %s", prefix, e)
            return False
        if deleted:
            logger.info("Deleted all audio files under %s", prefix)
        else:
            logger.warning("Failed to delete audio files under %s", prefix)
        return deleted
