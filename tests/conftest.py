"""
Shared fixtures: a seeded in-memory team with a coach, players and a game.
"""
import asyncio
from datetime import datetime, timedelta

import pytest

from gameframe.core.storage import AudioStorage
from gameframe.repositories import MemoryDatabase, build_memory_stores
from gameframe.schemas import (
    Coach,
    FullGameRecording,
    Game,
    Invite,
    KeyMoment,
    Player,
    PlayerTeamInfo,
    Team,
    Transcript,
    User,
    UserType,
)

TEAM_DOC_ID = "team-doc-1"
TEAM_ID = "team-1"
GAME_ID = "game-1"
ACCESS_CODE = "Falc0ns1"
COACH_ID = "coach-1"
KICKOFF = datetime(2025, 3, 1, 14, 0, 0)


class FakeStorage(AudioStorage):
    """Audio storage that records deletions and fakes signed links instead of calling S3."""

    def __init__(self, fail: bool = False, raise_error: bool = False):
        super().__init__(client=object(), bucket="test-audio")
        self.fail = fail
        self.raise_error = raise_error
        self.deleted = []

    def delete_folder(self, prefix: str) -> bool:
        if self.raise_error:
            raise RuntimeError("storage unreachable")
        self.deleted.append(prefix)
        return not self.fail

    def generate_presigned_url(self, s3_key: str, expiration: int = 3600) -> str:
        return f"https://signed.test/{s3_key}"


def run(coro):
    return asyncio.run(coro)


async def add_user(stores, user_id, first_name, last_name, user_type=UserType.PLAYER):
    await stores.users.create(
        User(
            id=f"user-doc-{user_id}",
            user_id=user_id,
            email=f"{user_id}@example.com",
            user_type=user_type,
            first_name=first_name,
            last_name=last_name,
        )
    )


async def add_player(stores, player_id, first_name, last_name, teams=()):
    await add_user(stores, player_id, first_name, last_name)
    await stores.players.create(
        Player(id=f"player-doc-{player_id}", player_id=player_id, teams_enrolled=list(teams))
    )


async def add_key_moment(stores, key_moment_id, minute, feedback_for, text=None, full_game=False, game_id=GAME_ID):
    start = KICKOFF + timedelta(minutes=minute)
    await stores.key_moments.create(
        TEAM_DOC_ID,
        KeyMoment(
            key_moment_id=key_moment_id,
            game_id=game_id,
            uploaded_by=COACH_ID,
            frame_start=start,
            frame_end=start + timedelta(seconds=20),
            full_game_id="full-1" if full_game else None,
            audio_url=f"audio/{TEAM_ID}/{game_id}/{key_moment_id}.m4a",
            feedback_for=list(feedback_for),
        ),
    )
    if text is not None:
        await stores.transcripts.create(
            TEAM_DOC_ID,
            Transcript(
                transcript_id=f"tr-{key_moment_id}",
                key_moment_id=key_moment_id,
                game_id=game_id,
                uploaded_by=COACH_ID,
                transcript=text,
            ),
        )


async def seed(stores):
    """
    Team "team-1" coached by coach-1 with players p1 and p2 on the roster,
    p3 registered but not enrolled, one game and one pending invite.
    """
    await add_user(stores, COACH_ID, "Carla", "Coach", UserType.COACH)
    await stores.coaches.create(Coach(id="coach-doc-1", coach_id=COACH_ID, teams_coaching=[TEAM_ID]))

    await add_player(stores, "p1", "Ana", "Alves", teams=[TEAM_ID])
    await add_player(stores, "p2", "Ben", "Brown", teams=[TEAM_ID])
    await add_player(stores, "p3", "Cal", "Cruz")
    await stores.player_team_info.save(
        PlayerTeamInfo(player_doc_id="player-doc-p1", team_id=TEAM_ID, nickname="Speedy", jersey_num=9)
    )

    await stores.invites.create(
        Invite(
            id="invite-1",
            user_doc_id="user-doc-p4",
            player_doc_id="player-doc-p4",
            email="p4@example.com",
            team_id=TEAM_ID,
        )
    )

    db_team = Team(
        id=TEAM_DOC_ID,
        team_id=TEAM_ID,
        name="Falcons",
        team_nickname="FAL",
        access_code=ACCESS_CODE,
        coaches=[COACH_ID],
        players=["p1", "p2"],
        invites=["invite-1"],
    )
    stores.teams.db.teams[db_team.id] = db_team

    await stores.games.create(TEAM_DOC_ID, Game(game_id=GAME_ID, team_id=TEAM_ID, title="Falcons vs Owls"))


@pytest.fixture
def db():
    return MemoryDatabase()


@pytest.fixture
def stores(db):
    stores = build_memory_stores(db)
    run(seed(stores))
    return stores


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def full_game_recording(stores):
    run(
        stores.full_game_recordings.create(
            TEAM_DOC_ID,
            FullGameRecording(
                id="full-1",
                game_id=GAME_ID,
                team_id=TEAM_ID,
                uploaded_by=COACH_ID,
                file_url=f"videos/{TEAM_ID}/{GAME_ID}.mp4",
            ),
        )
    )
