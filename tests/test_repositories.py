"""
Store contract tests, run against both the in-memory and the SQLAlchemy
implementation.
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from gameframe.core.database import init_db, make_engine
from gameframe.core.exceptions import KeyMomentNotFoundError, PlayerNotFoundError, TeamNotFoundError
from gameframe.repositories import (
    KeyMomentStore,
    TeamStore,
    TranscriptStore,
    build_memory_stores,
    build_sql_stores,
)
from gameframe.schemas import (
    Coach,
    FullGameRecording,
    Game,
    Invite,
    InviteStatus,
    KeyMoment,
    Player,
    PlayerTeamInfo,
    TeamCreate,
    Transcript,
    User,
    UserType,
)

from conftest import run

START = datetime(2025, 5, 10, 18, 0, 0)


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        yield build_memory_stores()
        return

    engine = make_engine("sqlite://")
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield build_sql_stores(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def team(repo):
    return run(repo.teams.create("coach-1", TeamCreate(name="Owls", team_nickname="OWL"), "CODE0001"))


def key_moment(key_moment_id, feedback_for, game_id="g1", minute=0):
    start = START + timedelta(minutes=minute)
    return KeyMoment(
        key_moment_id=key_moment_id,
        game_id=game_id,
        uploaded_by="coach-1",
        frame_start=start,
        frame_end=start + timedelta(seconds=10),
        feedback_for=feedback_for,
    )


def transcript(transcript_id, key_moment_id, game_id="g1", created_at=None):
    return Transcript(
        transcript_id=transcript_id,
        key_moment_id=key_moment_id,
        game_id=game_id,
        uploaded_by="coach-1",
        transcript=f"text of {transcript_id}",
        created_at=created_at,
    )


class TestContracts:
    """Test that both implementations satisfy the store protocols."""

    def test_protocols(self, repo):
        """Test that every store satisfies its protocol."""
        assert isinstance(repo.teams, TeamStore)
        assert isinstance(repo.key_moments, KeyMomentStore)
        assert isinstance(repo.transcripts, TranscriptStore)


class TestTeamStore:
    """Test team documents and their id lists."""

    def test_create_and_lookup(self, repo, team):
        """Test creating a team and finding it by team id and access code."""
        assert team.coaches == ["coach-1"]
        assert run(repo.teams.get_by_team_id(team.team_id)).id == team.id
        assert run(repo.teams.get_by_access_code("CODE0001")).team_id == team.team_id
        assert run(repo.teams.get_by_access_code("nope")) is None

    def test_get_by_doc_id_raises(self, repo):
        """Test that a missing team document raises."""
        with pytest.raises(TeamNotFoundError):
            run(repo.teams.get_by_doc_id("missing"))

    def test_roster_has_no_duplicates(self, repo, team):
        """Test that adding a player twice keeps one roster entry."""
        run(repo.teams.add_player(team.id, "p1"))
        run(repo.teams.add_player(team.id, "p1"))
        run(repo.teams.add_player(team.id, "p2"))

        assert run(repo.teams.get_by_doc_id(team.id)).players == ["p1", "p2"]
        assert run(repo.teams.get_roster_size(team.team_id)) == 2
        assert run(repo.teams.get_roster_size("unknown")) is None

    def test_remove_player_coach_invite(self, repo, team):
        """Test removing ids from the roster, coach and invite lists."""
        run(repo.teams.add_player(team.id, "p1"))
        run(repo.teams.add_invite(team.id, "i1"))
        run(repo.teams.add_coach(team.id, "coach-2"))

        run(repo.teams.remove_player(team.id, "p1"))
        run(repo.teams.remove_invite(team.id, "i1"))
        run(repo.teams.remove_coach(team.id, "coach-1"))

        stored = run(repo.teams.get_by_doc_id(team.id))
        assert stored.players == []
        assert stored.invites == []
        assert stored.coaches == ["coach-2"]

    def test_mutating_missing_team(self, repo):
        """Test that changing a missing team raises."""
        with pytest.raises(TeamNotFoundError):
            run(repo.teams.add_player("missing", "p1"))

    def test_returned_documents_are_copies(self, repo, team):
        """Test that callers cannot change stored teams through results."""
        fetched = run(repo.teams.get_by_doc_id(team.id))
        fetched.players.append("intruder")
        assert run(repo.teams.get_by_doc_id(team.id)).players == []

    def test_generated_code_is_free(self, repo, team):
        """Test that generated access codes are alphanumeric and unused."""
        code = run(repo.teams.generate_unique_access_code())
        assert len(code) == 8
        assert code.isalnum()
        assert code != team.access_code

    def test_get_all(self, repo, team):
        """Test fetching several teams by team id."""
        other = run(repo.teams.create("coach-2", TeamCreate(name="Hens", team_nickname="HEN"), "CODE0002"))

        found = run(repo.teams.get_all([team.team_id, other.team_id]))
        assert {t.id for t in found} == {team.id, other.id}
        assert run(repo.teams.get_all([])) == []

    def test_update_settings(self, repo, team):
        """Test that only provided settings change."""
        run(repo.teams.update_settings(team.id, nickname="OWLZ", age_grp="U16"))
        stored = run(repo.teams.get_by_doc_id(team.id))
        assert (stored.name, stored.team_nickname, stored.age_grp) == ("Owls", "OWLZ", "U16")

    def test_delete(self, repo, team):
        """Test deleting a team document."""
        run(repo.teams.delete(team.id))
        assert run(repo.teams.get_by_team_id(team.team_id)) is None


class TestPeopleStores:
    """Test users, players, coaches and team details."""

    def test_player_enrolment(self, repo):
        """Test adding and removing a player's team enrolment."""
        run(repo.players.create(Player(id="pd1", player_id="p1")))

        run(repo.players.add_team("pd1", "t1"))
        run(repo.players.add_team("pd1", "t1"))
        assert run(repo.players.is_enrolled("p1", "t1"))
        assert run(repo.players.get_by_doc_id("pd1")).teams_enrolled == ["t1"]

        run(repo.players.remove_team("pd1", "t1"))
        assert not run(repo.players.is_enrolled("p1", "t1"))

    def test_is_enrolled_unknown_player(self, repo):
        """Test checking enrolment of an unknown player."""
        with pytest.raises(PlayerNotFoundError):
            run(repo.players.is_enrolled("ghost", "t1"))

    def test_user_roundtrip(self, repo):
        """Test storing and looking up a user."""
        run(repo.users.create(User(id="u1", user_id="c1", email="c@x.com", user_type=UserType.COACH)))
        assert run(repo.users.get_by_user_id("c1")).user_type == UserType.COACH
        assert run(repo.users.get_by_user_id("nope")) is None

    def test_coach_teams(self, repo):
        """Test adding and removing coached teams."""
        run(repo.coaches.create(Coach(id="cd1", coach_id="c1")))
        run(repo.coaches.add_team("c1", "t1"))
        run(repo.coaches.add_team("c1", "t2"))
        run(repo.coaches.remove_team("c1", "t1"))
        assert run(repo.coaches.get_by_coach_id("c1")).teams_coaching == ["t2"]

    def test_player_team_info(self, repo):
        """Test that saving team details replaces earlier ones."""
        run(repo.player_team_info.save(PlayerTeamInfo(player_doc_id="pd1", team_id="t1", jersey_num=4)))
        run(repo.player_team_info.save(PlayerTeamInfo(player_doc_id="pd1", team_id="t1", jersey_num=7)))

        assert run(repo.player_team_info.get("pd1", "t1")).jersey_num == 7
        assert run(repo.player_team_info.get("pd1", "t2")) is None

    def test_invites(self, repo):
        """Test creating and deleting invites."""
        run(repo.invites.create(Invite(id="i1", user_doc_id="u", player_doc_id="pd", email="a@x.com", team_id="t1")))
        assert run(repo.invites.get("i1")).status == InviteStatus.PENDING

        run(repo.invites.delete("i1"))
        run(repo.invites.delete("i1"))
        assert run(repo.invites.get("i1")) is None


class TestGameStores:
    """Test games, key moments and transcripts."""

    def test_key_moments_absent_until_created(self, repo, team):
        """Test that a game without documents has no lists."""
        assert run(repo.key_moments.get_all(team.id, "g1")) is None
        assert run(repo.transcripts.get_all(team.id, "g1")) is None

    def test_assign_player_to_full_team_moments(self, repo, team):
        """Test adding a player to whole-team key moments only."""
        run(repo.key_moments.create(team.id, key_moment("all", ["p1", "p2"])))
        run(repo.key_moments.create(team.id, key_moment("one", ["p1"])))
        run(repo.key_moments.create(team.id, key_moment("done", ["p1", "p3"])))

        changed = run(repo.key_moments.assign_player_to_full_team_moments(team.id, "g1", 2, "p3"))

        assert changed == 1
        assert run(repo.key_moments.get(team.id, "g1", "all")).feedback_for == ["p1", "p2", "p3"]
        assert run(repo.key_moments.get(team.id, "g1", "one")).feedback_for == ["p1"]
        assert run(repo.key_moments.get(team.id, "g1", "done")).feedback_for == ["p1", "p3"]

    def test_add_players_to_feedback(self, repo, team):
        """Test merging recipients into a key moment."""
        run(repo.key_moments.create(team.id, key_moment("k", ["p1"])))
        run(repo.key_moments.add_players_to_feedback(team.id, "g1", "k", ["p2", "p1"]))
        assert run(repo.key_moments.get(team.id, "g1", "k")).feedback_for == ["p1", "p2"]

        with pytest.raises(KeyMomentNotFoundError):
            run(repo.key_moments.add_players_to_feedback(team.id, "g1", "missing", ["p2"]))

    def test_remove_key_moment(self, repo, team):
        """Test removing a key moment."""
        run(repo.key_moments.create(team.id, key_moment("k", [])))
        run(repo.key_moments.remove(team.id, "g1", "k"))
        assert run(repo.key_moments.get(team.id, "g1", "k")) is None

    def test_preview_takes_first_transcripts(self, repo, team):
        """Test that previews take the earliest stored transcripts."""
        for i in range(5):
            created = START + timedelta(seconds=i)
            run(repo.transcripts.create(team.id, transcript(f"t{i}", f"k{i}", created_at=created)))

        preview = run(repo.transcripts.get_preview(team.id, "g1", limit=3))

        assert [t.transcript_id for t in preview] == ["t0", "t1", "t2"]
        assert run(repo.transcripts.get_preview(team.id, "other", limit=3)) is None

    def test_transcript_update_and_remove(self, repo, team):
        """Test editing and removing a transcript."""
        run(repo.transcripts.create(team.id, transcript("t1", "k1")))
        run(repo.transcripts.update(team.id, "g1", "t1", "new text"))
        assert run(repo.transcripts.get(team.id, "g1", "t1")).transcript == "new text"

        run(repo.transcripts.remove(team.id, "g1", "t1"))
        assert run(repo.transcripts.get_all(team.id, "g1")) is None

    def test_delete_all_games_cascades(self, repo, team):
        """Test that deleting games removes their documents."""
        for game_id in ("g1", "g2"):
            run(repo.games.create(team.id, Game(game_id=game_id, team_id=team.team_id)))
            run(repo.key_moments.create(team.id, key_moment(f"k-{game_id}", [], game_id=game_id)))
            run(repo.transcripts.create(team.id, transcript(f"t-{game_id}", f"k-{game_id}", game_id=game_id)))
        run(
            repo.full_game_recordings.create(
                team.id,
                FullGameRecording(id="f1", game_id="g1", team_id=team.team_id, uploaded_by="coach-1", file_url="v.mp4"),
            )
        )
        assert len(run(repo.games.get_all(team.team_id))) == 2

        run(repo.games.delete_all(team.id))

        assert run(repo.games.get_all(team.team_id)) == []
        for game_id in ("g1", "g2"):
            assert run(repo.key_moments.get_all(team.id, game_id)) is None
            assert run(repo.transcripts.get_all(team.id, game_id)) is None
        assert run(repo.full_game_recordings.get_by_game_id(team.id, "g1")) is None
