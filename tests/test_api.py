"""
HTTP tests for the team and transcript routes, using the in-memory stores.
"""
import pytest
from fastapi.testclient import TestClient

from gameframe.api.deps import create_access_token, decode_token, get_storage, get_stores
from gameframe.core.config import settings
from gameframe.main import app
from gameframe.schemas import Coach, UserType

from conftest import ACCESS_CODE, COACH_ID, GAME_ID, TEAM_DOC_ID, TEAM_ID, add_key_moment, add_user, run

OUTSIDER_ID = "coach-x"


@pytest.fixture
def client(stores, storage, monkeypatch):
    monkeypatch.setattr(settings, "REPOSITORY_BACKEND", "memory")
    app.dependency_overrides[get_stores] = lambda: stores
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def outsider(stores):
    """A registered coach with no link to the seeded team."""
    run(add_user(stores, OUTSIDER_ID, "Xena", "Other", UserType.COACH))
    run(stores.coaches.create(Coach(id="coach-doc-x", coach_id=OUTSIDER_ID)))
    return OUTSIDER_ID


def auth(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def transcripts_url(suffix=""):
    return f"/api/teams/{TEAM_DOC_ID}/games/{GAME_ID}/transcripts/{suffix}"


class TestHealth:
    """Test service endpoints."""

    def test_root(self, client):
        """Test that the root endpoint reports the service as running."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        """Test the health check endpoint."""
        assert client.get("/health").json() == {"status": "healthy"}


class TestAuth:
    """Test bearer token handling."""

    def test_token_roundtrip(self):
        """Test that a created token decodes to its user id."""
        assert decode_token(create_access_token("p1")) == "p1"

    def test_garbage_token(self):
        """Test that an undecodable token yields no user."""
        assert decode_token("not-a-token") is None

    def test_missing_token(self, client):
        """Test that requests without a token are rejected."""
        assert client.get("/api/teams/").status_code == 401

    def test_invalid_token(self, client):
        """Test that requests with an invalid token are rejected."""
        response = client.get("/api/teams/", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestTeamRoutes:
    """Test team routes."""

    def test_list_teams(self, client):
        """Test listing the teams of a coach."""
        response = client.get("/api/teams/", headers=auth(COACH_ID))
        assert response.status_code == 200
        assert [t["team_id"] for t in response.json()] == [TEAM_ID]

    def test_create_team(self, client):
        """Test creating a team with a generated access code."""
        response = client.post(
            "/api/teams/",
            json={"name": "Hawks", "team_nickname": "HAW", "colour": "#112233"},
            headers=auth(COACH_ID),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["coaches"] == [COACH_ID]
        assert len(data["access_code"]) == 8

    def test_create_team_bad_colour(self, client):
        """Test that a malformed colour is a validation error."""
        response = client.post(
            "/api/teams/",
            json={"name": "Hawks", "team_nickname": "HAW", "colour": "red"},
            headers=auth(COACH_ID),
        )
        assert response.status_code == 422

    def test_get_team_as_player(self, client):
        """Test that an enrolled player can read their team."""
        response = client.get(f"/api/teams/{TEAM_DOC_ID}", headers=auth("p1"))
        assert response.status_code == 200
        assert response.json()["team_id"] == TEAM_ID

    def test_get_missing_team(self, client):
        """Test reading a team that does not exist."""
        response = client.get("/api/teams/nope", headers=auth(COACH_ID))
        assert response.status_code == 404
        assert response.json()["detail"] == "Team not found with id: nope"

    def test_get_team_of_another_coach(self, client, outsider):
        """Test that a coach of another team cannot read this one."""
        response = client.get(f"/api/teams/{TEAM_DOC_ID}", headers=auth(outsider))
        assert response.status_code == 404

    def test_get_team_not_enrolled(self, client):
        """Test that a player who has not joined cannot read the team."""
        assert client.get(f"/api/teams/{TEAM_DOC_ID}", headers=auth("p3")).status_code == 404

    def test_join(self, client):
        """Test joining with a padded access code."""
        response = client.post("/api/teams/join", json={"access_code": f" {ACCESS_CODE} "}, headers=auth("p3"))
        assert response.status_code == 200
        assert response.json()["players"] == ["p1", "p2", "p3"]

    def test_join_invalid_code(self, client):
        """Test joining with an unknown access code."""
        response = client.post("/api/teams/join", json={"access_code": "ZZZZZZ"}, headers=auth("p3"))
        assert response.status_code == 400
        assert response.json()["detail"] == "The access code is invalid. Please check it and try again."

    def test_join_twice(self, client):
        """Test that joining a team twice is a conflict."""
        response = client.post("/api/teams/join", json={"access_code": ACCESS_CODE}, headers=auth("p1"))
        assert response.status_code == 409
        assert response.json()["detail"] == "You are already enrolled in this team."

    def test_update_requires_coach(self, client):
        """Test that players cannot change team settings."""
        response = client.patch(f"/api/teams/{TEAM_DOC_ID}", json={"name": "X"}, headers=auth("p1"))
        assert response.status_code == 403

    def test_update_by_another_coach(self, client, stores, outsider):
        """Test that a coach of another team cannot change this one."""
        response = client.patch(f"/api/teams/{TEAM_DOC_ID}", json={"name": "X"}, headers=auth(outsider))
        assert response.status_code == 404
        assert run(stores.teams.get_by_doc_id(TEAM_DOC_ID)).name == "Falcons"

    def test_update(self, client):
        """Test a partial settings update."""
        response = client.patch(f"/api/teams/{TEAM_DOC_ID}", json={"age_grp": "U18"}, headers=auth(COACH_ID))
        assert response.status_code == 200
        assert response.json()["age_grp"] == "U18"
        assert response.json()["name"] == "Falcons"

    def test_delete(self, client, stores, storage):
        """Test deleting a team and cleaning up its audio after the response."""
        response = client.delete(f"/api/teams/{TEAM_DOC_ID}", headers=auth(COACH_ID))
        assert response.status_code == 204
        assert run(stores.teams.get_by_team_id(TEAM_ID)) is None
        assert storage.deleted == [f"audio/{TEAM_ID}"]
        assert client.get(f"/api/teams/{TEAM_DOC_ID}", headers=auth(COACH_ID)).status_code == 404

    def test_delete_requires_coach(self, client, stores, storage):
        """Test that players cannot delete their team."""
        response = client.delete(f"/api/teams/{TEAM_DOC_ID}", headers=auth("p1"))
        assert response.status_code == 403
        assert run(stores.teams.get_by_team_id(TEAM_ID)) is not None
        assert storage.deleted == []


class TestTranscriptRoutes:
    """Test transcript routes."""

    @pytest.fixture(autouse=True)
    def moments(self, stores):
        run(add_key_moment(stores, "k2", 10, ["p1"], text="good tackle"))
        run(add_key_moment(stores, "k1", 5, ["p1", "p2"], text="pass to left"))

    def test_coach_list(self, client):
        """Test that a coach gets every transcript in order."""
        response = client.get(transcripts_url(), headers=auth(COACH_ID))
        assert response.status_code == 200
        assert [r["key_moment_id"] for r in response.json()] == ["k1", "k2"]

    def test_player_list(self, client):
        """Test that a player only gets feedback addressed to them."""
        response = client.get(transcripts_url(), headers=auth("p2"))
        records = response.json()
        assert [r["key_moment_id"] for r in records] == ["k1"]
        assert [p["player_id"] for p in records[0]["feedback_for"]] == ["p2"]

    def test_no_transcripts_is_null(self, client):
        """Test that a game without transcripts returns null."""
        response = client.get(f"/api/teams/{TEAM_DOC_ID}/games/other/transcripts/", headers=auth(COACH_ID))
        assert response.status_code == 200
        assert response.json() is None

    def test_key_moments(self, client):
        """Test the recordings and full game lists."""
        response = client.get(transcripts_url("key-moments"), headers=auth(COACH_ID))
        data = response.json()
        assert len(data["recordings"]) == 2
        assert data["key_moments"] == []

    def test_preview(self, client):
        """Test the preview lists."""
        response = client.get(transcripts_url("preview"), headers=auth(COACH_ID))
        assert len(response.json()["recordings"]) == 2

    @pytest.mark.parametrize("suffix", ["", "key-moments", "preview"])
    def test_foreign_coach_refused(self, client, outsider, suffix):
        """Test that a coach of another team cannot read this team's transcripts."""
        response = client.get(transcripts_url(suffix), headers=auth(outsider))
        assert response.status_code == 404

    def test_unenrolled_player_refused(self, client):
        """Test that a player outside the roster cannot read transcripts."""
        assert client.get(transcripts_url(), headers=auth("p3")).status_code == 404

    def test_unknown_role_forbidden(self, client, stores):
        """Test that a team member with an unknown user type is refused."""
        run(add_user(stores, "ref", "Rex", "Ref", user_type="Referee"))
        run(stores.teams.add_coach(TEAM_DOC_ID, "ref"))
        response = client.get(transcripts_url(), headers=auth("ref"))
        assert response.status_code == 403

    def test_update_transcript(self, client, stores):
        """Test that a coach can edit text and add recipients."""
        response = client.patch(
            transcripts_url("tr-k2"),
            json={"transcript": "great tackle", "feedback_for": ["p2"]},
            headers=auth(COACH_ID),
        )
        assert response.status_code == 200
        assert response.json()["transcript"] == "great tackle"
        key_moment = run(stores.key_moments.get(TEAM_DOC_ID, GAME_ID, "k2"))
        assert key_moment.feedback_for == ["p1", "p2"]

    def test_player_cannot_add_themselves_to_feedback(self, client, stores):
        """Test that a player cannot widen feedback to read someone else's transcript."""
        response = client.patch(transcripts_url("tr-k2"), json={"feedback_for": ["p2"]}, headers=auth("p2"))

        assert response.status_code == 403
        assert run(stores.key_moments.get(TEAM_DOC_ID, GAME_ID, "k2")).feedback_for == ["p1"]
        records = client.get(transcripts_url(), headers=auth("p2")).json()
        assert [r["key_moment_id"] for r in records] == ["k1"]

    def test_foreign_coach_cannot_edit(self, client, stores, outsider):
        """Test that a coach of another team cannot edit transcripts."""
        response = client.patch(transcripts_url("tr-k2"), json={"transcript": "x"}, headers=auth(outsider))
        assert response.status_code == 404
        assert run(stores.transcripts.get(TEAM_DOC_ID, GAME_ID, "tr-k2")).transcript == "good tackle"

    def test_update_nothing(self, client):
        """Test that an empty edit is rejected."""
        response = client.patch(transcripts_url("tr-k2"), json={}, headers=auth(COACH_ID))
        assert response.status_code == 400

    def test_update_missing_transcript(self, client):
        """Test editing a transcript that does not exist."""
        response = client.patch(transcripts_url("tr-none"), json={"transcript": "x"}, headers=auth(COACH_ID))
        assert response.status_code == 404

    def test_coach_gets_signed_audio(self, client):
        """Test that audio links are signed by the storage."""
        response = client.get(transcripts_url("key-moments/k2/audio"), headers=auth(COACH_ID))
        assert response.status_code == 200
        assert response.json() == {
            "key_moment_id": "k2",
            "audio_url": f"https://signed.test/audio/{TEAM_ID}/{GAME_ID}/k2.m4a",
        }

    def test_player_gets_own_audio_only(self, client):
        """Test that players only get audio of feedback addressed to them."""
        assert client.get(transcripts_url("key-moments/k2/audio"), headers=auth("p1")).status_code == 200
        assert client.get(transcripts_url("key-moments/k2/audio"), headers=auth("p2")).status_code == 404

    def test_audio_of_missing_key_moment(self, client):
        """Test asking for audio of a key moment that does not exist."""
        response = client.get(transcripts_url("key-moments/nope/audio"), headers=auth(COACH_ID))
        assert response.status_code == 404
