"""
tests/test_api_routes.py — FastAPI Route Integration Tests
============================================================

Runs the real app through TestClient with the engine and config
dependencies pointed at the SQLite fixture.

These tests verify:
- Health endpoint availability
- Skill lookup / leaderboard / distribution response structure
- Upload endpoints end to end (records → snapshot → leaderboard)
- Auth guards on version administration
"""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.orm import Session

from conftest import TEST_VERSION, add_record, add_user
from gitadora.database.models import GameVersion, InstrumentType, SkillHistory


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seeded(db_engine):
    """Two players with GUITAR records, one snapshot each, and a version."""
    with Session(db_engine) as session:
        session.add(GameVersion(name=TEST_VERSION, started_at=datetime(2026, 1, 1)))
        drew = add_user(session, "drew", ingame_name="DREW", title="Rookie")
        kai = add_user(session, "kai", ingame_name="KAI")
        add_record(session, drew.id, "Hot Song", skill_score=150.0, is_hot=True)
        add_record(session, drew.id, "Old Song", skill_score=100.0)
        add_record(session, kai.id, "Old Song", skill_score=120.0, achievement=95.0)
        for user_id, total in ((drew.id, 250.0), (kai.id, 4100.0)):
            session.add(SkillHistory(
                user_id=user_id,
                total_skill=total,
                hot_skill=0,
                other_skill=total,
                instrument_type=InstrumentType.GUITAR,
                recorded_at=datetime(2026, 1, 20),
            ))
        session.commit()
        return {"drew": drew.id, "kai": kai.id}


# ===========================================================================
# Health endpoint
# ===========================================================================
class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ===========================================================================
# GET /users/{id}/skill
# ===========================================================================
class TestUserSkill:
    def test_default_instrument_from_config(self, client, seeded):
        resp = client.get(f"/api/users/{seeded['drew']}/skill")
        assert resp.status_code == 200
        body = resp.json()
        assert body["instrumentType"] == "GUITAR"
        assert body["totalSkill"] == 250.0
        assert body["hotSkill"] == 150.0
        assert body["otherSkill"] == 100.0
        assert [r["songTitle"] for r in body["hotRecords"]] == ["Hot Song"]
        assert len(body["history"]) == 1

    def test_explicit_instrument(self, client, seeded):
        body = client.get(
            f"/api/users/{seeded['drew']}/skill", params={"instrumentType": "DRUM"},
        ).json()
        assert body["instrumentType"] == "DRUM"
        assert body["totalSkill"] == 0
        assert body["history"] == []

    def test_rejects_non_numeric_user_id(self, client):
        resp = client.get("/api/users/abc/skill")
        assert resp.status_code == 422

    def test_rejects_unknown_instrument(self, client, seeded):
        resp = client.get(f"/api/users/{seeded['drew']}/skill", params={"instrumentType": "KAZOO"})
        assert resp.status_code == 422

    def test_non_numeric_history_id_ignored(self, client, seeded):
        resp = client.get(f"/api/users/{seeded['drew']}/skill", params={"historyId": "latest"})
        assert resp.status_code == 200
        assert resp.json()["totalSkill"] == 250.0

    def test_version_filter(self, client, seeded):
        body = client.get(
            f"/api/users/{seeded['drew']}/skill", params={"version": "GITADORA FUZZ-UP"},
        ).json()
        assert body["totalSkill"] == 0


# ===========================================================================
# GET /users/list
# ===========================================================================
class TestUserList:
    def test_ranked_by_latest_snapshot(self, client, seeded):
        resp = client.get("/api/users/list")
        assert resp.status_code == 200
        rows = resp.json()
        assert [(r["rank"], r["userId"]) for r in rows] == [
            (1, seeded["kai"]), (2, seeded["drew"]),
        ]
        assert rows[0]["tier"] == "BLUE"
        assert rows[1]["title"] == "Rookie"
        assert rows[1]["ingamename"] == "DREW"

    def test_instrument_without_snapshots_is_empty(self, client, seeded):
        assert client.get("/api/users/list", params={"instrumentType": "BASS"}).json() == []


# ===========================================================================
# Uploads
# ===========================================================================
class TestUploads:
    RECORD = {
        "songTitle": "Cinnamon",
        "instrumentType": "GUITAR",
        "difficulty": "EXTREME",
        "achievement": 96.1,
        "skillScore": 170.0,
        "isHot": False,
    }

    def test_upload_for_user_writes_snapshot(self, client, seeded):
        resp = client.post(
            f"/api/users/{seeded['drew']}/skill-records",
            json={"records": [self.RECORD, {**self.RECORD, "difficulty": "HARD"}]},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["created"] == 1
        assert body["errorCount"] == 1
        assert body["snapshots"][0]["totalSkill"] == 420.0

        skill = client.get(f"/api/users/{seeded['drew']}/skill").json()
        assert skill["otherSkill"] == 270.0
        assert skill["history"][0]["totalSkill"] == 420.0

    def test_upload_with_taken_gitadora_id_still_stores_records(self, client, seeded, db_engine):
        with Session(db_engine) as session:
            add_user(session, "owner", gitadora_id="G1")
            session.commit()

        resp = client.post(
            f"/api/users/{seeded['drew']}/skill-records",
            json={"records": [self.RECORD], "profileInfo": {"gitadoraId": "G1"}},
        )
        assert resp.status_code == 200
        assert resp.json()["created"] == 1

    def test_upload_for_unknown_user(self, client, seeded):
        resp = client.post("/api/users/9999/skill-records", json={"records": [self.RECORD]})
        assert resp.status_code == 404

    def test_upload_without_records(self, client, seeded):
        resp = client.post(f"/api/users/{seeded['drew']}/skill-records", json={"records": []})
        assert resp.status_code == 400

    def test_upload_by_gitadora_id_creates_player(self, client, seeded):
        resp = client.post("/api/skill-records", json={
            "records": [self.RECORD],
            "profileInfo": {"gitadoraId": "5555-6666", "name": "NEWBIE"},
        })
        assert resp.status_code == 200
        user_id = resp.json()["userId"]

        ranking = client.get("/api/users/list").json()
        assert any(r["userId"] == user_id and r["totalSkill"] == 170.0 for r in ranking)

    def test_upload_by_gitadora_id_requires_id(self, client, seeded):
        resp = client.post("/api/skill-records", json={"records": [self.RECORD], "profileInfo": {}})
        assert resp.status_code == 400

    def test_upload_by_gitadora_id_unknown_version(self, client, seeded):
        resp = client.post("/api/skill-records", json={
            "records": [self.RECORD],
            "profileInfo": {"gitadoraId": "5555-6666"},
            "version": "GITADORA NOPE",
        })
        assert resp.status_code == 404

    def test_profile_only_upload(self, client, seeded):
        resp = client.post("/api/skill-records", json={
            "records": [],
            "profileInfo": {"gitadoraId": "7777"},
        })
        assert resp.status_code == 200
        assert resp.json()["created"] == 0
        assert "no records" in resp.json()["message"]


# ===========================================================================
# GET /skill-distribution
# ===========================================================================
class TestSkillDistribution:
    def test_distribution_for_song(self, client, seeded):
        resp = client.get("/api/skill-distribution", params={"songTitle": "Old Song"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["totalRecords"] == 2
        bucket = body["distribution"]["GUITAR"]["MASTER"]
        assert bucket["count"] == 2
        assert {p["username"] for p in bucket["points"]} == {"DREW", "KAI"}
        assert body["histogram"]["GUITAR"]["MASTER"][9] == 2

    def test_song_title_required(self, client):
        assert client.get("/api/skill-distribution").status_code == 422


# ===========================================================================
# Versions — reads public, writes ADMIN-only
# ===========================================================================
class TestVersions:
    BODY = {"name": "GITADORA GALAXY WAVE", "startedAt": "2025-03-05T13:45:00"}

    def test_list_public(self, client, seeded):
        resp = client.get("/api/versions")
        assert resp.status_code == 200
        assert [v["name"] for v in resp.json()] == [TEST_VERSION]

    def test_get_unknown(self, client, seeded):
        assert client.get("/api/versions/9999").status_code == 404

    def test_create_requires_auth(self, client, seeded):
        assert client.post("/api/versions", json=self.BODY).status_code == 401

    def test_create_rejects_invalid_token(self, client, seeded):
        resp = client.post("/api/versions", json=self.BODY, headers=_auth("invalid"))
        assert resp.status_code == 401

    def test_create_rejects_non_admin(self, client, seeded, user_token):
        resp = client.post("/api/versions", json=self.BODY, headers=_auth(user_token))
        assert resp.status_code == 403

    def test_admin_creates_at_midnight(self, client, seeded, admin_token):
        resp = client.post("/api/versions", json=self.BODY, headers=_auth(admin_token))
        assert resp.status_code == 201
        body = resp.json()
        assert body["startedAt"].startswith("2025-03-05T00:00:00")
        assert body["endedAt"] is None

        fetched = client.get(f"/api/versions/{body['id']}").json()
        assert fetched["name"] == "GITADORA GALAXY WAVE"

    def test_duplicate_name_conflicts(self, client, seeded, admin_token):
        resp = client.post(
            "/api/versions",
            json={**self.BODY, "name": TEST_VERSION},
            headers=_auth(admin_token),
        )
        assert resp.status_code == 409

    def test_admin_updates(self, client, seeded, admin_token):
        created = client.post("/api/versions", json=self.BODY, headers=_auth(admin_token)).json()
        resp = client.put(
            f"/api/versions/{created['id']}",
            json={**self.BODY, "name": "GITADORA GALAXY WAVE (renamed)", "endedAt": "2025-12-31T23:00:00"},
            headers=_auth(admin_token),
        )
        assert resp.status_code == 200
        assert resp.json()["endedAt"].startswith("2025-12-31T00:00:00")

    def test_update_unknown(self, client, seeded, admin_token):
        resp = client.put("/api/versions/9999", json=self.BODY, headers=_auth(admin_token))
        assert resp.status_code == 404


# ===========================================================================
# Auth /me endpoint
# ===========================================================================
class TestAuthMe:
    def test_me_returns_identity(self, client, admin_token):
        resp = client.get("/api/auth/me", headers=_auth(admin_token))
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == "99999"
        assert body["username"] == "FixtureAdmin"
        assert body["role"] == "ADMIN"
        assert body["is_admin"] is True

    def test_me_for_regular_user(self, client, user_token):
        body = client.get("/api/auth/me", headers=_auth(user_token)).json()
        assert body["is_admin"] is False

    def test_me_rejects_no_auth(self, client):
        assert client.get("/api/auth/me").status_code == 401
