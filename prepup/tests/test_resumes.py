"""Tests for /api/resumes CRUD and history"""
from prepup.app.models.resume import ResumeHistory


def _create(client, headers, title="Platform Engineer", content=None):
    r = client.post("/api/resumes", json={"title": title, "content": content}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["resume"]


def test_list_requires_auth(client):
    """Auth required: assert 401 without token."""
    r = client.get("/api/resumes")
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"


def test_create_and_get(client, auth_headers):
    resume = _create(client, auth_headers, content="  Ten years of Go  ")
    assert resume["version"] == 1
    assert resume["file_url"] is None
    assert resume["content"] == "Ten years of Go"

    r = client.get(f"/api/resumes/{resume['resume_id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["resume"]["title"] == "Platform Engineer"


def test_create_requires_title(client, auth_headers):
    r = client.post("/api/resumes", json={"title": "   "}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Title is required and must be a non-empty string"


def test_list_only_own_active_resumes(client, auth_headers, other_headers):
    mine = _create(client, auth_headers, "Mine")
    gone = _create(client, auth_headers, "Gone")
    _create(client, other_headers, "Theirs")

    r = client.delete(f"/api/resumes/{gone['resume_id']}", headers=auth_headers)
    assert r.status_code == 200

    r = client.get("/api/resumes", headers=auth_headers)
    assert r.status_code == 200
    ids = [x["resume_id"] for x in r.json()["resumes"]]
    assert ids == [mine["resume_id"]]


def test_soft_deleted_resume_still_readable(client, auth_headers):
    resume = _create(client, auth_headers)
    client.delete(f"/api/resumes/{resume['resume_id']}", headers=auth_headers)
    r = client.get(f"/api/resumes/{resume['resume_id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["resume"]["is_active"] is False


def test_foreign_and_missing_resume_look_the_same(client, auth_headers, other_headers):
    theirs = _create(client, other_headers, "Theirs")
    foreign = client.get(f"/api/resumes/{theirs['resume_id']}", headers=auth_headers)
    missing = client.get("/api/resumes/does-not-exist", headers=auth_headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"detail": "Resume not found"}


def test_delete_foreign_resume_is_404(client, auth_headers, other_headers):
    theirs = _create(client, other_headers, "Theirs")
    r = client.delete(f"/api/resumes/{theirs['resume_id']}", headers=auth_headers)
    assert r.status_code == 404
    r = client.get(f"/api/resumes/{theirs['resume_id']}", headers=other_headers)
    assert r.json()["resume"]["is_active"] is True


def test_patch_title_snapshots_and_bumps_version(client, auth_headers, db_session):
    resume = _create(client, auth_headers, "Old title")
    r = client.patch(
        f"/api/resumes/{resume['resume_id']}",
        json={"title": "New title", "changeReason": "rename"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    updated = r.json()["resume"]
    assert updated["title"] == "New title"
    assert updated["version"] == 2

    history = db_session.query(ResumeHistory).all()
    assert len(history) == 1
    assert history[0].title == "Old title"
    assert history[0].version == 1
    assert history[0].change_reason == "rename"


def test_patch_is_active_only_is_not_versioned(client, auth_headers, db_session):
    resume = _create(client, auth_headers)
    r = client.patch(f"/api/resumes/{resume['resume_id']}", json={"is_active": False}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["resume"]["version"] == 1
    assert r.json()["resume"]["is_active"] is False
    assert db_session.query(ResumeHistory).count() == 0


def test_patch_same_title_is_not_versioned(client, auth_headers, db_session):
    resume = _create(client, auth_headers, "Same")
    r = client.patch(f"/api/resumes/{resume['resume_id']}", json={"title": "Same"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["resume"]["version"] == 1
    assert db_session.query(ResumeHistory).count() == 0


def test_patch_validation(client, auth_headers):
    resume = _create(client, auth_headers)
    r = client.patch(f"/api/resumes/{resume['resume_id']}", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "No valid fields to update"

    r = client.patch(f"/api/resumes/{resume['resume_id']}", json={"title": "  "}, headers=auth_headers)
    assert r.status_code == 400


def test_history_pagination(client, auth_headers):
    resume = _create(client, auth_headers, "v1")
    for title in ("v2", "v3", "v4"):
        r = client.patch(f"/api/resumes/{resume['resume_id']}", json={"title": title}, headers=auth_headers)
        assert r.status_code == 200

    r = client.get(f"/api/resumes/{resume['resume_id']}/history", params={"limit": 2}, headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert [h["version"] for h in data["history"]] == [3, 2]
    assert data["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    r = client.get(
        f"/api/resumes/{resume['resume_id']}/history",
        params={"limit": 2, "offset": 2},
        headers=auth_headers,
    )
    data = r.json()
    assert [h["title"] for h in data["history"]] == ["v1"]
    assert data["pagination"]["hasMore"] is False


def test_history_limit_bounds(client, auth_headers):
    resume = _create(client, auth_headers)
    for params in ({"limit": 0}, {"limit": 201}, {"offset": -1}):
        r = client.get(f"/api/resumes/{resume['resume_id']}/history", params=params, headers=auth_headers)
        assert r.status_code == 400


def test_history_of_foreign_resume_is_404(client, auth_headers, other_headers):
    theirs = _create(client, other_headers)
    r = client.get(f"/api/resumes/{theirs['resume_id']}/history", headers=auth_headers)
    assert r.status_code == 404
