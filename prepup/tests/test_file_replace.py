"""Tests for PUT /api/resumes/{id}/file"""
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from prepup.app.models.resume import ResumeHistory
from prepup.app.repositories.orm import SqlAlchemyResumeRepository
from prepup.app.schemas.resume import NewResume, ResumeChanges
from prepup.app.services.resume_service import snapshot_of

NEW_KEY = "resumes/user_abc/1800000000000-Backend_Engineer_v2.pdf"


def test_replace_file_versions_and_snapshots(client, auth_headers, upload, fake_s3, db_session):
    data = upload()
    old_key = data["fileUrl"]
    resume_id = data["resume"]["resume_id"]
    fake_s3.add(NEW_KEY)

    r = client.put(
        f"/api/resumes/{resume_id}/file",
        json={"fileKey": NEW_KEY, "changeReason": "typo fix"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    resume = r.json()["resume"]
    assert resume["version"] == 2
    assert resume["file_url"] == NEW_KEY

    history = db_session.query(ResumeHistory).filter(ResumeHistory.resume_id == resume_id).all()
    assert len(history) == 1
    assert history[0].version == 1
    assert history[0].file_url == old_key
    assert history[0].change_reason == "typo fix"

    r = client.get(f"/api/resumes/{resume_id}/history", headers=auth_headers)
    assert r.json()["history"][0]["change_reason"] == "typo fix"


def test_replace_file_foreign_key_is_403(client, auth_headers, upload, fake_s3, db_session):
    data = upload()
    fake_s3.add("resumes/user_xyz/1-cv.pdf")
    r = client.put(
        f"/api/resumes/{data['resume']['resume_id']}/file",
        json={"fileKey": "resumes/user_xyz/1-cv.pdf"},
        headers=auth_headers,
    )
    assert r.status_code == 403
    assert db_session.query(ResumeHistory).count() == 0


def test_replace_file_missing_object_is_400(client, auth_headers, upload, db_session):
    data = upload()
    r = client.put(
        f"/api/resumes/{data['resume']['resume_id']}/file",
        json={"fileKey": NEW_KEY},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["fileKey"] == NEW_KEY
    resume = client.get(f"/api/resumes/{data['resume']['resume_id']}", headers=auth_headers).json()["resume"]
    assert resume["version"] == 1
    assert db_session.query(ResumeHistory).count() == 0


def test_replace_file_on_foreign_resume_is_404(client, auth_headers, other_headers, upload, fake_s3):
    theirs = upload(headers=other_headers)
    fake_s3.add(NEW_KEY)
    r = client.put(
        f"/api/resumes/{theirs['resume']['resume_id']}/file",
        json={"fileKey": NEW_KEY},
        headers=auth_headers,
    )
    assert r.status_code == 404


def test_failed_update_discards_flushed_history(db_session):
    """History is flushed before the resume UPDATE; a failing UPDATE must take it down too."""
    repo = SqlAlchemyResumeRepository(db_session)
    repo.ensure_user("user_abc", "abc@example.com")
    resume = repo.insert_resume(NewResume(resume_id=str(uuid.uuid4()), user_id="user_abc", title="Backend"))

    # score outside 0..100 violates ck_resumes_score when the UPDATE runs
    with pytest.raises(IntegrityError):
        repo.update_resume(
            resume,
            ResumeChanges(title="Backend v2", score=150, bump_version=True),
            snapshot_of(resume, "edit"),
        )

    assert db_session.query(ResumeHistory).count() == 0
    after = repo.get_resume(resume.resume_id, "user_abc")
    assert after.version == 1
    assert after.title == "Backend"
