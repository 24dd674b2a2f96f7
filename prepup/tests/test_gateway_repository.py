"""Tests for the GraphQL metadata repository against a mocked gateway"""
import json

import httpx
import pytest

from prepup.app.core.exceptions import UpstreamError
from prepup.app.repositories.gateway import GraphQLGateway, GraphQLQuestionRepository, GraphQLResumeRepository
from prepup.app.schemas.question import NewQuestion, QuestionFilters
from prepup.app.schemas.resume import ResumeChanges, ResumeHistoryRecord, ResumeRecord

ENDPOINT = "http://gateway.test/v1/graphql"

RESUME_ROW = {
    "resume_id": "r1",
    "user_id": "user_abc",
    "title": "Backend",
    "content": None,
    "version": 1,
    "is_active": True,
    "file_url": "resumes/user_abc/1-cv.pdf",
    "ai_feedback": None,
    "score": None,
    "created_at": "2026-01-01T00:00:00+00:00",
    "updated_at": "2026-01-01T00:00:00+00:00",
}


class Recorder:
    def __init__(self, responder):
        self.requests = []
        self.responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append({"headers": request.headers, **body})
        return self.responder(body)


def _repo(responder, admin_secret="s3cret"):
    recorder = Recorder(responder)
    gateway = GraphQLGateway(ENDPOINT, admin_secret=admin_secret, transport=httpx.MockTransport(recorder))
    return GraphQLResumeRepository(gateway), recorder


def test_get_resume_filters_by_owner():
    repo, rec = _repo(lambda body: httpx.Response(200, json={"data": {"resumes": [RESUME_ROW]}}))
    resume = repo.get_resume("r1", "user_abc")
    assert resume.title == "Backend"
    assert rec.requests[0]["variables"] == {"resumeId": "r1", "userId": "user_abc"}
    assert rec.requests[0]["headers"]["x-hasura-admin-secret"] == "s3cret"


def test_get_resume_missing_returns_none():
    repo, _ = _repo(lambda body: httpx.Response(200, json={"data": {"resumes": []}}))
    assert repo.get_resume("nope", "user_abc") is None


def test_ensure_user_uses_on_conflict():
    repo, rec = _repo(lambda body: httpx.Response(200, json={"data": {"insert_users_one": None}}))
    repo.ensure_user("user_abc", "abc@example.com")
    assert "on_conflict" in rec.requests[0]["query"]
    assert rec.requests[0]["variables"] == {"userId": "user_abc", "email": "abc@example.com"}


def test_versioned_update_is_one_request():
    updated = {**RESUME_ROW, "title": "Backend v2", "version": 2}
    repo, rec = _repo(
        lambda body: httpx.Response(
            200,
            json={"data": {
                "insert_resume_history_one": {"history_id": "h1"},
                "update_resumes": {"returning": [updated]},
            }},
        )
    )
    current = ResumeRecord.model_validate(RESUME_ROW)
    snapshot = ResumeHistoryRecord(
        history_id="h1", resume_id="r1", user_id="user_abc", title="Backend", version=1,
        file_url=current.file_url, change_reason="rename",
    )
    result = repo.update_resume(current, ResumeChanges(title="Backend v2", bump_version=True), snapshot)

    assert result.version == 2
    assert len(rec.requests) == 1
    sent = rec.requests[0]
    assert "insert_resume_history_one" in sent["query"]
    assert "update_resumes" in sent["query"]
    assert sent["variables"]["inc"] == {"version": 1}
    assert sent["variables"]["set"]["title"] == "Backend v2"
    assert "updated_at" in sent["variables"]["set"]
    assert sent["variables"]["history"]["change_reason"] == "rename"
    assert sent["variables"]["history"]["version"] == 1


def test_unversioned_update_skips_history():
    repo, rec = _repo(
        lambda body: httpx.Response(200, json={"data": {"update_resumes": {"returning": [{**RESUME_ROW, "is_active": False}]}}})
    )
    current = ResumeRecord.model_validate(RESUME_ROW)
    result = repo.update_resume(current, ResumeChanges(is_active=False))
    assert result.is_active is False
    assert "insert_resume_history_one" not in rec.requests[0]["query"]
    assert rec.requests[0]["variables"]["inc"] is None


def test_update_with_no_rows_raises():
    repo, _ = _repo(lambda body: httpx.Response(200, json={"data": {"update_resumes": {"returning": []}}}))
    with pytest.raises(UpstreamError):
        repo.update_resume(ResumeRecord.model_validate(RESUME_ROW), ResumeChanges(is_active=False))


def test_list_history_reads_aggregate():
    repo, rec = _repo(
        lambda body: httpx.Response(200, json={"data": {
            "resume_history": [{
                "history_id": "h1", "resume_id": "r1", "user_id": "user_abc", "title": "Backend",
                "content": None, "version": 1, "file_url": None, "ai_feedback": None, "score": None,
                "change_reason": None, "created_at": "2026-01-01T00:00:00+00:00",
            }],
            "resume_history_aggregate": {"aggregate": {"count": 7}},
        }})
    )
    page = repo.list_history("r1", "user_abc", limit=1, offset=0)
    assert page.total == 7
    assert [h.history_id for h in page.items] == ["h1"]
    assert rec.requests[0]["variables"]["limit"] == 1


def test_graphql_errors_raise_upstream():
    repo, _ = _repo(lambda body: httpx.Response(200, json={"errors": [{"message": "permission denied"}]}))
    with pytest.raises(UpstreamError) as exc:
        repo.list_resumes("user_abc")
    assert exc.value.status_code == 500


def test_http_failure_raises_upstream():
    repo, _ = _repo(lambda body: httpx.Response(503, text="unavailable"))
    with pytest.raises(UpstreamError):
        repo.list_resumes("user_abc")


def test_no_admin_secret_header_when_unset():
    repo, rec = _repo(lambda body: httpx.Response(200, json={"data": {"resumes": []}}), admin_secret="")
    repo.list_resumes("user_abc")
    assert "x-hasura-admin-secret" not in rec.requests[0]["headers"]


# --- Questions ---

QUESTION_ROW = {
    "question_id": "q1",
    "resume_id": "r1",
    "user_id": "user_abc",
    "question_text": "Tell me about a migration",
    "category": "technical",
    "difficulty": "medium",
    "suggested_answer": None,
    "tips": None,
    "tags": None,
    "is_bookmarked": True,
    "created_at": "2026-01-01T00:00:00+00:00",
}


def _question_repo(responder):
    recorder = Recorder(responder)
    gateway = GraphQLGateway(ENDPOINT, admin_secret="s3cret", transport=httpx.MockTransport(recorder))
    return GraphQLQuestionRepository(gateway), recorder


def test_list_questions_builds_where_from_filters():
    repo, rec = _question_repo(lambda body: httpx.Response(200, json={"data": {"interview_questions": [QUESTION_ROW]}}))
    questions = repo.list_questions("user_abc", QuestionFilters(category="technical", is_bookmarked=True))
    assert [q.question_id for q in questions] == ["q1"]
    assert rec.requests[0]["variables"]["where"] == {
        "user_id": {"_eq": "user_abc"},
        "category": {"_eq": "technical"},
        "is_bookmarked": {"_eq": True},
    }


def test_get_question_missing_returns_none():
    repo, _ = _question_repo(lambda body: httpx.Response(200, json={"data": {"interview_questions_by_pk": None}}))
    assert repo.get_question("nope") is None


def test_insert_questions_starts_unbookmarked():
    repo, rec = _question_repo(
        lambda body: httpx.Response(200, json={"data": {"insert_interview_questions": {"affected_rows": 1}}})
    )
    new = NewQuestion(question_id="q2", resume_id="r1", user_id="user_abc", question_text="Why Go?")
    assert repo.insert_questions([new]) == 1
    assert rec.requests[0]["variables"]["objects"][0]["is_bookmarked"] is False


def test_bookmark_and_delete_scoped_to_owner():
    repo, rec = _question_repo(lambda body: httpx.Response(200, json={"data": {
        "update_interview_questions": {"affected_rows": 0},
        "delete_interview_questions": {"affected_rows": 1},
    }}))
    assert repo.set_bookmark("q1", "user_xyz", True) is False
    assert repo.delete_question("q1", "user_abc") is True
    assert rec.requests[0]["variables"] == {"questionId": "q1", "userId": "user_xyz", "isBookmarked": True}
    assert rec.requests[1]["variables"] == {"questionId": "q1", "userId": "user_abc"}
