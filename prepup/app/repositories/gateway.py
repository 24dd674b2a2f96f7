"""
GraphQL gateway metadata repository (primary deployment).

Talks to a Hasura-style gateway over HTTP with httpx. Mutations that must be
atomic (history snapshot + resume update) are sent as one request document; the
gateway executes every mutation field of a request sequentially in a single
transaction.
"""
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

import httpx

from prepup.app.core.config import settings
from prepup.app.core.exceptions import UpstreamError
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.question import NewQuestion, QuestionFilters, QuestionRecord
from prepup.app.schemas.resume import (
    HistoryPage,
    NewResume,
    ResumeChanges,
    ResumeHistoryRecord,
    ResumeRecord,
)

logger = get_logger("repositories.gateway")

RESUME_FIELDS = """
    resume_id
    user_id
    title
    content
    version
    is_active
    file_url
    ai_feedback
    score
    created_at
    updated_at
"""

HISTORY_FIELDS = """
    history_id
    resume_id
    user_id
    title
    content
    version
    file_url
    ai_feedback
    score
    change_reason
    created_at
"""

ENSURE_USER = """
mutation EnsureUser($userId: String!, $email: String) {
  insert_users_one(
    object: { user_id: $userId, email: $email, language_preference: "en" }
    on_conflict: { constraint: users_pkey, update_columns: [] }
  ) {
    user_id
  }
}
"""

GET_RESUME_BY_ID = f"""
query GetResumeById($resumeId: String!, $userId: String!) {{
  resumes(where: {{ resume_id: {{ _eq: $resumeId }}, user_id: {{ _eq: $userId }} }}, limit: 1) {{
    {RESUME_FIELDS}
  }}
}}
"""

GET_RESUMES = f"""
query GetResumes($userId: String!) {{
  resumes(
    where: {{ user_id: {{ _eq: $userId }}, is_active: {{ _eq: true }} }}
    order_by: {{ created_at: desc }}
  ) {{
    {RESUME_FIELDS}
  }}
}}
"""

CREATE_RESUME = f"""
mutation CreateResume($object: resumes_insert_input!) {{
  insert_resumes_one(object: $object) {{
    {RESUME_FIELDS}
  }}
}}
"""

UPDATE_RESUME = f"""
mutation UpdateResume(
  $resumeId: String!
  $userId: String!
  $set: resumes_set_input!
  $inc: resumes_inc_input
) {{
  update_resumes(
    where: {{ resume_id: {{ _eq: $resumeId }}, user_id: {{ _eq: $userId }} }}
    _set: $set
    _inc: $inc
  ) {{
    returning {{
      {RESUME_FIELDS}
    }}
  }}
}}
"""

SNAPSHOT_AND_UPDATE_RESUME = f"""
mutation SnapshotAndUpdateResume(
  $history: resume_history_insert_input!
  $resumeId: String!
  $userId: String!
  $set: resumes_set_input!
  $inc: resumes_inc_input
) {{
  insert_resume_history_one(object: $history) {{
    history_id
  }}
  update_resumes(
    where: {{ resume_id: {{ _eq: $resumeId }}, user_id: {{ _eq: $userId }} }}
    _set: $set
    _inc: $inc
  ) {{
    returning {{
      {RESUME_FIELDS}
    }}
  }}
}}
"""

SOFT_DELETE_RESUME = """
mutation SoftDeleteResume($resumeId: String!, $userId: String!, $updatedAt: timestamptz!) {
  update_resumes(
    where: { resume_id: { _eq: $resumeId }, user_id: { _eq: $userId } }
    _set: { is_active: false, updated_at: $updatedAt }
  ) {
    affected_rows
  }
}
"""

GET_RESUME_HISTORY = f"""
query GetResumeHistory($resumeId: String!, $userId: String!, $limit: Int!, $offset: Int!) {{
  resume_history(
    where: {{ resume_id: {{ _eq: $resumeId }}, user_id: {{ _eq: $userId }} }}
    order_by: [{{ created_at: desc }}, {{ version: desc }}]
    limit: $limit
    offset: $offset
  ) {{
    {HISTORY_FIELDS}
  }}
  resume_history_aggregate(
    where: {{ resume_id: {{ _eq: $resumeId }}, user_id: {{ _eq: $userId }} }}
  ) {{
    aggregate {{
      count
    }}
  }}
}}
"""


QUESTION_FIELDS = """
    question_id
    resume_id
    user_id
    question_text
    category
    difficulty
    suggested_answer
    tips
    tags
    is_bookmarked
    created_at
"""

GET_QUESTIONS = f"""
query GetQuestions($where: interview_questions_bool_exp!) {{
  interview_questions(where: $where, order_by: {{ created_at: desc }}) {{
    {QUESTION_FIELDS}
  }}
}}
"""

GET_QUESTION_BY_ID = f"""
query GetQuestionById($questionId: String!) {{
  interview_questions_by_pk(question_id: $questionId) {{
    {QUESTION_FIELDS}
  }}
}}
"""

INSERT_QUESTIONS = """
mutation InsertQuestions($objects: [interview_questions_insert_input!]!) {
  insert_interview_questions(objects: $objects) {
    affected_rows
  }
}
"""

SET_QUESTION_BOOKMARK = """
mutation SetQuestionBookmark($questionId: String!, $userId: String!, $isBookmarked: Boolean!) {
  update_interview_questions(
    where: { question_id: { _eq: $questionId }, user_id: { _eq: $userId } }
    _set: { is_bookmarked: $isBookmarked }
  ) {
    affected_rows
  }
}
"""

DELETE_QUESTION = """
mutation DeleteQuestion($questionId: String!, $userId: String!) {
  delete_interview_questions(
    where: { question_id: { _eq: $questionId }, user_id: { _eq: $userId } }
  ) {
    affected_rows
  }
}
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GraphQLGateway:
    """Thin GraphQL-over-HTTP client. Raises UpstreamError on transport or GraphQL errors."""

    def __init__(
        self,
        endpoint: str,
        admin_secret: str = "",
        timeout: float = 30,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if admin_secret:
            headers["x-hasura-admin-secret"] = admin_secret
        self.endpoint = endpoint
        self._client = httpx.Client(headers=headers, timeout=timeout, transport=transport)

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            resp = self._client.post(self.endpoint, json={"query": query, "variables": variables or {}})
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as e:
            logger.error("GraphQL request failed endpoint=%s error=%s", self.endpoint, e)
            raise UpstreamError("Metadata gateway request failed") from e
        if body.get("errors"):
            first = body["errors"][0].get("message", "unknown error")
            logger.error("GraphQL error endpoint=%s message=%s", self.endpoint, first)
            raise UpstreamError("Metadata gateway returned an error")
        return body.get("data") or {}

    def close(self) -> None:
        self._client.close()


@lru_cache
def get_graphql_gateway() -> GraphQLGateway:
    return GraphQLGateway(
        settings.graphql_endpoint,
        admin_secret=settings.graphql_admin_secret,
        timeout=settings.graphql_timeout,
    )


def _history_object(snapshot: ResumeHistoryRecord) -> dict:
    return snapshot.model_dump(mode="json", exclude={"created_at"})


class GraphQLResumeRepository(ResumeRepository):

    def __init__(self, gateway: GraphQLGateway):
        self.gateway = gateway

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> None:
        self.gateway.execute(ENSURE_USER, {"userId": user_id, "email": email})

    def get_resume(self, resume_id: str, user_id: str) -> Optional[ResumeRecord]:
        data = self.gateway.execute(GET_RESUME_BY_ID, {"resumeId": resume_id, "userId": user_id})
        rows = data.get("resumes") or []
        return ResumeRecord.model_validate(rows[0]) if rows else None

    def list_resumes(self, user_id: str) -> list[ResumeRecord]:
        data = self.gateway.execute(GET_RESUMES, {"userId": user_id})
        return [ResumeRecord.model_validate(r) for r in data.get("resumes") or []]

    def insert_resume(self, new: NewResume) -> ResumeRecord:
        obj = {**new.model_dump(), "version": 1, "is_active": True}
        data = self.gateway.execute(CREATE_RESUME, {"object": obj})
        return ResumeRecord.model_validate(data["insert_resumes_one"])

    def _update(
        self,
        current: ResumeRecord,
        values: dict,
        snapshot: ResumeHistoryRecord | None,
        bump_version: bool,
    ) -> ResumeRecord:
        variables = {
            "resumeId": current.resume_id,
            "userId": current.user_id,
            "set": {**values, "updated_at": _now()},
            "inc": {"version": 1} if bump_version else None,
        }
        if snapshot is not None:
            variables["history"] = _history_object(snapshot)
            data = self.gateway.execute(SNAPSHOT_AND_UPDATE_RESUME, variables)
        else:
            data = self.gateway.execute(UPDATE_RESUME, variables)
        returning = (data.get("update_resumes") or {}).get("returning") or []
        if not returning:
            raise UpstreamError("Resume update affected no rows")
        return ResumeRecord.model_validate(returning[0])

    def update_resume(
        self,
        current: ResumeRecord,
        changes: ResumeChanges,
        snapshot: Optional[ResumeHistoryRecord] = None,
    ) -> ResumeRecord:
        return self._update(current, changes.as_values(), snapshot, changes.bump_version)

    def replace_file(
        self,
        current: ResumeRecord,
        file_url: str,
        snapshot: ResumeHistoryRecord,
    ) -> ResumeRecord:
        return self._update(current, {"file_url": file_url}, snapshot, bump_version=True)

    def soft_delete(self, resume_id: str, user_id: str) -> None:
        self.gateway.execute(
            SOFT_DELETE_RESUME,
            {"resumeId": resume_id, "userId": user_id, "updatedAt": _now()},
        )

    def list_history(self, resume_id: str, user_id: str, limit: int, offset: int) -> HistoryPage:
        data = self.gateway.execute(
            GET_RESUME_HISTORY,
            {"resumeId": resume_id, "userId": user_id, "limit": limit, "offset": offset},
        )
        items = [ResumeHistoryRecord.model_validate(h) for h in data.get("resume_history") or []]
        total = data["resume_history_aggregate"]["aggregate"]["count"]
        return HistoryPage(items=items, total=total)


class GraphQLQuestionRepository(QuestionRepository):

    def __init__(self, gateway: GraphQLGateway):
        self.gateway = gateway

    def list_questions(self, user_id: str, filters: QuestionFilters) -> list[QuestionRecord]:
        where: dict[str, Any] = {"user_id": {"_eq": user_id}}
        if filters.category is not None:
            where["category"] = {"_eq": filters.category}
        if filters.is_bookmarked is not None:
            where["is_bookmarked"] = {"_eq": filters.is_bookmarked}
        if filters.resume_id is not None:
            where["resume_id"] = {"_eq": filters.resume_id}
        data = self.gateway.execute(GET_QUESTIONS, {"where": where})
        return [QuestionRecord.model_validate(q) for q in data.get("interview_questions") or []]

    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        data = self.gateway.execute(GET_QUESTION_BY_ID, {"questionId": question_id})
        row = data.get("interview_questions_by_pk")
        return QuestionRecord.model_validate(row) if row else None

    def insert_questions(self, questions: list[NewQuestion]) -> int:
        if not questions:
            return 0
        objects = [{**q.model_dump(), "is_bookmarked": False} for q in questions]
        data = self.gateway.execute(INSERT_QUESTIONS, {"objects": objects})
        return data["insert_interview_questions"]["affected_rows"]

    def set_bookmark(self, question_id: str, user_id: str, is_bookmarked: bool) -> bool:
        data = self.gateway.execute(
            SET_QUESTION_BOOKMARK,
            {"questionId": question_id, "userId": user_id, "isBookmarked": is_bookmarked},
        )
        return data["update_interview_questions"]["affected_rows"] > 0

    def delete_question(self, question_id: str, user_id: str) -> bool:
        data = self.gateway.execute(DELETE_QUESTION, {"questionId": question_id, "userId": user_id})
        return data["delete_interview_questions"]["affected_rows"] > 0
