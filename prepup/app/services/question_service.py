"""
Interview questions - listing, stats, bookmarks and LLM generation from an analysed resume.
"""
import json
import uuid
from typing import Optional

import openai
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from prepup.app.core.config import (
    ANALYSIS_MAX_INPUT_CHARS,
    QUESTION_CATEGORIES,
    QUESTION_DIFFICULTIES,
    settings,
)
from prepup.app.core.exceptions import NotFoundError, OwnershipError, UpstreamError, ValidationError
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.question import (
    GenerateQuestionsIn,
    NewQuestion,
    QuestionFilters,
    QuestionRecord,
    QuestionStats,
)
from prepup.app.schemas.user import Identity
from prepup.app.services.openai_client import get_openai_client
from prepup.app.services.resume_service import get_owned_resume

logger = get_logger("services.questions")

GENERATION_SYSTEM_PROMPT = "You are an expert technical interviewer. You output only valid JSON."

GENERATION_PROMPT = """Generate {count} interview questions tailored to this candidate.

Resume Content:
\"\"\"
{resume_text}
\"\"\"

Categories: {categories}
Difficulties: {difficulties}

Return JSON only:
{{"questions": [{{"questionText": "...", "category": "...", "difficulty": "...",
  "suggestedAnswer": "...", "tips": "...", "tags": ["..."]}}]}}
"""


class GeneratedQuestion(BaseModel):
    questionText: str = Field(min_length=1)
    category: Optional[str] = None
    difficulty: Optional[str] = None
    suggestedAnswer: Optional[str] = None
    tips: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class GeneratedQuestions(BaseModel):
    questions: list[GeneratedQuestion] = Field(default_factory=list)


def parse_filters(
    category: Optional[str],
    bookmarked: Optional[str],
    resume_id: Optional[str],
) -> QuestionFilters:
    """Query-string filters. Unknown categories and non-boolean bookmark values are ignored."""
    return QuestionFilters(
        category=category if category in QUESTION_CATEGORIES else None,
        is_bookmarked={"true": True, "false": False}.get(bookmarked or ""),
        resume_id=resume_id or None,
    )


def list_questions(repo: QuestionRepository, identity: Identity, filters: QuestionFilters) -> list[QuestionRecord]:
    return repo.list_questions(identity.user_id, filters)


def question_stats(repo: QuestionRepository, identity: Identity) -> QuestionStats:
    questions = repo.list_questions(identity.user_id, QuestionFilters())
    by_category = {c: 0 for c in QUESTION_CATEGORIES}
    for q in questions:
        if q.category in by_category:
            by_category[q.category] += 1
    return QuestionStats(
        total=len(questions),
        bookmarked=sum(1 for q in questions if q.is_bookmarked),
        byCategory=by_category,
    )


def get_owned_question(repo: QuestionRepository, identity: Identity, question_id: str) -> QuestionRecord:
    """A missing question is 404; another user's question is 403."""
    question = repo.get_question(question_id)
    if question is None:
        raise NotFoundError("Question not found")
    if question.user_id != identity.user_id:
        raise OwnershipError("Forbidden")
    return question


def toggle_bookmark(repo: QuestionRepository, identity: Identity, question_id: str) -> bool:
    question = get_owned_question(repo, identity, question_id)
    new_value = not question.is_bookmarked
    if not repo.set_bookmark(question_id, identity.user_id, new_value):
        raise NotFoundError("Question not found")
    return new_value


def delete_question(repo: QuestionRepository, identity: Identity, question_id: str) -> None:
    get_owned_question(repo, identity, question_id)
    if not repo.delete_question(question_id, identity.user_id):
        raise NotFoundError("Question not found")
    logger.info("Question deleted user_id=%s question_id=%s", identity.user_id, question_id)


def _request_questions(resume_text: str, count: int) -> GeneratedQuestions:
    client = get_openai_client()
    prompt = GENERATION_PROMPT.format(
        count=count,
        resume_text=resume_text[:ANALYSIS_MAX_INPUT_CHARS],
        categories=", ".join(QUESTION_CATEGORIES),
        difficulties=", ".join(QUESTION_DIFFICULTIES),
    )
    try:
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": GENERATION_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.7,
        )
        content = response.choices[0].message.content or ""
        return GeneratedQuestions.model_validate(json.loads(content))
    except openai.APIError as e:
        logger.error("Question generation request failed error=%s", e)
        raise UpstreamError("Failed to generate questions") from e
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.error("Question generation response unreadable error=%s", e)
        raise UpstreamError("Failed to generate questions") from e


def generate_questions(
    resume_repo: ResumeRepository,
    question_repo: QuestionRepository,
    identity: Identity,
    body: GenerateQuestionsIn,
) -> list[QuestionRecord]:
    resume = get_owned_resume(resume_repo, identity, body.resume_id)
    if not (resume.content or "").strip():
        raise ValidationError("Resume content is required to generate questions")

    generated = _request_questions(resume.content, body.count).questions[: body.count]
    new = [
        NewQuestion(
            question_id=str(uuid.uuid4()),
            resume_id=resume.resume_id,
            user_id=identity.user_id,
            question_text=g.questionText,
            category=g.category if g.category in QUESTION_CATEGORIES else None,
            difficulty=g.difficulty if g.difficulty in QUESTION_DIFFICULTIES else None,
            suggested_answer=g.suggestedAnswer,
            tips=g.tips,
            tags=json.dumps(g.tags) if g.tags else None,
        )
        for g in generated
    ]
    if not new:
        raise UpstreamError("Failed to generate questions")
    created = question_repo.insert_questions(new)
    logger.info(
        "Questions generated user_id=%s resume_id=%s count=%d",
        identity.user_id,
        resume.resume_id,
        created,
    )
    return _created_questions(question_repo, identity, [q.question_id for q in new])


def _created_questions(repo: QuestionRepository, identity: Identity, question_ids: list[str]) -> list[QuestionRecord]:
    wanted = set(question_ids)
    return [q for q in repo.list_questions(identity.user_id, QuestionFilters()) if q.question_id in wanted]
