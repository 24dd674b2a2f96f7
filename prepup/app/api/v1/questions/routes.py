"""
Interview question endpoints - list/filter, stats, generation, bookmarks, delete
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from prepup.app.core.dependencies import (
    get_current_identity,
    get_question_repository,
    get_resume_repository,
)
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.question import GenerateQuestionsIn
from prepup.app.schemas.user import Identity
from prepup.app.services import question_service

router = APIRouter()


@router.get("")
def list_questions(
    category: Optional[str] = Query(None),
    bookmarked: Optional[str] = Query(None),
    resume_id: Optional[str] = Query(None, alias="resumeId"),
    stats: Optional[str] = Query(None),
    repo: QuestionRepository = Depends(get_question_repository),
    identity: Identity = Depends(get_current_identity),
):
    """
    The caller's questions, newest first.

    - **category**, **bookmarked** (true/false), **resumeId**: optional filters
    - **stats=true**: return counts instead of the list
    """
    if stats == "true":
        return {"stats": question_service.question_stats(repo, identity).model_dump()}
    filters = question_service.parse_filters(category, bookmarked, resume_id)
    questions = question_service.list_questions(repo, identity, filters)
    return {"questions": [q.model_dump(mode="json") for q in questions]}


@router.post("/generate", status_code=status.HTTP_201_CREATED)
def generate_questions(
    payload: GenerateQuestionsIn,
    resume_repo: ResumeRepository = Depends(get_resume_repository),
    question_repo: QuestionRepository = Depends(get_question_repository),
    identity: Identity = Depends(get_current_identity),
):
    questions = question_service.generate_questions(resume_repo, question_repo, identity, payload)
    return {
        "success": True,
        "questionsCreated": len(questions),
        "questions": [q.model_dump(mode="json") for q in questions],
    }


@router.patch("/{question_id}/bookmark")
def toggle_bookmark(
    question_id: str,
    repo: QuestionRepository = Depends(get_question_repository),
    identity: Identity = Depends(get_current_identity),
):
    is_bookmarked = question_service.toggle_bookmark(repo, identity, question_id)
    return {"success": True, "isBookmarked": is_bookmarked}


@router.delete("/{question_id}")
def delete_question(
    question_id: str,
    repo: QuestionRepository = Depends(get_question_repository),
    identity: Identity = Depends(get_current_identity),
):
    question_service.delete_question(repo, identity, question_id)
    return {"success": True}
