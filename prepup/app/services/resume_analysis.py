"""
AI resume analysis - scores a resume and stores the feedback that grounds mock interviews.
"""
import json
import re
from typing import Optional

import openai
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from prepup.app.core.config import (
    ANALYSIS_DEFAULT_SCORE,
    ANALYSIS_MAX_INPUT_CHARS,
    settings,
)
from prepup.app.core.exceptions import UpstreamError, ValidationError
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import ResumeRepository
from prepup.app.schemas.resume import AnalyzeIn, ResumeChanges, ResumeRecord
from prepup.app.schemas.user import Identity
from prepup.app.services.openai_client import get_openai_client
from prepup.app.services.resume_service import get_owned_resume, snapshot_of

logger = get_logger("services.resume_analysis")

ANALYSIS_SYSTEM_PROMPT = "You are an expert resume analyzer and career coach. You output only valid JSON."

ANALYSIS_PROMPT = """Analyze the following resume text.

Resume Content:
\"\"\"
{resume_text}
\"\"\"

Return JSON only:
{{"summary": "2-3 sentence professional summary of the candidate",
  "score": <integer 0-100 based on completeness, impact and clarity>,
  "overall_feedback": "3-4 key points on what is good and what to improve",
  "strengths": ["concrete projects or experiences worth validating in an interview", ...],
  "improvements": ["areas to explore or improve", ...]}}
"""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AnalysisResult(BaseModel):
    summary: str = ""
    score: int = ANALYSIS_DEFAULT_SCORE
    overall_feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return ANALYSIS_DEFAULT_SCORE
        return max(0, min(100, int(v)))


def parse_analysis_response(text: str) -> AnalysisResult:
    """Parse the model's JSON, tolerating code fences or prose around the object."""
    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(cleaned)
        if not match:
            raise ValueError("no JSON object in analysis response")
        payload = json.loads(match.group(0))
    if not isinstance(payload, dict):
        raise ValueError("analysis response is not a JSON object")
    return AnalysisResult.model_validate(payload)


def _run_analysis(resume_text: str) -> AnalysisResult:
    client = get_openai_client()
    try:
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": ANALYSIS_PROMPT.format(resume_text=resume_text[:ANALYSIS_MAX_INPUT_CHARS])},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
        return parse_analysis_response(response.choices[0].message.content or "")
    except openai.APIError as e:
        logger.error("Resume analysis request failed error=%s", e)
        raise UpstreamError("AI analysis failed to process the resume.") from e
    except (ValueError, PydanticValidationError) as e:
        logger.error("Resume analysis response unreadable error=%s", e)
        raise UpstreamError("AI analysis failed to process the resume.") from e


def analyze_resume(
    repo: ResumeRepository,
    identity: Identity,
    resume_id: str,
    body: AnalyzeIn,
) -> tuple[ResumeRecord, AnalysisResult]:
    """
    Analyze the resume text and store score + ai_feedback (JSON) on the resume.

    The analysed text becomes the resume's content. When that changes the content,
    the previous state is snapshotted and the version bumped like any content edit.
    """
    resume = get_owned_resume(repo, identity, resume_id)
    text: Optional[str] = (body.extracted_text or "").strip() or (resume.content or "").strip()
    if not text:
        raise ValidationError("Resume text is required for analysis")

    result = _run_analysis(text)

    changed = text != resume.content
    changes = ResumeChanges(
        content=text,
        ai_feedback=json.dumps(result.model_dump()),
        score=result.score,
        bump_version=changed,
    )
    snapshot = snapshot_of(resume, "AI analysis") if changed else None
    updated = repo.update_resume(resume, changes, snapshot)
    logger.info(
        "Resume analysed user_id=%s resume_id=%s score=%d version=%d",
        identity.user_id,
        resume_id,
        result.score,
        updated.version,
    )
    return updated, result
