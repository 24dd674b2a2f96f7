"""
Mock-interview voice session: builds the agent config for a stored question and an
owned, analysed resume, then mints an ephemeral OpenAI Realtime session the browser
connects with.
"""
import json
from typing import Optional

import openai
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from prepup.app.core.exceptions import UpstreamError, ValidationError
from prepup.app.core.logging_config import get_logger
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.question import QuestionRecord
from prepup.app.schemas.resume import ResumeRecord
from prepup.app.schemas.user import Identity
from prepup.app.services.openai_client import get_openai_client
from prepup.app.services.question_service import get_owned_question
from prepup.app.services.resume_service import get_owned_resume
from prepup.app.services.voice.agent_config import (
    AgentConfig,
    InterviewQuestion,
    ResumeAnalysis,
    create_validated_agent_config,
)
from prepup.app.services.voice.tools import INTERVIEW_TOOLS

logger = get_logger("services.voice")


class VoiceSessionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId", min_length=1)
    # defaults to the resume the question was generated from
    resume_id: Optional[str] = Field(default=None, alias="resumeId")


def parse_analysis(resume: ResumeRecord) -> ResumeAnalysis:
    """ai_feedback is stored as JSON text; a resume without it cannot ground an interview."""
    if not resume.ai_feedback:
        raise ValidationError("Resume analysis not available")
    try:
        return ResumeAnalysis.model_validate(json.loads(resume.ai_feedback))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning("Unreadable ai_feedback resume_id=%s error=%s", resume.resume_id, e)
        raise ValidationError("Resume analysis not available") from e


def interview_question(record: QuestionRecord) -> InterviewQuestion:
    return InterviewQuestion(
        id=record.question_id,
        text=record.question_text,
        category=record.category or "general",
        difficulty=record.difficulty,
        suggested_answer=record.suggested_answer,
        tips=record.tips,
    )


def realtime_session_params(config: AgentConfig) -> dict:
    voice = config.voice_config
    turn = voice.turn_detection
    return {
        "model": voice.model,
        "voice": voice.voice,
        "instructions": config.instructions,
        "modalities": ["text", "audio"],
        "input_audio_format": voice.input_audio_format,
        "output_audio_format": voice.output_audio_format,
        "turn_detection": {
            "type": turn.type,
            "threshold": turn.threshold,
            "silence_duration_ms": turn.silence_duration_ms,
            "prefix_padding_ms": turn.prefix_padding_ms,
        },
        "tools": [t.to_realtime() for t in INTERVIEW_TOOLS],
    }


def create_voice_session(
    resume_repo: ResumeRepository,
    question_repo: QuestionRepository,
    identity: Identity,
    body: VoiceSessionIn,
) -> dict:
    record = get_owned_question(question_repo, identity, body.question_id)
    resume = get_owned_resume(resume_repo, identity, body.resume_id or record.resume_id)
    analysis = parse_analysis(resume)
    question = interview_question(record)

    config = create_validated_agent_config(
        question=question,
        resume_id=resume.resume_id,
        resume_title=resume.title,
        analysis=analysis,
    )

    client = get_openai_client()
    try:
        session = client.beta.realtime.sessions.create(**realtime_session_params(config))
    except openai.APIError as e:
        logger.error("Realtime session request failed user_id=%s error=%s", identity.user_id, e)
        raise UpstreamError("Failed to create OpenAI session") from e

    session_id = getattr(session, "id", None)
    logger.info(
        "Voice session created user_id=%s resume_id=%s question_id=%s session_id=%s",
        identity.user_id,
        resume.resume_id,
        record.question_id,
        session_id,
    )
    return {
        "client_secret": session.client_secret.value,
        "session_id": session_id,
        "expires_at": session.client_secret.expires_at,
        "question": question.model_dump(),
        "resume": {"id": resume.resume_id, "title": resume.title},
        "tools": [t.model_dump() for t in INTERVIEW_TOOLS],
        "voice_config": config.voice_config.model_dump(),
    }
