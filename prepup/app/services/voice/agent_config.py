"""
Realtime interview agent configuration.

Builds the instructions and voice settings handed to the OpenAI Realtime API for a
mock interview. Turn-taking, audio transport and inference all happen inside the
realtime service; this module only shapes its configuration.
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from prepup.app.core.config import settings

MAX_SILENCE_DURATION_MS = 10000
MIN_INSTRUCTIONS_LENGTH = 100
FOLLOW_UP_COUNT = 3


class TurnDetection(BaseModel):
    type: Literal["server_vad"] = "server_vad"
    threshold: float = 0.5
    silence_duration_ms: int = MAX_SILENCE_DURATION_MS
    prefix_padding_ms: Optional[int] = 300


class VoiceConfig(BaseModel):
    model: str
    voice: Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"] = "alloy"
    input_audio_format: Literal["pcm16", "g711_ulaw", "g711_alaw"] = "pcm16"
    output_audio_format: Literal["pcm16", "g711_ulaw", "g711_alaw"] = "pcm16"
    turn_detection: TurnDetection = Field(default_factory=TurnDetection)


class InterviewQuestion(BaseModel):
    id: Optional[str] = None
    text: str = Field(min_length=1)
    category: str = "behavioral"
    difficulty: Optional[str] = None
    suggested_answer: Optional[str] = None
    tips: Optional[str] = None


class ResumeAnalysis(BaseModel):
    """Subset of a resume's ai_feedback used to ground the interview."""
    summary: str = "Candidate with relevant experience"
    score: Optional[int] = None
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)


class InterviewStructure(BaseModel):
    introduction: str
    main_question: str
    follow_up_count: int = FOLLOW_UP_COUNT
    conclusion: str


class AgentInstructions(BaseModel):
    role: str
    objective: str
    interview_structure: InterviewStructure
    resume_context: ResumeAnalysis
    guidelines: list[str]
    constraints: list[str]
    # interviewer-only notes; never read out to the candidate
    question_notes: list[str] = Field(default_factory=list)


class AgentConfig(BaseModel):
    instructions: str
    voice_config: VoiceConfig
    metadata: dict[str, Any] = Field(default_factory=dict)


class AgentConfigError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid agent configuration: " + "; ".join(errors))


def default_voice_config() -> VoiceConfig:
    return VoiceConfig(model=settings.openai_realtime_model)


GUIDELINES = [
    "Listen actively to the candidate's responses before asking follow-up questions",
    "Reference specific details from their resume when relevant",
    "Ask for concrete examples and outcomes behind each claim",
    "Validate claims made in the resume through behavioral questions",
    "Maintain a professional, encouraging, and respectful tone",
    "Keep the interview focused and structured (10-15 minutes total)",
    "If the candidate asks for a hint, use the provideHint tool to offer guidance",
    "When the candidate finishes answering a follow-up question, you may use saveInterviewAnswer tool",
    f"After completing all {FOLLOW_UP_COUNT} follow-up questions, mention time to wrap up",
]

CONSTRAINTS = [
    "Do NOT ask inappropriate or personal questions unrelated to professional skills",
    "Do NOT make assumptions about the candidate's abilities without evidence",
    "Do NOT interrupt the candidate while they're speaking",
    "Do NOT exceed 15 minutes total interview time",
    f"Do NOT ask more than {FOLLOW_UP_COUNT} follow-up questions",
    "Do NOT provide answers or coach the candidate (except when hint tool is called)",
    "Stay professional and maintain interview boundaries",
]


def build_agent_instructions(question: InterviewQuestion, analysis: ResumeAnalysis) -> AgentInstructions:
    difficulty = f", {question.difficulty} difficulty" if question.difficulty else ""
    notes = []
    if question.tips:
        notes.append(f"Tips for a strong answer: {question.tips}")
    if question.suggested_answer:
        notes.append(f"Reference answer to compare against: {question.suggested_answer}")
    return AgentInstructions(
        role="Professional Interview Coach",
        objective=f'Conduct a structured behavioral interview for the question: "{question.text}"',
        interview_structure=InterviewStructure(
            introduction=(
                "Start with a brief 10-15 second introduction. "
                f'Mention you\'ll be asking about "{question.text}" ({question.category} category{difficulty}).'
            ),
            main_question=(
                f'Ask the main question clearly: "{question.text}". '
                "Give the candidate time to think and respond fully."
            ),
            conclusion=(
                f"After exactly {FOLLOW_UP_COUNT} follow-up questions, provide a brief professional "
                "conclusion and thank the candidate."
            ),
        ),
        resume_context=analysis,
        guidelines=list(GUIDELINES),
        constraints=list(CONSTRAINTS),
        question_notes=notes,
    )


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def format_instructions(instructions: AgentInstructions) -> str:
    """Render structured instructions as the prompt text the realtime agent receives."""
    structure = instructions.interview_structure
    context = instructions.resume_context

    sections = [
        f"# Role\nYou are a {instructions.role}.",
        f"# Objective\n{instructions.objective}",
        "# Interview Structure\n\n"
        f"## Introduction (10-15 seconds)\n{structure.introduction}\n\n"
        f"## Main Question\n{structure.main_question}\n\n"
        "## Follow-up Questions\n"
        f"- Ask exactly {structure.follow_up_count} follow-up questions based on the candidate's response\n"
        "- Each follow-up should dig deeper into specific examples, outcomes, and learnings\n"
        "- Space out your questions naturally, allowing the candidate time to think and respond\n\n"
        f"## Conclusion\n{structure.conclusion}",
    ]

    resume_lines = ["# Resume Context", "The candidate's resume shows:", f"- Summary: {context.summary}"]
    if context.strengths:
        resume_lines.append("- Key Strengths:")
        resume_lines.extend(f"  * {s}" for s in context.strengths)
    if context.improvements:
        resume_lines.append("- Areas to Explore:")
        resume_lines.extend(f"  * {s}" for s in context.improvements)
    sections.append("\n".join(resume_lines))

    if instructions.question_notes:
        sections.append(
            "# Question Notes (do not read aloud)\n" + "\n".join(f"- {n}" for n in instructions.question_notes)
        )

    sections.append(f"# Guidelines\n{_numbered(instructions.guidelines)}")
    sections.append(f"# Constraints (IMPORTANT - Must Follow)\n{_numbered(instructions.constraints)}")
    sections.append(
        "# Tools Available\n"
        "You have access to the following tools:\n"
        "- **provideHint**: Use when candidate explicitly asks for a hint or guidance\n"
        "- **saveInterviewAnswer**: Use after candidate completes answering a follow-up question\n"
        "- **endInterview**: Use when all questions are answered and interview is complete (requires approval)"
    )
    sections.append(
        "Remember: You are conducting a professional interview. Be respectful, attentive, "
        "and focused on gathering insights about the candidate's experience and skills."
    )
    return "\n\n".join(sections)


def create_agent_config(
    question: InterviewQuestion,
    resume_id: str,
    resume_title: str,
    analysis: ResumeAnalysis,
    voice_overrides: dict[str, Any] | None = None,
    instruction_overrides: dict[str, Any] | None = None,
) -> AgentConfig:
    instructions = build_agent_instructions(question, analysis)
    if instruction_overrides:
        instructions = instructions.model_copy(update=instruction_overrides)

    voice_config = default_voice_config()
    if voice_overrides:
        voice_config = VoiceConfig.model_validate({**voice_config.model_dump(), **voice_overrides})

    return AgentConfig(
        instructions=format_instructions(instructions),
        voice_config=voice_config,
        metadata={
            "questionId": question.id,
            "questionText": question.text,
            "questionCategory": question.category,
            "questionDifficulty": question.difficulty,
            "resumeId": resume_id,
            "resumeTitle": resume_title,
        },
    )


def validate_agent_config(config: AgentConfig) -> list[str]:
    """Return a list of problems; empty when the config is usable."""
    errors = []
    if len(config.instructions.strip()) < MIN_INSTRUCTIONS_LENGTH:
        errors.append(f"Instructions must be at least {MIN_INSTRUCTIONS_LENGTH} characters")
    if not config.voice_config.model:
        errors.append("Voice config must specify a model")
    if not config.voice_config.voice:
        errors.append("Voice config must specify a voice")
    turn = config.voice_config.turn_detection
    if not 0 <= turn.threshold <= 1:
        errors.append("Turn detection threshold must be between 0 and 1")
    if turn.silence_duration_ms > MAX_SILENCE_DURATION_MS:
        errors.append(f"Silence duration cannot exceed {MAX_SILENCE_DURATION_MS}ms")
    return errors


def create_validated_agent_config(**kwargs) -> AgentConfig:
    config = create_agent_config(**kwargs)
    errors = validate_agent_config(config)
    if errors:
        raise AgentConfigError(errors)
    return config
