"""
Tool schemas the realtime interview agent may call.
Execution happens client-side; the server only advertises the definitions.
"""
from pydantic import BaseModel


class ToolDefinition(BaseModel):
    name: str
    description: str
    parameters: dict
    needs_approval: bool = False

    def to_realtime(self) -> dict:
        """Shape expected in a realtime session's `tools` list."""
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


INTERVIEW_TOOLS: list[ToolDefinition] = [
    ToolDefinition(
        name="getResumeDetails",
        description=(
            "Fetch additional details from the candidate's resume when you need more context "
            "about their experience, skills, or background."
        ),
        parameters={
            "type": "object",
            "properties": {
                "section": {
                    "type": "string",
                    "enum": ["summary", "strengths", "improvements", "full_analysis"],
                    "description": "Which section of the resume analysis to retrieve",
                },
            },
            "required": ["section"],
        },
    ),
    ToolDefinition(
        name="provideHint",
        description=(
            "Provide a helpful hint when the candidate explicitly asks for guidance. "
            "Offer direction without giving away the complete answer."
        ),
        parameters={
            "type": "object",
            "properties": {
                "hintType": {
                    "type": "string",
                    "enum": ["structure", "example", "framework", "general"],
                    "description": "Type of hint to provide",
                },
                "context": {
                    "type": "string",
                    "description": "Brief context about what the candidate is struggling with",
                },
            },
            "required": ["hintType", "context"],
        },
    ),
    ToolDefinition(
        name="saveInterviewAnswer",
        description="Save the candidate's answer after they finish responding to a follow-up question.",
        parameters={
            "type": "object",
            "properties": {
                "questionNumber": {"type": "number", "description": "Which follow-up question this answers (1, 2, or 3)"},
                "questionText": {"type": "string", "description": "The exact follow-up question you asked"},
                "answerSummary": {"type": "string", "description": "A brief summary of the answer (2-3 sentences)"},
                "keyPoints": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Key points or insights from the response",
                },
            },
            "required": ["questionNumber", "questionText", "answerSummary", "keyPoints"],
        },
    ),
    ToolDefinition(
        name="endInterview",
        description=(
            "Mark the interview as complete and generate final feedback. Use only after all "
            "follow-up questions have been asked and the conclusion given."
        ),
        parameters={
            "type": "object",
            "properties": {
                "overallPerformance": {
                    "type": "string",
                    "enum": ["excellent", "good", "satisfactory", "needs_improvement"],
                },
                "keyStrengths": {"type": "array", "items": {"type": "string"}},
                "areasToImprove": {"type": "array", "items": {"type": "string"}},
                "completionStatus": {"type": "string", "enum": ["completed", "partial"]},
            },
            "required": ["overallPerformance", "keyStrengths", "areasToImprove", "completionStatus"],
        },
        needs_approval=True,
    ),
]
