"""
Shared OpenAI client for analysis, question generation and realtime sessions.
"""
from openai import OpenAI

from prepup.app.core.config import settings
from prepup.app.core.exceptions import AppError

_OPENAI_CLIENT: OpenAI | None = None


def get_openai_client() -> OpenAI:
    """Lazily built client. Raises AppError (500) when no API key is configured."""
    global _OPENAI_CLIENT
    if not settings.openai_api_key:
        raise AppError("OpenAI API key not configured")
    if _OPENAI_CLIENT is None:
        _OPENAI_CLIENT = OpenAI(api_key=settings.openai_api_key, timeout=settings.http_request_timeout)
    return _OPENAI_CLIENT
