"""
Application configuration settings.
Loads from .env file first (overrides shell env for local dev), then pydantic reads from environment.
Production: set env vars in the platform (Workers, Docker, K8s, etc.); .env is optional.

All backend-related configs and constants are centralized here.
"""
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env path: prepup/.env (absolute path, works regardless of cwd)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = (_BASE_DIR / ".env").resolve()

# override=True so .env values win over stale shell env (e.g. AWS keys from another profile).
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=True)


class Settings(BaseSettings):
    """Application settings. Source: env vars (after dotenv load)."""

    # App
    app_name: str = "PrepUp"
    app_version: str = "1.0.0"
    port: int = 8001

    # Metadata store: "orm" talks to database_url directly, "graphql" goes through the gateway
    metadata_backend: Literal["orm", "graphql"] = "orm"
    database_url: str = "sqlite:///./prepup.db"
    graphql_endpoint: str = "http://localhost:8080/v1/graphql"
    graphql_admin_secret: str = ""
    graphql_timeout: int = 30

    # Identity provider JWT verification
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    identity_audience: str = ""
    access_token_expire_minutes: int = 60

    # Object storage (S3 API; set s3_endpoint_url for R2)
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "auto"
    aws_bucket_name: str = "prepup-files"
    s3_endpoint_url: str = ""
    s3_key_prefix: str = "resumes"
    s3_presigned_url_expiration: int = 3600
    s3_presigned_url_max_expiration: int = 604800
    s3_upload_url_expiration: int = 3600
    download_url_expiration: int = 300

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024

    # OpenAI (resume analysis, question generation, realtime sessions)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_realtime_model: str = "gpt-4o-realtime-preview-2024-12-17"
    http_request_timeout: int = 30

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


# --- Constants (non-env, business config) ---

ALLOWED_RESUME_MIME_TYPES: tuple[str, ...] = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

DEFAULT_FILENAME_STEM: str = "resume"
DEFAULT_FILENAME_EXTENSION: str = ".pdf"
UNTITLED_RESUME: str = "Untitled Resume"

# Resume history pagination
HISTORY_DEFAULT_LIMIT: int = 50
HISTORY_MAX_LIMIT: int = 200

# Object listing
LIST_FILES_DEFAULT_LIMIT: int = 100
LIST_FILES_MAX_LIMIT: int = 1000

# Interview questions
QUESTION_CATEGORIES: tuple[str, ...] = (
    "behavioral",
    "technical",
    "system_design",
    "leadership",
    "problem_solving",
    "company_specific",
)
QUESTION_DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")

# Resume analysis
ANALYSIS_MAX_INPUT_CHARS: int = 12000
ANALYSIS_DEFAULT_SCORE: int = 70
