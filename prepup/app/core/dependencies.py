"""
Dependency injection utilities
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from prepup.app.core.config import settings
from prepup.app.core.security import decode_access_token
from prepup.app.db.session import SessionLocal
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.repositories.gateway import (
    GraphQLQuestionRepository,
    GraphQLResumeRepository,
    get_graphql_gateway,
)
from prepup.app.repositories.orm import SqlAlchemyQuestionRepository, SqlAlchemyResumeRepository
from prepup.app.schemas.user import Identity

security = HTTPBearer(auto_error=False)


def get_db() -> Session:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    """Resolve the caller from the identity provider's bearer JWT"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = payload.get("sub")
    # the subject becomes a storage key segment
    if not user_id or not isinstance(user_id, str) or "/" in user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return Identity(user_id=user_id, email=payload.get("email"))


def get_resume_repository(db: Session = Depends(get_db)) -> ResumeRepository:
    """Metadata store for this request, chosen by METADATA_BACKEND"""
    if settings.metadata_backend == "graphql":
        return GraphQLResumeRepository(get_graphql_gateway())
    return SqlAlchemyResumeRepository(db)


def get_question_repository(db: Session = Depends(get_db)) -> QuestionRepository:
    """Question store for this request, chosen by METADATA_BACKEND"""
    if settings.metadata_backend == "graphql":
        return GraphQLQuestionRepository(get_graphql_gateway())
    return SqlAlchemyQuestionRepository(db)
