"""
Metadata repository interface.

Two implementations exist: SqlAlchemyResumeRepository (direct ORM access) and
GraphQLResumeRepository (through the GraphQL gateway). Services only talk to this
interface, so both deployment targets share one code path.
"""
from abc import ABC, abstractmethod
from typing import Optional

from prepup.app.schemas.question import NewQuestion, QuestionFilters, QuestionRecord
from prepup.app.schemas.resume import (
    HistoryPage,
    NewResume,
    ResumeChanges,
    ResumeHistoryRecord,
    ResumeRecord,
)


class ResumeRepository(ABC):

    @abstractmethod
    def ensure_user(self, user_id: str, email: Optional[str] = None) -> None:
        """Create the user row if absent. Safe to call concurrently and repeatedly."""

    @abstractmethod
    def get_resume(self, resume_id: str, user_id: str) -> Optional[ResumeRecord]:
        """Resume with this id owned by user_id, or None (missing and foreign look the same)."""

    @abstractmethod
    def list_resumes(self, user_id: str) -> list[ResumeRecord]:
        """Active resumes of user_id, newest first."""

    @abstractmethod
    def insert_resume(self, new: NewResume) -> ResumeRecord:
        ...

    @abstractmethod
    def update_resume(
        self,
        current: ResumeRecord,
        changes: ResumeChanges,
        snapshot: Optional[ResumeHistoryRecord] = None,
    ) -> ResumeRecord:
        """
        Apply `changes` to `current`. When `snapshot` is given it is written first,
        in the same transaction as the update.
        """

    @abstractmethod
    def replace_file(
        self,
        current: ResumeRecord,
        file_url: str,
        snapshot: ResumeHistoryRecord,
    ) -> ResumeRecord:
        """Write `snapshot`, then point the resume at `file_url` with version + 1, atomically."""

    @abstractmethod
    def soft_delete(self, resume_id: str, user_id: str) -> None:
        ...

    @abstractmethod
    def list_history(self, resume_id: str, user_id: str, limit: int, offset: int) -> HistoryPage:
        """History rows for a resume, newest first, plus the total count."""


class QuestionRepository(ABC):
    """Stored interview questions. Implemented by the same two backends as ResumeRepository."""

    @abstractmethod
    def list_questions(self, user_id: str, filters: QuestionFilters) -> list[QuestionRecord]:
        """Questions of user_id matching `filters`, newest first."""

    @abstractmethod
    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        """Question by id regardless of owner; callers check ownership."""

    @abstractmethod
    def insert_questions(self, questions: list[NewQuestion]) -> int:
        ...

    @abstractmethod
    def set_bookmark(self, question_id: str, user_id: str, is_bookmarked: bool) -> bool:
        """Returns False when no owned question matched."""

    @abstractmethod
    def delete_question(self, question_id: str, user_id: str) -> bool:
        ...
