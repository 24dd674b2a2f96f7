"""
ORM-backed metadata repository (local and single-node deployments).
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from prepup.app.core.logging_config import get_logger
from prepup.app.models.question import Question
from prepup.app.models.resume import Resume, ResumeHistory
from prepup.app.models.user import User
from prepup.app.repositories.base import QuestionRepository, ResumeRepository
from prepup.app.schemas.question import NewQuestion, QuestionFilters, QuestionRecord
from prepup.app.schemas.resume import (
    HistoryPage,
    NewResume,
    ResumeChanges,
    ResumeHistoryRecord,
    ResumeRecord,
)

logger = get_logger("repositories.orm")

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class SqlAlchemyResumeRepository(ResumeRepository):

    def __init__(self, db: Session):
        self.db = db

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"ensure_user has no upsert for dialect {dialect}")
        now = datetime.utcnow()
        stmt = (
            insert(User)
            .values(user_id=user_id, email=email, language_preference="en", created_at=now, updated_at=now)
            .on_conflict_do_nothing(index_elements=[User.user_id])
        )
        self.db.execute(stmt)
        self.db.commit()

    def _get_row(self, resume_id: str, user_id: str) -> Resume | None:
        return (
            self.db.query(Resume)
            .filter(Resume.resume_id == resume_id, Resume.user_id == user_id)
            .first()
        )

    def get_resume(self, resume_id: str, user_id: str) -> Optional[ResumeRecord]:
        row = self._get_row(resume_id, user_id)
        return ResumeRecord.model_validate(row) if row else None

    def list_resumes(self, user_id: str) -> list[ResumeRecord]:
        rows = (
            self.db.query(Resume)
            .filter(Resume.user_id == user_id, Resume.is_active.is_(True))
            .order_by(Resume.created_at.desc())
            .all()
        )
        return [ResumeRecord.model_validate(r) for r in rows]

    def insert_resume(self, new: NewResume) -> ResumeRecord:
        row = Resume(**new.model_dump(), version=1, is_active=True)
        self.db.add(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return ResumeRecord.model_validate(row)

    def _add_snapshot(self, snapshot: ResumeHistoryRecord) -> None:
        self.db.add(ResumeHistory(**snapshot.model_dump(exclude={"created_at"})))
        # flush so the history INSERT is issued before the resume UPDATE
        self.db.flush()

    def _update(
        self,
        current: ResumeRecord,
        values: dict,
        snapshot: ResumeHistoryRecord | None,
        bump_version: bool,
    ) -> ResumeRecord:
        row = self._get_row(current.resume_id, current.user_id)
        if row is None:
            raise LookupError(f"resume {current.resume_id} disappeared during update")
        try:
            if snapshot is not None:
                self._add_snapshot(snapshot)
            for field, value in values.items():
                setattr(row, field, value)
            if bump_version:
                row.version = Resume.version + 1
            row.updated_at = datetime.utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return ResumeRecord.model_validate(row)

    def update_resume(
        self,
        current: ResumeRecord,
        changes: ResumeChanges,
        snapshot: Optional[ResumeHistoryRecord] = None,
    ) -> ResumeRecord:
        return self._update(current, changes.as_values(), snapshot, changes.bump_version)

    def replace_file(
        self,
        current: ResumeRecord,
        file_url: str,
        snapshot: ResumeHistoryRecord,
    ) -> ResumeRecord:
        return self._update(current, {"file_url": file_url}, snapshot, bump_version=True)

    def soft_delete(self, resume_id: str, user_id: str) -> None:
        row = self._get_row(resume_id, user_id)
        if row is None:
            return
        row.is_active = False
        row.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info("Resume soft-deleted resume_id=%s user_id=%s", resume_id, user_id)

    def list_history(self, resume_id: str, user_id: str, limit: int, offset: int) -> HistoryPage:
        base = self.db.query(ResumeHistory).filter(
            ResumeHistory.resume_id == resume_id,
            ResumeHistory.user_id == user_id,
        )
        total = base.with_entities(func.count(ResumeHistory.history_id)).scalar() or 0
        rows = (
            base.order_by(ResumeHistory.created_at.desc(), ResumeHistory.version.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return HistoryPage(items=[ResumeHistoryRecord.model_validate(r) for r in rows], total=total)


class SqlAlchemyQuestionRepository(QuestionRepository):

    def __init__(self, db: Session):
        self.db = db

    def list_questions(self, user_id: str, filters: QuestionFilters) -> list[QuestionRecord]:
        query = self.db.query(Question).filter(Question.user_id == user_id)
        if filters.category is not None:
            query = query.filter(Question.category == filters.category)
        if filters.is_bookmarked is not None:
            query = query.filter(Question.is_bookmarked.is_(filters.is_bookmarked))
        if filters.resume_id is not None:
            query = query.filter(Question.resume_id == filters.resume_id)
        rows = query.order_by(Question.created_at.desc()).all()
        return [QuestionRecord.model_validate(r) for r in rows]

    def get_question(self, question_id: str) -> Optional[QuestionRecord]:
        row = self.db.query(Question).filter(Question.question_id == question_id).first()
        return QuestionRecord.model_validate(row) if row else None

    def insert_questions(self, questions: list[NewQuestion]) -> int:
        if not questions:
            return 0
        self.db.add_all([Question(**q.model_dump(), is_bookmarked=False) for q in questions])
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return len(questions)

    def set_bookmark(self, question_id: str, user_id: str, is_bookmarked: bool) -> bool:
        updated = (
            self.db.query(Question)
            .filter(Question.question_id == question_id, Question.user_id == user_id)
            .update({Question.is_bookmarked: is_bookmarked}, synchronize_session=False)
        )
        self.db.commit()
        return updated > 0

    def delete_question(self, question_id: str, user_id: str) -> bool:
        deleted = (
            self.db.query(Question)
            .filter(Question.question_id == question_id, Question.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0
