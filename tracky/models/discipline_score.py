from sqlalchemy import Column, String, Date, DateTime, Integer, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func
from tracky.database import Base
import uuid


class DisciplineScore(Base):
    """
    Memoized composite score for a user-day.

    Derived from the day's habit, workout and learning facts; written only by
    crud.discipline.write_facts_and_rescore, in the same transaction as the
    fact change.
    """
    __tablename__ = "discipline_scores"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)

    habits_score = Column(Integer, nullable=False, default=0)
    fitness_score = Column(Integer, nullable=False, default=0)
    learning_score = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)

    computed_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_discipline_scores_user_date"),
        CheckConstraint("total_score >= 0 AND total_score <= 100", name="ck_discipline_scores_total_range"),
    )

    def __repr__(self) -> str:
        return f"<DisciplineScore user_id={self.user_id} date={self.date} total={self.total_score}>"
