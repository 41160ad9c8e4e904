from sqlalchemy import Column, String, Date, DateTime, Integer, Float, Boolean, Text, UniqueConstraint
from sqlalchemy.sql import func
from tracky.database import Base
import uuid


class WorkoutLog(Base):
    """The day's workout. A `rest` type counts as no qualifying workout."""
    __tablename__ = "workout_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    workout_type = Column(String(50), nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    effort = Column(Integer, nullable=True)  # 1-10
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_workout_logs_user_date"),
    )

    def __repr__(self) -> str:
        return f"<WorkoutLog user_id={self.user_id} date={self.date} type={self.workout_type}>"


class LearningLog(Base):
    __tablename__ = "learning_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    leetcode_solved = Column(Integer, nullable=False, default=0)
    pages_read = Column(Integer, nullable=False, default=0)
    study_hours = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_learning_logs_user_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<LearningLog user_id={self.user_id} date={self.date} "
            f"leetcode={self.leetcode_solved} pages={self.pages_read} hours={self.study_hours}>"
        )


class DisciplineCheckin(Base):
    """Morning-routine answers scored by the five-factor formula."""
    __tablename__ = "discipline_checkins"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    woke_up_on_time = Column(Boolean, nullable=False, default=False)
    cold_shower = Column(Boolean, nullable=False, default=False)
    no_phone_first_hour = Column(Boolean, nullable=False, default=False)
    meditated = Column(Boolean, nullable=False, default=False)
    planned_tomorrow = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_discipline_checkins_user_date"),
    )
