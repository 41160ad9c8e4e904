from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, ForeignKey, Index, UniqueConstraint, CheckConstraint, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tracky.database import Base
import uuid


class ChallengeSession(Base):
    """One attempt at a 75 day challenge."""
    __tablename__ = "challenge_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    challenge_type = Column(String(16), nullable=False)  # 75_hard | 75_soft
    start_date = Column(Date, nullable=False)
    current_day = Column(Integer, nullable=False, default=1)
    status = Column(String(16), nullable=False, default="active")  # active | completed | paused
    restart_count = Column(Integer, nullable=False, default=0)
    completed_at = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    logs = relationship("ChallengeDailyLog", back_populates="session", cascade="all, delete-orphan")

    # At most one active session per user
    __table_args__ = (
        Index(
            "uq_challenge_sessions_one_active",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<ChallengeSession id={self.id} user_id={self.user_id} type={self.challenge_type} "
            f"day={self.current_day} status={self.status}>"
        )


class ChallengeDailyLog(Base):
    __tablename__ = "challenge_daily_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String, ForeignKey("challenge_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    day_number = Column(Integer, nullable=False)

    # Task flags
    workout_1_done = Column(Boolean, nullable=False, default=False)
    workout_2_outdoor_done = Column(Boolean, nullable=False, default=False)
    diet_followed = Column(Boolean, nullable=False, default=False)
    water_goal_done = Column(Boolean, nullable=False, default=False)
    reading_done = Column(Boolean, nullable=False, default=False)
    progress_photo = Column(Boolean, nullable=False, default=False)
    no_alcohol = Column(Boolean, nullable=False, default=False)
    reflection_done = Column(Boolean, nullable=False, default=False)

    # Derived from the flags on every write
    all_tasks_complete = Column(Boolean, nullable=False, default=False)
    passed = Column(Boolean, nullable=False, default=False)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    session = relationship("ChallengeSession", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("session_id", "date", name="uq_challenge_daily_logs_session_date"),
        CheckConstraint("day_number >= 1 AND day_number <= 75", name="ck_challenge_daily_logs_day_range"),
    )

    def __repr__(self) -> str:
        return f"<ChallengeDailyLog session_id={self.session_id} day={self.day_number} passed={self.passed}>"
