from sqlalchemy import Column, String, Date, DateTime, Integer, CheckConstraint
from sqlalchemy.sql import func
from tracky.database import Base


class UserStreak(Base):
    __tablename__ = "user_streaks"

    # Use user_id as primary key to ensure one row per user
    user_id = Column(String, primary_key=True)

    # Streak counters
    current_streak = Column(Integer, nullable=False, default=1)
    longest_streak = Column(Integer, nullable=False, default=1)

    # Dates
    last_qualifying_date = Column(Date, nullable=True)
    streak_started_at = Column(Date, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("longest_streak >= current_streak", name="ck_user_streaks_longest_gte_current"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserStreak user_id={self.user_id} current={self.current_streak} "
            f"longest={self.longest_streak} last={self.last_qualifying_date}>"
        )
