from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tracky.database import Base
import uuid


class Habit(Base):
    """A recurring behaviour the user checks off daily."""
    __tablename__ = "habits"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    name = Column(String(120), nullable=False)
    icon = Column(String(16), nullable=True)
    weight = Column(Integer, nullable=False, default=10)  # relative importance, > 0
    domain = Column(String(32), nullable=False, default="personal")
    active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    logs = relationship("HabitLog", back_populates="habit", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_habits_user_name"),
    )

    def __repr__(self) -> str:
        return f"<Habit id={self.id} user_id={self.user_id} name={self.name} active={self.active}>"


class HabitLog(Base):
    """Completion of one habit on one date. Overwritten, never deleted."""
    __tablename__ = "habit_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    habit_id = Column(String, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    habit = relationship("Habit", back_populates="logs")

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_logs_habit_date"),
    )

    def __repr__(self) -> str:
        return f"<HabitLog habit_id={self.habit_id} date={self.date} completed={self.completed}>"
