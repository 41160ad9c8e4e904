from sqlalchemy import Column, String, Date, DateTime, Integer, Boolean, Text
from sqlalchemy.sql import func
from tracky.database import Base
import uuid


class XpEvent(Base):
    """Ledger of experience points awarded to a user."""
    __tablename__ = "xp_events"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    reason = Column(String(64), nullable=False)  # streak_day, challenge_day_complete, challenge_milestone_7, ...
    day_number = Column(Integer, nullable=True)
    event_date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<XpEvent user_id={self.user_id} amount={self.amount} reason={self.reason}>"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    type = Column(String(32), nullable=False, default="achievement")
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Notification user_id={self.user_id} title={self.title}>"
