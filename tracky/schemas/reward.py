from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    read: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class RewardsResponse(BaseModel):
    user_id: str
    total_xp: int
    notifications: List[NotificationResponse]
