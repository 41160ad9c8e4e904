from tracky.database import Base
from tracky.models.habit import Habit, HabitLog
from tracky.models.activity import WorkoutLog, LearningLog, DisciplineCheckin
from tracky.models.discipline_score import DisciplineScore
from tracky.models.user_streak import UserStreak
from tracky.models.challenge import ChallengeSession, ChallengeDailyLog
from tracky.models.reward import XpEvent, Notification

__all__ = [
    "Base", "Habit", "HabitLog", "WorkoutLog", "LearningLog", "DisciplineCheckin",
    "DisciplineScore", "UserStreak", "ChallengeSession", "ChallengeDailyLog",
    "XpEvent", "Notification",
]
