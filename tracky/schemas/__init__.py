from tracky.schemas.habit import HabitCreate, HabitResponse, HabitLogRequest, HabitToggle, HabitBulkLogRequest, HabitLogResponse
from tracky.schemas.activity import WorkoutLogRequest, LearningLogRequest, ActivityLogResponse
from tracky.schemas.discipline import (
    DisciplineScoreResponse, DisciplineCheckinRequest, FiveFactorScoreResponse,
    DisciplineTrendPoint, DisciplineTrendResponse, score_response
)
from tracky.schemas.streak import StreakSummary, StreakResponse
from tracky.schemas.challenge import (
    ChallengeStartRequest, ChallengeSessionResponse, ChallengeStartResponse,
    ChallengeLogRequest, ChallengeDailyLogResponse, ChallengeLogResponse, ChallengeStatusResponse
)
from tracky.schemas.reward import NotificationResponse, RewardsResponse

__all__ = [
    "HabitCreate", "HabitResponse", "HabitLogRequest", "HabitToggle", "HabitBulkLogRequest", "HabitLogResponse",
    "WorkoutLogRequest", "LearningLogRequest", "ActivityLogResponse",
    "DisciplineScoreResponse", "DisciplineCheckinRequest", "FiveFactorScoreResponse",
    "DisciplineTrendPoint", "DisciplineTrendResponse", "score_response",
    "StreakSummary", "StreakResponse",
    "ChallengeStartRequest", "ChallengeSessionResponse", "ChallengeStartResponse",
    "ChallengeLogRequest", "ChallengeDailyLogResponse", "ChallengeLogResponse", "ChallengeStatusResponse",
    "NotificationResponse", "RewardsResponse",
]
