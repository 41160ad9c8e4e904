# API Routers
from tracky.routers import habits, fitness, learning, discipline, streaks, challenge, rewards

__all__ = ["habits", "fitness", "learning", "discipline", "streaks", "challenge", "rewards"]
