"""Tracky: discipline scoring, streaks and 75 day challenges."""
__version__ = "1.0.0"
