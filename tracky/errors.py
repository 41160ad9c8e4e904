from typing import Any, Dict, Optional


class TrackyError(Exception):
    """
    Base error for the scoring, streak and challenge core.

    Carries a stable machine-readable code, the HTTP status the API layer
    should answer with, and any details needed to explain which invariant
    was violated.
    """
    code = "TRACKY_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.details}


class ValidationFailed(TrackyError):
    code = "VALIDATION_ERROR"
    status_code = 400


class UnknownTaskId(ValidationFailed):
    code = "UNKNOWN_TASK_ID"

    def __init__(self, task_id: str, challenge_type: str):
        super().__init__(
            f"Task '{task_id}' is not part of the {challenge_type} challenge",
            {"task_id": task_id, "challenge_type": challenge_type},
        )


class InvalidDay(ValidationFailed):
    code = "INVALID_DAY"

    def __init__(self, day_number: int, total_days: int):
        super().__init__(
            f"Day {day_number} is outside this challenge (1-{total_days})",
            {"day_number": day_number, "total_days": total_days},
        )


class NotFound(TrackyError):
    code = "NOT_FOUND"
    status_code = 404


class NoActiveSession(NotFound):
    code = "NO_ACTIVE_CHALLENGE"

    def __init__(self, user_id: str):
        super().__init__("No active challenge", {"user_id": user_id})


class ConflictingActiveSession(TrackyError):
    code = "CONFLICTING_ACTIVE_SESSION"
    status_code = 409

    def __init__(self, existing_session_id: str):
        super().__init__(
            "You already have an active challenge. Complete or pause it first.",
            {"existing_session_id": existing_session_id},
        )
        self.existing_session_id = existing_session_id


class DependencyUnavailable(TrackyError):
    code = "DEPENDENCY_UNAVAILABLE"
    status_code = 503

    def __init__(self, operation: str):
        super().__init__(f"Record store unavailable during {operation}", {"operation": operation})
