import logging
import contextvars
from typing import Optional

# Context variables carried across async operations for log correlation
request_id_context = contextvars.ContextVar('request_id', default=None)
user_id_context = contextvars.ContextVar('user_id', default=None)


class RequestAwareLogger:
    """
    A logger wrapper that stamps the current request and user onto every record.

    Route handlers and CRUD functions log through this wrapper so that a
    streak transition or a challenge milestone can be traced back to the
    request that caused it without threading ids through every call.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        user_id = kwargs.pop('user_id', None) or user_id_context.get()

        extra = kwargs.get('extra', {})
        extra.setdefault('request_id', request_id or "no-request-id")
        extra.setdefault('user_id', user_id or "anonymous")
        kwargs['extra'] = extra

        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs, exc_info=True)


def get_logger(name: str) -> RequestAwareLogger:
    """
    Get a request-aware logger for the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        RequestAwareLogger: A logger that automatically includes request context
    """
    return RequestAwareLogger(name)


def set_request_context(request_id: str, user_id: Optional[str] = None):
    """
    Set the request and user ids in the current context.

    Called by RequestIDMiddleware at the beginning of each request.
    """
    request_id_context.set(request_id)
    user_id_context.set(user_id)


def clear_request_context():
    """Clear the current request context."""
    request_id_context.set(None)
    user_id_context.set(None)
