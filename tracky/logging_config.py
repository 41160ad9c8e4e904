from logging.config import dictConfig
import logging

from tracky.config import settings


class SafeContextFormatter(logging.Formatter):
    """
    A formatter that tolerates records emitted outside a request.

    Third-party loggers (uvicorn, sqlalchemy) do not go through
    RequestAwareLogger, so their records lack the context attributes.
    """

    def format(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = 'no-request-id'
        if not hasattr(record, 'user_id'):
            record.user_id = 'anonymous'
        return super().format(record)


LOG_LEVEL = "DEBUG" if settings.DEBUG else "INFO"

# Central logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": SafeContextFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] [%(user_id)s] - %(message)s",
        },
        "simple": {
            "()": SafeContextFormatter,
            "format": "%(asctime)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
        "access_console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "tracky": {  # Catch-all logger for all tracky modules
            "level": LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access_console"],
            "propagate": False,
        },
        "sqlalchemy.engine": {
            "level": "INFO" if settings.DEBUG else "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)
