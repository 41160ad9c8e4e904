from tracky.middleware.request_id import RequestIDMiddleware
from tracky.middleware.rate_limit import limiter, rate_limit_write

__all__ = ["RequestIDMiddleware", "limiter", "rate_limit_write"]
