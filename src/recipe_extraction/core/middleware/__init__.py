"""Custom middleware components."""

from recipe_extraction.core.middleware.logging import LoggingMiddleware
from recipe_extraction.core.middleware.request_id import RequestIDMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
]
