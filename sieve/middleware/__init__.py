"""Middleware infrastructure for query execution.

Middleware components wrap query execution to provide cross-cutting
concerns like logging or context propagation. They follow the chain of
responsibility pattern.
"""

from .base import QueryHandler, QueryMiddleware
from .context import ContextPropagationMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ContextPropagationMiddleware",
    "LoggingMiddleware",
    "QueryHandler",
    "QueryMiddleware",
]
