"""Logging middleware for query execution."""

import logging
from typing import TYPE_CHECKING, Any

from ..config import SieveSettings
from ..context import get_context
from ..exceptions import SieveError
from .base import QueryHandler, QueryMiddleware

if TYPE_CHECKING:
    from ..service import QueryRequest

LOGGER = logging.getLogger(__name__)


class LoggingMiddleware(QueryMiddleware):
    """Middleware that logs query execution with correlation tracking.

    Logs each query at the specified logging level with the query type,
    the operation and the correlation ID. Filter values are NOT logged to
    avoid exposing PII or sensitive information. Rejected queries are
    logged once more before the error propagates.

    Attributes:
        level: The numeric logging level (e.g., logging.INFO, logging.DEBUG).

    Examples:
        >>> service = QueryService(
        ...     engine,
        ...     HistoricIncidentQueryDto,
        ...     HistoricIncidentDto.from_incident,
        ...     middleware=[ContextPropagationMiddleware(), LoggingMiddleware("INFO")],
        ... )

    Note:
        For correlation tracking to work, ContextPropagationMiddleware should
        be registered before LoggingMiddleware in the middleware chain.
    """

    @staticmethod
    def from_settings(settings: SieveSettings) -> "LoggingMiddleware":
        return LoggingMiddleware(settings.log_level)

    def __init__(self, level: str):
        """Initialize the logging middleware.

        Args:
            level: String representation of the log level (e.g., "INFO", "DEBUG").
                   Case-insensitive.
        """
        self.level = getattr(logging, level.upper())

    def handle(self, request: "QueryRequest", next: QueryHandler) -> Any:
        """Log the query type with correlation context and pass to next handler.

        Args:
            request: The query request to log and process.
            next: The next handler in the chain.

        Returns:
            The result from the next handler.
        """
        extra = {
            "query_type": type(request.query).__name__,
            "operation": request.operation.value,
        }

        ctx = get_context()
        if ctx.correlation_id is not None:
            extra["correlation_id"] = str(ctx.correlation_id)

        LOGGER.log(self.level, "Executing Query", extra=extra)
        try:
            return next(request)
        except SieveError as exc:
            LOGGER.log(self.level, "Query Failed", extra={**extra, "error_type": type(exc).__name__})
            raise
