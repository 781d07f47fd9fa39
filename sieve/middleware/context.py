"""Context propagation middleware for correlation tracking."""

from typing import TYPE_CHECKING, Any

from ..context import get_context, scoped_context
from .base import QueryHandler, QueryMiddleware

if TYPE_CHECKING:
    from ..service import QueryRequest


class ContextPropagationMiddleware(QueryMiddleware):
    """Runs every query inside an execution context.

    A context set by the caller (for example from an incoming correlation
    header) is kept. Otherwise a fresh one is installed for the request
    and removed afterwards, also when the query fails.

    Register it before LoggingMiddleware so log records carry the
    correlation ID.
    """

    def handle(self, request: "QueryRequest", next: QueryHandler) -> Any:
        if get_context().correlation_id is not None:
            return next(request)
        with scoped_context():
            return next(request)
