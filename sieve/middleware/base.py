"""Base middleware class for query execution.

Middleware components wrap query execution to provide cross-cutting
concerns like logging, context propagation, or access checks.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..service import QueryRequest

QueryHandler = Callable[["QueryRequest"], Any]


class QueryMiddleware(ABC):
    """Base class for query middleware.

    Middleware follows the chain of responsibility pattern: each one
    receives the request and the next handler, and decides whether and
    how to call it.

    Examples:
        Reject counting for a query type:

        >>> class NoCounting(QueryMiddleware):
        ...     def handle(self, request: QueryRequest, next: QueryHandler) -> Any:
        ...         if request.operation is Operation.COUNT:
        ...             raise InvalidRequestError("Counting is disabled")
        ...         return next(request)
    """

    @abstractmethod
    def handle(self, request: "QueryRequest", next: QueryHandler) -> Any:
        """Process a request and pass it to the next handler.

        Args:
            request: The query request.
            next: The next handler in the chain.

        Returns:
            The result from the next handler.
        """
        ...
