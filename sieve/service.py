"""Service facade executing query types for a service boundary."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from .config import SieveSettings
from .exceptions import EngineExecutionError, QueryEngineError
from .middleware.base import QueryHandler, QueryMiddleware
from .pagination import UNBOUNDED, PageSpec, check_result_limit, count, list_results
from .query import AbstractQueryDto

TDto = TypeVar("TDto", bound=AbstractQueryDto[Any])
TResult = TypeVar("TResult")


class Operation(str, Enum):
    LIST = "list"
    COUNT = "count"


@dataclass(frozen=True)
class QueryRequest:
    """A bound query on its way through the middleware chain.

    Attributes:
        query: The validated query.
        operation: Whether results or their count are requested.
        page: Requested result window; ignored for counts.
    """

    query: AbstractQueryDto[Any]
    operation: Operation
    page: PageSpec = UNBOUNDED


class CountResultDto(BaseModel):
    count: int


class QueryService(Generic[TDto, TResult]):
    """Executes one query type against the query engine.

    The service binds raw request parameters (or a typed request body) to
    its query type, runs the request through the middleware chain and
    maps engine results to result DTOs. Errors raised by the engine are
    reported as EngineExecutionError and never retried.

    Args:
        engine: The engine or session handles are obtained from.
        query_type: The query type served by this service.
        to_result: Maps one engine result to its result DTO.
        settings: Paging configuration. Defaults to SieveSettings().
        middleware: Middleware applied in registration order.
        engine_errors: Exception types raised by the engine that denote a
            rejected query.

    Examples:
        >>> service = QueryService(
        ...     engine,
        ...     HistoricIncidentQueryDto,
        ...     HistoricIncidentDto.from_incident,
        ...     middleware=[LoggingMiddleware("INFO")],
        ... )
        >>> service.get_results({"open": ["true"]}, first_result=0, max_results=20)
        >>> service.get_count({"incidentType": ["failedJob"]})
    """

    def __init__(
        self,
        engine: Any,
        query_type: type[TDto],
        to_result: Callable[[Any], TResult],
        *,
        settings: SieveSettings | None = None,
        middleware: Sequence[QueryMiddleware] = (),
        engine_errors: tuple[type[Exception], ...] = (QueryEngineError,),
    ):
        self.engine = engine
        self.query_type = query_type
        self.to_result = to_result
        self.settings = settings if settings is not None else SieveSettings()
        self.middleware = list(middleware)
        self.engine_errors = engine_errors
        # Build the middleware chain by reducing from right to left
        chain: QueryHandler = self.handle
        for mw in reversed(self.middleware):

            def make_chain(m: QueryMiddleware, n: QueryHandler) -> QueryHandler:
                return lambda request: m.handle(request, n)

            chain = make_chain(mw, chain)
        self.chain = chain

    def get_results(
        self,
        parameters: Mapping[str, str | Sequence[str]],
        first_result: int | None = None,
        max_results: int | None = None,
    ) -> list[TResult]:
        """List results matching raw request parameters."""
        query = self.query_type.from_parameters(parameters)
        return self.execute_list(query, PageSpec.of(first_result, max_results))

    def query_results(
        self,
        body: Mapping[str, Any],
        first_result: int | None = None,
        max_results: int | None = None,
    ) -> list[TResult]:
        """List results matching a typed request body."""
        query = self.query_type.from_body(body)
        return self.execute_list(query, PageSpec.of(first_result, max_results))

    def get_count(self, parameters: Mapping[str, str | Sequence[str]]) -> CountResultDto:
        """Count results matching raw request parameters."""
        return self.execute_count(self.query_type.from_parameters(parameters))

    def query_count(self, body: Mapping[str, Any]) -> CountResultDto:
        """Count results matching a typed request body."""
        return self.execute_count(self.query_type.from_body(body))

    def execute_list(self, query: TDto, page: PageSpec = UNBOUNDED) -> list[TResult]:
        result: list[TResult] = self.chain(QueryRequest(query, Operation.LIST, page))
        return result

    def execute_count(self, query: TDto) -> CountResultDto:
        result: CountResultDto = self.chain(QueryRequest(query, Operation.COUNT))
        return result

    def handle(self, request: QueryRequest) -> Any:
        """Build and run a query. This is the innermost handler of the chain.

        Raises:
            InvalidRequestError: If the page exceeds the result limit.
            SortValidationError: If sorting is invalid.
            EngineExecutionError: If the engine rejects the query.
        """
        if request.operation is Operation.LIST:
            check_result_limit(request.page, self.settings)
        try:
            query = request.query.to_query(self.engine)
            if request.operation is Operation.COUNT:
                return CountResultDto(count=count(query))
            results = list_results(query, request.page, self.settings)
        except self.engine_errors as exc:
            raise EngineExecutionError(str(exc)) from exc
        return [self.to_result(result) for result in results]
