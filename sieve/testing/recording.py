"""Recording stand-ins for the query engine."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple

ORDERING_PREFIX = "order_by_"
DIRECTIONS = frozenset({"asc", "desc"})
TERMINALS = frozenset({"list", "list_page", "count"})


class Call(NamedTuple):
    name: str
    args: tuple[Any, ...]


class RecordingQuery:
    """Engine-query handle that records every call made on it.

    Any method name is accepted; each call is recorded and returns the
    handle itself so fluent calls chain. Terminal operations return the
    canned results, or raise ``error`` if one is given.

    Examples:
        >>> query = RecordingQuery(results=["a", "b", "c"])
        >>> query.incident_type("failedJob").order_by_create_time().asc()
        >>> query.list_page(1, 1)
        ['b']
        >>> query.filter_calls()
        [Call(name='incident_type', args=('failedJob',))]
    """

    def __init__(
        self,
        results: Iterable[Any] = (),
        count: int | None = None,
        error: Exception | None = None,
    ):
        self.calls: list[Call] = []
        self.results = list(results)
        self.total = count
        self.error = error

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any) -> RecordingQuery:
            self.calls.append(Call(name, args))
            return self

        return record

    def _terminal(self, name: str, *args: Any) -> None:
        self.calls.append(Call(name, args))
        if self.error is not None:
            raise self.error

    def list(self) -> list[Any]:
        self._terminal("list")
        return list(self.results)

    def list_page(self, first_result: int, max_results: int) -> list[Any]:
        self._terminal("list_page", first_result, max_results)
        return self.results[first_result : first_result + max_results]

    def count(self) -> int:
        self._terminal("count")
        return self.total if self.total is not None else len(self.results)

    def names(self) -> list[str]:
        return [call.name for call in self.calls]

    def filter_calls(self) -> list[Call]:
        """Calls that are neither ordering, direction nor terminal calls."""
        return [
            call
            for call in self.calls
            if not call.name.startswith(ORDERING_PREFIX)
            and call.name not in DIRECTIONS
            and call.name not in TERMINALS
        ]

    def ordering_calls(self) -> list[Call]:
        """Ordering and direction calls, in the order they were made."""
        return [
            call
            for call in self.calls
            if call.name.startswith(ORDERING_PREFIX) or call.name in DIRECTIONS
        ]

    def terminal_calls(self) -> list[Call]:
        return [call for call in self.calls if call.name in TERMINALS]


class _RecordingService:
    def __init__(self, engine: RecordingEngine):
        self._engine = engine

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("create_"):
            raise AttributeError(name)

        def create() -> RecordingQuery:
            self._engine.created.append(name)
            return self._engine.query

        return create


class RecordingEngine:
    """Engine whose services hand out a single RecordingQuery.

    Every ``create_*`` call on any ``*_service`` attribute returns the same
    handle, and the factory names are recorded in ``created``.

    Example:
        >>> engine = RecordingEngine(RecordingQuery())
        >>> engine.history_service.create_historic_incident_query()
        >>> engine.created
        ['create_historic_incident_query']
    """

    def __init__(self, query: RecordingQuery | None = None):
        self.query = query if query is not None else RecordingQuery()
        self.created: list[str] = []

    def __getattr__(self, name: str) -> Any:
        if not name.endswith("_service"):
            raise AttributeError(name)
        return _RecordingService(self)
