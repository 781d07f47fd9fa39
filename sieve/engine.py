"""Structural types for the query engine consumed by sieve.

The engine itself is an external collaborator. sieve only needs a handle
that accepts ordering direction calls and offers three terminal
operations; filter and ordering calls are specific to each query type
and declared alongside it.
"""

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class EngineQuery(Protocol[T_co]):
    """An engine-query handle owned by a single request."""

    def asc(self) -> Any: ...

    def desc(self) -> Any: ...

    def list(self) -> Sequence[T_co]: ...

    def list_page(self, first_result: int, max_results: int) -> Sequence[T_co]: ...

    def count(self) -> int: ...
