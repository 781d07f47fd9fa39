"""Terminal execution of engine-query handles: listing, paging and counting."""

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Self

from . import converters
from .config import SieveSettings
from .engine import EngineQuery
from .exceptions import BindingError, InvalidRequestError
from .parameters import ParameterDescriptor, ParameterTable, bind, normalize_parameters

T = TypeVar("T")

PAGINATION_PARAMETERS = ParameterTable(
    ParameterDescriptor("firstResult", "first_result", converters.INTEGER),
    ParameterDescriptor("maxResults", "max_results", converters.INTEGER),
)


class PageSpec(BaseModel):
    """Requested result window.

    An absent bound means unbounded on that side. A request with neither
    bound is executed as a plain listing rather than as a page.

    Attributes:
        first_result: Index of the first result to return.
        max_results: Maximum number of results to return.
    """

    model_config = ConfigDict(frozen=True)

    first_result: int | None = Field(default=None, ge=0)
    max_results: int | None = Field(default=None, gt=0)

    @classmethod
    def of(cls, first_result: int | None = None, max_results: int | None = None) -> Self:
        """Create a page, reporting invalid bounds as a client-input failure.

        Raises:
            BindingError: If a bound is out of range.
        """
        try:
            return cls(first_result=first_result, max_results=max_results)
        except PydanticValidationError as exc:
            error = exc.errors()[0]
            name = PAGINATION_PARAMETERS.by_field()[str(error["loc"][0])].name
            raise BindingError(name, error.get("input"), error["msg"]) from exc

    @classmethod
    def from_parameters(cls, raw: Mapping[str, str | Sequence[str]]) -> Self:
        """Read ``firstResult`` and ``maxResults`` from request parameters."""
        return cls.of(**bind(PAGINATION_PARAMETERS, normalize_parameters(raw)))

    @property
    def is_paginated(self) -> bool:
        return self.first_result is not None or self.max_results is not None


UNBOUNDED = PageSpec()


def check_result_limit(page: PageSpec, settings: SieveSettings) -> None:
    """Reject listings larger than the configured result limit.

    Raises:
        InvalidRequestError: If a limit is configured and the page is
            unbounded or asks for more results than the limit.
    """
    limit = settings.max_results_limit
    if limit is None:
        return
    if page.max_results is None or page.max_results > limit:
        raise InvalidRequestError(f"Max results limit of {limit} exceeded")


def list_unbounded(query: EngineQuery[T]) -> list[T]:
    return list(query.list())


def list_page(query: EngineQuery[T], page: PageSpec, settings: SieveSettings) -> list[T]:
    """Execute a bounded page, defaulting missing bounds.

    A missing first result starts at 0; a missing max result is the
    largest count the engine accepts.
    """
    first_result = page.first_result if page.first_result is not None else 0
    max_results = (
        page.max_results if page.max_results is not None else settings.unbounded_max_results
    )
    return list(query.list_page(first_result, max_results))


def list_results(
    query: EngineQuery[T], page: PageSpec | None, settings: SieveSettings
) -> list[T]:
    """List results, choosing paging only when a bound was supplied.

    The choice depends on which bounds are present, never on their values.
    """
    if page is not None and page.is_paginated:
        return list_page(query, page, settings)
    return list_unbounded(query)


def count(query: EngineQuery[Any]) -> int:
    return query.count()
