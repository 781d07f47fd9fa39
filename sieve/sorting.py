"""Whitelist-checked sort resolution for query types."""

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import BindingError, InvalidRequestError, SortValidationError

SORT_BY = "sortBy"
SORT_ORDER = "sortOrder"

Ordering = Callable[[Any], Any]


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortCriterion(BaseModel):
    """One ordering instruction. The first criterion of a request is primary.

    Examples:
        >>> SortCriterion(field="createTime", order=SortOrder.DESC)
        >>> SortCriterion.model_validate({"sortBy": "createTime", "sortOrder": "asc"})
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(alias=SORT_BY)
    order: SortOrder = Field(default=SortOrder.ASC, alias=SORT_ORDER)


class SortWhitelist:
    """Maps every sortable field name of a query type to its ordering call.

    Ordering callables receive the engine-query handle; the direction is
    applied afterwards with ``asc()`` or ``desc()``.

    Examples:
        >>> whitelist = SortWhitelist({
        ...     "incidentId": methodcaller("order_by_incident_id"),
        ...     "createTime": methodcaller("order_by_create_time"),
        ... })
        >>> "createTime" in whitelist
        True
    """

    def __init__(self, orderings: Mapping[str, Ordering] | None = None):
        self._orderings: Mapping[str, Ordering] = MappingProxyType(dict(orderings or {}))

    def __contains__(self, name: object) -> bool:
        return name in self._orderings

    def __iter__(self) -> Iterator[str]:
        return iter(self._orderings)

    def __len__(self) -> int:
        return len(self._orderings)

    def names(self) -> list[str]:
        return list(self._orderings)

    def ordering(self, name: str) -> Ordering:
        """Get the ordering call for a field.

        Raises:
            KeyError: If the field is not whitelisted.
        """
        return self._orderings[name]

    def apply(self, query: Any, criterion: SortCriterion) -> None:
        """Apply one criterion to an engine-query handle."""
        self.ordering(criterion.field)(query)
        if criterion.order is SortOrder.DESC:
            query.desc()
        else:
            query.asc()


class Sortable(Protocol):
    __name__: str

    def is_valid_sort_field(self, name: str) -> bool: ...


def validate_sort_field(query_type: Sortable, name: str) -> None:
    """Raise SortValidationError unless the field is sortable for the query type."""
    if not query_type.is_valid_sort_field(name):
        raise SortValidationError(name, query_type.__name__)


def resolve(query_type: Sortable, criteria: Iterable[SortCriterion]) -> tuple[SortCriterion, ...]:
    """Validate sort criteria against a query type's whitelist.

    Criteria are returned in request order. Repeated fields are kept.

    Args:
        query_type: The query type whose whitelist applies.
        criteria: The requested criteria, primary first.

    Returns:
        The validated criteria.

    Raises:
        SortValidationError: For the first criterion naming a field that
            is not whitelisted.
    """
    resolved = tuple(criteria)
    for criterion in resolved:
        validate_sort_field(query_type, criterion.field)
    return resolved


def parse_sort_order(value: str) -> SortOrder:
    try:
        return SortOrder(value)
    except ValueError:
        raise BindingError(SORT_ORDER, value, "expected 'asc' or 'desc'") from None


def criteria_from_parameters(
    query_type: Sortable,
    sort_by: Sequence[str],
    sort_order: Sequence[str],
) -> tuple[SortCriterion, ...]:
    """Build sort criteria from repeated ``sortBy``/``sortOrder`` parameters.

    Values are paired by position. Every ``sortBy`` value is checked
    against the whitelist before pairing, so an unknown field is always
    reported as such.

    Raises:
        SortValidationError: If a sortBy value is not whitelisted.
        BindingError: If a sortOrder value is neither "asc" nor "desc".
        InvalidRequestError: If sortBy and sortOrder are not supplied together.
    """
    for name in sort_by:
        validate_sort_field(query_type, name)
    orders = [parse_sort_order(value) for value in sort_order]
    if len(sort_by) != len(orders):
        raise InvalidRequestError(
            "Only a single sorting parameter specified. sortBy and sortOrder required"
        )
    return tuple(
        SortCriterion(field=name, order=order) for name, order in zip(sort_by, orders, strict=True)
    )
