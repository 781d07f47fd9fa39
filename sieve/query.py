"""Base class every concrete query type implements."""

from abc import abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Self

from .exceptions import BindingError, SortValidationError
from .parameters import ParameterTable, bind, normalize_parameters
from .sorting import (
    SORT_BY,
    SORT_ORDER,
    SortCriterion,
    SortWhitelist,
    criteria_from_parameters,
    resolve,
)

TQuery = TypeVar("TQuery")

SORTING = "sorting"


class AbstractQueryDto(BaseModel, Generic[TQuery]):
    """Typed, validated description of a query against the query engine.

    A query type declares, once per class, which request parameters it
    accepts (``parameters``) and which fields results may be ordered by
    (``sort_fields``). The generic machinery here binds raw request
    parameters to the declared fields, validates sorting, and turns the
    result into a filtered, ordered engine-query handle.

    Fields that were not supplied in the request keep their ``None``
    default and are absent from ``model_fields_set``.

    Subclasses implement:
    - ``new_engine_query``: obtain a fresh handle from the engine
    - ``apply_filters``: invoke one filter call per set field

    Attributes:
        sorting: Validated sort criteria, primary first.

    Examples:
        >>> class IncidentQueryDto(AbstractQueryDto[IncidentQuery]):
        ...     parameters = ParameterTable(
        ...         ParameterDescriptor("incidentType", "incident_type"),
        ...         ParameterDescriptor("open", "open", converters.BOOLEAN),
        ...     )
        ...     sort_fields = SortWhitelist({
        ...         "createTime": methodcaller("order_by_create_time"),
        ...     })
        ...
        ...     incident_type: str | None = None
        ...     open: bool | None = None
        ...
        ...     def new_engine_query(self, engine):
        ...         return engine.create_incident_query()
        ...
        ...     def apply_filters(self, query):
        ...         if self.incident_type is not None:
        ...             query.incident_type(self.incident_type)
        ...         if self.open:
        ...             query.open()
        >>>
        >>> dto = IncidentQueryDto.from_parameters({"open": ["true"]})
        >>> query = dto.to_query(engine)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    parameters: ClassVar[ParameterTable] = ParameterTable()
    sort_fields: ClassVar[SortWhitelist] = SortWhitelist()

    sorting: tuple[SortCriterion, ...] = ()

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        """Check the parameter table against the declared fields."""
        super().__pydantic_init_subclass__(**kwargs)
        for descriptor in cls.parameters:
            if descriptor.field == SORTING or descriptor.field not in cls.model_fields:
                raise TypeError(
                    f"{cls.__name__}: parameter '{descriptor.name}' targets "
                    f"unknown field '{descriptor.field}'"
                )

    @model_validator(mode="after")
    def _check_sorting(self) -> Self:
        resolve(type(self), self.sorting)
        return self

    @classmethod
    def from_parameters(cls, raw: Mapping[str, str | Sequence[str]]) -> Self:
        """Bind raw, multi-valued request parameters.

        Args:
            raw: Request parameters; each value is a string or a sequence
                of strings. Undeclared parameters are ignored.

        Returns:
            A populated query with only the supplied fields set.

        Raises:
            BindingError: If a parameter value cannot be converted.
            SortValidationError: If a sortBy value is not whitelisted.
            InvalidRequestError: If sortBy and sortOrder do not pair up.
        """
        parameters = normalize_parameters(raw)
        values = bind(cls.parameters, parameters)
        sorting = criteria_from_parameters(
            cls, parameters.get(SORT_BY, ()), parameters.get(SORT_ORDER, ())
        )
        if sorting:
            values[SORTING] = sorting
        return cls(**values)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> Self:
        """Bind an already typed request body, such as decoded JSON.

        Keys are external parameter names. ``sortBy``/``sortOrder`` may be
        given as strings or lists and are paired as in ``from_parameters``;
        ``sorting`` holds a list of ``{"sortBy": ..., "sortOrder": ...}``
        objects applied after them. Null values are treated as absent and
        unknown keys are ignored.

        Raises:
            BindingError: If a value does not match its field's type.
            SortValidationError: If a sort field is not whitelisted.
            InvalidRequestError: If sortBy and sortOrder do not pair up.
        """
        values: dict[str, Any] = {
            descriptor.field: body[descriptor.name]
            for descriptor in cls.parameters
            if body.get(descriptor.name) is not None
        }
        sorting: list[Any] = list(
            criteria_from_parameters(
                cls, _sort_values(body, SORT_BY), _sort_values(body, SORT_ORDER)
            )
        )
        if body.get(SORTING) is not None:
            entries = body[SORTING]
            if isinstance(entries, (str, Mapping)) or not isinstance(entries, Sequence):
                raise BindingError(SORTING, entries, "expected a list of sort criteria")
            sorting.extend(entries)
        if sorting:
            values[SORTING] = sorting
        try:
            return cls.model_validate(values)
        except PydanticValidationError as exc:
            raise cls._binding_error(exc) from exc

    @classmethod
    def _binding_error(cls, exc: PydanticValidationError) -> BindingError:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        descriptors = cls.parameters.by_field()
        name = descriptors[field].name if field in descriptors else field
        return BindingError(name, error.get("input"), error["msg"])

    @classmethod
    def is_valid_sort_field(cls, name: str) -> bool:
        return name in cls.sort_fields

    def is_set(self, field: str) -> bool:
        """Whether a field was supplied by the request."""
        return field in self.model_fields_set

    @abstractmethod
    def new_engine_query(self, engine: Any) -> TQuery:
        """Obtain a fresh engine-query handle from the engine."""
        ...

    @abstractmethod
    def apply_filters(self, query: TQuery) -> None:
        """Invoke the filter call for every set field. Unset fields are no-ops."""
        ...

    def apply_sort(self, query: TQuery, criterion: SortCriterion) -> None:
        """Invoke the ordering call for one criterion.

        Raises:
            SortValidationError: If the criterion's field is not whitelisted.
        """
        if not self.is_valid_sort_field(criterion.field):
            raise SortValidationError(criterion.field, type(self).__name__)
        self.sort_fields.apply(query, criterion)

    def to_query(self, engine: Any) -> TQuery:
        """Build a filtered and ordered engine-query handle.

        Sorting is validated before the engine is touched. Criteria are
        applied in order, so later ones break ties of earlier ones.

        Args:
            engine: The engine or session the handle is obtained from.

        Returns:
            A handle ready for a terminal operation.
        """
        criteria = resolve(type(self), self.sorting)
        query = self.new_engine_query(engine)
        self.apply_filters(query)
        for criterion in criteria:
            self.apply_sort(query, criterion)
        return query


def _sort_values(body: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = body.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise BindingError(key, value, "expected a string or a list of strings")
