"""Declarative parameter descriptors and the generic binder.

Each query type declares a ParameterTable once, at class definition time.
The binder walks that table for every request and converts the raw text
values it finds into typed field values.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .converters import STRING, Converter
from .exceptions import BindingError, ConversionError

RawParameters = Mapping[str, Sequence[str]]


def normalize_parameters(raw: Mapping[str, str | Sequence[str]]) -> RawParameters:
    """Return an immutable multi-valued view of request parameters.

    Plain string values are treated as a parameter supplied once.

    Example:
        >>> normalize_parameters({"open": "true", "tenantIdIn": ["a", "b"]})
        mappingproxy({'open': ('true',), 'tenantIdIn': ('a', 'b')})
    """
    return MappingProxyType(
        {
            name: (values,) if isinstance(values, str) else tuple(values)
            for name, values in raw.items()
        }
    )


@dataclass(frozen=True)
class ParameterDescriptor:
    """Describes how one external parameter is bound to a query field.

    Attributes:
        name: External parameter name as it appears in requests.
        field: Name of the query field the converted value is assigned to.
        converter: Converter from raw text to the field's type.
        multi_valued: If True, every supplied value is converted; otherwise
            only the first one is.
    """

    name: str
    field: str
    converter: Converter[Any] = STRING
    multi_valued: bool = False

    def convert(self, values: Sequence[str]) -> Any:
        """Convert the raw values supplied for this parameter.

        Raises:
            BindingError: If conversion fails.
        """
        try:
            if self.multi_valued:
                return self.converter.convert_all(values)
            return self.converter.convert(values[0])
        except ConversionError as exc:
            raise BindingError(self.name, exc.value, exc.reason) from exc


class ParameterTable:
    """Immutable set of parameter descriptors for one query type.

    External names and target fields must both be unique within a table.

    Examples:
        >>> table = ParameterTable(
        ...     ParameterDescriptor("incidentId", "incident_id"),
        ...     ParameterDescriptor("open", "open", converters.BOOLEAN),
        ... )
        >>> table["open"].field
        'open'
    """

    def __init__(self, *descriptors: ParameterDescriptor):
        by_name: dict[str, ParameterDescriptor] = {}
        fields: set[str] = set()
        for descriptor in descriptors:
            if descriptor.name in by_name:
                raise ValueError(f"Duplicate parameter name '{descriptor.name}'")
            if descriptor.field in fields:
                raise ValueError(f"Duplicate target field '{descriptor.field}'")
            by_name[descriptor.name] = descriptor
            fields.add(descriptor.field)
        self._descriptors: Mapping[str, ParameterDescriptor] = MappingProxyType(by_name)

    def extend(self, *descriptors: ParameterDescriptor) -> "ParameterTable":
        """Return a new table with additional descriptors appended."""
        return ParameterTable(*self, *descriptors)

    def __iter__(self) -> Iterator[ParameterDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __getitem__(self, name: str) -> ParameterDescriptor:
        return self._descriptors[name]

    def names(self) -> list[str]:
        return list(self._descriptors)

    def fields(self) -> list[str]:
        return [descriptor.field for descriptor in self]

    def by_field(self) -> dict[str, ParameterDescriptor]:
        return {descriptor.field: descriptor for descriptor in self}


def bind(table: Iterable[ParameterDescriptor], raw: RawParameters) -> dict[str, Any]:
    """Convert the described parameters present in a request.

    Parameters that are not described by the table are ignored, and
    described parameters that are absent from the request produce no
    entry at all, so callers can tell "not requested" from any value.

    Args:
        table: The descriptors to bind.
        raw: Multi-valued raw request parameters.

    Returns:
        Mapping of target field name to converted value.

    Raises:
        BindingError: If any present parameter fails to convert. No
            partial result is returned.
    """
    values: dict[str, Any] = {}
    for descriptor in table:
        supplied = raw.get(descriptor.name)
        if not supplied:
            continue
        values[descriptor.field] = descriptor.convert(supplied)
    return values
