"""Converters from raw request text to typed filter values.

Converters are stateless and safe to share between requests. Each one
accepts the text form of a single parameter value and either returns a
typed value or raises ConversionError.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConversionError

T = TypeVar("T")

_DATETIME = TypeAdapter(datetime)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class Converter(ABC, Generic[T]):
    """Converts raw parameter text into a typed value.

    Subclasses implement convert() for a single text value. Parameters that
    may be repeated in a request are converted with convert_all(), which by
    default converts each value independently.

    Examples:
        >>> BooleanConverter().convert("true")
        True
        >>> StringListConverter().convert("a, b,,c")
        ['a', 'b', 'c']
    """

    @abstractmethod
    def convert(self, value: str) -> T:
        """Convert a single raw value.

        Raises:
            ConversionError: If the value is outside the converter's domain.
        """
        ...

    def convert_all(self, values: Sequence[str]) -> Any:
        """Convert every value of a repeated parameter, preserving order."""
        return [self.convert(value) for value in values]


class StringConverter(Converter[str]):
    def convert(self, value: str) -> str:
        return value


class BooleanConverter(Converter[bool]):
    """Accepts exactly "true" or "false" (case-sensitive)."""

    def convert(self, value: str) -> bool:
        if value == "true":
            return True
        if value == "false":
            return False
        raise ConversionError(value, "expected 'true' or 'false'")


class IntegerConverter(Converter[int]):
    """Accepts ASCII decimal digits with an optional sign."""

    def convert(self, value: str) -> int:
        if not _INTEGER.fullmatch(value):
            raise ConversionError(value, "expected an integer")
        return int(value)


class DateConverter(Converter[datetime]):
    """Parses ISO-8601 date-times such as 2013-01-23T14:42:45."""

    def convert(self, value: str) -> datetime:
        # pydantic also reads unix timestamps from numeric text
        if not _ISO_DATE.match(value):
            raise ConversionError(value, "expected an ISO-8601 date-time")
        try:
            return _DATETIME.validate_python(value)
        except PydanticValidationError:
            raise ConversionError(value, "expected an ISO-8601 date-time") from None


class StringListConverter(Converter[list[str]]):
    """Splits comma separated text into trimmed, non-empty items.

    Repeated parameters are concatenated in request order, so
    ``tenantIdIn=a,b&tenantIdIn=c`` yields ``["a", "b", "c"]``.
    """

    separator = ","

    def convert(self, value: str) -> list[str]:
        items = (item.strip() for item in value.split(self.separator))
        return [item for item in items if item]

    def convert_all(self, values: Sequence[str]) -> list[str]:
        return [item for value in values for item in self.convert(value)]


class StringSetConverter(StringListConverter):
    """Like StringListConverter, but drops repeated items (first one wins)."""

    def convert(self, value: str) -> list[str]:
        return list(dict.fromkeys(super().convert(value)))

    def convert_all(self, values: Sequence[str]) -> list[str]:
        return list(dict.fromkeys(super().convert_all(values)))


class VariableOperator(str, Enum):
    EQUALS = "eq"
    NOT_EQUALS = "neq"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUALS = "gteq"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUALS = "lteq"
    LIKE = "like"


class VariableQueryParameter(BaseModel):
    """A single variable filter of the form ``name_operator_value``."""

    model_config = ConfigDict(frozen=True)

    name: str
    operator: VariableOperator
    value: str


class VariableListConverter(Converter[list[VariableQueryParameter]]):
    """Parses ``name_operator_value`` triples separated by commas."""

    def convert(self, value: str) -> list[VariableQueryParameter]:
        variables = []
        for expression in value.split(","):
            parts = expression.strip().split("_", 2)
            if len(parts) != 3 or not parts[0]:
                raise ConversionError(
                    value, "variable query parameter has to have format KEY_OPERATOR_VALUE"
                )
            name, operator, operand = parts
            try:
                op = VariableOperator(operator)
            except ValueError:
                raise ConversionError(value, f"unknown variable operator '{operator}'") from None
            variables.append(VariableQueryParameter(name=name, operator=op, value=operand))
        return variables

    def convert_all(self, values: Sequence[str]) -> list[VariableQueryParameter]:
        return [variable for value in values for variable in self.convert(value)]


STRING = StringConverter()
BOOLEAN = BooleanConverter()
INTEGER = IntegerConverter()
DATE = DateConverter()
STRING_LIST = StringListConverter()
STRING_SET = StringSetConverter()
VARIABLE_LIST = VariableListConverter()


class ConverterRegistry:
    """Registry of converters addressed by kind name.

    Examples:
        >>> registry = ConverterRegistry.default()
        >>> registry.convert("boolean", "false")
        False
        >>> registry.convert("string-list", ["a,b", "c"])
        ['a', 'b', 'c']
    """

    @staticmethod
    def default() -> "ConverterRegistry":
        registry = ConverterRegistry()
        registry.register("string", STRING)
        registry.register("boolean", BOOLEAN)
        registry.register("integer", INTEGER)
        registry.register("date", DATE)
        registry.register("string-list", STRING_LIST)
        registry.register("string-set", STRING_SET)
        registry.register("variable-list", VARIABLE_LIST)
        return registry

    def __init__(self) -> None:
        self._converters: dict[str, Converter[Any]] = {}

    def register(self, kind: str, converter: Converter[Any]) -> None:
        """Register a converter under a kind name.

        Args:
            kind: Name the converter is looked up by.
            converter: The converter instance.
        """
        self._converters[kind] = converter

    def get(self, kind: str) -> Converter[Any]:
        """Get the converter registered for a kind.

        Raises:
            KeyError: If no converter is registered for the kind.
        """
        return self._converters[kind]

    def kinds(self) -> set[str]:
        return set(self._converters)

    def convert(self, kind: str, raw: str | Sequence[str]) -> Any:
        """Convert a raw value (or a list of raw values) with a named converter.

        Args:
            kind: Kind name of the converter to use.
            raw: A single text value, or every value of a repeated parameter.

        Returns:
            The typed value.

        Raises:
            KeyError: If no converter is registered for the kind.
            ConversionError: If the value cannot be converted.
        """
        converter = self.get(kind)
        if isinstance(raw, str):
            return converter.convert(raw)
        return converter.convert_all(raw)


CONVERTERS = ConverterRegistry.default()
