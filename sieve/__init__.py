"""Sieve - declarative query parameter binding and execution.

This module provides the public API for turning untyped request
parameters into validated, paginated queries against a query engine.
"""

from .config import SieveSettings
from .converters import CONVERTERS, Converter, ConverterRegistry
from .exceptions import (
    BindingError,
    ConversionError,
    EngineExecutionError,
    InvalidRequestError,
    NotFoundError,
    QueryEngineError,
    SieveError,
    SortValidationError,
)
from .pagination import PageSpec
from .parameters import ParameterDescriptor, ParameterTable, RawParameters, bind
from .query import AbstractQueryDto
from .service import CountResultDto, Operation, QueryRequest, QueryService
from .sorting import SortCriterion, SortOrder, SortWhitelist

__all__ = [
    # Binding
    "CONVERTERS",
    "Converter",
    "ConverterRegistry",
    "ParameterDescriptor",
    "ParameterTable",
    "RawParameters",
    "bind",
    # Queries
    "AbstractQueryDto",
    "SortCriterion",
    "SortOrder",
    "SortWhitelist",
    # Execution
    "CountResultDto",
    "Operation",
    "PageSpec",
    "QueryRequest",
    "QueryService",
    "SieveSettings",
    # Errors
    "BindingError",
    "ConversionError",
    "EngineExecutionError",
    "InvalidRequestError",
    "NotFoundError",
    "QueryEngineError",
    "SieveError",
    "SortValidationError",
]
