"""Exceptions raised while binding, validating and executing queries."""

from typing import Any


class SieveError(Exception):
    """Base class for all errors raised by sieve."""

    pass


class InvalidRequestError(SieveError):
    """Raised when a request cannot be turned into a valid query.

    This is the client-input failure class: the caller sent something
    that was rejected and should not be resubmitted unchanged.

    Attributes:
        message: Human readable description of the problem.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConversionError(InvalidRequestError):
    """Raised when a raw text value cannot be converted to its declared type.

    Attributes:
        value: The raw value that failed to convert.
        reason: Why the value was rejected.
    """

    def __init__(self, value: Any, reason: str):
        super().__init__(f"Cannot convert value '{value}': {reason}")
        self.value = value
        self.reason = reason


class BindingError(ConversionError):
    """Raised when a request parameter cannot be bound to a query field.

    Attributes:
        parameter: External name of the offending parameter.
        value: The raw value supplied for it.
        reason: Why the value was rejected.
    """

    def __init__(self, parameter: str, value: Any, reason: str):
        InvalidRequestError.__init__(
            self,
            f"Cannot set query parameter '{parameter}' to value '{value}': {reason}",
        )
        self.parameter = parameter
        self.value = value
        self.reason = reason


class SortValidationError(InvalidRequestError):
    """Raised when a sort field is not whitelisted for a query type.

    Attributes:
        field: The rejected sort field.
        query_type: Name of the query type that rejected it.
    """

    def __init__(self, field: str, query_type: str):
        super().__init__(f"sortBy parameter has invalid value '{field}' for {query_type}")
        self.field = field
        self.query_type = query_type


class EngineExecutionError(InvalidRequestError):
    """Raised when the query engine rejects a constructed query.

    Attributes:
        reason: The error text reported by the engine.
    """

    def __init__(self, reason: str):
        super().__init__(f"Query engine rejected the query: {reason}")
        self.reason = reason


class NotFoundError(SieveError):
    """Raised by collaborators that cannot resolve an identifier to an entity."""

    pass


class QueryEngineError(Exception):
    """Base class for errors raised by query engine adapters.

    Engine adapters raise this (or a subclass) when a query cannot be
    executed. The service layer translates it into EngineExecutionError.
    """

    pass
