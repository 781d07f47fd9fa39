"""Per-request execution context carrying the correlation ID."""

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ulid import ULID

from .exceptions import InvalidRequestError


@dataclass(frozen=True)
class ExecutionContext:
    """Correlation data for the request currently being served.

    The context lives in a ``ContextVar``, so it follows the request across
    function calls without being passed around, and concurrent requests on
    other threads or tasks never see each other's context.

    Attributes:
        correlation_id: Identifies one logical operation, possibly spanning
            several services. None when no context was established.

    Examples:
        >>> ctx = ExecutionContext.create()
        >>> ctx = ExecutionContext.from_header(request.headers.get("X-Correlation-Id"))
    """

    correlation_id: ULID | None = None

    @classmethod
    def create(cls, correlation_id: ULID | None = None) -> "ExecutionContext":
        """Create a context, generating a correlation ID if none is given."""
        return cls(correlation_id=correlation_id if correlation_id is not None else ULID())

    @classmethod
    def from_header(cls, value: str | None) -> "ExecutionContext":
        """Continue an operation started by a caller.

        An absent or blank header starts a new operation.

        Raises:
            InvalidRequestError: If the header is not a valid ULID.
        """
        if value is None or not value.strip():
            return cls.create()
        try:
            return cls.create(ULID.from_str(value.strip()))
        except ValueError:
            raise InvalidRequestError(f"Invalid correlation id '{value}'") from None


_context: contextvars.ContextVar[ExecutionContext | None] = contextvars.ContextVar(
    "sieve_execution_context", default=None
)


def get_context() -> ExecutionContext:
    """Return the current context, or an empty one if none is set."""
    return _context.get() or ExecutionContext()


def set_context(context: ExecutionContext) -> None:
    _context.set(context)


def clear_context() -> None:
    _context.set(None)


def get_or_create_context() -> ExecutionContext:
    """Return the current context, establishing a new one if none is set.

    Example:
        >>> ctx = get_or_create_context()
        >>> response.headers["X-Correlation-Id"] = str(ctx.correlation_id)
    """
    ctx = _context.get()
    if ctx is None:
        ctx = ExecutionContext.create()
        set_context(ctx)
    return ctx


@contextmanager
def scoped_context(context: ExecutionContext | None = None) -> Iterator[ExecutionContext]:
    """Install a context for the duration of a block.

    The previous context is restored on exit, also when the block raises.

    Example:
        >>> with scoped_context() as ctx:
        ...     service.get_results(parameters)
    """
    ctx = context if context is not None else ExecutionContext.create()
    token = _context.set(ctx)
    try:
        yield ctx
    finally:
        _context.reset(token)
