"""Settings for query execution using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class SieveSettings(BaseSettings):
    """Configuration for paging and logging of query execution.

    All settings can be configured via environment variables with the
    SIEVE_ prefix. For example:
    - SIEVE_MAX_RESULTS_LIMIT=1000
    - SIEVE_LOG_LEVEL=DEBUG

    Attributes:
        unbounded_max_results: Max results passed to the engine when a
            page has a first result but no max results.
        max_results_limit: If set, listings must request at most this many
            results. Counting is never limited.
        log_level: Level used by LoggingMiddleware.from_settings().

    Example:
        >>> settings = SieveSettings(max_results_limit=500)
        >>> service = QueryService(engine, HistoricIncidentQueryDto,
        ...                        HistoricIncidentDto.from_incident,
        ...                        settings=settings)
    """

    unbounded_max_results: int = Field(default=2**31 - 1, ge=1)
    max_results_limit: int | None = Field(default=None, ge=1)
    log_level: str = "INFO"

    model_config = {"env_prefix": "SIEVE_"}
