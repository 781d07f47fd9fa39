"""Query types for runtime engine data."""

from .process_instance import (
    ProcessInstanceDto,
    ProcessInstanceQuery,
    ProcessInstanceQueryDto,
    RuntimeEngine,
    RuntimeService,
)

__all__ = [
    "ProcessInstanceDto",
    "ProcessInstanceQuery",
    "ProcessInstanceQueryDto",
    "RuntimeEngine",
    "RuntimeService",
]
