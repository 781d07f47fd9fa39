"""Query types for historic (completed or archived) engine data."""

from .incident import (
    HistoricIncidentDto,
    HistoricIncidentQuery,
    HistoricIncidentQueryDto,
    HistoryEngine,
    HistoryService,
)

__all__ = [
    "HistoricIncidentDto",
    "HistoricIncidentQuery",
    "HistoricIncidentQueryDto",
    "HistoryEngine",
    "HistoryService",
]
