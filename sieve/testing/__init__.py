from .recording import Call, RecordingEngine, RecordingQuery
from .scenario import QueryScenario

__all__ = [
    "Call",
    "QueryScenario",
    "RecordingEngine",
    "RecordingQuery",
]
