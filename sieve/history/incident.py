"""Historic incident query type."""

from datetime import datetime
from operator import methodcaller
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, StrictBool
from typing_extensions import Self

from .. import converters
from ..parameters import ParameterDescriptor, ParameterTable
from ..query import AbstractQueryDto
from ..sorting import SortWhitelist


class HistoricIncidentQuery(Protocol):
    """Engine-query handle for historic incidents."""

    def incident_id(self, incident_id: str) -> Any: ...
    def incident_type(self, incident_type: str) -> Any: ...
    def incident_message(self, incident_message: str) -> Any: ...
    def process_definition_id(self, process_definition_id: str) -> Any: ...
    def process_instance_id(self, process_instance_id: str) -> Any: ...
    def execution_id(self, execution_id: str) -> Any: ...
    def activity_id(self, activity_id: str) -> Any: ...
    def cause_incident_id(self, cause_incident_id: str) -> Any: ...
    def root_cause_incident_id(self, root_cause_incident_id: str) -> Any: ...
    def configuration(self, configuration: str) -> Any: ...
    def open(self) -> Any: ...
    def resolved(self) -> Any: ...
    def deleted(self) -> Any: ...
    def tenant_id_in(self, *tenant_ids: str) -> Any: ...
    def job_definition_id_in(self, *job_definition_ids: str) -> Any: ...


class HistoryService(Protocol):
    def create_historic_incident_query(self) -> HistoricIncidentQuery: ...


class HistoryEngine(Protocol):
    @property
    def history_service(self) -> HistoryService: ...


class HistoricIncidentQueryDto(AbstractQueryDto[HistoricIncidentQuery]):
    """Query for historic incidents.

    ``open``, ``resolved`` and ``deleted`` are marker filters: they only
    restrict the query when set to true. ``open=false`` behaves exactly
    like omitting ``open``.

    Example:
        >>> dto = HistoricIncidentQueryDto.from_parameters({
        ...     "incidentType": ["failedJob"],
        ...     "resolved": ["true"],
        ...     "sortBy": ["createTime"],
        ...     "sortOrder": ["asc"],
        ... })
        >>> query = dto.to_query(engine)
    """

    parameters = ParameterTable(
        ParameterDescriptor("incidentId", "incident_id"),
        ParameterDescriptor("incidentType", "incident_type"),
        ParameterDescriptor("incidentMessage", "incident_message"),
        ParameterDescriptor("processDefinitionId", "process_definition_id"),
        ParameterDescriptor("processInstanceId", "process_instance_id"),
        ParameterDescriptor("executionId", "execution_id"),
        ParameterDescriptor("activityId", "activity_id"),
        ParameterDescriptor("causeIncidentId", "cause_incident_id"),
        ParameterDescriptor("rootCauseIncidentId", "root_cause_incident_id"),
        ParameterDescriptor("configuration", "configuration"),
        ParameterDescriptor("open", "open", converters.BOOLEAN),
        ParameterDescriptor("resolved", "resolved", converters.BOOLEAN),
        ParameterDescriptor("deleted", "deleted", converters.BOOLEAN),
        ParameterDescriptor("tenantIdIn", "tenant_ids", converters.STRING_LIST, multi_valued=True),
        ParameterDescriptor(
            "jobDefinitionIdIn", "job_definition_ids", converters.STRING_LIST, multi_valued=True
        ),
    )

    sort_fields = SortWhitelist(
        {
            "incidentId": methodcaller("order_by_incident_id"),
            "incidentMessage": methodcaller("order_by_incident_message"),
            "createTime": methodcaller("order_by_create_time"),
            "endTime": methodcaller("order_by_end_time"),
            "incidentType": methodcaller("order_by_incident_type"),
            "executionId": methodcaller("order_by_execution_id"),
            "activityId": methodcaller("order_by_activity_id"),
            "processInstanceId": methodcaller("order_by_process_instance_id"),
            "processDefinitionId": methodcaller("order_by_process_definition_id"),
            "causeIncidentId": methodcaller("order_by_cause_incident_id"),
            "rootCauseIncidentId": methodcaller("order_by_root_cause_incident_id"),
            "configuration": methodcaller("order_by_configuration"),
            "tenantId": methodcaller("order_by_tenant_id"),
            "incidentState": methodcaller("order_by_incident_state"),
        }
    )

    incident_id: str | None = None
    incident_type: str | None = None
    incident_message: str | None = None
    process_definition_id: str | None = None
    process_instance_id: str | None = None
    execution_id: str | None = None
    activity_id: str | None = None
    cause_incident_id: str | None = None
    root_cause_incident_id: str | None = None
    configuration: str | None = None
    open: StrictBool | None = None
    resolved: StrictBool | None = None
    deleted: StrictBool | None = None
    tenant_ids: list[str] | None = None
    job_definition_ids: list[str] | None = None

    def new_engine_query(self, engine: HistoryEngine) -> HistoricIncidentQuery:
        return engine.history_service.create_historic_incident_query()

    def apply_filters(self, query: HistoricIncidentQuery) -> None:
        if self.incident_id is not None:
            query.incident_id(self.incident_id)
        if self.incident_type is not None:
            query.incident_type(self.incident_type)
        if self.incident_message is not None:
            query.incident_message(self.incident_message)
        if self.process_definition_id is not None:
            query.process_definition_id(self.process_definition_id)
        if self.process_instance_id is not None:
            query.process_instance_id(self.process_instance_id)
        if self.execution_id is not None:
            query.execution_id(self.execution_id)
        if self.activity_id is not None:
            query.activity_id(self.activity_id)
        if self.cause_incident_id is not None:
            query.cause_incident_id(self.cause_incident_id)
        if self.root_cause_incident_id is not None:
            query.root_cause_incident_id(self.root_cause_incident_id)
        if self.configuration is not None:
            query.configuration(self.configuration)
        if self.open:
            query.open()
        if self.resolved:
            query.resolved()
        if self.deleted:
            query.deleted()
        if self.tenant_ids:
            query.tenant_id_in(*self.tenant_ids)
        if self.job_definition_ids:
            query.job_definition_id_in(*self.job_definition_ids)


class HistoricIncidentDto(BaseModel):
    """Result DTO for one historic incident."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    process_definition_key: str | None = None
    process_definition_id: str | None = None
    process_instance_id: str | None = None
    execution_id: str | None = None
    root_process_instance_id: str | None = None
    create_time: datetime | None = None
    end_time: datetime | None = None
    removal_time: datetime | None = None
    incident_type: str | None = None
    activity_id: str | None = None
    cause_incident_id: str | None = None
    root_cause_incident_id: str | None = None
    configuration: str | None = None
    incident_message: str | None = None
    tenant_id: str | None = None
    job_definition_id: str | None = None
    open: bool = False
    deleted: bool = False
    resolved: bool = False

    @classmethod
    def from_incident(cls, incident: Any) -> Self:
        """Map an engine incident entity by reading its attributes."""
        return cls.model_validate(incident)
