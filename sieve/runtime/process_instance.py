"""Process instance query type."""

from operator import methodcaller
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, StrictBool
from typing_extensions import Self

from .. import converters
from ..converters import VariableOperator, VariableQueryParameter
from ..parameters import ParameterDescriptor, ParameterTable
from ..query import AbstractQueryDto
from ..sorting import SortWhitelist


class ProcessInstanceQuery(Protocol):
    """Engine-query handle for running process instances."""

    def process_instance_ids(self, *process_instance_ids: str) -> Any: ...
    def process_instance_business_key(self, business_key: str) -> Any: ...
    def process_definition_id(self, process_definition_id: str) -> Any: ...
    def process_definition_key(self, process_definition_key: str) -> Any: ...
    def super_process_instance_id(self, super_process_instance_id: str) -> Any: ...
    def sub_process_instance_id(self, sub_process_instance_id: str) -> Any: ...
    def incident_id(self, incident_id: str) -> Any: ...
    def incident_type(self, incident_type: str) -> Any: ...
    def incident_message(self, incident_message: str) -> Any: ...
    def active(self) -> Any: ...
    def suspended(self) -> Any: ...
    def with_incident(self) -> Any: ...
    def without_tenant_id(self) -> Any: ...
    def tenant_id_in(self, *tenant_ids: str) -> Any: ...
    def variable_value_equals(self, name: str, value: str) -> Any: ...
    def variable_value_not_equals(self, name: str, value: str) -> Any: ...
    def variable_value_greater_than(self, name: str, value: str) -> Any: ...
    def variable_value_greater_than_or_equal(self, name: str, value: str) -> Any: ...
    def variable_value_less_than(self, name: str, value: str) -> Any: ...
    def variable_value_less_than_or_equal(self, name: str, value: str) -> Any: ...
    def variable_value_like(self, name: str, value: str) -> Any: ...


class RuntimeService(Protocol):
    def create_process_instance_query(self) -> ProcessInstanceQuery: ...


class RuntimeEngine(Protocol):
    @property
    def runtime_service(self) -> RuntimeService: ...


# Filter call on the query handle for each variable operator
VARIABLE_FILTERS = {
    VariableOperator.EQUALS: "variable_value_equals",
    VariableOperator.NOT_EQUALS: "variable_value_not_equals",
    VariableOperator.GREATER_THAN: "variable_value_greater_than",
    VariableOperator.GREATER_THAN_OR_EQUALS: "variable_value_greater_than_or_equal",
    VariableOperator.LESS_THAN: "variable_value_less_than",
    VariableOperator.LESS_THAN_OR_EQUALS: "variable_value_less_than_or_equal",
    VariableOperator.LIKE: "variable_value_like",
}


class ProcessInstanceQueryDto(AbstractQueryDto[ProcessInstanceQuery]):
    """Query for running process instances.

    ``active``, ``suspended``, ``withIncident`` and ``withoutTenantId`` are
    marker filters and only apply when true. Requesting both ``active``
    and ``suspended`` is passed through; the engine decides whether that
    combination is valid.

    ``variables`` takes comma separated ``name_operator_value`` triples,
    e.g. ``variables=amount_gteq_100,status_eq_open``.
    """

    parameters = ParameterTable(
        ParameterDescriptor(
            "processInstanceIds", "process_instance_ids", converters.STRING_SET, multi_valued=True
        ),
        ParameterDescriptor("businessKey", "business_key"),
        ParameterDescriptor("processDefinitionId", "process_definition_id"),
        ParameterDescriptor("processDefinitionKey", "process_definition_key"),
        ParameterDescriptor("superProcessInstance", "super_process_instance"),
        ParameterDescriptor("subProcessInstance", "sub_process_instance"),
        ParameterDescriptor("incidentId", "incident_id"),
        ParameterDescriptor("incidentType", "incident_type"),
        ParameterDescriptor("incidentMessage", "incident_message"),
        ParameterDescriptor("active", "active", converters.BOOLEAN),
        ParameterDescriptor("suspended", "suspended", converters.BOOLEAN),
        ParameterDescriptor("withIncident", "with_incident", converters.BOOLEAN),
        ParameterDescriptor("withoutTenantId", "without_tenant_id", converters.BOOLEAN),
        ParameterDescriptor("tenantIdIn", "tenant_ids", converters.STRING_LIST, multi_valued=True),
        ParameterDescriptor("variables", "variables", converters.VARIABLE_LIST, multi_valued=True),
    )

    sort_fields = SortWhitelist(
        {
            "instanceId": methodcaller("order_by_process_instance_id"),
            "definitionKey": methodcaller("order_by_process_definition_key"),
            "definitionId": methodcaller("order_by_process_definition_id"),
            "tenantId": methodcaller("order_by_tenant_id"),
            "businessKey": methodcaller("order_by_business_key"),
        }
    )

    process_instance_ids: list[str] | None = None
    business_key: str | None = None
    process_definition_id: str | None = None
    process_definition_key: str | None = None
    super_process_instance: str | None = None
    sub_process_instance: str | None = None
    incident_id: str | None = None
    incident_type: str | None = None
    incident_message: str | None = None
    active: StrictBool | None = None
    suspended: StrictBool | None = None
    with_incident: StrictBool | None = None
    without_tenant_id: StrictBool | None = None
    tenant_ids: list[str] | None = None
    variables: list[VariableQueryParameter] | None = None

    def new_engine_query(self, engine: RuntimeEngine) -> ProcessInstanceQuery:
        return engine.runtime_service.create_process_instance_query()

    def apply_filters(self, query: ProcessInstanceQuery) -> None:
        if self.process_instance_ids:
            query.process_instance_ids(*self.process_instance_ids)
        if self.business_key is not None:
            query.process_instance_business_key(self.business_key)
        if self.process_definition_id is not None:
            query.process_definition_id(self.process_definition_id)
        if self.process_definition_key is not None:
            query.process_definition_key(self.process_definition_key)
        if self.super_process_instance is not None:
            query.super_process_instance_id(self.super_process_instance)
        if self.sub_process_instance is not None:
            query.sub_process_instance_id(self.sub_process_instance)
        if self.incident_id is not None:
            query.incident_id(self.incident_id)
        if self.incident_type is not None:
            query.incident_type(self.incident_type)
        if self.incident_message is not None:
            query.incident_message(self.incident_message)
        if self.active:
            query.active()
        if self.suspended:
            query.suspended()
        if self.with_incident:
            query.with_incident()
        if self.without_tenant_id:
            query.without_tenant_id()
        if self.tenant_ids:
            query.tenant_id_in(*self.tenant_ids)
        for variable in self.variables or ():
            getattr(query, VARIABLE_FILTERS[variable.operator])(variable.name, variable.value)


class ProcessInstanceDto(BaseModel):
    """Result DTO for one process instance."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    process_definition_id: str | None = None
    business_key: str | None = None
    case_instance_id: str | None = None
    ended: bool = False
    suspended: bool = False
    tenant_id: str | None = None

    @classmethod
    def from_process_instance(cls, instance: Any) -> Self:
        """Map an engine process instance by reading its attributes."""
        return cls.model_validate(instance)
