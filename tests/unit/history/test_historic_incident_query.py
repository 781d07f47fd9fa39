"""Tests for the historic incident query type."""

from datetime import datetime

import pytest

from sieve.exceptions import BindingError, ConversionError, SortValidationError
from sieve.history import HistoricIncidentDto, HistoricIncidentQueryDto
from sieve.sorting import SortOrder
from sieve.testing import Call, QueryScenario, RecordingEngine, RecordingQuery

MARKERS = [("open", "open"), ("resolved", "resolved"), ("deleted", "deleted")]


def build(parameters: dict) -> RecordingQuery:
    query = RecordingQuery()
    HistoricIncidentQueryDto.from_parameters(parameters).to_query(RecordingEngine(query))
    return query


class TestBinding:
    def test_failed_job_scenario(self):
        dto = HistoricIncidentQueryDto.from_parameters(
            {
                "incidentType": "failedJob",
                "resolved": "true",
                "sortBy": "createTime",
                "sortOrder": "asc",
            }
        )

        assert dto.incident_type == "failedJob"
        assert dto.resolved is True
        assert dto.model_fields_set == {"incident_type", "resolved", "sorting"}

        query = RecordingQuery()
        dto.to_query(RecordingEngine(query))

        assert query.filter_calls() == [
            Call("incident_type", ("failedJob",)),
            Call("resolved", ()),
        ]
        assert query.ordering_calls() == [Call("order_by_create_time", ()), Call("asc", ())]

    def test_invalid_boolean(self):
        with pytest.raises(ConversionError) as exc_info:
            HistoricIncidentQueryDto.from_parameters({"open": "notabool"})

        assert isinstance(exc_info.value, BindingError)
        assert exc_info.value.parameter == "open"
        assert exc_info.value.value == "notabool"

    def test_bogus_sort_field(self):
        with pytest.raises(SortValidationError):
            HistoricIncidentQueryDto.from_parameters({"sortBy": "bogusField"})

    def test_tenant_ids_keep_order(self):
        dto = HistoricIncidentQueryDto.from_parameters({"tenantIdIn": "t2,t1,t3"})

        assert dto.tenant_ids == ["t2", "t1", "t3"]


class TestFilters:
    @pytest.mark.parametrize(
        ("parameter", "value", "call"),
        [
            ("incidentId", "inc-1", "incident_id"),
            ("incidentType", "failedJob", "incident_type"),
            ("incidentMessage", "boom", "incident_message"),
            ("processDefinitionId", "pd-1", "process_definition_id"),
            ("processInstanceId", "pi-1", "process_instance_id"),
            ("executionId", "ex-1", "execution_id"),
            ("activityId", "task", "activity_id"),
            ("causeIncidentId", "inc-0", "cause_incident_id"),
            ("rootCauseIncidentId", "inc-root", "root_cause_incident_id"),
            ("configuration", "job-1", "configuration"),
        ],
    )
    def test_string_filters(self, parameter, value, call):
        assert build({parameter: value}).calls == [Call(call, (value,))]

    @pytest.mark.parametrize(("parameter", "call"), MARKERS)
    def test_marker_applied_when_true(self, parameter, call):
        assert build({parameter: "true"}).calls == [Call(call, ())]

    @pytest.mark.parametrize(("parameter", "call"), MARKERS)
    def test_marker_false_behaves_like_unset(self, parameter, call):
        assert build({parameter: "false"}).calls == build({}).calls == []

    def test_list_filters_expand_arguments(self):
        query = build({"tenantIdIn": "a,b", "jobDefinitionIdIn": ["j1", "j2"]})

        assert query.calls == [
            Call("tenant_id_in", ("a", "b")),
            Call("job_definition_id_in", ("j1", "j2")),
        ]

    def test_empty_lists_make_no_call(self):
        assert build({"tenantIdIn": "", "jobDefinitionIdIn": " , "}).calls == []

    def test_unknown_parameters_make_no_call(self):
        assert build({"colour": "blue"}).calls == []


class TestSorting:
    @pytest.mark.parametrize(
        ("field", "call"),
        [
            ("incidentId", "order_by_incident_id"),
            ("incidentMessage", "order_by_incident_message"),
            ("createTime", "order_by_create_time"),
            ("endTime", "order_by_end_time"),
            ("incidentType", "order_by_incident_type"),
            ("executionId", "order_by_execution_id"),
            ("activityId", "order_by_activity_id"),
            ("processInstanceId", "order_by_process_instance_id"),
            ("processDefinitionId", "order_by_process_definition_id"),
            ("causeIncidentId", "order_by_cause_incident_id"),
            ("rootCauseIncidentId", "order_by_root_cause_incident_id"),
            ("configuration", "order_by_configuration"),
            ("tenantId", "order_by_tenant_id"),
            ("incidentState", "order_by_incident_state"),
        ],
    )
    def test_every_whitelisted_field(self, field, call):
        query = build({"sortBy": field, "sortOrder": "desc"})

        assert query.calls == [Call(call, ()), Call("desc", ())]

    def test_criteria_applied_in_request_order(self):
        with QueryScenario(HistoricIncidentQueryDto) as scenario:
            (
                scenario.given_parameters(
                    sortBy=["endTime", "incidentId"], sortOrder=["desc", "asc"]
                ).should_order_by(
                    ("order_by_end_time", SortOrder.DESC),
                    ("order_by_incident_id", SortOrder.ASC),
                )
            )


class TestBody:
    def test_body_binding(self):
        with QueryScenario(HistoricIncidentQueryDto) as scenario:
            (
                scenario.given_body(
                    {
                        "incidentType": "failedJob",
                        "open": False,
                        "deleted": True,
                        "tenantIdIn": ["t1"],
                        "sorting": [{"sortBy": "createTime", "sortOrder": "desc"}],
                    }
                )
                .should_call("incident_type", "failedJob")
                .should_call("deleted")
                .should_call("tenant_id_in", "t1")
                .should_not_call("open")
                .should_make_filter_calls(3)
                .should_order_by(("order_by_create_time", SortOrder.DESC))
            )

    @pytest.mark.parametrize("value", ["yes", "on", "1", "True", "t", 1])
    def test_body_markers_accept_only_booleans(self, value):
        with QueryScenario(HistoricIncidentQueryDto) as scenario:
            scenario.given_body({"open": value}).should_raise(BindingError)

    def test_body_rejects_unknown_top_level_sort_field(self):
        with QueryScenario(HistoricIncidentQueryDto) as scenario:
            scenario.given_body({"sortBy": "bogusField", "sortOrder": "asc"}).should_raise(
                SortValidationError
            )

    def test_body_top_level_sorting(self):
        with QueryScenario(HistoricIncidentQueryDto) as scenario:
            scenario.given_body({"sortBy": "incidentType", "sortOrder": "desc"}).should_order_by(
                ("order_by_incident_type", SortOrder.DESC)
            )


class TestHistoricIncidentDto:
    def test_maps_entity_attributes(self):
        class Incident:
            id = "inc-1"
            incident_type = "failedJob"
            create_time = datetime(2024, 5, 1, 12, 0)
            end_time = None
            open = True
            tenant_id = "t1"

        dto = HistoricIncidentDto.from_incident(Incident())

        assert dto.id == "inc-1"
        assert dto.incident_type == "failedJob"
        assert dto.create_time == datetime(2024, 5, 1, 12, 0)
        assert dto.open is True
        assert dto.resolved is False
        assert dto.process_instance_id is None
