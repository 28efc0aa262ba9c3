"""
Unit tests for IndexReconciler.

Covers the internal apply() layer (what actually happened in the index
store) separately from the reconcile() boundary, which must report
SUCCESS whatever apply() returned.
"""

import logging

import pytest
from pydantic import ValidationError

from tests.unit_test.helpers import STACK_ID, FakeIndexStore, make_index_event
from vectorkb.custom_resource import ResponseStatus
from vectorkb.index.base import IndexRef, IndexSpec, ReconcileOutcome
from vectorkb.index.reconciler import IndexReconciler, parse_change_event

parse = parse_change_event


class TestCreate:
    """Create and Update events"""

    def test_create_against_empty_store(self):
        """Exactly one create call with a 1024-dimension vector field; physical id is the index name."""
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)

        result = reconciler.reconcile(parse(make_index_event("Create")))

        assert store.calls_of("create") == ["kb-1"]
        body = store.create_requests[0].to_body()
        assert body["mappings"]["properties"]["v"]["type"] == "knn_vector"
        assert body["mappings"]["properties"]["v"]["dimension"] == 1024
        assert result.status == ResponseStatus.SUCCESS
        assert result.physical_id == "kb-1"
        assert result.stack_id == STACK_ID

    def test_create_twice_is_idempotent(self):
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)
        event = parse(make_index_event("Create"))

        first = reconciler.reconcile(event)
        second = reconciler.reconcile(event)

        assert first.to_response() == second.to_response()
        assert store.calls_of("create") == ["kb-1"]
        assert store.calls_of("exists") == ["kb-1", "kb-1"]

    def test_existing_index_is_left_untouched(self):
        store = FakeIndexStore(indexes={"kb-1": {"mappings": "unchanged"}})
        reconciler = IndexReconciler(store)

        result = reconciler.apply(parse(make_index_event("Create")))

        assert result.success
        assert result.outcome == ReconcileOutcome.ALREADY_PRESENT
        assert store.calls_of("create") == []
        assert store.indexes["kb-1"] == {"mappings": "unchanged"}

    def test_update_creates_missing_index(self):
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)

        result = reconciler.apply(parse(make_index_event("Update", indexName="kb-2", vectorField="kb-2")))

        assert result.outcome == ReconcileOutcome.CREATED
        assert "kb-2" in store.indexes

    def test_existence_is_queried_on_every_event(self):
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)

        reconciler.reconcile(parse(make_index_event("Create")))
        del store.indexes["kb-1"]  # removed out of band
        reconciler.reconcile(parse(make_index_event("Update")))

        assert store.calls_of("create") == ["kb-1", "kb-1"]

    def test_string_dimension_is_coerced(self):
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)

        reconciler.apply(parse(make_index_event("Create", vectorDimension="256")))

        assert store.create_requests[0].vector_fields[0].dimension == 256

    @pytest.mark.parametrize("failing_call", ["exists", "create"])
    def test_store_failure_is_contained(self, failing_call, caplog):
        store = FakeIndexStore(fail_on=(failing_call,))
        reconciler = IndexReconciler(store)
        event = parse(make_index_event("Create"))

        internal = reconciler.apply(event)
        with caplog.at_level(logging.ERROR, logger="vectorkb.index.reconciler"):
            boundary = reconciler.reconcile(event)

        assert internal.success is False
        assert internal.outcome == ReconcileOutcome.FAILED
        assert "connection reset by peer" in internal.error
        assert boundary.status == ResponseStatus.SUCCESS
        assert boundary.physical_id == "kb-1"
        assert "Error creating index kb-1" in caplog.text


class TestDelete:
    """Delete events"""

    def test_delete_existing_index(self):
        store = FakeIndexStore(indexes={"kb-1": {}})
        reconciler = IndexReconciler(store)

        internal = reconciler.apply(parse(make_index_event("Delete")))

        assert internal.outcome == ReconcileOutcome.DELETED
        assert store.indexes == {}

    def test_delete_of_absent_index_reports_success(self, caplog):
        store = FakeIndexStore()
        reconciler = IndexReconciler(store)
        event = parse(make_index_event("Delete"))

        with caplog.at_level(logging.WARNING, logger="vectorkb.index.reconciler"):
            result = reconciler.reconcile(event)

        assert result.status == ResponseStatus.SUCCESS
        assert result.physical_id == "kb-1"
        assert store.calls_of("delete") == ["kb-1"]
        assert "Index kb-1 not found" in caplog.text

    def test_delete_failure_is_contained(self):
        store = FakeIndexStore(indexes={"kb-1": {}}, fail_on=("delete",))
        reconciler = IndexReconciler(store)
        event = parse(make_index_event("Delete"))

        assert reconciler.apply(event).success is False
        assert reconciler.reconcile(event).status == ResponseStatus.SUCCESS

    def test_rollback_of_rejected_create_deletes_index(self):
        """A Delete whose mapping properties would not pass Create validation still completes"""
        store = FakeIndexStore(indexes={"kb-1": {}})
        event = parse(make_index_event("Delete", vectorDimension="0", vectorField=""))

        result = IndexReconciler(store).reconcile(event)

        assert result.status == ResponseStatus.SUCCESS
        assert result.physical_id == "kb-1"
        assert store.calls_of("delete") == ["kb-1"]

    def test_delete_does_not_query_existence(self):
        store = FakeIndexStore(indexes={"kb-1": {}})
        IndexReconciler(store).reconcile(parse(make_index_event("Delete")))

        assert store.calls_of("exists") == []


class TestParseChangeEvent:
    """Raw event validation"""

    def test_delete_carries_only_index_name(self):
        event = parse(make_index_event("Delete", vectorDimension="0"))

        assert type(event.properties) is IndexRef
        assert event.properties.index_name == "kb-1"

    def test_create_carries_full_spec(self):
        event = parse(make_index_event("Create"))

        assert isinstance(event.properties, IndexSpec)
        assert event.properties.vector_dimension == 1024

    def test_create_with_invalid_dimension_is_rejected(self):
        with pytest.raises(ValidationError):
            parse(make_index_event("Create", vectorDimension="0"))

    def test_delete_without_index_name_is_rejected(self):
        event = make_index_event("Delete")
        del event["ResourceProperties"]["indexName"]

        with pytest.raises(ValidationError):
            parse(event)


class TestResponse:
    def test_wire_format(self):
        result = IndexReconciler(FakeIndexStore()).reconcile(parse(make_index_event("Create")))

        assert result.to_response() == {
            "Status": "SUCCESS",
            "RequestId": "b2d7c1a0-0d4e-4c55-9c0a-1f2e3d4c5b6a",
            "LogicalResourceId": "VectorIndexCreation",
            "PhysicalResourceId": "kb-1",
            "StackId": STACK_ID,
            "Data": {"IndexName": "kb-1"},
        }
