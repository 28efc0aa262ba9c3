"""Shared fakes and event builders for unit tests."""

import importlib
import sys
from typing import Any, Dict, List, Tuple

from vectorkb.exceptions import IndexNotFound
from vectorkb.index.base import IndexStore
from vectorkb.index.mapping import IndexCreationRequest

STACK_ID = "arn:aws:cloudformation:us-east-1:123456789012:stack/knowledge-base/6f1c"


class FakeIndexStore(IndexStore):
    """In-memory index store that records every call"""

    def __init__(self, indexes: Dict[str, Any] = None, fail_on: Tuple[str, ...] = ()):
        self.indexes = dict(indexes or {})
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[str, str]] = []
        self.create_requests: List[IndexCreationRequest] = []

    def _maybe_fail(self, operation: str, name: str):
        if operation in self.fail_on:
            raise ConnectionError(f"{operation} {name}: connection reset by peer")

    def exists(self, name: str) -> bool:
        self.calls.append(("exists", name))
        self._maybe_fail("exists", name)
        return name in self.indexes

    def create(self, name: str, request: IndexCreationRequest) -> None:
        self.calls.append(("create", name))
        self._maybe_fail("create", name)
        self.create_requests.append(request)
        self.indexes[name] = request.to_body()

    def delete(self, name: str) -> None:
        self.calls.append(("delete", name))
        self._maybe_fail("delete", name)
        if name not in self.indexes:
            raise IndexNotFound(name)
        del self.indexes[name]

    def calls_of(self, operation: str) -> List[str]:
        return [name for op, name in self.calls if op == operation]


def make_index_event(change_type: str = "Create", **properties) -> Dict[str, Any]:
    resource_properties = {
        "ServiceToken": "arn:aws:lambda:us-east-1:123456789012:function:create-index-provider",
        "indexName": "kb-1",
        "vectorDimension": 1024,
        "vectorField": "v",
        "textField": "t",
        "metadataField": "m",
    }
    resource_properties.update(properties)
    return {
        "RequestType": change_type,
        "ServiceToken": "arn:aws:lambda:us-east-1:123456789012:function:create-index-provider",
        "ResponseURL": "https://cloudformation-custom-resource-response-useast1.s3.amazonaws.com/signed",
        "StackId": STACK_ID,
        "RequestId": "b2d7c1a0-0d4e-4c55-9c0a-1f2e3d4c5b6a",
        "LogicalResourceId": "VectorIndexCreation",
        "ResourceType": "AWS::CloudFormation::CustomResource",
        "ResourceProperties": resource_properties,
    }


def make_ingestion_event(change_type: str = "Create", **properties) -> Dict[str, Any]:
    resource_properties = {"knowledgeBaseId": "KB12345678", "dataSourceId": "DS12345678"}
    resource_properties.update(properties)
    return {
        "RequestType": change_type,
        "StackId": STACK_ID,
        "RequestId": "0c9e8d7f-6a5b-4c3d-2e1f-0a9b8c7d6e5f",
        "LogicalResourceId": "SyncAfterCreation",
        "ResourceProperties": resource_properties,
    }


def started_job_response(job_id: str = "JOB1234567") -> Dict[str, Any]:
    return {"ingestionJob": {"ingestionJobId": job_id, "knowledgeBaseId": "KB12345678", "status": "STARTING"}}


INDEX_HANDLER = "vectorkb.handlers.index_handler"
INGESTION_HANDLER = "vectorkb.handlers.ingestion_handler"


def fresh_import(name: str):
    """Import a handler module as a cold start would, re-reading the environment"""
    sys.modules.pop(name, None)
    return importlib.import_module(name)
