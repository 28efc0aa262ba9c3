import sys

import pytest

from tests.unit_test.helpers import INDEX_HANDLER, INGESTION_HANDLER, FakeIndexStore, fresh_import


@pytest.fixture
def index_env(monkeypatch):
    monkeypatch.setenv("OPENSEARCH_DOMAIN", "https://abc123.us-east-1.aoss.amazonaws.com")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")


@pytest.fixture
def fake_store():
    return FakeIndexStore()


@pytest.fixture
def index_handler(index_env, fake_store, monkeypatch):
    from vectorkb.index.reconciler import IndexReconciler

    module = fresh_import(INDEX_HANDLER)
    monkeypatch.setattr(module, "index_reconciler", IndexReconciler(fake_store))
    yield module
    sys.modules.pop(INDEX_HANDLER, None)


@pytest.fixture
def ingestion_handler(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    module = fresh_import(INGESTION_HANDLER)
    yield module
    sys.modules.pop(INGESTION_HANDLER, None)
