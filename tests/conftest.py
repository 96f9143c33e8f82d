# File: tests/conftest.py

import os
import sys

import pytest
from sqlalchemy import text
from fastapi.testclient import TestClient

# 1. Add project root to path
sys.path.append(os.getcwd())

from knowledge_extractor.api.server import create_app
from knowledge_extractor.core.database.connection import connect, connect_embedded, provision_schema
from knowledge_extractor.features.analysis.data.repository import build_repository
from knowledge_extractor.features.analysis.service.api import AnalysisService
from knowledge_extractor.features.analysis.service.search import SearchService
from knowledge_extractor.features.intelligence.data.stub_adapter import StubLLMAdapter

# Postgres tests only run when a disposable database is provided
TEST_POSTGRES_URL = os.getenv("TEST_POSTGRES_URL")


@pytest.fixture(scope="function")
def db_handle(tmp_path):
    """
    A fresh embedded database per test, schema provisioned.
    """
    handle = connect_embedded(str(tmp_path / "test_knowledge.db"))
    provision_schema(handle)
    yield handle
    handle.dispose()


@pytest.fixture(scope="function")
def db_session(db_handle):
    """
    Provides a session for the test to inspect rows directly.
    """
    session = db_handle.session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_handle):
    return build_repository(db_handle)


@pytest.fixture
def analysis_service(repo):
    return AnalysisService(llm=StubLLMAdapter(), repo=repo)


@pytest.fixture
def search_service(repo):
    return SearchService(repo=repo)


@pytest.fixture
def client(analysis_service, search_service):
    app = create_app(analysis_service=analysis_service, search_service=search_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def pg_handle(tmp_path):
    """
    A Postgres handle with an empty analyses table.
    Skipped unless TEST_POSTGRES_URL points at a reachable server.
    """
    if not TEST_POSTGRES_URL:
        pytest.skip("TEST_POSTGRES_URL not set")

    handle = connect(TEST_POSTGRES_URL, str(tmp_path / "unused.db"))
    if handle.dialect.value != "postgresql":
        handle.dispose()
        pytest.skip("Postgres at TEST_POSTGRES_URL is unreachable")

    provision_schema(handle)
    with handle.engine.begin() as conn:
        conn.execute(text('TRUNCATE TABLE "analyses";'))

    yield handle
    handle.dispose()
