"""Shared fixtures: temp SQLite database, fake object store, API client."""

import pytest
from fastapi.testclient import TestClient

from helpers import FakeStorage
from upload_broker.api.main import create_app
from upload_broker.config.settings import Settings
from upload_broker.infrastructure.db.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from upload_broker.infrastructure.db.repository import ImageRepository


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
        s3_bucket="test-bucket",
        aws_region="us-east-1",
        allowed_origin="http://localhost:5173",
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine):
    return ImageRepository(create_session_factory(engine))


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def app(settings, storage):
    return create_app(settings, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
