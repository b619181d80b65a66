"""Shared fixtures: a throwaway SQLite database per test."""

import pytest
from fastapi.testclient import TestClient

from oldcars_api.app.core.config import Settings
from oldcars_api.app.core.db import ConnectionPool, init_db
from oldcars_api.app.main import create_app
from oldcars_api.app.services.car_service import CarRepository


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "oldcars.db")


@pytest.fixture
def pool(db_path):
    pool = ConnectionPool(db_path)
    init_db(pool)
    return pool


@pytest.fixture
def repository(pool):
    return CarRepository(pool)


@pytest.fixture
def app(db_path):
    return create_app(Settings(database_url=db_path))


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
