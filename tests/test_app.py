"""Application wiring: settings, database bootstrap and startup failures."""

import logging
import os
import sqlite3

import pytest
from fastapi.testclient import TestClient

from oldcars_api.app.core.config import Settings
from oldcars_api.app.core.db import ConnectionPool, init_db, resolve_database_path
from oldcars_api.app.core.errors import CarStoreError, ErrorKind
from oldcars_api.app.core.logging_config import UVICORN_LOGGERS, setup_logging
from oldcars_api.app.main import create_app


class TestResolveDatabasePath:
    def test_absolute_path_is_kept(self, tmp_path):
        path = str(tmp_path / "cars.db")
        assert resolve_database_path(path) == path

    def test_sqlite_url_is_unwrapped(self, tmp_path):
        path = str(tmp_path / "cars.db")
        assert resolve_database_path(f"sqlite:///{path}") == path

    def test_relative_path_is_anchored_to_the_package(self):
        resolved = resolve_database_path("oldcars.db")
        assert os.path.isabs(resolved)
        assert resolved.endswith(os.path.join("oldcars_api", "oldcars.db"))


class TestConnectionPool:
    def test_ping_fails_for_unreachable_database(self, tmp_path):
        pool = ConnectionPool(str(tmp_path / "missing-dir" / "cars.db"))

        with pytest.raises(CarStoreError) as excinfo:
            pool.ping()

        assert excinfo.value.kind is ErrorKind.TRANSPORT

    def test_acquire_rolls_back_on_error(self, pool):
        with pytest.raises(RuntimeError):
            with pool.acquire() as conn:
                conn.execute("INSERT INTO car (id, document) VALUES ('x', '{}')")
                raise RuntimeError("boom")

        with pool.acquire() as conn:
            assert conn.execute("SELECT COUNT(*) FROM car").fetchone()[0] == 0

    def test_init_db_creates_car_table_and_year_index(self, db_path):
        init_db(ConnectionPool(db_path))

        conn = sqlite3.connect(db_path)
        try:
            names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master")}
        finally:
            conn.close()
        assert {"car", "migrations", "idx_car_year"} <= names


class TestCreateApp:
    def test_routes_use_the_configured_prefix(self, tmp_path):
        app = create_app(Settings(database_url=str(tmp_path / "cars.db"), api_prefix="/api/v1"))

        with TestClient(app) as client:
            assert client.get("/api/v1/cars").text == "Car list:\n"
            assert client.get("/cars").status_code == 404

    def test_startup_fails_when_database_cannot_be_opened(self, tmp_path):
        app = create_app(Settings(database_url=str(tmp_path / "missing-dir" / "cars.db")))

        with pytest.raises(CarStoreError):
            with TestClient(app):
                pass


class TestSettings:
    def test_defaults_without_environment(self, monkeypatch):
        for name in ("API_PREFIX", "PORT", "HOST", "DATABASE_URL", "DATABASE_TIMEOUT", "LOG_FILE", "DEBUG"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.api_prefix == ""
        assert settings.port == 8080
        assert settings.host == "127.0.0.1"
        assert settings.database_url == "oldcars.db"
        assert settings.database_timeout == 5.0
        assert settings.log_file is None
        assert settings.debug is False

    def test_environment_is_read_on_instantiation(self, monkeypatch):
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("API_PREFIX", "/api/v1")
        monkeypatch.setenv("DEBUG", "yes")

        settings = Settings()

        assert settings.port == 9090
        assert settings.api_prefix == "/api/v1"
        assert settings.debug is True


class TestLogging:
    @pytest.fixture
    def uvicorn_loggers(self):
        loggers = [logging.getLogger(name) for name in UVICORN_LOGGERS]
        saved = [(lg.handlers[:], lg.propagate, lg.level) for lg in loggers]
        yield loggers
        for lg, (handlers, propagate, level) in zip(loggers, saved):
            lg.handlers[:] = handlers
            lg.propagate = propagate
            lg.setLevel(level)

    def test_uvicorn_records_go_through_root_handlers(self, uvicorn_loggers):
        stray = logging.StreamHandler()
        for lg in uvicorn_loggers:
            lg.addHandler(stray)
            lg.propagate = False

        setup_logging("debug")

        for lg in uvicorn_loggers:
            assert lg.handlers == []
            assert lg.propagate is True
            assert lg.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, uvicorn_loggers):
        setup_logging("chatty")

        assert all(lg.level == logging.INFO for lg in uvicorn_loggers)
