"""
Shared pytest fixtures: isolated settings, a temp database and an API client
with "today" pinned to a fixed date.
"""

import pytest
from fastapi.testclient import TestClient

from habitcheck.api.app import create_app
from habitcheck.api.dependencies import get_current_time, get_reference_date
from habitcheck.config import HabitCheckSettings
from habitcheck.core.database import HabitDatabase
from tests.factories import REFERENCE_DATE, REPORT_TIME


@pytest.fixture
def settings(tmp_path):
    return HabitCheckSettings(
        DATA_DIR=tmp_path / "data",
        BACKUP_DIR=tmp_path / "backups",
        MAX_BACKUPS=3,
        LOG_FILE=None,
        ENVIRONMENT="testing",
    )


@pytest.fixture
def database(settings):
    return HabitDatabase(settings.database_path, settings.BACKUP_DIR, settings.MAX_BACKUPS)


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.dependency_overrides[get_reference_date] = lambda: REFERENCE_DATE
    app.dependency_overrides[get_current_time] = lambda: REPORT_TIME
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
