"""Shared test fixtures."""
import json
from datetime import date, timedelta

import pytest

from medibook import create_app
from medibook.config import TestConfig
from medibook.extensions import db
from medibook.stores.memory_store import MemoryStore
from medibook.stores.seed import seed_sample_data
from medibook.stores.sql_store import SqlStore

PATIENT = {"id": "2", "name": "Patient User", "email": "patient@medibook.com", "role": "patient"}
ADMIN = {"id": "1", "name": "Admin User", "email": "admin@medibook.com", "role": "admin"}

# sample appointment: Dr. Jane Smith, Monday 2025-05-05 at 10:00
SAMPLE_MONDAY = date(2025, 5, 5)


class MemoryTestConfig(TestConfig):
    DATA_BACKEND = "memory"


def next_weekday(weekday, today=None):
    """First date strictly after today falling on `weekday` (0 = Monday)."""
    today = today or date.today()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


@pytest.fixture
def app():
    """App on an in-memory sqlite database loaded with the sample records."""
    app = create_app(TestConfig)
    with app.app_context():
        seed_sample_data()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def memory_app():
    app = create_app(MemoryTestConfig)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Both data store strategies, each starting from the sample records."""
    if request.param == "memory":
        yield MemoryStore(seed=True)
        return

    app = create_app(TestConfig)
    with app.app_context():
        seed_sample_data()
        yield SqlStore()
        db.session.remove()
        db.drop_all()


def _sign_in(client, profile):
    with client.session_transaction() as sess:
        sess["medibook.auth"] = json.dumps(profile)


@pytest.fixture
def patient_client(client):
    _sign_in(client, PATIENT)
    return client


@pytest.fixture
def admin_client(client):
    _sign_in(client, ADMIN)
    return client
