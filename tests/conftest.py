"""
Shared fixtures: every test gets its own SQLite file.
"""

import pytest
from fastapi.testclient import TestClient

from ledger_api.core.config import Settings
from ledger_api.database import Database
from ledger_api.main import create_app
from ledger_api.models import User
from ledger_api.services import LedgerEngine


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        TRANSFER_LOCK_TIMEOUT=10.0,
        LIST_BATCH_SIZE=2,  # small batches exercise the lazy listing
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(settings):
    database = Database.from_settings(settings)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def ledger(database):
    return LedgerEngine(database, lock_timeout=10.0, batch_size=2)


@pytest.fixture
def owner_id(database):
    """A user row to own accounts in engine-level tests."""
    with database.session() as db:
        user = User(name="Owner", email="owner@example.com", password_hash="x")
        db.add(user)
        db.commit()
        return user.id
