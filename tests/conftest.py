import pytest

from domain.models import seed_data
from services.state_store import StateStore
from storage.db import Database
from storage.repos import AppDataRepo

from helpers import FakeClock, ms


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=str(tmp_path / "studyflow.db"))
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def repo(db):
    return AppDataRepo(db)


@pytest.fixture
def store(repo):
    return StateStore.open(repo)


@pytest.fixture
def clock():
    return FakeClock(ms(2026, 6, 10, 9, 0))


@pytest.fixture
def seed():
    return seed_data()
