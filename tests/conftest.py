import pytest
from fastapi.testclient import TestClient

from exam_roster.config import Settings
from exam_roster.database import Database
from exam_roster.main_api import create_app
from exam_roster.models import StudentRecord
from exam_roster.persistence import SqlAlchemyPersistence
from exam_roster.roster_store import RosterStore


def students(*rolls):
    return [StudentRecord(roll_no = r) for r in rolls]


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'roster.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def persistence(database):
    return SqlAlchemyPersistence(database)


@pytest.fixture
def store(persistence):
    persistence.add_room("A", 2)
    persistence.add_room("B", 3)
    return RosterStore(persistence)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url = f"sqlite:///{tmp_path / 'api.db'}",
        export_dir = tmp_path / "exports",
        max_upload_bytes = 4096,
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
