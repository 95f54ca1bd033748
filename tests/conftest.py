# tests/conftest.py
import os

# Must be set before config/database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_FORMAT"] = "plain"
os.environ["STORAGE_BACKEND"] = "local"

from decimal import Decimal

import pytest

from database import build_engine, build_session_factory, init_db
from document_storage import LocalDocumentStore
from models import Room, RoomStatus


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'engine.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(tmp_path):
    return LocalDocumentStore(str(tmp_path / "uploads"))


@pytest.fixture
def make_room(db):
    def _make(price="5000.00", status=RoomStatus.AVAILABLE, name="A101"):
        room = Room(name=name, price_per_month=Decimal(price), status=status)
        db.add(room)
        db.commit()
        return room

    return _make
