# tests/test_database.py
import pytest
from sqlalchemy import text

from database import check_connection, get_session_context
from models import Room, RoomStatus


def test_check_connection():
    assert check_connection() is True


def test_session_context_commits(session_factory, monkeypatch):
    monkeypatch.setattr("database.SessionLocal", session_factory)

    with get_session_context() as db:
        db.add(Room(name="C301", price_per_month=4000, status=RoomStatus.AVAILABLE))

    with session_factory() as db:
        assert db.query(Room).filter(Room.name == "C301").count() == 1


def test_session_context_rolls_back_on_error(session_factory, monkeypatch):
    monkeypatch.setattr("database.SessionLocal", session_factory)

    with pytest.raises(RuntimeError):
        with get_session_context() as db:
            db.add(Room(name="C302", price_per_month=4000, status=RoomStatus.AVAILABLE))
            db.flush()
            raise RuntimeError("boom")

    with session_factory() as db:
        assert db.execute(text("SELECT count(*) FROM rooms WHERE name = 'C302'")).scalar() == 0


def test_model_tables_match_the_migration():
    from models import Base

    assert set(Base.metadata.tables) == {
        "rooms",
        "rentals",
        "tenant_information",
        "electricity_usages",
        "utility_rates",
        "invoices",
        "number_sequences",
    }
