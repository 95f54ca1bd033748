# tests/test_usage_service.py
import threading
from datetime import date

import pytest

from exceptions import (
    InvalidAmountError,
    LedgerImmutableError,
    NonMonotonicReadingError,
    ReadingOutOfOrderError,
    RoomNotFoundError,
)
from models import ElectricityUsage
from services.usage_service import get_latest_reading, list_readings, record_reading


def test_first_reading_starts_from_zero(db, make_room):
    room = make_room()

    usage = record_reading(db, room.id, date(2025, 1, 31), 120)

    assert usage.previous_units == 0
    assert usage.current_units == 120
    assert usage.units_used == 120
    assert usage.is_billed is False


def test_reading_must_exceed_latest(db, make_room):
    room = make_room()
    record_reading(db, room.id, date(2025, 1, 31), 120)

    with pytest.raises(NonMonotonicReadingError) as exc_info:
        record_reading(db, room.id, date(2025, 2, 28), 100)
    assert exc_info.value.current_units == 100
    assert exc_info.value.floor == 120
    assert exc_info.value.details == {"current_units": 100, "floor": 120}
    assert exc_info.value.status_code == 422

    with pytest.raises(NonMonotonicReadingError):
        record_reading(db, room.id, date(2025, 2, 28), 120)

    assert db.query(ElectricityUsage).count() == 1


def test_zero_is_not_a_valid_first_reading(db, make_room):
    room = make_room()
    with pytest.raises(NonMonotonicReadingError) as exc_info:
        record_reading(db, room.id, date(2025, 1, 31), 0)
    assert exc_info.value.floor == 0


def test_negative_reading(db, make_room):
    room = make_room()
    with pytest.raises(InvalidAmountError):
        record_reading(db, room.id, date(2025, 1, 31), -5)


def test_consumption_is_derived_from_previous_reading(db, make_room):
    room = make_room()
    record_reading(db, room.id, date(2025, 1, 31), 120)
    record_reading(db, room.id, date(2025, 2, 28), 200)
    third = record_reading(db, room.id, date(2025, 2, 28), 230)

    assert (third.previous_units, third.units_used) == (200, 30)
    assert get_latest_reading(db, room.id).id == third.id


def test_backdated_reading_is_rejected(db, make_room):
    room = make_room()
    record_reading(db, room.id, date(2025, 2, 28), 120)

    with pytest.raises(ReadingOutOfOrderError) as exc_info:
        record_reading(db, room.id, date(2025, 1, 31), 150)
    assert exc_info.value.details["latest_reading_date"] == "2025-02-28"


def test_rooms_have_independent_meters(db, make_room):
    room_a = make_room(name="A101")
    room_b = make_room(name="B202")
    record_reading(db, room_a.id, date(2025, 1, 31), 120)

    usage = record_reading(db, room_b.id, date(2025, 1, 31), 50)

    assert usage.previous_units == 0
    assert usage.units_used == 50


def test_unknown_room(db):
    with pytest.raises(RoomNotFoundError):
        record_reading(db, 999, date(2025, 1, 31), 10)
    with pytest.raises(RoomNotFoundError):
        list_readings(db, 999)


def test_list_readings(db, make_room):
    room = make_room()
    assert get_latest_reading(db, room.id) is None

    first = record_reading(db, room.id, date(2025, 1, 31), 120)
    second = record_reading(db, room.id, date(2025, 2, 28), 200)
    first.is_billed = True
    db.commit()

    assert [u.id for u in list_readings(db, room.id)] == [first.id, second.id]
    assert [u.id for u in list_readings(db, room.id, unbilled_only=True)] == [second.id]


def test_reading_values_cannot_be_changed(db, make_room):
    room = make_room()
    usage = record_reading(db, room.id, date(2025, 1, 31), 120)

    usage.current_units = 999
    with pytest.raises(LedgerImmutableError) as exc_info:
        db.flush()
    assert exc_info.value.details["field"] == "current_units"
    db.rollback()

    assert db.get(ElectricityUsage, usage.id).current_units == 120


def test_billed_flag_cannot_be_reset(db, make_room):
    room = make_room()
    usage = record_reading(db, room.id, date(2025, 1, 31), 120)
    usage.is_billed = True
    db.commit()

    usage.is_billed = False
    with pytest.raises(LedgerImmutableError):
        db.flush()
    db.rollback()


def test_concurrent_readings_keep_the_chain_consistent(db, session_factory, make_room):
    room = make_room()
    room_id = room.id
    db.close()

    values = [100, 200, 300, 400, 500]
    barrier = threading.Barrier(len(values))
    unexpected = []

    def read_meter(units):
        session = session_factory()
        try:
            barrier.wait()
            record_reading(session, room_id, date(2025, 1, 31), units)
        except NonMonotonicReadingError:
            pass
        except Exception as exc:
            unexpected.append(repr(exc))
        finally:
            session.close()

    threads = [threading.Thread(target=read_meter, args=(v,)) for v in values]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert unexpected == []
    session = session_factory()
    try:
        readings = session.query(ElectricityUsage).order_by(ElectricityUsage.id).all()
    finally:
        session.close()

    assert readings
    floor = 0
    for reading in readings:
        assert reading.previous_units == floor
        assert reading.current_units > floor
        assert reading.units_used == reading.current_units - floor
        floor = reading.current_units
