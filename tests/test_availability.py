# tests/test_availability.py
from datetime import date
from decimal import Decimal

import pytest

from exceptions import DateConflictError, RoomNotFoundError, RoomUnavailableError
from models import Rental, RentalStatus, RoomStatus
from services.availability_service import check_availability, find_conflicting_rental, overlaps


def add_rental(db, room, start, end, status, number):
    rental = Rental(
        user_id=1,
        room_id=room.id,
        contract_number=number,
        contract_date=date(2025, 1, 1),
        start_date=start,
        end_date=end,
        status=status,
        monthly_rent=room.price_per_month,
        total_price=Decimal("0.00"),
    )
    db.add(rental)
    db.commit()
    return rental


@pytest.mark.parametrize(
    "other_start, other_end",
    [
        (date(2025, 1, 5), date(2025, 1, 15)),   # overlaps the start
        (date(2025, 1, 25), date(2025, 2, 5)),   # overlaps the end
        (date(2025, 1, 12), date(2025, 1, 20)),  # contained
        (date(2024, 12, 1), date(2025, 3, 1)),   # contains
        (date(2025, 1, 31), date(2025, 2, 10)),  # shares the last day
        (date(2024, 12, 20), date(2025, 1, 10)), # shares the first day
    ],
)
def test_overlap_cases(other_start, other_end):
    assert overlaps(date(2025, 1, 10), date(2025, 1, 31), other_start, other_end)
    assert overlaps(other_start, other_end, date(2025, 1, 10), date(2025, 1, 31))


def test_adjacent_ranges_do_not_overlap():
    assert not overlaps(date(2025, 1, 10), date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 28))
    assert not overlaps(date(2025, 2, 1), date(2025, 2, 28), date(2025, 1, 10), date(2025, 1, 31))


def test_free_room_is_available(db, make_room):
    room = make_room()
    assert check_availability(db, room.id, date(2025, 1, 10), date(2025, 2, 9)).id == room.id


def test_unknown_room(db):
    with pytest.raises(RoomNotFoundError) as exc_info:
        check_availability(db, 999, date(2025, 1, 10), date(2025, 2, 9))
    assert exc_info.value.status_code == 404


def test_room_in_maintenance_is_unavailable(db, make_room):
    room = make_room(status=RoomStatus.MAINTENANCE)
    with pytest.raises(RoomUnavailableError) as exc_info:
        check_availability(db, room.id, date(2025, 1, 10), date(2025, 2, 9))
    assert exc_info.value.details["status"] == "maintenance"


@pytest.mark.parametrize("status", [RentalStatus.APPROVED, RentalStatus.ACTIVE])
def test_approved_and_active_rentals_block(db, make_room, status):
    room = make_room()
    blocking = add_rental(db, room, date(2025, 1, 10), date(2025, 2, 9), status, "CNT-20250101-0001")

    with pytest.raises(DateConflictError) as exc_info:
        check_availability(db, room.id, date(2025, 2, 1), date(2025, 2, 15))
    assert exc_info.value.details["conflicting_rental_id"] == blocking.id
    assert exc_info.value.status_code == 409


@pytest.mark.parametrize("status", [RentalStatus.PENDING, RentalStatus.CANCELLED, RentalStatus.COMPLETED])
def test_other_statuses_do_not_block(db, make_room, status):
    room = make_room()
    add_rental(db, room, date(2025, 1, 10), date(2025, 2, 9), status, "CNT-20250101-0001")

    check_availability(db, room.id, date(2025, 2, 1), date(2025, 2, 15))


def test_overlap_is_reported_before_room_status(db, make_room):
    room = make_room(status=RoomStatus.OCCUPIED)
    add_rental(db, room, date(2025, 1, 10), date(2025, 2, 9), RentalStatus.APPROVED, "CNT-20250101-0001")

    with pytest.raises(DateConflictError):
        check_availability(db, room.id, date(2025, 2, 1), date(2025, 2, 15))
    with pytest.raises(RoomUnavailableError):
        check_availability(db, room.id, date(2025, 3, 1), date(2025, 3, 15))


def test_find_conflicting_rental_can_exclude_a_rental(db, make_room):
    room = make_room()
    rental = add_rental(db, room, date(2025, 1, 10), date(2025, 2, 9), RentalStatus.APPROVED, "CNT-20250101-0001")

    assert find_conflicting_rental(db, room.id, date(2025, 1, 1), date(2025, 1, 10)).id == rental.id
    assert find_conflicting_rental(
        db, room.id, date(2025, 1, 1), date(2025, 1, 10), exclude_rental_id=rental.id
    ) is None
