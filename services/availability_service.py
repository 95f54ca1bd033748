# services/availability_service.py
"""
Availability guard - decides whether a room may be booked for a date range.

Two inclusive ranges [s1, e1] and [s2, e2] overlap iff s1 <= e2 and
s2 <= e1. That single test covers partial overlap on either side and
containment in either direction; the SQL query below is the same predicate.
Only approved and active rentals hold a room.
"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from exceptions import DateConflictError, RoomNotFoundError, RoomUnavailableError
from models import Rental, Room, BLOCKING_STATUSES


def overlaps(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
     """Return True if the inclusive ranges share at least one calendar day."""
     return start_a <= end_b and start_b <= end_a


def find_conflicting_rental(
     db: Session,
     room_id: int,
     start_date: date,
     end_date: date,
     exclude_rental_id: Optional[int] = None,
) -> Optional[Rental]:
     """First approved/active rental of the room whose period overlaps the given one."""
     query = db.query(Rental).filter(
          Rental.room_id == room_id,
          Rental.status.in_(BLOCKING_STATUSES),
          Rental.start_date <= end_date,
          Rental.end_date >= start_date,
     )
     if exclude_rental_id is not None:
          query = query.filter(Rental.id != exclude_rental_id)
     return query.order_by(Rental.start_date).first()


def ensure_room_bookable(db: Session, room: Room, start_date: date, end_date: date) -> None:
     """
     Apply both availability rules to an already loaded room.

     An overlapping rental is reported before the room status (an approved
     rental also marks its room occupied).

     Raises:
          DateConflictError: An approved/active rental overlaps the range
          RoomUnavailableError: Room status is not available
     """
     conflict = find_conflicting_rental(db, room.id, start_date, end_date)
     if conflict is not None:
          raise DateConflictError(room.id, conflict.id)

     if not room.is_available:
          raise RoomUnavailableError(room.id, room.status.value)


def check_availability(db: Session, room_id: int, start_date: date, end_date: date) -> Room:
     """
     Check whether ``room_id`` can be booked for ``[start_date, end_date]``.

     Pure read; used as a precondition gate and by the availability endpoint.

     Returns:
          The room, when booking is allowed

     Raises:
          RoomNotFoundError: Unknown room id
          RoomUnavailableError: Room status is not available
          DateConflictError: An approved/active rental overlaps the range
     """
     room = db.query(Room).filter(Room.id == room_id).first()
     if room is None:
          raise RoomNotFoundError(room_id)

     ensure_room_bookable(db, room, start_date, end_date)
     return room
