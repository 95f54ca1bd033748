# services/usage_service.py
"""
Electricity Usage Service - append-only meter reading ledger.

When a reading is recorded for a room:
1. Find the room's latest reading (by reading_date, then id); floor = its current_units, or 0
2. Reject readings that do not exceed the floor or are dated before the latest one
3. Store previous_units = floor and units_used = current_units - floor

Readings are never updated or deleted; billing only flips ``is_billed``.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from exceptions import InvalidAmountError, NonMonotonicReadingError, ReadingOutOfOrderError, RoomNotFoundError
from models import ElectricityUsage, Room
from services.locks import meter_locks

logger = logging.getLogger(__name__)


def get_latest_reading(db: Session, room_id: int) -> Optional[ElectricityUsage]:
     """Most recent reading of the room, or None if it has no readings yet."""
     return (
          db.query(ElectricityUsage)
          .filter(ElectricityUsage.room_id == room_id)
          .order_by(desc(ElectricityUsage.reading_date), desc(ElectricityUsage.id))
          .first()
     )


def list_readings(db: Session, room_id: int, unbilled_only: bool = False) -> List[ElectricityUsage]:
     if db.query(Room.id).filter(Room.id == room_id).first() is None:
          raise RoomNotFoundError(room_id)
     query = db.query(ElectricityUsage).filter(ElectricityUsage.room_id == room_id)
     if unbilled_only:
          query = query.filter(ElectricityUsage.is_billed.is_(False))
     return query.order_by(ElectricityUsage.reading_date, ElectricityUsage.id).all()


def record_reading(db: Session, room_id: int, reading_date: date, current_units: int) -> ElectricityUsage:
     """
     Append a meter reading for a room.

     Readings of the same room are serialized; the floor is read and the new
     row inserted within one locked section and one transaction.

     Raises:
          InvalidAmountError: current_units is negative
          RoomNotFoundError: Unknown room
          NonMonotonicReadingError: current_units does not exceed the latest reading
          ReadingOutOfOrderError: reading_date is before the latest reading's date
     """
     if current_units < 0:
          raise InvalidAmountError("current_units", current_units)

     with meter_locks.hold(room_id):
          try:
               room = (
                    db.query(Room)
                    .filter(Room.id == room_id)
                    .with_for_update()
                    .first()
               )
               if room is None:
                    raise RoomNotFoundError(room_id)

               latest = get_latest_reading(db, room_id)
               floor = latest.current_units if latest is not None else 0
               if current_units <= floor:
                    raise NonMonotonicReadingError(current_units, floor)
               if latest is not None and reading_date < latest.reading_date:
                    raise ReadingOutOfOrderError(reading_date, latest.reading_date)

               usage = ElectricityUsage(
                    room_id=room_id,
                    reading_date=reading_date,
                    previous_units=floor,
                    current_units=current_units,
                    units_used=current_units - floor,
                    is_billed=False,
               )
               db.add(usage)
               db.commit()
          except Exception:
               db.rollback()
               raise

     logger.info(
          "Recorded reading for room %s on %s: %s units (%s used)",
          room_id, reading_date, current_units, usage.units_used,
     )
     return usage
