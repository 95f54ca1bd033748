# models/room.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Enum
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class RoomStatus(str, enum.Enum):
     """Occupancy status of a room."""
     AVAILABLE = "available"
     OCCUPIED = "occupied"
     MAINTENANCE = "maintenance"


class Room(TimestampMixin, Base):
     """
     Room model - owned by the room catalog.

     The engine only reads ``price_per_month`` and flips ``status`` between
     available and occupied as a side effect of the rental lifecycle.
     """
     __tablename__ = "rooms"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=True)
     status = Column(
          Enum(
               RoomStatus,
               name="room_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=RoomStatus.AVAILABLE,
          nullable=False,
          index=True,
     )
     price_per_month = Column(Numeric(10, 2), nullable=False)

     # Relationships
     rentals = relationship("Rental", back_populates="room")
     electricity_usages = relationship("ElectricityUsage", back_populates="room")

     def __repr__(self):
          return f"<Room(id={self.id}, name='{self.name}', status='{self.status.value}')>"

     @property
     def is_available(self) -> bool:
          return self.status == RoomStatus.AVAILABLE
