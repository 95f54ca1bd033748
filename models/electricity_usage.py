# models/electricity_usage.py
"""
ElectricityUsage model - append-only meter reading ledger per room.

Readings are inserted by the usage service and never edited. The only
permitted change is the one-way ``is_billed`` flag flip done by billing;
the ``before_update`` hook below enforces this at the ORM layer.
"""
from sqlalchemy import Column, Integer, Date, Boolean, DateTime, ForeignKey, Index, event, func
from sqlalchemy.orm import relationship
from sqlalchemy.orm.attributes import get_history

from exceptions import LedgerImmutableError
from .base import Base

READING_COLUMNS = ("room_id", "reading_date", "previous_units", "current_units", "units_used")


class ElectricityUsage(Base):
     """One meter reading and the consumption derived from the previous one."""
     __tablename__ = "electricity_usages"
     __table_args__ = (
          Index("ix_electricity_usages_room_id_reading_date", "room_id", "reading_date"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
     reading_date = Column(Date, nullable=False)
     previous_units = Column(Integer, default=0, nullable=False)
     current_units = Column(Integer, nullable=False)
     units_used = Column(Integer, default=0, nullable=False)
     is_billed = Column(Boolean, default=False, nullable=False, index=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     room = relationship("Room", back_populates="electricity_usages")

     def __repr__(self):
          return (
               f"<ElectricityUsage(id={self.id}, room_id={self.room_id}, "
               f"units_used={self.units_used}, is_billed={self.is_billed})>"
          )


@event.listens_for(ElectricityUsage, "before_update")
def _reject_ledger_mutation(mapper, connection, target: ElectricityUsage):
     for field in READING_COLUMNS:
          if get_history(target, field).has_changes():
               raise LedgerImmutableError(target.id, field)

     billed = get_history(target, "is_billed")
     if billed.has_changes() and True in (billed.deleted or ()):
          raise LedgerImmutableError(target.id, "is_billed")
