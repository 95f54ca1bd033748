# models/rental.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Date, Text, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin


class RentalStatus(str, enum.Enum):
     """Lifecycle status of a rental contract."""
     PENDING = "pending"
     APPROVED = "approved"
     ACTIVE = "active"
     CANCELLED = "cancelled"
     COMPLETED = "completed"


# Statuses that hold the room for their date range
BLOCKING_STATUSES = (RentalStatus.APPROVED, RentalStatus.ACTIVE)


class Rental(TimestampMixin, Base):
     """
     Rental model - the contract between a tenant and a room.

     ``monthly_rent`` is a snapshot of the room price at creation time and is
     never updated when the room price changes later.
     """
     __tablename__ = "rentals"
     __table_args__ = (
          Index("ix_rentals_room_id_status", "room_id", "status"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Identity lives in an external service; no FK on purpose
     user_id = Column(Integer, nullable=False, index=True)
     room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)

     # Contract
     contract_number = Column(String(32), nullable=False, unique=True)
     contract_date = Column(Date, nullable=False)

     # Rental period (inclusive calendar dates)
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False)

     status = Column(
          Enum(
               RentalStatus,
               name="rental_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=RentalStatus.PENDING,
          nullable=False,
     )

     # Money terms
     monthly_rent = Column(Numeric(10, 2), nullable=False)
     deposit_amount = Column(Numeric(10, 2), default=0, nullable=False)
     advance_payment = Column(Numeric(10, 2), default=0, nullable=False)
     total_price = Column(Numeric(10, 2), nullable=False)

     special_conditions = Column(Text, nullable=True)
     notes = Column(Text, nullable=True)

     # Relationships
     room = relationship("Room", back_populates="rentals")
     tenant_information = relationship(
          "TenantInformation",
          back_populates="rental",
          uselist=False,
          cascade="all, delete-orphan",
     )
     invoices = relationship("Invoice", back_populates="rental")

     def __repr__(self):
          return f"<Rental(id={self.id}, contract='{self.contract_number}', status='{self.status.value}')>"

     @property
     def total_days(self) -> int:
          """Inclusive number of days covered by the rental."""
          return (self.end_date - self.start_date).days + 1
