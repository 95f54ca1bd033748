# models/invoice.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class InvoiceStatus(str, enum.Enum):
     """Enumeration for invoice payment status."""
     UNPAID = "unpaid"
     PAID = "paid"


class Invoice(Base):
     """
     Invoice model - one billing event for a rental.

     Charges are fixed at creation; only the payment status may change
     afterwards (settlement happens outside the engine).
     """
     __tablename__ = "invoices"

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     rental_id = Column(
          Integer,
          ForeignKey("rentals.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     electricity_usage_id = Column(
          Integer,
          ForeignKey("electricity_usages.id"),
          nullable=True
     )

     # Invoice details
     invoice_number = Column(String(32), nullable=False, unique=True)
     issue_date = Column(Date, nullable=False, index=True)
     due_date = Column(Date, nullable=False, index=True)

     # Charges
     room_rent = Column(Numeric(10, 2), default=0, nullable=False)
     electricity_charge = Column(Numeric(10, 2), default=0, nullable=False)
     water_charge = Column(Numeric(10, 2), default=0, nullable=False)
     total_amount = Column(Numeric(10, 2), default=0, nullable=False)

     status = Column(
          Enum(
               InvoiceStatus,
               name="invoice_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=InvoiceStatus.UNPAID,
          nullable=False,
          index=True
     )

     # Billing period, set by monthly generation
     period_month = Column(Integer, nullable=True)
     period_year = Column(Integer, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     rental = relationship("Rental", back_populates="invoices")
     electricity_usage = relationship("ElectricityUsage")

     def __repr__(self):
          return f"<Invoice(id={self.id}, number='{self.invoice_number}', total={self.total_amount}, status='{self.status.value}')>"

     @property
     def is_overdue(self) -> bool:
          """Check if invoice is past due date and unpaid."""
          from datetime import date
          return self.status == InvoiceStatus.UNPAID and self.due_date < date.today()
