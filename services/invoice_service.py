# services/invoice_service.py
"""
Invoice Service - Business logic layer for invoice operations.

Handles single invoice creation and the monthly batch run. A usage record
is billed at most once: it is flagged with a conditional
``UPDATE ... WHERE is_billed = false`` in the same transaction that creates
the invoice, so a concurrent biller finds zero matching rows.
"""
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, update
from sqlalchemy.orm import Session

import config
from exceptions import (
     BillingRunInProgressError,
     InvalidAmountError,
     InvalidBillingPeriodError,
     InvoiceNotFoundError,
     RentalNotFoundError,
     RoomNotFoundError,
     UsageAlreadyBilledError,
     UsageRecordNotFoundError,
     UsageRoomMismatchError,
)
from models import BLOCKING_STATUSES, ElectricityUsage, Invoice, Rental
from models.invoice import InvoiceStatus
from services.locks import billing_run_lock
from services.money import Amount, to_money
from services.numbering import next_invoice_number
from services.utility_rate_service import RateSnapshot, snapshot_rates

logger = logging.getLogger(__name__)


@dataclass
class BillingRunResult:
     """Outcome of a monthly run: invoices created plus one entry per failed rental."""
     month: int
     year: int
     generated_count: int = 0
     errors: List[Dict[str, Any]] = field(default_factory=list)
     invoices: List[Invoice] = field(default_factory=list)


def _mark_billed(db: Session, usage: ElectricityUsage) -> None:
     result = db.execute(
          update(ElectricityUsage)
          .where(ElectricityUsage.id == usage.id, ElectricityUsage.is_billed.is_(False))
          .values(is_billed=True)
          .execution_options(synchronize_session=False)
     )
     if result.rowcount == 0:
          raise UsageAlreadyBilledError(usage.id)
     db.expire(usage, ["is_billed"])


def _new_invoice(
     db: Session,
     rental_id: int,
     room_rent,
     electricity_charge,
     water_charge,
     issue_date: date,
     electricity_usage_id: Optional[int] = None,
     period_month: Optional[int] = None,
     period_year: Optional[int] = None,
) -> Invoice:
     # Number first: allocating on first use flushes the session
     invoice_number = next_invoice_number(db, issue_date)
     invoice = Invoice(
          rental_id=rental_id,
          electricity_usage_id=electricity_usage_id,
          invoice_number=invoice_number,
          issue_date=issue_date,
          due_date=issue_date + timedelta(days=config.INVOICE_DUE_DAYS),
          room_rent=room_rent,
          electricity_charge=electricity_charge,
          water_charge=water_charge,
          total_amount=to_money(room_rent + electricity_charge + water_charge),
          status=InvoiceStatus.UNPAID,
          period_month=period_month,
          period_year=period_year,
     )
     db.add(invoice)
     db.flush()
     return invoice


def _invoice_for_rental(
     db: Session,
     rental: Rental,
     rates: RateSnapshot,
     month: int,
     year: int,
     today: date,
) -> Invoice:
     """Bill one rental for the period: current room price, latest unbilled reading, water flat rate."""
     room = rental.room
     if room is None:
          raise RoomNotFoundError(rental.room_id)

     period_start = date(year, month, 1)
     period_end = date(year, month, calendar.monthrange(year, month)[1])

     usage = (
          db.query(ElectricityUsage)
          .filter(
               ElectricityUsage.room_id == rental.room_id,
               ElectricityUsage.is_billed.is_(False),
               ElectricityUsage.reading_date >= period_start,
               ElectricityUsage.reading_date <= period_end,
          )
          .order_by(desc(ElectricityUsage.reading_date), desc(ElectricityUsage.id))
          .first()
     )

     units_used = usage.units_used if usage is not None else 0
     electricity_charge = to_money(rates.electricity_rate_per_unit * units_used)
     if usage is not None:
          _mark_billed(db, usage)

     return _new_invoice(
          db,
          rental_id=rental.id,
          room_rent=to_money(room.price_per_month),
          electricity_charge=electricity_charge,
          water_charge=rates.water_flat_rate,
          issue_date=today,
          electricity_usage_id=usage.id if usage is not None else None,
          period_month=month,
          period_year=year,
     )


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def create_invoice(
          db: Session,
          rental_id: int,
          room_rent: Amount,
          electricity_charge: Amount,
          water_charge: Amount,
          electricity_usage_id: Optional[int] = None,
          today: Optional[date] = None,
     ) -> Invoice:
          """
          Create an unpaid invoice for a rental with the given charges.

          Args:
               db: SQLAlchemy database session
               rental_id: ID of the rental being billed
               room_rent: Room rent charge
               electricity_charge: Electricity charge
               water_charge: Water charge
               electricity_usage_id: Usage record covered by this invoice, marked billed
               today: Issue date (defaults to today)

          Returns:
               Created Invoice object

          Raises:
               InvalidAmountError: A charge is negative
               RentalNotFoundError: Unknown rental
               UsageRecordNotFoundError: Unknown usage record
               UsageRoomMismatchError: Usage record belongs to another room
               UsageAlreadyBilledError: Usage record was billed before
          """
          charges = {
               "room_rent": to_money(room_rent),
               "electricity_charge": to_money(electricity_charge),
               "water_charge": to_money(water_charge),
          }
          for name, value in charges.items():
               if value < 0:
                    raise InvalidAmountError(name, value)

          today = today or date.today()

          try:
               rental = db.query(Rental).filter(Rental.id == rental_id).first()
               if rental is None:
                    raise RentalNotFoundError(rental_id)

               if electricity_usage_id is not None:
                    usage = db.query(ElectricityUsage).filter(ElectricityUsage.id == electricity_usage_id).first()
                    if usage is None:
                         raise UsageRecordNotFoundError(electricity_usage_id)
                    if usage.room_id != rental.room_id:
                         raise UsageRoomMismatchError(usage.id, usage.room_id, rental.room_id)
                    _mark_billed(db, usage)

               invoice = _new_invoice(
                    db,
                    rental_id=rental.id,
                    issue_date=today,
                    electricity_usage_id=electricity_usage_id,
                    **charges,
               )
               db.commit()
          except Exception:
               db.rollback()
               raise

          logger.info(
               "Invoice %s created for rental %s, total %s",
               invoice.invoice_number, rental_id, invoice.total_amount,
          )
          return invoice

     @staticmethod
     def generate_monthly_invoices(
          db: Session,
          month: int,
          year: int,
          today: Optional[date] = None,
     ) -> BillingRunResult:
          """
          Generate invoices for every approved or active rental.

          Each rental is billed inside its own SAVEPOINT: a failure rolls back
          that rental's writes only and is reported in ``errors``. Anything
          failing outside the per-rental step rolls back the whole run.

          Args:
               db: SQLAlchemy database session
               month: Billing month (1-12)
               year: Billing year (2000-2100)
               today: Issue date (defaults to today)

          Returns:
               BillingRunResult with the created invoices and per-rental errors

          Raises:
               InvalidBillingPeriodError: Month or year out of range
               BillingRunInProgressError: Another run is active in this process
          """
          if not 1 <= month <= 12 or not 2000 <= year <= 2100:
               raise InvalidBillingPeriodError(month, year)

          if not billing_run_lock.acquire(blocking=False):
               raise BillingRunInProgressError()
          try:
               return InvoiceService._run_billing(db, month, year, today or date.today())
          finally:
               billing_run_lock.release()

     @staticmethod
     def _run_billing(db: Session, month: int, year: int, today: date) -> BillingRunResult:
          result = BillingRunResult(month=month, year=year)

          try:
               rentals = InvoiceService.list_billable_rentals(db)
               if not rentals:
                    db.rollback()
                    logger.info("No billable rentals for %02d/%d", month, year)
                    return result

               rates = snapshot_rates(db)

               for rental in rentals:
                    rental_id = rental.id
                    room_name = None
                    try:
                         room = rental.room
                         room_name = room.name if room is not None else None
                         with db.begin_nested():
                              invoice = _invoice_for_rental(db, rental, rates, month, year, today)
                    except Exception as exc:
                         logger.warning(
                              "Billing failed for rental %s (room %s): %s",
                              rental_id, room_name, exc, exc_info=True,
                         )
                         result.errors.append({
                              "rental_id": rental_id,
                              "room_name": room_name,
                              "error": str(exc),
                         })
                         continue

                    result.invoices.append(invoice)
                    result.generated_count += 1

               db.commit()
          except Exception:
               db.rollback()
               logger.error("Billing run for %02d/%d failed and was rolled back", month, year)
               raise

          logger.info(
               "Billing run for %02d/%d: %d invoice(s) generated, %d error(s)",
               month, year, result.generated_count, len(result.errors),
          )
          return result

     @staticmethod
     def get_invoice(db: Session, invoice_id: int) -> Invoice:
          invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
          if invoice is None:
               raise InvoiceNotFoundError(invoice_id)
          return invoice

     @staticmethod
     def list_invoices_for_rental(db: Session, rental_id: int) -> List[Invoice]:
          if db.query(Rental.id).filter(Rental.id == rental_id).first() is None:
               raise RentalNotFoundError(rental_id)
          return (
               db.query(Invoice)
               .filter(Invoice.rental_id == rental_id)
               .order_by(desc(Invoice.issue_date), desc(Invoice.id))
               .all()
          )

     @staticmethod
     def list_invoices_for_month(db: Session, year: int, month: int) -> List[Invoice]:
          """Invoices issued during the given calendar month."""
          if not 1 <= month <= 12 or not 2000 <= year <= 2100:
               raise InvalidBillingPeriodError(month, year)
          first_day = date(year, month, 1)
          last_day = date(year, month, calendar.monthrange(year, month)[1])
          return (
               db.query(Invoice)
               .filter(Invoice.issue_date >= first_day, Invoice.issue_date <= last_day)
               .order_by(Invoice.invoice_number)
               .all()
          )

     @staticmethod
     def list_billable_rentals(db: Session) -> List[Rental]:
          """Rentals that are invoiced by a monthly run (approved or active)."""
          return (
               db.query(Rental)
               .filter(Rental.status.in_(BLOCKING_STATUSES))
               .order_by(Rental.id)
               .all()
          )
