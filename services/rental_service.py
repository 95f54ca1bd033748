# services/rental_service.py
"""
Rental Service - booking requests and the rental status lifecycle.

     pending  -> approved | cancelled
     approved -> active
     active   -> completed

Approval occupies the room; completion releases it. Creation and every
status change run inside the room's locked section with the room row
locked, so "check availability, then write" cannot interleave with another
booking or approval on the same room. Each operation commits its own unit
of work and rolls back on failure.
"""
import logging
import math
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from document_storage import UploadedDocument, discard_on_failure, get_document_store
from exceptions import (
     InvalidAmountError,
     InvalidDateRangeError,
     InvalidRentalStateError,
     NotRentalOwnerError,
     RentalNotFoundError,
     RoomNoLongerAvailableError,
     RoomNotFoundError,
)
from models import Rental, RentalStatus, Room, RoomStatus, TenantInformation
from services.availability_service import ensure_room_bookable, find_conflicting_rental
from services.locks import room_locks
from services.money import Amount, to_money
from services.numbering import next_contract_number

logger = logging.getLogger(__name__)

# Days counted as one billable month when pricing a contract
DAYS_PER_MONTH = 30


def _lock_room(db: Session, room_id: int) -> Room:
     room = (
          db.query(Room)
          .filter(Room.id == room_id)
          .populate_existing()
          .with_for_update()
          .first()
     )
     if room is None:
          raise RoomNotFoundError(room_id)
     return room


def _lock_rental(db: Session, rental_id: int) -> Rental:
     rental = (
          db.query(Rental)
          .filter(Rental.id == rental_id)
          .populate_existing()
          .with_for_update()
          .first()
     )
     if rental is None:
          raise RentalNotFoundError(rental_id)
     return rental


def _room_id_for(db: Session, rental_id: int) -> int:
     room_id = db.query(Rental.room_id).filter(Rental.id == rental_id).scalar()
     if room_id is None:
          raise RentalNotFoundError(rental_id)
     # End the read-only transaction; the locked section must start a fresh one
     db.rollback()
     return room_id


def _require_status(rental: Rental, allowed: Iterable[RentalStatus], action: str) -> None:
     if rental.status not in allowed:
          raise InvalidRentalStateError(rental.id, rental.status.value, action)


class RentalService:
     """
     Service class for rental lifecycle operations.

     Each operation owns the session's transaction: it commits on success and
     rolls back on failure. Changes left pending by the caller are discarded
     by the transitions that start from a rental id, not committed.
     """

     @staticmethod
     def calculate_total_price(monthly_rent: Amount, start_date: date, end_date: date) -> Decimal:
          """
          Contract price: monthly rent times the number of started 30-day months.

          ``total_days`` counts both the start and the end date.
          """
          total_days = (end_date - start_date).days + 1
          months = math.ceil(total_days / DAYS_PER_MONTH)
          return to_money(to_money(monthly_rent) * months)

     @staticmethod
     def create_rental(
          db: Session,
          user_id: int,
          room_id: int,
          start_date: date,
          end_date: date,
          deposit_amount: Amount = 0,
          advance_payment: Amount = 0,
          special_conditions: Optional[str] = None,
          notes: Optional[str] = None,
          tenant_details: Optional[Dict[str, Any]] = None,
          documents: Iterable[UploadedDocument] = (),
          store=None,
          today: Optional[date] = None,
     ) -> Rental:
          """
          Check availability and create a pending rental as one atomic step.

          Args:
               db: SQLAlchemy database session
               user_id: Requesting user (external identity reference)
               room_id: Room to book
               start_date: First day of the rental (inclusive)
               end_date: Last day of the rental (inclusive)
               deposit_amount: Deposit agreed in the contract
               advance_payment: Advance rent agreed in the contract
               special_conditions: Free-text contract conditions
               notes: Free-text notes
               tenant_details: Tenant data, stored as given
               documents: Uploaded tenant documents to store with the rental
               store: Document store (defaults to the configured one)
               today: Contract date (defaults to today)

          Returns:
               The created Rental in ``pending`` status

          Raises:
               InvalidDateRangeError: end_date is not after start_date
               InvalidAmountError: Negative deposit or advance payment
               RoomNotFoundError: Unknown room
               RoomUnavailableError: Room status is not available
               DateConflictError: An approved/active rental overlaps the period
          """
          if end_date <= start_date:
               raise InvalidDateRangeError(start_date, end_date)

          deposit_amount = to_money(deposit_amount)
          advance_payment = to_money(advance_payment)
          if deposit_amount < 0:
               raise InvalidAmountError("deposit_amount", deposit_amount)
          if advance_payment < 0:
               raise InvalidAmountError("advance_payment", advance_payment)

          today = today or date.today()
          documents = list(documents)
          if store is None:
               store = get_document_store()

          with room_locks.hold(room_id), discard_on_failure(store) as saved:
               try:
                    room = _lock_room(db, room_id)
                    ensure_room_bookable(db, room, start_date, end_date)

                    monthly_rent = to_money(room.price_per_month)
                    rental = Rental(
                         user_id=user_id,
                         room_id=room.id,
                         contract_number=next_contract_number(db, today),
                         contract_date=today,
                         start_date=start_date,
                         end_date=end_date,
                         status=RentalStatus.PENDING,
                         monthly_rent=monthly_rent,
                         deposit_amount=deposit_amount,
                         advance_payment=advance_payment,
                         total_price=RentalService.calculate_total_price(monthly_rent, start_date, end_date),
                         special_conditions=special_conditions,
                         notes=notes,
                    )
                    db.add(rental)
                    db.flush()  # Flush to get the ID without committing

                    for document in documents:
                         saved.append(
                              store.save(
                                   document.content,
                                   document.filename,
                                   folder=f"rentals/{rental.contract_number}/{document.kind}",
                              )
                         )

                    db.add(
                         TenantInformation(
                              rental_id=rental.id,
                              details=tenant_details,
                              document_refs=list(saved),
                         )
                    )
                    db.commit()
               except Exception:
                    db.rollback()
                    raise

          logger.info(
               "Rental %s created for room %s (%s to %s), total %s",
               rental.contract_number, room_id, start_date, end_date, rental.total_price,
          )
          return rental

     @staticmethod
     def approve_rental(db: Session, rental_id: int) -> Rental:
          """
          Approve a pending rental and mark its room occupied, in one commit.

          Raises:
               RentalNotFoundError: Unknown rental
               InvalidRentalStateError: Rental is not pending
               RoomNoLongerAvailableError: Room was taken in the meantime
          """
          room_id = _room_id_for(db, rental_id)

          with room_locks.hold(room_id):
               try:
                    room = _lock_room(db, room_id)
                    rental = _lock_rental(db, rental_id)
                    _require_status(rental, (RentalStatus.PENDING,), "approve")

                    conflict = find_conflicting_rental(
                         db, room_id, rental.start_date, rental.end_date, exclude_rental_id=rental.id
                    )
                    if not room.is_available or conflict is not None:
                         raise RoomNoLongerAvailableError(room_id, rental.id)

                    rental.status = RentalStatus.APPROVED
                    room.status = RoomStatus.OCCUPIED
                    db.commit()
               except Exception:
                    db.rollback()
                    raise

          logger.info("Rental %s approved; room %s is now occupied", rental.contract_number, room_id)
          return rental

     @staticmethod
     def reject_rental(db: Session, rental_id: int) -> Rental:
          """Reject a pending rental (admin action). The room is left untouched."""
          return RentalService._cancel(db, rental_id, action="reject")

     @staticmethod
     def cancel_rental(db: Session, rental_id: int, requester_id: int) -> Rental:
          """
          Cancel a pending rental on behalf of the user who requested it.

          Raises:
               RentalNotFoundError: Unknown rental
               NotRentalOwnerError: requester_id did not create the rental
               InvalidRentalStateError: Rental is not pending
          """
          return RentalService._cancel(db, rental_id, action="cancel", requester_id=requester_id)

     @staticmethod
     def _cancel(db: Session, rental_id: int, action: str, requester_id: Optional[int] = None) -> Rental:
          room_id = _room_id_for(db, rental_id)

          with room_locks.hold(room_id):
               try:
                    rental = _lock_rental(db, rental_id)
                    if requester_id is not None and rental.user_id != requester_id:
                         raise NotRentalOwnerError(rental_id)
                    _require_status(rental, (RentalStatus.PENDING,), action)

                    rental.status = RentalStatus.CANCELLED
                    db.commit()
               except Exception:
                    db.rollback()
                    raise

          logger.info("Rental %s cancelled (%s)", rental.contract_number, action)
          return rental

     @staticmethod
     def activate_rental(db: Session, rental_id: int) -> Rental:
          """Record that an approved rental has started (move-in)."""
          room_id = _room_id_for(db, rental_id)

          with room_locks.hold(room_id):
               try:
                    rental = _lock_rental(db, rental_id)
                    _require_status(rental, (RentalStatus.APPROVED,), "activate")
                    rental.status = RentalStatus.ACTIVE
                    db.commit()
               except Exception:
                    db.rollback()
                    raise

          logger.info("Rental %s is now active", rental.contract_number)
          return rental

     @staticmethod
     def complete_rental(db: Session, rental_id: int) -> Rental:
          """Record that an active rental has ended and release its room."""
          room_id = _room_id_for(db, rental_id)

          with room_locks.hold(room_id):
               try:
                    room = _lock_room(db, room_id)
                    rental = _lock_rental(db, rental_id)
                    _require_status(rental, (RentalStatus.ACTIVE,), "complete")
                    rental.status = RentalStatus.COMPLETED
                    if room.status == RoomStatus.OCCUPIED:
                         room.status = RoomStatus.AVAILABLE
                    db.commit()
               except Exception:
                    db.rollback()
                    raise

          logger.info("Rental %s completed; room %s released", rental.contract_number, room_id)
          return rental

     @staticmethod
     def get_rental(db: Session, rental_id: int) -> Rental:
          rental = db.query(Rental).filter(Rental.id == rental_id).first()
          if rental is None:
               raise RentalNotFoundError(rental_id)
          return rental

     @staticmethod
     def list_rentals(
          db: Session,
          status: Optional[RentalStatus] = None,
          room_id: Optional[int] = None,
          user_id: Optional[int] = None,
          search: Optional[str] = None,
     ) -> List[Rental]:
          """List rentals, newest first, with optional filters (search matches contract number)."""
          query = db.query(Rental)
          if status is not None:
               query = query.filter(Rental.status == status)
          if room_id is not None:
               query = query.filter(Rental.room_id == room_id)
          if user_id is not None:
               query = query.filter(Rental.user_id == user_id)
          if search:
               query = query.filter(Rental.contract_number.like(f"%{search}%"))
          return query.order_by(Rental.created_at.desc(), Rental.id.desc()).all()
