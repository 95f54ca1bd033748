# routers/rentals.py
"""
Rental API routes: availability checks, booking requests and lifecycle
transitions (approve, reject, cancel, activate, complete).
"""
import json
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id, verify_token
from document_storage import UploadedDocument
from exceptions import InvalidDateRangeError
from models import RentalStatus
from schemas.rental import (
     AvailabilityResponse,
     RentalCreate,
     RentalListResponse,
     RentalResponse,
     RentalStatusEnum,
     RoomSummary,
)
from services.availability_service import check_availability
from services.rental_service import RentalService

router = APIRouter(prefix="/api/rentals", tags=["rentals"])


def _parse_tenant(raw: Optional[str]) -> Optional[dict]:
     if raw is None or raw == "":
          return None
     try:
          tenant = json.loads(raw)
     except ValueError:
          tenant = None
     if not isinstance(tenant, dict):
          raise RequestValidationError([{
               "type": "json_invalid",
               "loc": ("body", "tenant"),
               "msg": "tenant must be a JSON object",
               "input": raw,
          }])
     return tenant


@router.get(
     "/availability",
     response_model=AvailabilityResponse,
     summary="Check whether a room can be booked for a period"
)
def get_availability(
     room_id: int = Query(..., gt=0),
     start_date: date = Query(...),
     end_date: date = Query(...),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Answers 200 when the room is bookable; 404 for an unknown room and 409
     when the room is not available or an approved/active rental overlaps.
     """
     if end_date <= start_date:
          raise InvalidDateRangeError(start_date, end_date)
     room = check_availability(db, room_id, start_date, end_date)
     return AvailabilityResponse(available=True, room=RoomSummary.model_validate(room))


@router.post(
     "",
     response_model=RentalResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Request a rental"
)
def create_rental(
     room_id: int = Form(...),
     start_date: date = Form(...),
     end_date: date = Form(...),
     deposit_amount: Decimal = Form(Decimal("0")),
     advance_payment: Decimal = Form(Decimal("0")),
     special_conditions: Optional[str] = Form(None),
     notes: Optional[str] = Form(None),
     tenant: Optional[str] = Form(None, description="Tenant details as a JSON object"),
     documents: Optional[List[UploadFile]] = File(None),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Create a pending rental for the authenticated user.

     - **room_id**: Room to book
     - **start_date** / **end_date**: Inclusive period, start not in the past
     - **deposit_amount** / **advance_payment**: Contract money terms
     - **tenant**: Tenant details (JSON object), stored as submitted
     - **documents**: Tenant documents (ID card copy, photos)
     """
     try:
          data = RentalCreate(
               room_id=room_id,
               start_date=start_date,
               end_date=end_date,
               deposit_amount=deposit_amount,
               advance_payment=advance_payment,
               special_conditions=special_conditions,
               notes=notes,
               tenant=_parse_tenant(tenant),
          )
     except ValidationError as exc:
          raise RequestValidationError(exc.errors(include_url=False, include_context=False))

     uploads = [
          UploadedDocument(filename=upload.filename or "document", content=upload.file)
          for upload in documents or []
     ]

     rental = RentalService.create_rental(
          db,
          user_id=user_id,
          room_id=data.room_id,
          start_date=data.start_date,
          end_date=data.end_date,
          deposit_amount=data.deposit_amount,
          advance_payment=data.advance_payment,
          special_conditions=data.special_conditions,
          notes=data.notes,
          tenant_details=data.tenant,
          documents=uploads,
     )
     return RentalResponse.model_validate(rental)


@router.get(
     "",
     response_model=RentalListResponse,
     summary="List rentals with filters"
)
def list_rentals(
     status: Optional[RentalStatusEnum] = Query(None, description="Filter by status"),
     room_id: Optional[int] = Query(None, gt=0),
     user_id: Optional[int] = Query(None, gt=0),
     search: Optional[str] = Query(None, max_length=50, description="Contract number contains"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     rentals = RentalService.list_rentals(
          db,
          status=RentalStatus(status.value) if status is not None else None,
          room_id=room_id,
          user_id=user_id,
          search=search,
     )
     return RentalListResponse(
          rentals=[RentalResponse.model_validate(r) for r in rentals],
          total=len(rentals),
     )


@router.get(
     "/{rental_id}",
     response_model=RentalResponse,
     summary="Get rental by ID"
)
def get_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return RentalResponse.model_validate(RentalService.get_rental(db, rental_id))


@router.post("/{rental_id}/approve", response_model=RentalResponse, summary="Approve a pending rental")
def approve_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Approve the rental and mark its room occupied. 409 if the room was taken meanwhile."""
     return RentalResponse.model_validate(RentalService.approve_rental(db, rental_id))


@router.post("/{rental_id}/reject", response_model=RentalResponse, summary="Reject a pending rental")
def reject_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return RentalResponse.model_validate(RentalService.reject_rental(db, rental_id))


@router.post("/{rental_id}/cancel", response_model=RentalResponse, summary="Cancel own pending rental")
def cancel_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return RentalResponse.model_validate(RentalService.cancel_rental(db, rental_id, requester_id=user_id))


@router.post("/{rental_id}/activate", response_model=RentalResponse, summary="Mark an approved rental active")
def activate_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return RentalResponse.model_validate(RentalService.activate_rental(db, rental_id))


@router.post("/{rental_id}/complete", response_model=RentalResponse, summary="Complete an active rental")
def complete_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return RentalResponse.model_validate(RentalService.complete_rental(db, rental_id))
