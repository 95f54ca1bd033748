# routers/electricity.py
"""
Meter reading API routes. Readings are append-only: there is no update or
delete route.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from schemas.electricity import (
     ElectricityUsageCreate,
     ElectricityUsageListResponse,
     ElectricityUsageResponse,
)
from services.usage_service import get_latest_reading, list_readings, record_reading

router = APIRouter(prefix="/api/electricity-usages", tags=["electricity"])


@router.post(
     "",
     response_model=ElectricityUsageResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a meter reading"
)
def create_reading(
     body: ElectricityUsageCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Record a reading for a room.

     - **current_units** must exceed the room's latest reading (422 otherwise)
     - **reading_date** must not be before the latest reading's date
     """
     usage = record_reading(db, body.room_id, body.reading_date, body.current_units)
     return ElectricityUsageResponse.model_validate(usage)


@router.get(
     "/rooms/{room_id}",
     response_model=ElectricityUsageListResponse,
     summary="List readings of a room"
)
def get_room_readings(
     room_id: int,
     unbilled_only: bool = Query(False, description="Only readings not yet invoiced"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     readings = list_readings(db, room_id, unbilled_only=unbilled_only)
     return ElectricityUsageListResponse(
          readings=[ElectricityUsageResponse.model_validate(r) for r in readings],
          total=len(readings),
     )


@router.get(
     "/rooms/{room_id}/latest",
     response_model=ElectricityUsageResponse,
     summary="Latest reading of a room"
)
def get_room_latest_reading(
     room_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     usage = get_latest_reading(db, room_id)
     if usage is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"No readings recorded for room {room_id}"
          )
     return ElectricityUsageResponse.model_validate(usage)
