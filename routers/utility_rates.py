# routers/utility_rates.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from schemas.utility_rate import UtilityRateResponse, UtilityRateUpdate
from services.utility_rate_service import get_current_rates, update_rates

router = APIRouter(prefix="/api/utility-rates", tags=["utility-rates"])


@router.get("", response_model=UtilityRateResponse, summary="Current utility rates")
def get_rates(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return UtilityRateResponse.model_validate(get_current_rates(db))


@router.put("", response_model=UtilityRateResponse, summary="Update utility rates")
def put_rates(
     body: UtilityRateUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """New rates apply to invoices created afterwards; issued invoices keep their amounts."""
     rates = update_rates(db, body.electricity_rate_per_unit, body.water_flat_rate)
     return UtilityRateResponse.model_validate(rates)
