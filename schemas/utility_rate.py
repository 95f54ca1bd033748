# schemas/utility_rate.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UtilityRateUpdate(BaseModel):
     """Request body for PUT /api/utility-rates."""
     electricity_rate_per_unit: Decimal = Field(..., ge=0, le=Decimal("999999.99"), decimal_places=2)
     water_flat_rate: Decimal = Field(..., ge=0, le=Decimal("999999.99"), decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "electricity_rate_per_unit": 8.00,
                    "water_flat_rate": 100.00
               }
          }
     )


class UtilityRateResponse(BaseModel):
     electricity_rate_per_unit: Decimal
     water_flat_rate: Decimal
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
