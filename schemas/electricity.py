# schemas/electricity.py
"""
Pydantic schemas for meter reading requests and responses.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ElectricityUsageCreate(BaseModel):
     """Request body for POST /api/electricity-usages."""
     room_id: int = Field(..., gt=0, description="Room whose meter was read")
     reading_date: date = Field(..., description="Date of the reading")
     current_units: int = Field(..., ge=0, description="Meter value; must exceed the previous reading")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "room_id": 1,
                    "reading_date": "2026-03-31",
                    "current_units": 120
               }
          }
     )


class ElectricityUsageResponse(BaseModel):
     id: int
     room_id: int
     reading_date: date
     previous_units: int
     current_units: int
     units_used: int
     is_billed: bool
     created_at: Optional[datetime] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "room_id": 1,
                    "reading_date": "2026-03-31",
                    "previous_units": 0,
                    "current_units": 120,
                    "units_used": 120,
                    "is_billed": False,
                    "created_at": "2026-03-31T09:00:00"
               }
          }
     )


class ElectricityUsageListResponse(BaseModel):
     readings: List[ElectricityUsageResponse]
     total: int
