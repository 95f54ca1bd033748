# schemas/rental.py
"""
Pydantic schemas for Rental API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RentalStatusEnum(str, Enum):
     """Rental lifecycle status options."""
     PENDING = "pending"
     APPROVED = "approved"
     ACTIVE = "active"
     CANCELLED = "cancelled"
     COMPLETED = "completed"


class RoomStatusEnum(str, Enum):
     AVAILABLE = "available"
     OCCUPIED = "occupied"
     MAINTENANCE = "maintenance"


class RentalCreate(BaseModel):
     """Booking request fields (sent as multipart form data together with the documents)."""
     room_id: int = Field(..., gt=0, description="Room to book")
     start_date: date = Field(..., description="First day of the rental (inclusive)")
     end_date: date = Field(..., description="Last day of the rental (inclusive)")
     deposit_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     advance_payment: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     special_conditions: Optional[str] = Field(None, max_length=2000)
     notes: Optional[str] = Field(None, max_length=2000)
     tenant: Optional[Dict[str, Any]] = Field(None, description="Tenant details, stored as submitted")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "room_id": 1,
                    "start_date": "2026-11-01",
                    "end_date": "2027-04-30",
                    "deposit_amount": 5000.00,
                    "advance_payment": 5000.00,
                    "special_conditions": "No pets",
                    "tenant": {"full_name": "Jane Doe", "phone": "0812345678"}
               }
          }
     )

     @field_validator("start_date")
     @classmethod
     def start_date_not_in_past(cls, value: date) -> date:
          if value < date.today():
               raise ValueError("start_date must not be in the past")
          return value

     @model_validator(mode="after")
     def end_after_start(self) -> "RentalCreate":
          if self.end_date <= self.start_date:
               raise ValueError("end_date must be after start_date")
          return self


class RoomSummary(BaseModel):
     id: int
     name: Optional[str] = None
     status: RoomStatusEnum
     price_per_month: Decimal

     model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
     """Result of an availability check."""
     available: bool
     room: RoomSummary

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "available": True,
                    "room": {"id": 1, "name": "A101", "status": "available", "price_per_month": 5000.00}
               }
          }
     )


class TenantInformationResponse(BaseModel):
     details: Optional[Dict[str, Any]] = None
     document_refs: Optional[List[str]] = None

     model_config = ConfigDict(from_attributes=True)


class RentalResponse(BaseModel):
     """Schema for rental response."""
     id: int
     user_id: int
     room_id: int
     contract_number: str
     contract_date: date
     start_date: date
     end_date: date
     status: RentalStatusEnum
     monthly_rent: Decimal
     deposit_amount: Decimal
     advance_payment: Decimal
     total_price: Decimal
     total_days: int
     special_conditions: Optional[str] = None
     notes: Optional[str] = None
     created_at: Optional[datetime] = None
     tenant_information: Optional[TenantInformationResponse] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "user_id": 42,
                    "room_id": 1,
                    "contract_number": "CNT-20260301-0001",
                    "contract_date": "2026-03-01",
                    "start_date": "2026-03-10",
                    "end_date": "2026-04-09",
                    "status": "pending",
                    "monthly_rent": 5000.00,
                    "deposit_amount": 5000.00,
                    "advance_payment": 0.00,
                    "total_price": 10000.00,
                    "total_days": 31,
                    "created_at": "2026-03-01T10:30:00",
                    "tenant_information": {
                         "details": {"full_name": "Jane Doe"},
                         "document_refs": ["rentals/CNT-20260301-0001/id_card/7f0c.jpg"]
                    }
               }
          }
     )


class RentalListResponse(BaseModel):
     rentals: List[RentalResponse]
     total: int
