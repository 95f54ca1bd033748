# schemas/invoice.py
"""
Pydantic schemas for Invoice API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum

from .rental import RentalStatusEnum


class InvoiceStatusEnum(str, Enum):
     """Invoice payment status options."""
     UNPAID = "unpaid"
     PAID = "paid"


class InvoiceCreate(BaseModel):
     """Schema for creating a single invoice."""
     rental_id: int = Field(..., gt=0, description="Rental ID (must exist)")
     room_rent: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
     electricity_charge: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     water_charge: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     electricity_usage_id: Optional[int] = Field(None, gt=0, description="Meter reading billed by this invoice")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "rental_id": 1,
                    "room_rent": 5000.00,
                    "electricity_charge": 960.00,
                    "water_charge": 100.00,
                    "electricity_usage_id": 3
               }
          }
     )


class MonthlyInvoiceRequest(BaseModel):
     """Request body for POST /api/invoices/generate-monthly."""
     month: int = Field(..., ge=1, le=12)
     year: int = Field(..., ge=2000, le=2100)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "month": 3,
                    "year": 2026
               }
          }
     )


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: int
     rental_id: int
     electricity_usage_id: Optional[int] = None
     invoice_number: str
     issue_date: date
     due_date: date
     room_rent: Decimal
     electricity_charge: Decimal
     water_charge: Decimal
     total_amount: Decimal
     status: InvoiceStatusEnum
     period_month: Optional[int] = None
     period_year: Optional[int] = None
     is_overdue: bool = False
     created_at: Optional[datetime] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "rental_id": 1,
                    "electricity_usage_id": 3,
                    "invoice_number": "INV-202603-0001",
                    "issue_date": "2026-03-31",
                    "due_date": "2026-04-07",
                    "room_rent": 5000.00,
                    "electricity_charge": 960.00,
                    "water_charge": 100.00,
                    "total_amount": 6060.00,
                    "status": "unpaid",
                    "period_month": 3,
                    "period_year": 2026,
                    "is_overdue": False,
                    "created_at": "2026-03-31T10:30:00"
               }
          }
     )


class InvoiceListResponse(BaseModel):
     invoices: List[InvoiceResponse]
     total: int


class MonthlyInvoiceResponse(BaseModel):
     """Outcome of a monthly run; failed rentals are listed in ``errors``."""
     month: int
     year: int
     generated_count: int
     errors: List[Dict[str, Any]]
     invoices: List[InvoiceResponse]

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "month": 3,
                    "year": 2026,
                    "generated_count": 1,
                    "errors": [{"rental_id": 7, "room_name": "B204", "error": "USAGE_ALREADY_BILLED: ..."}],
                    "invoices": []
               }
          }
     )


class BillableRentalResponse(BaseModel):
     id: int
     room_id: int
     contract_number: str
     status: RentalStatusEnum
     monthly_rent: Decimal

     model_config = ConfigDict(from_attributes=True)
