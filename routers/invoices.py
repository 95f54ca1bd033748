# routers/invoices.py
"""
Invoice API routes.

Provides single invoice creation, the monthly batch run and invoice reads.
Invoices are never edited here; payment settlement happens elsewhere.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from schemas.invoice import (
     BillableRentalResponse,
     InvoiceCreate,
     InvoiceListResponse,
     InvoiceResponse,
     MonthlyInvoiceRequest,
     MonthlyInvoiceResponse,
)
from services.invoice_service import InvoiceService

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _invoice_list(invoices) -> InvoiceListResponse:
     return InvoiceListResponse(
          invoices=[InvoiceResponse.model_validate(inv) for inv in invoices],
          total=len(invoices),
     )


@router.post(
     "",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new invoice"
)
def create_invoice(
     invoice_data: InvoiceCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create an unpaid invoice for a rental.

     - **rental_id**: Rental being billed
     - **room_rent** / **electricity_charge** / **water_charge**: Non-negative charges
     - **electricity_usage_id**: Optional reading billed by this invoice; it must
       belong to the rental's room and not be billed yet (409 otherwise)
     """
     invoice = InvoiceService.create_invoice(
          db,
          rental_id=invoice_data.rental_id,
          room_rent=invoice_data.room_rent,
          electricity_charge=invoice_data.electricity_charge,
          water_charge=invoice_data.water_charge,
          electricity_usage_id=invoice_data.electricity_usage_id,
     )
     return InvoiceResponse.model_validate(invoice)


@router.post(
     "/generate-monthly",
     response_model=MonthlyInvoiceResponse,
     summary="Generate invoices for all approved and active rentals"
)
def generate_monthly_invoices(
     body: MonthlyInvoiceRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Bill every approved/active rental for the given month.

     Rentals that fail are reported in **errors** while the others are still
     invoiced. 409 when another run is in progress.
     """
     result = InvoiceService.generate_monthly_invoices(db, month=body.month, year=body.year)
     return MonthlyInvoiceResponse(
          month=result.month,
          year=result.year,
          generated_count=result.generated_count,
          errors=result.errors,
          invoices=[InvoiceResponse.model_validate(inv) for inv in result.invoices],
     )


@router.get(
     "/billable-rentals",
     response_model=list[BillableRentalResponse],
     summary="Rentals included in a monthly run"
)
def get_billable_rentals(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     rentals = InvoiceService.list_billable_rentals(db)
     return [BillableRentalResponse.model_validate(r) for r in rentals]


@router.get(
     "/month/{year}/{month}",
     response_model=InvoiceListResponse,
     summary="Get invoices issued in a month"
)
def get_invoices_by_month(
     year: int,
     month: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return _invoice_list(InvoiceService.list_invoices_for_month(db, year=year, month=month))


@router.get(
     "/rental/{rental_id}",
     response_model=InvoiceListResponse,
     summary="Get invoices of a rental"
)
def get_invoices_by_rental(
     rental_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return _invoice_list(InvoiceService.list_invoices_for_rental(db, rental_id))


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return InvoiceResponse.model_validate(InvoiceService.get_invoice(db, invoice_id))
