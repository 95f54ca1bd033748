# schemas/__init__.py
from .electricity import (
     ElectricityUsageCreate,
     ElectricityUsageResponse,
     ElectricityUsageListResponse,
)
from .invoice import (
     BillableRentalResponse,
     InvoiceCreate,
     InvoiceResponse,
     InvoiceListResponse,
     MonthlyInvoiceRequest,
     MonthlyInvoiceResponse,
)
from .rental import (
     AvailabilityResponse,
     RentalCreate,
     RentalResponse,
     RentalListResponse,
     RentalStatusEnum,
)
from .utility_rate import UtilityRateUpdate, UtilityRateResponse

__all__ = [
     "ElectricityUsageCreate",
     "ElectricityUsageResponse",
     "ElectricityUsageListResponse",
     "BillableRentalResponse",
     "InvoiceCreate",
     "InvoiceResponse",
     "InvoiceListResponse",
     "MonthlyInvoiceRequest",
     "MonthlyInvoiceResponse",
     "AvailabilityResponse",
     "RentalCreate",
     "RentalResponse",
     "RentalListResponse",
     "RentalStatusEnum",
     "UtilityRateUpdate",
     "UtilityRateResponse",
]
