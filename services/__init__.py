from .availability_service import check_availability, find_conflicting_rental, overlaps
from .invoice_service import BillingRunResult, InvoiceService
from .rental_service import RentalService
from .usage_service import get_latest_reading, list_readings, record_reading
from .utility_rate_service import RateSnapshot, get_current_rates, snapshot_rates, update_rates

__all__ = [
     "check_availability",
     "find_conflicting_rental",
     "overlaps",
     "BillingRunResult",
     "InvoiceService",
     "RentalService",
     "get_latest_reading",
     "list_readings",
     "record_reading",
     "RateSnapshot",
     "get_current_rates",
     "snapshot_rates",
     "update_rates",
]
