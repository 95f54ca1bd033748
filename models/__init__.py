# models/__init__.py
from .base import Base
from .room import Room, RoomStatus
from .rental import Rental, RentalStatus, BLOCKING_STATUSES
from .tenant_information import TenantInformation
from .electricity_usage import ElectricityUsage
from .utility_rate import UtilityRate
from .invoice import Invoice, InvoiceStatus
from .number_sequence import NumberSequence

__all__ = [
     "Base",
     "Room",
     "RoomStatus",
     "Rental",
     "RentalStatus",
     "BLOCKING_STATUSES",
     "TenantInformation",
     "ElectricityUsage",
     "UtilityRate",
     "Invoice",
     "InvoiceStatus",
     "NumberSequence",
]
