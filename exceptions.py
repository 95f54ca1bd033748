# exceptions.py
"""
Domain exceptions raised by the rental, ledger and billing services.

Each exception carries a stable error code, optional structured details and
the HTTP status the API layer should answer with, so callers can tell
"not found" apart from "conflicting state".
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
     """Stable error codes exposed to API clients."""
     # Validation
     INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
     INVALID_AMOUNT = "INVALID_AMOUNT"
     NON_MONOTONIC_READING = "NON_MONOTONIC_READING"
     READING_OUT_OF_ORDER = "READING_OUT_OF_ORDER"
     INVALID_BILLING_PERIOD = "INVALID_BILLING_PERIOD"

     # Not found
     ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
     RENTAL_NOT_FOUND = "RENTAL_NOT_FOUND"
     USAGE_RECORD_NOT_FOUND = "USAGE_RECORD_NOT_FOUND"
     INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"

     # State conflicts
     ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
     DATE_CONFLICT = "DATE_CONFLICT"
     INVALID_STATE = "INVALID_STATE"
     ROOM_NO_LONGER_AVAILABLE = "ROOM_NO_LONGER_AVAILABLE"
     USAGE_ALREADY_BILLED = "USAGE_ALREADY_BILLED"
     USAGE_ROOM_MISMATCH = "USAGE_ROOM_MISMATCH"
     BILLING_RUN_IN_PROGRESS = "BILLING_RUN_IN_PROGRESS"
     LEDGER_IMMUTABLE = "LEDGER_IMMUTABLE"

     # Authorization
     NOT_OWNER = "NOT_OWNER"


class EngineError(Exception):
     """
     Base class for all engine errors.

     Args:
          message: Human readable description
          error_code: Machine readable code
          details: Extra structured context (ids, offending values)
          status_code: HTTP status the API maps this error to
     """

     def __init__(
          self,
          message: str,
          error_code: ErrorCode,
          details: Optional[Dict[str, Any]] = None,
          status_code: int = 400,
     ):
          self.message = message
          self.error_code = error_code
          self.details = details or {}
          self.status_code = status_code
          super().__init__(self.message)

     def to_dict(self) -> Dict[str, Any]:
          return {
               "error": {
                    "message": self.message,
                    "code": self.error_code.value,
                    "details": self.details,
                    "type": self.__class__.__name__,
               }
          }

     def __str__(self) -> str:
          return f"{self.error_code.value}: {self.message}"


# ---------------------------------------------------------------------------
# Validation errors (rejected before any write)
# ---------------------------------------------------------------------------

class ValidationFailedError(EngineError):
     def __init__(self, message: str, error_code: ErrorCode, details: Optional[Dict[str, Any]] = None):
          super().__init__(message, error_code, details, status_code=422)


class InvalidDateRangeError(ValidationFailedError):
     def __init__(self, start_date: date, end_date: date):
          super().__init__(
               f"End date {end_date} must be after start date {start_date}",
               ErrorCode.INVALID_DATE_RANGE,
               {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
          )


class InvalidAmountError(ValidationFailedError):
     def __init__(self, field: str, value: Any, reason: str = "must not be negative"):
          super().__init__(
               f"{field} {reason} (got {value})",
               ErrorCode.INVALID_AMOUNT,
               {"field": field, "value": str(value)},
          )


class NonMonotonicReadingError(ValidationFailedError):
     def __init__(self, current_units: int, floor: int):
          self.current_units = current_units
          self.floor = floor
          super().__init__(
               f"Current units ({current_units}) must be greater than previous units ({floor})",
               ErrorCode.NON_MONOTONIC_READING,
               {"current_units": current_units, "floor": floor},
          )


class ReadingOutOfOrderError(ValidationFailedError):
     def __init__(self, reading_date: date, latest_date: date):
          super().__init__(
               f"Reading date {reading_date} is earlier than the latest reading ({latest_date})",
               ErrorCode.READING_OUT_OF_ORDER,
               {"reading_date": reading_date.isoformat(), "latest_reading_date": latest_date.isoformat()},
          )


class InvalidBillingPeriodError(ValidationFailedError):
     def __init__(self, month: int, year: int):
          super().__init__(
               f"Invalid billing period {month}/{year}: month must be 1-12 and year 2000-2100",
               ErrorCode.INVALID_BILLING_PERIOD,
               {"month": month, "year": year},
          )


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------

class NotFoundError(EngineError):
     def __init__(self, message: str, error_code: ErrorCode, details: Optional[Dict[str, Any]] = None):
          super().__init__(message, error_code, details, status_code=404)


class RoomNotFoundError(NotFoundError):
     def __init__(self, room_id: int):
          super().__init__(f"Room with ID {room_id} not found", ErrorCode.ROOM_NOT_FOUND, {"room_id": room_id})


class RentalNotFoundError(NotFoundError):
     def __init__(self, rental_id: int):
          super().__init__(f"Rental with ID {rental_id} not found", ErrorCode.RENTAL_NOT_FOUND, {"rental_id": rental_id})


class UsageRecordNotFoundError(NotFoundError):
     def __init__(self, usage_id: int):
          super().__init__(
               f"Electricity usage record with ID {usage_id} not found",
               ErrorCode.USAGE_RECORD_NOT_FOUND,
               {"electricity_usage_id": usage_id},
          )


class InvoiceNotFoundError(NotFoundError):
     def __init__(self, invoice_id: int):
          super().__init__(f"Invoice with ID {invoice_id} not found", ErrorCode.INVOICE_NOT_FOUND, {"invoice_id": invoice_id})


# ---------------------------------------------------------------------------
# State conflicts
# ---------------------------------------------------------------------------

class StateConflictError(EngineError):
     def __init__(self, message: str, error_code: ErrorCode, details: Optional[Dict[str, Any]] = None):
          super().__init__(message, error_code, details, status_code=409)


class RoomUnavailableError(StateConflictError):
     def __init__(self, room_id: int, status: str):
          super().__init__(
               f"This room is not available for booking. Current status: {status}",
               ErrorCode.ROOM_UNAVAILABLE,
               {"room_id": room_id, "status": status},
          )


class DateConflictError(StateConflictError):
     def __init__(self, room_id: int, conflicting_rental_id: int):
          self.conflicting_rental_id = conflicting_rental_id
          super().__init__(
               "The room is already booked for the selected dates",
               ErrorCode.DATE_CONFLICT,
               {"room_id": room_id, "conflicting_rental_id": conflicting_rental_id},
          )


class InvalidRentalStateError(StateConflictError):
     def __init__(self, rental_id: int, current: str, action: str):
          super().__init__(
               f"Cannot {action} rental {rental_id} in status '{current}'",
               ErrorCode.INVALID_STATE,
               {"rental_id": rental_id, "status": current, "action": action},
          )


class RoomNoLongerAvailableError(StateConflictError):
     def __init__(self, room_id: int, rental_id: int):
          super().__init__(
               "Room is no longer available",
               ErrorCode.ROOM_NO_LONGER_AVAILABLE,
               {"room_id": room_id, "rental_id": rental_id},
          )


class UsageAlreadyBilledError(StateConflictError):
     def __init__(self, usage_id: int):
          super().__init__(
               f"Electricity usage record {usage_id} has already been billed",
               ErrorCode.USAGE_ALREADY_BILLED,
               {"electricity_usage_id": usage_id},
          )


class UsageRoomMismatchError(StateConflictError):
     def __init__(self, usage_id: int, usage_room_id: int, rental_room_id: int):
          super().__init__(
               f"Electricity usage record {usage_id} belongs to room {usage_room_id}, not {rental_room_id}",
               ErrorCode.USAGE_ROOM_MISMATCH,
               {"electricity_usage_id": usage_id, "usage_room_id": usage_room_id, "rental_room_id": rental_room_id},
          )


class BillingRunInProgressError(StateConflictError):
     def __init__(self):
          super().__init__("Another invoice generation run is in progress", ErrorCode.BILLING_RUN_IN_PROGRESS)


class LedgerImmutableError(StateConflictError):
     def __init__(self, usage_id: int, field: str):
          super().__init__(
               f"Electricity usage record {usage_id} is append-only; '{field}' cannot be changed",
               ErrorCode.LEDGER_IMMUTABLE,
               {"electricity_usage_id": usage_id, "field": field},
          )


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

class NotRentalOwnerError(EngineError):
     def __init__(self, rental_id: int):
          super().__init__(
               f"Rental {rental_id} does not belong to the requesting user",
               ErrorCode.NOT_OWNER,
               {"rental_id": rental_id},
               status_code=403,
          )
