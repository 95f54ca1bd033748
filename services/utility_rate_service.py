# services/utility_rate_service.py
"""
Utility rate configuration.

Billing reads the rates once per operation into a ``RateSnapshot`` so that
a concurrent rate change never mixes old and new prices within one run.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import InvalidAmountError
from models import UtilityRate
from models.utility_rate import SINGLETON_ID
from services.money import Amount, to_money

logger = logging.getLogger(__name__)

MAX_RATE = Decimal("999999.99")


@dataclass(frozen=True)
class RateSnapshot:
     electricity_rate_per_unit: Decimal
     water_flat_rate: Decimal


def get_current_rates(db: Session) -> UtilityRate:
     """Return the rate row, creating it with zero rates on first use."""
     rates = db.query(UtilityRate).filter(UtilityRate.id == SINGLETON_ID).first()
     if rates is not None:
          return rates

     try:
          with db.begin_nested():
               rates = UtilityRate(
                    id=SINGLETON_ID,
                    electricity_rate_per_unit=Decimal("0.00"),
                    water_flat_rate=Decimal("0.00"),
               )
               db.add(rates)
          logger.info("Initialized utility rates with zero values")
          return rates
     except IntegrityError:
          # Created concurrently
          return db.query(UtilityRate).filter(UtilityRate.id == SINGLETON_ID).one()


def snapshot_rates(db: Session) -> RateSnapshot:
     rates = get_current_rates(db)
     return RateSnapshot(
          electricity_rate_per_unit=to_money(rates.electricity_rate_per_unit),
          water_flat_rate=to_money(rates.water_flat_rate),
     )


def _validate_rate(field: str, value: Amount) -> Decimal:
     rate = to_money(value)
     if rate < 0:
          raise InvalidAmountError(field, rate)
     if rate > MAX_RATE:
          raise InvalidAmountError(field, rate, reason=f"must not exceed {MAX_RATE}")
     return rate


def update_rates(db: Session, electricity_rate_per_unit: Amount, water_flat_rate: Amount) -> UtilityRate:
     """
     Replace both rates. Existing invoices keep the amounts they were issued with.

     Raises:
          InvalidAmountError: A rate is negative or above 999999.99
     """
     electricity = _validate_rate("electricity_rate_per_unit", electricity_rate_per_unit)
     water = _validate_rate("water_flat_rate", water_flat_rate)

     try:
          rates = get_current_rates(db)
          rates.electricity_rate_per_unit = electricity
          rates.water_flat_rate = water
          db.commit()
     except Exception:
          db.rollback()
          raise

     logger.info("Utility rates updated: electricity %s/unit, water %s", electricity, water)
     return rates
