# models/utility_rate.py
from sqlalchemy import Column, Integer, Numeric, DateTime, func

from .base import Base

# The table holds exactly one row
SINGLETON_ID = 1


class UtilityRate(Base):
     """
     UtilityRate model - current electricity and water pricing.

     Read once per billing operation; changing it only affects invoices
     created afterwards.
     """
     __tablename__ = "utility_rates"

     id = Column(Integer, primary_key=True, autoincrement=False, default=SINGLETON_ID)
     electricity_rate_per_unit = Column(Numeric(8, 2), default=0, nullable=False)
     water_flat_rate = Column(Numeric(8, 2), default=0, nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return (
               f"<UtilityRate(electricity_rate_per_unit={self.electricity_rate_per_unit}, "
               f"water_flat_rate={self.water_flat_rate})>"
          )
