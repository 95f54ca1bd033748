# models/number_sequence.py
from sqlalchemy import Column, Integer, String

from .base import Base


class NumberSequence(Base):
     """
     Named counter used to allocate contract and invoice numbers.

     One row per prefix (e.g. ``INV-202501``); ``last_value`` is the last
     number handed out.
     """
     __tablename__ = "number_sequences"

     name = Column(String(32), primary_key=True)
     last_value = Column(Integer, default=0, nullable=False)

     def __repr__(self):
          return f"<NumberSequence(name='{self.name}', last_value={self.last_value})>"
