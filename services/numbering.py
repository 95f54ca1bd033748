# services/numbering.py
"""
Contract and invoice number allocation.

Numbers come from the ``number_sequences`` table, incremented with a single
UPDATE so that concurrent transactions serialize on the row lock instead of
racing on a ``count(*) + 1`` snapshot.

Formats:
     CNT-YYYYMMDD-NNNN  (contracts, per contract day)
     INV-YYYYMM-NNNN    (invoices, per issue month)
"""
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import NumberSequence

CONTRACT_PREFIX = "CNT"
INVOICE_PREFIX = "INV"


def _increment(db: Session, name: str) -> bool:
     result = db.execute(
          update(NumberSequence)
          .where(NumberSequence.name == name)
          .values(last_value=NumberSequence.last_value + 1)
          .execution_options(synchronize_session=False)
     )
     return result.rowcount > 0


def next_sequence_value(db: Session, name: str) -> int:
     """
     Allocate the next value of the named sequence within the caller's transaction.

     The first allocation inserts the row inside a SAVEPOINT; if a concurrent
     transaction inserted it first, the increment is retried on its row.
     """
     if not _increment(db, name):
          try:
               with db.begin_nested():
                    db.add(NumberSequence(name=name, last_value=1))
               return 1
          except IntegrityError:
               _increment(db, name)

     return db.execute(
          select(NumberSequence.last_value).where(NumberSequence.name == name)
     ).scalar_one()


def next_contract_number(db: Session, on_date: date) -> str:
     key = f"{CONTRACT_PREFIX}-{on_date:%Y%m%d}"
     return f"{key}-{next_sequence_value(db, key):04d}"


def next_invoice_number(db: Session, on_date: date) -> str:
     key = f"{INVOICE_PREFIX}-{on_date:%Y%m}"
     return f"{key}-{next_sequence_value(db, key):04d}"
