# tests/test_numbering.py
from datetime import date

from models import NumberSequence
from services.numbering import next_contract_number, next_invoice_number, next_sequence_value


def test_sequence_starts_at_one_and_increments(db):
    assert [next_sequence_value(db, "CNT-20250105") for _ in range(3)] == [1, 2, 3]
    assert next_sequence_value(db, "INV-202501") == 1
    db.commit()

    last_value = (
        db.query(NumberSequence.last_value)
        .filter(NumberSequence.name == "CNT-20250105")
        .scalar()
    )
    assert last_value == 3


def test_rolled_back_numbers_are_reused(db):
    next_sequence_value(db, "INV-202501")
    db.commit()
    next_sequence_value(db, "INV-202501")
    db.rollback()

    assert next_sequence_value(db, "INV-202501") == 2


def test_number_formats(db):
    assert next_contract_number(db, date(2025, 1, 5)) == "CNT-20250105-0001"
    assert next_contract_number(db, date(2025, 1, 5)) == "CNT-20250105-0002"
    assert next_invoice_number(db, date(2025, 1, 31)) == "INV-202501-0001"
    assert next_invoice_number(db, date(2025, 2, 1)) == "INV-202502-0001"
