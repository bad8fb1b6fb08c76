"""Data access layer for the loan catalog"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from loan_finder.domain.models import Bank, Loan
from loan_finder.domain.value_objects import InterestRate, LoanType, Money, Term
from loan_finder.infrastructure.database.models import BankRecord, LoanRecord


def _to_bank(record: BankRecord) -> Bank:
    return Bank(
        id=record.id,
        name=record.name,
        is_active=record.is_active,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_loan(record: LoanRecord, banks: Optional[Dict[str, Bank]] = None) -> Loan:
    # Loans of one bank read in the same call share a single Bank instance
    banks = {} if banks is None else banks
    if record.bank_id not in banks:
        banks[record.bank_id] = _to_bank(record.bank)
    return Loan(
        id=record.id,
        bank=banks[record.bank_id],
        type=LoanType(record.loan_type),
        interest_rate=InterestRate(record.interest_rate),
        min_amount=Money(record.min_amount, record.currency),
        max_amount=Money(record.max_amount, record.currency),
        max_term=Term(record.max_term_months),
        eligibility_note=record.eligibility_note,
        is_active=record.is_active,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_loans(records: Iterable[LoanRecord]) -> List[Loan]:
    banks: Dict[str, Bank] = {}
    return [_to_loan(record, banks) for record in records]


class SqlLoanCatalog:
    """Loan catalog persisted through SQLAlchemy; one session per operation"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _ordered(self, db: Session):
        return db.query(LoanRecord).order_by(LoanRecord.position)

    def find_by_id(self, loan_id: str) -> Optional[Loan]:
        with self.session_factory() as db:
            record = db.get(LoanRecord, loan_id)
            return _to_loan(record) if record else None

    def find_by_type(self, loan_type: LoanType) -> List[Loan]:
        with self.session_factory() as db:
            records = (
                self._ordered(db)
                .filter(LoanRecord.loan_type == loan_type.value, LoanRecord.is_active.is_(True))
                .all()
            )
            return _to_loans(records)

    def find_eligible(self, loan_type: LoanType, amount: Money, term: Term) -> List[Loan]:
        # Coarse filter in SQL, the exact predicate stays on the domain entity
        with self.session_factory() as db:
            records = (
                self._ordered(db)
                .filter(
                    LoanRecord.loan_type == loan_type.value,
                    LoanRecord.is_active.is_(True),
                    LoanRecord.currency == amount.currency,
                )
                .all()
            )
            loans = _to_loans(records)
        return [loan for loan in loans if loan.is_eligible(amount, term)]

    def find_all(self) -> List[Loan]:
        with self.session_factory() as db:
            return _to_loans(self._ordered(db).all())

    def save(self, loan: Loan) -> None:
        """Insert or update a loan (and its bank); new loans go to the end of the catalog"""
        with self.session_factory() as db:
            bank = db.get(BankRecord, loan.bank.id) or BankRecord(id=loan.bank.id)
            bank.name = loan.bank.name
            bank.is_active = loan.bank.is_active
            bank.created_at = loan.bank.created_at
            bank.updated_at = loan.bank.updated_at
            db.add(bank)

            record = db.get(LoanRecord, loan.id)
            if record is None:
                last_position = db.query(func.max(LoanRecord.position)).scalar()
                record = LoanRecord(id=loan.id, position=(last_position or 0) + 1)

            record.bank_id = loan.bank.id
            record.loan_type = loan.type.value
            record.interest_rate = loan.interest_rate.rate
            record.currency = loan.currency
            record.min_amount = loan.min_amount.amount
            record.max_amount = loan.max_amount.amount
            record.max_term_months = loan.max_term.months
            record.eligibility_note = loan.eligibility_note
            record.is_active = loan.is_active
            record.created_at = loan.created_at
            record.updated_at = loan.updated_at
            db.add(record)
            db.commit()

    def delete(self, loan_id: str) -> None:
        with self.session_factory() as db:
            record = db.get(LoanRecord, loan_id)
            if record is not None:
                db.delete(record)
                db.commit()
