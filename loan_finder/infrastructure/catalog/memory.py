"""In-memory loan catalog"""

from typing import Iterable, List, Optional

from loan_finder.domain.models import Loan
from loan_finder.domain.value_objects import LoanType, Money, Term


class InMemoryLoanCatalog:
    """Loan catalog held in a list; saving an existing id replaces it in place"""

    def __init__(self, loans: Optional[Iterable[Loan]] = None):
        self._loans: List[Loan] = []
        for loan in loans or []:
            self.save(loan)

    def find_by_id(self, loan_id: str) -> Optional[Loan]:
        return next((loan for loan in self._loans if loan.id == loan_id), None)

    def find_by_type(self, loan_type: LoanType) -> List[Loan]:
        return [loan for loan in self._loans if loan.type == loan_type and loan.is_active]

    def find_eligible(self, loan_type: LoanType, amount: Money, term: Term) -> List[Loan]:
        return [loan for loan in self._loans if loan.type == loan_type and loan.is_eligible(amount, term)]

    def find_all(self) -> List[Loan]:
        return list(self._loans)

    def save(self, loan: Loan) -> None:
        for index, existing in enumerate(self._loans):
            if existing.id == loan.id:
                self._loans[index] = loan
                return
        self._loans.append(loan)

    def delete(self, loan_id: str) -> None:
        self._loans = [loan for loan in self._loans if loan.id != loan_id]
