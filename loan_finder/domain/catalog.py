"""Catalog contract consumed by the search orchestrator"""

from typing import List, Optional, Protocol

from loan_finder.domain.models import Loan
from loan_finder.domain.value_objects import LoanType, Money, Term


class LoanCatalog(Protocol):
    """Read-mostly store of loan products, iterated in insertion order"""

    def find_by_id(self, loan_id: str) -> Optional[Loan]: ...

    def find_by_type(self, loan_type: LoanType) -> List[Loan]: ...

    def find_eligible(self, loan_type: LoanType, amount: Money, term: Term) -> List[Loan]: ...

    def find_all(self) -> List[Loan]: ...

    def save(self, loan: Loan) -> None: ...

    def delete(self, loan_id: str) -> None: ...
