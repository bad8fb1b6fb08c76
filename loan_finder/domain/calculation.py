"""Loan calculation service - payment figures and cost ranking"""

from typing import Iterable, List, Optional

from loan_finder.domain.models import Loan, LoanComparison
from loan_finder.domain.value_objects import Money, Term


class LoanCalculationService:
    """Domain service for amortization math and ranking over loan products"""

    def calculate_monthly_payment(self, loan: Loan, amount: Money, term: Term) -> Money:
        return loan.calculate_monthly_payment(amount, term)

    def calculate_total_payment(self, loan: Loan, amount: Money, term: Term) -> Money:
        return loan.calculate_total_payment(amount, term)

    def calculate_total_interest(self, loan: Loan, amount: Money, term: Term) -> Money:
        return loan.calculate_total_payment(amount, term).subtract(amount)

    def compare(self, loan: Loan, amount: Money, term: Term) -> LoanComparison:
        """
        Compute all figures for a single loan.

        Raises:
            EligibilityError: if the loan does not accept the amount or term
        """
        raw_monthly = loan.raw_monthly_payment(amount, term)
        total_payment = Money.of(raw_monthly * term.months, amount.currency)
        return LoanComparison(
            loan=loan,
            monthly_payment=Money.of(raw_monthly, amount.currency),
            total_payment=total_payment,
            total_interest=total_payment.subtract(amount),
        )

    def compare_loans(self, loans: Iterable[Loan], amount: Money, term: Term) -> List[LoanComparison]:
        """
        Rank eligible, active loans by total cost.

        Ineligible loans are dropped entirely. The sort is stable, so loans with
        equal total payment keep their catalog order.
        """
        comparisons = [self.compare(loan, amount, term) for loan in loans if loan.is_eligible(amount, term)]
        return sorted(comparisons, key=lambda c: c.total_payment.amount)

    def find_best_loan(self, loans: Iterable[Loan], amount: Money, term: Term) -> Optional[Loan]:
        comparisons = self.compare_loans(loans, amount, term)
        return comparisons[0].loan if comparisons else None
