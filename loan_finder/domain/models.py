"""Domain models - frozen dataclasses representing banks, loan products and their figures"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from loan_finder.domain.exceptions import ValidationError, AmountOutOfRangeError, TermExceededError
from loan_finder.domain.value_objects import Money, Term, InterestRate, LoanType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(value: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


@dataclass(frozen=True)
class Bank:
    """Financial institution offering loan products"""

    id: str
    name: str
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        _require_text(self.id, "Bank ID cannot be empty")
        object.__setattr__(self, "name", _require_text(self.name, "Bank name cannot be empty"))

    def rename(self, name: str) -> "Bank":
        return replace(self, name=name, updated_at=_utcnow())

    def activate(self) -> "Bank":
        return replace(self, is_active=True, updated_at=_utcnow())

    def deactivate(self) -> "Bank":
        return replace(self, is_active=False, updated_at=_utcnow())

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Loan:
    """Loan product offered by a bank"""

    id: str
    bank: Bank
    type: LoanType
    interest_rate: InterestRate
    min_amount: Money
    max_amount: Money
    max_term: Term
    eligibility_note: str
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        _require_text(self.id, "Loan ID cannot be empty")
        if not isinstance(self.bank, Bank):
            raise ValidationError("Bank is required")
        if not isinstance(self.type, LoanType):
            raise ValidationError("Loan type is required")
        if not isinstance(self.interest_rate, InterestRate):
            raise ValidationError("Interest rate is required")
        if not isinstance(self.min_amount, Money) or not isinstance(self.max_amount, Money):
            raise ValidationError("Minimum and maximum amounts are required")
        if not isinstance(self.max_term, Term):
            raise ValidationError("Maximum term is required")
        if self.min_amount.is_greater_than(self.max_amount):
            raise ValidationError("Minimum amount cannot be greater than maximum amount")
        object.__setattr__(
            self, "eligibility_note", _require_text(self.eligibility_note, "Eligibility note cannot be empty")
        )

    @property
    def currency(self) -> str:
        return self.min_amount.currency

    def is_eligible_for_amount(self, amount: Money) -> bool:
        # Limits are denominated in the loan's currency; other currencies never qualify
        if amount.currency != self.currency:
            return False
        return not amount.is_less_than(self.min_amount) and not amount.is_greater_than(self.max_amount)

    def is_eligible_for_term(self, term: Term) -> bool:
        return not term.is_greater_than(self.max_term)

    def is_eligible(self, amount: Money, term: Term) -> bool:
        return self.is_active and self.is_eligible_for_amount(amount) and self.is_eligible_for_term(term)

    def _ensure_eligible(self, amount: Money, term: Term) -> None:
        if not self.is_eligible_for_amount(amount):
            raise AmountOutOfRangeError(
                f"Amount {amount} is not within loan limits ({self.min_amount} - {self.max_amount})"
            )
        if not self.is_eligible_for_term(term):
            raise TermExceededError(f"Term {term.months} months exceeds maximum term of {self.max_term.months}")

    def raw_monthly_payment(self, amount: Money, term: Term) -> float:
        """
        Unrounded fixed monthly installment (annuity formula).

        Raises:
            AmountOutOfRangeError: amount outside [min_amount, max_amount]
            TermExceededError: term longer than max_term
        """
        self._ensure_eligible(amount, term)

        principal = float(amount.amount)
        n = term.months
        r = self.interest_rate.monthly_rate
        if r == 0:
            return principal / n

        growth = (1 + r) ** n
        return principal * r * growth / (growth - 1)

    def calculate_monthly_payment(self, amount: Money, term: Term) -> Money:
        return Money.of(self.raw_monthly_payment(amount, term), amount.currency)

    def calculate_total_payment(self, amount: Money, term: Term) -> Money:
        return Money.of(self.raw_monthly_payment(amount, term) * term.months, amount.currency)

    def update_interest_rate(self, rate: InterestRate) -> "Loan":
        return replace(self, interest_rate=rate, updated_at=_utcnow())

    def update_eligibility_note(self, note: str) -> "Loan":
        return replace(self, eligibility_note=note, updated_at=_utcnow())

    def activate(self) -> "Loan":
        return replace(self, is_active=True, updated_at=_utcnow())

    def deactivate(self) -> "Loan":
        return replace(self, is_active=False, updated_at=_utcnow())

    def __str__(self) -> str:
        return f"{self.bank.name} - {self.type.display_name} ({self.interest_rate})"


@dataclass(frozen=True)
class LoanComparison:
    """Payment figures of one eligible loan for a requested amount and term"""

    loan: Loan
    monthly_payment: Money
    total_payment: Money
    total_interest: Money


@dataclass(frozen=True)
class Installment:
    """Single month in an amortization schedule"""

    month: int
    payment: Money
    principal: Money
    interest: Money
    remaining_balance: Money
