"""Immutable, self-validating value objects for the loan domain"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
from typing import List, Union

from loan_finder.domain.exceptions import ValidationError, CurrencyMismatchError

Number = Union[int, float, Decimal, str]

CENT = Decimal("0.01")
DEFAULT_CURRENCY = "TRY"
MAX_TERM_MONTHS = 360


def _to_decimal(value: Number) -> Decimal:
    try:
        # str() keeps float inputs at their shortest repr (0.1 -> "0.1")
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency, rounded to 2 decimals on construction"""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        amount = _to_decimal(self.amount)
        if not amount.is_finite():
            raise ValidationError(f"Invalid amount: {self.amount!r}")
        if amount < 0:
            raise ValidationError("Amount cannot be negative")
        if not isinstance(self.currency, str) or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError("Currency must be a valid 3-letter code")

        object.__setattr__(self, "amount", amount.quantize(CENT, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def of(cls, amount: Number, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(_to_decimal(amount), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(Decimal(0), currency)

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot operate on different currencies: {self.currency} vs {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor: Number) -> "Money":
        return Money(self.amount * _to_decimal(factor), self.currency)

    def divide(self, divisor: Number) -> "Money":
        divisor = _to_decimal(divisor)
        if divisor == 0:
            raise ValidationError("Cannot divide by zero")
        return Money(self.amount / divisor, self.currency)

    def is_greater_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: "Money") -> bool:
        self._ensure_same_currency(other)
        return self.amount < other.amount

    def __str__(self) -> str:
        return f"{self.amount:,.2f} {self.currency}"


@dataclass(frozen=True)
class Term:
    """Loan term in months (1..360)"""

    months: int

    def __post_init__(self) -> None:
        try:
            raw = float(self.months)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValidationError(f"Invalid term: {self.months!r}") from e
        if not math.isfinite(raw):
            raise ValidationError(f"Invalid term: {self.months!r}")

        # Upper bound applies to the raw value, then round half up
        if raw > MAX_TERM_MONTHS:
            raise ValidationError(f"Term cannot exceed {MAX_TERM_MONTHS} months (30 years)")
        months = int(Decimal(str(raw)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        if months <= 0:
            raise ValidationError("Term must be positive")
        object.__setattr__(self, "months", months)

    @classmethod
    def from_years(cls, years: Number) -> "Term":
        return cls(float(years) * 12)

    @property
    def years(self) -> float:
        return round(self.months / 12, 2)

    def is_greater_than(self, other: "Term") -> bool:
        return self.months > other.months

    def __str__(self) -> str:
        years, months = divmod(self.months, 12)
        if years == 0:
            return f"{months} ay"
        if months == 0:
            return f"{years} yıl"
        return f"{years} yıl {months} ay"


@dataclass(frozen=True)
class InterestRate:
    """Annual interest rate in percent (0..100); monthly_rate is the per-month fraction"""

    rate: float

    def __post_init__(self) -> None:
        try:
            rate = float(self.rate)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid interest rate: {self.rate!r}") from e
        if math.isnan(rate):
            raise ValidationError(f"Invalid interest rate: {self.rate!r}")
        if rate < 0:
            raise ValidationError("Interest rate cannot be negative")
        if rate > 100:
            raise ValidationError("Interest rate cannot exceed 100%")
        object.__setattr__(self, "rate", round(rate, 2))

    @property
    def monthly_rate(self) -> float:
        return self.rate / 1200

    @classmethod
    def zero(cls) -> "InterestRate":
        return cls(0)

    def __str__(self) -> str:
        return f"%{self.rate}"


_LOAN_TYPE_LABELS = {
    "housing": "Konut Kredisi",
    "vehicle": "Taşıt Kredisi",
    "personal": "İhtiyaç Kredisi",
}

# Turkish product names (with and without diacritics) seen in queries and model output
_LOAN_TYPE_ALIASES = {
    "konut": "housing",
    "ev": "housing",
    "mortgage": "housing",
    "taşıt": "vehicle",
    "tasit": "vehicle",
    "taşit": "vehicle",
    "araç": "vehicle",
    "arac": "vehicle",
    "car": "vehicle",
    "ihtiyaç": "personal",
    "ihtiyac": "personal",
    "kişisel": "personal",
    "kisisel": "personal",
}


def normalize_text(text: str) -> str:
    """Lower-case text without the combining dot that str.lower() leaves on 'İ'"""
    return text.replace("İ", "i").lower()


class LoanType(str, Enum):
    """Closed set of credit product categories"""

    HOUSING = "housing"
    VEHICLE = "vehicle"
    PERSONAL = "personal"

    @property
    def display_name(self) -> str:
        return _LOAN_TYPE_LABELS[self.value]

    @classmethod
    def from_string(cls, value: str) -> "LoanType":
        """Resolve a type from its value, Turkish alias or display label"""
        if isinstance(value, LoanType):
            return value
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Invalid loan type: {value!r}")

        key = normalize_text(value.strip())
        for suffix in (" kredisi", " kredi", " loan"):
            if key.endswith(suffix):
                key = key[: -len(suffix)].strip()

        key = _LOAN_TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValidationError(f"Invalid loan type: {value}. Valid types: {valid}") from None

    @classmethod
    def all_types(cls) -> List["LoanType"]:
        return list(cls)
