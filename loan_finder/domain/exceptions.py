"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException, ValueError):
    """A value object or entity was constructed with invalid data"""

    pass


class CurrencyMismatchError(ValidationError):
    """Arithmetic or comparison attempted across different currencies"""

    pass


class EligibilityError(DomainException):
    """Payment figures requested for an amount/term the loan does not accept"""

    pass


class AmountOutOfRangeError(EligibilityError):
    """Requested amount is outside the loan's min/max limits"""

    pass


class TermExceededError(EligibilityError):
    """Requested term is longer than the loan's maximum term"""

    pass
