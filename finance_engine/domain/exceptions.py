"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDebtError(DomainException):
    """Debt record has a negative balance, rate or minimum payment"""

    pass


class InvalidLoanTermsError(DomainException):
    """Loan term or payment parameters cannot be amortized"""

    pass


class InvalidHoldingError(DomainException):
    """Holding has a negative quantity or price"""

    pass


class InvalidAllocationError(DomainException):
    """Allocation map or drift threshold is out of range"""

    pass


class InvalidRiskProfileError(DomainException):
    """Risk score, age or horizon outside the supported range"""

    pass
