"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPeriodError(DomainException):
    """Month or year outside the accepted range"""

    pass


class LedgerAPIError(DomainException):
    """Ledger API returned an error or is unavailable"""

    pass


class InvalidAmountError(DomainException):
    """Amount string is not a finite, non-negative number"""

    pass


class BillCalculationError(DomainException):
    """A bill projection could not be computed"""

    pass


class ConfigurationError(DomainException):
    """Optional configuration is missing or unusable"""

    pass
