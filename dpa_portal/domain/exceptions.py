"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPaymentError(DomainException):
    """Partial payment is non-positive, exceeds the balance, or the loan cannot take payments"""

    pass


class InvalidFinancialYearError(DomainException):
    """Financial year end date is not after its start date"""

    pass


class InvalidLoanTransitionError(DomainException):
    """Requested loan status change is not allowed from the current status"""

    pass


class LedgerAPIError(DomainException):
    """Backend ledger API returned an error or is unavailable"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
