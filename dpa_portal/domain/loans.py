"""Loan amortization, partial payments and the loan status state machine"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, FrozenSet, Optional

from dpa_portal.domain.currency import ZERO, parse_amount, to_cents
from dpa_portal.domain.exceptions import InvalidLoanTransitionError, InvalidPaymentError
from dpa_portal.domain.models import Amortization, LoanRecord, LoanStatus

HUNDRED = Decimal(100)
MONTHS_PER_YEAR = Decimal(12)

# action -> (allowed source statuses, target status)
_TRANSITIONS: Dict[str, tuple[FrozenSet[LoanStatus], LoanStatus]] = {
    "approve": (frozenset({LoanStatus.PENDING}), LoanStatus.APPROVED),
    "reject": (frozenset({LoanStatus.PENDING}), LoanStatus.REJECTED),
    "activate": (frozenset({LoanStatus.APPROVED}), LoanStatus.ACTIVE),
    "close": (frozenset({LoanStatus.PENDING, LoanStatus.APPROVED, LoanStatus.ACTIVE}), LoanStatus.CLOSED),
}

PAYABLE_STATUSES = frozenset({LoanStatus.APPROVED, LoanStatus.ACTIVE})

_NO_REPAYMENT = Amortization(monthly_payment=ZERO, total_repayable=ZERO, total_interest=ZERO)


def amortize(principal, annual_rate_percent, months: int) -> Amortization:
    """
    Fixed-rate amortization figures for a loan.

    monthly_rate = annual_rate_percent / 100 / 12
    payment = principal * r * (1 + r)^n / ((1 + r)^n - 1)

    A zero rate repays principal / months. Incomplete inputs (no
    principal, months <= 0, a degenerate rate) and schedules too long to
    compute give all-zero figures instead of raising.

    Example:
        amortize(120000, 12, 12) -> 10661.85 monthly, 127942.26 total, 7942.26 interest
    """
    principal = parse_amount(principal)
    rate = parse_amount(annual_rate_percent)
    try:
        months = int(months)
    except (TypeError, ValueError):
        return _NO_REPAYMENT

    if months <= 0 or principal <= 0:
        return _NO_REPAYMENT

    try:
        if rate == 0:
            monthly_payment = principal / months
        else:
            monthly_rate = rate / HUNDRED / MONTHS_PER_YEAR
            growth = (1 + monthly_rate) ** months
            if growth == 1:
                return _NO_REPAYMENT
            monthly_payment = principal * monthly_rate * growth / (growth - 1)

        if not monthly_payment.is_finite():
            return _NO_REPAYMENT

        total_repayable = monthly_payment * months
        return Amortization(
            monthly_payment=to_cents(monthly_payment),
            total_repayable=to_cents(total_repayable),
            total_interest=to_cents(total_repayable - principal),
        )
    except ArithmeticError:
        # Overflow on very long schedules
        return _NO_REPAYMENT


def new_loan(
    id,
    user_id,
    loan_amount,
    interest_rate,
    duration_months: int,
    application_date: Optional[date] = None,
) -> LoanRecord:
    """Pending loan with its repayment figures filled in from the amortization schedule"""
    figures = amortize(loan_amount, interest_rate, duration_months)
    return LoanRecord(
        id=id,
        user_id=user_id,
        loan_amount=loan_amount,
        interest_rate=interest_rate,
        duration_months=duration_months,
        monthly_repayment=figures.monthly_payment,
        total_repayable=figures.total_repayable,
        status=LoanStatus.PENDING,
        application_date=application_date or date.today(),
    )


def paid_percentage_of(amount_paid: Decimal, total_repayable: Decimal) -> Decimal:
    """Share of the repayable total already paid, clamped to 0-100"""
    if total_repayable <= 0:
        return to_cents(ZERO)
    percent = amount_paid / total_repayable * HUNDRED
    return to_cents(min(HUNDRED, max(ZERO, percent)))


def paid_percentage(loan: LoanRecord) -> Decimal:
    return paid_percentage_of(loan.amount_paid, loan.total_repayable)


def apply_partial_payment(loan: LoanRecord, amount) -> LoanRecord:
    """
    Record a partial payment and return the updated loan.

    Raises:
        InvalidPaymentError: amount <= 0, amount above the balance, or the
            loan is not approved/active. A payment on an approved loan
            activates it.
    """
    amount = parse_amount(amount)

    if loan.status not in PAYABLE_STATUSES:
        raise InvalidPaymentError(f"Loan {loan.id} is {loan.status.value} and cannot receive payments")
    if amount <= 0:
        raise InvalidPaymentError("Payment amount must be greater than zero")
    if amount > loan.balance:
        raise InvalidPaymentError(
            f"Payment amount {amount} exceeds the current balance {loan.balance}"
        )

    return replace(loan, amount_paid=loan.amount_paid + amount, status=LoanStatus.ACTIVE)


def transition(loan: LoanRecord, action: str) -> LoanRecord:
    """Apply a status change; closed and rejected loans never change again"""
    try:
        allowed_from, target = _TRANSITIONS[action]
    except KeyError:
        raise InvalidLoanTransitionError(f"Unknown loan action {action!r}") from None

    if loan.status not in allowed_from:
        raise InvalidLoanTransitionError(
            f"Cannot {action} loan {loan.id}: status is {loan.status.value}"
        )
    return replace(loan, status=target)


def approve_loan(loan: LoanRecord) -> LoanRecord:
    return transition(loan, "approve")


def reject_loan(loan: LoanRecord) -> LoanRecord:
    return transition(loan, "reject")


def activate_loan(loan: LoanRecord) -> LoanRecord:
    return transition(loan, "activate")


def close_loan(loan: LoanRecord) -> LoanRecord:
    """Admin override: closes regardless of the remaining balance"""
    return transition(loan, "close")
