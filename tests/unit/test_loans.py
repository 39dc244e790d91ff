"""Unit tests for loan amortization, payments and status changes"""

import pytest
from datetime import date
from decimal import Decimal
from dpa_portal.domain.exceptions import InvalidLoanTransitionError, InvalidPaymentError
from dpa_portal.domain.loans import (
    activate_loan,
    amortize,
    apply_partial_payment,
    approve_loan,
    close_loan,
    new_loan,
    paid_percentage,
    reject_loan,
    transition,
)
from dpa_portal.domain.models import LoanRecord, LoanStatus


def make_loan(status=LoanStatus.ACTIVE, total_repayable="100000", amount_paid="70000"):
    return LoanRecord(
        id=1,
        user_id=1,
        loan_amount="90000",
        interest_rate="10",
        duration_months=12,
        total_repayable=total_repayable,
        amount_paid=amount_paid,
        status=status,
    )


def test_amortize_standard_loan():
    """120,000 at 12% a year over 12 months"""
    result = amortize(120000, 12, 12)

    assert result.monthly_payment == Decimal("10661.85")
    assert result.total_repayable == Decimal("127942.26")
    assert result.total_interest == Decimal("7942.26")


def test_amortize_accepts_formatted_strings():
    assert amortize("120,000.00", "12", 12) == amortize(120000, 12, 12)


def test_amortize_zero_rate_splits_principal():
    result = amortize(12000, 0, 12)

    assert result.monthly_payment == Decimal("1000.00")
    assert result.total_repayable == Decimal("12000.00")
    assert result.total_interest == Decimal("0.00")


@pytest.mark.parametrize("principal,rate,months", [
    (120000, 12, 0),
    (120000, 12, -3),
    (0, 12, 12),
    ("", 12, 12),
    (120000, 12, "soon"),
])
def test_amortize_incomplete_inputs_give_zeros(principal, rate, months):
    result = amortize(principal, rate, months)

    assert result.monthly_payment == 0
    assert result.total_repayable == 0
    assert result.total_interest == 0


def test_partial_payment_clears_balance():
    loan = make_loan()
    assert loan.balance == Decimal("30000")

    paid = apply_partial_payment(loan, 30000)

    assert paid.amount_paid == Decimal("100000")
    assert paid.balance == Decimal("0")
    with pytest.raises(InvalidPaymentError):
        apply_partial_payment(paid, 1)


def test_partial_payment_leaves_input_untouched():
    loan = make_loan()

    apply_partial_payment(loan, "1,000")

    assert loan.amount_paid == Decimal("70000")


@pytest.mark.parametrize("amount", [0, -10, "abc"])
def test_partial_payment_rejects_non_positive_amounts(amount):
    with pytest.raises(InvalidPaymentError):
        apply_partial_payment(make_loan(), amount)


def test_partial_payment_rejects_overpayment():
    with pytest.raises(InvalidPaymentError):
        apply_partial_payment(make_loan(), Decimal("30000.01"))


@pytest.mark.parametrize("status", [LoanStatus.PENDING, LoanStatus.CLOSED, LoanStatus.REJECTED])
def test_partial_payment_requires_approved_or_active(status):
    with pytest.raises(InvalidPaymentError):
        apply_partial_payment(make_loan(status=status), 100)


def test_payment_on_approved_loan_activates_it():
    paid = apply_partial_payment(make_loan(status=LoanStatus.APPROVED), 500)

    assert paid.status == LoanStatus.ACTIVE
    assert paid.amount_paid == Decimal("70500")


def test_balance_never_negative():
    loan = make_loan(amount_paid="120000")

    assert loan.balance == Decimal("0")
    assert paid_percentage(loan) == Decimal("100.00")


def test_paid_percentage():
    assert paid_percentage(make_loan()) == Decimal("70.00")
    assert paid_percentage(make_loan(total_repayable="0", amount_paid="0")) == Decimal("0.00")


def test_status_transitions():
    pending = make_loan(status=LoanStatus.PENDING)

    approved = approve_loan(pending)
    assert approved.status == LoanStatus.APPROVED
    assert activate_loan(approved).status == LoanStatus.ACTIVE
    assert reject_loan(pending).status == LoanStatus.REJECTED
    assert close_loan(activate_loan(approved)).status == LoanStatus.CLOSED


def test_close_ignores_outstanding_balance():
    closed = close_loan(make_loan())

    assert closed.status == LoanStatus.CLOSED
    assert closed.balance == Decimal("30000")


@pytest.mark.parametrize("status", [LoanStatus.CLOSED, LoanStatus.REJECTED])
@pytest.mark.parametrize("action", ["approve", "reject", "activate", "close"])
def test_terminal_statuses_never_change(status, action):
    with pytest.raises(InvalidLoanTransitionError):
        transition(make_loan(status=status), action)


def test_invalid_transitions():
    with pytest.raises(InvalidLoanTransitionError):
        approve_loan(make_loan(status=LoanStatus.ACTIVE))
    with pytest.raises(InvalidLoanTransitionError):
        activate_loan(make_loan(status=LoanStatus.PENDING))
    with pytest.raises(InvalidLoanTransitionError):
        transition(make_loan(), "refinance")


def test_new_loan_is_pending_with_schedule():
    loan = new_loan(
        id=5,
        user_id=3,
        loan_amount="120000",
        interest_rate="12",
        duration_months=12,
        application_date=date(2024, 3, 1),
    )

    assert loan.status == LoanStatus.PENDING
    assert loan.monthly_repayment == Decimal("10661.85")
    assert loan.total_repayable == Decimal("127942.26")
    assert loan.amount_paid == Decimal("0")
    assert loan.balance == Decimal("127942.26")
    assert loan.application_date == date(2024, 3, 1)


def test_amortize_schedule_too_long_gives_zeros():
    result = amortize(120000, 12, 10**9)

    assert result.monthly_payment == 0
    assert result.total_repayable == 0
    assert result.total_interest == 0


def test_amortize_very_large_principal():
    result = amortize("1" * 30, 12, 12)

    assert result.monthly_payment > 0
    assert result.total_interest > 0
