"""Unit tests for ledger record normalization"""

import pytest
from datetime import date
from decimal import Decimal
from dpa_portal.domain.models import LoanRecord, SavingsRecord, ShareRecord, revalue_share


def test_savings_record_normalizes_inputs():
    record = SavingsRecord(id=1, user_id=1, amount="₦ 5,000.00", payment_date="2024-11-05T08:30:00Z", payment_month=None)

    assert record.amount == Decimal("5000.00")
    assert record.payment_date == date(2024, 11, 5)
    assert record.payment_month == ""


def test_effective_date_falls_back_to_created_at():
    record = SavingsRecord(id=1, user_id=1, amount="10", payment_date="garbage", created_at="2024-02-01")

    assert record.payment_date is None
    assert record.effective_date == date(2024, 2, 1)


def test_share_total_value_follows_count_and_unit_value():
    share = ShareRecord(id=1, user_id=1, shares_count=3, share_value="5,000")

    assert share.total_value == Decimal("15000")
    assert revalue_share(share, shares_count=4).total_value == Decimal("20000")
    assert revalue_share(share, share_value="6000").total_value == Decimal("18000")
    assert share.shares_count == 3


@pytest.mark.parametrize("count", [0, -1, 2.5, True])
def test_revalue_share_requires_positive_integer_count(count):
    share = ShareRecord(id=1, user_id=1, shares_count=3, share_value="5000")

    with pytest.raises(ValueError):
        revalue_share(share, shares_count=count)


def test_loan_balance_is_derived():
    loan = LoanRecord(
        id=1,
        user_id=1,
        loan_amount="100,000",
        interest_rate="10",
        duration_months=12,
        total_repayable="110,000",
        amount_paid="10,000",
    )

    assert loan.balance == Decimal("100000")
