"""Ledger aggregation - monthly series, member summaries and dashboard figures"""

from decimal import Decimal
from typing import Any, Dict, Iterable, List

from dpa_portal.domain.currency import ZERO, parse_amount
from dpa_portal.domain.loans import paid_percentage_of
from dpa_portal.domain.models import (
    AdminDashboard,
    LedgerTotals,
    LoanPortfolio,
    LoanRecord,
    LoanStatus,
    MemberDashboard,
    MemberSummary,
    MonthlyTotal,
    SavingsRecord,
    ShareHoldings,
    ShareRecord,
    StatusCount,
)
from dpa_portal.domain.periods import record_value
from dpa_portal.utils.date_utils import month_label, parse_record_date


def _sum(records: Iterable[Any], amount_field: str) -> Decimal:
    return sum((parse_amount(record_value(r, amount_field)) for r in records), ZERO)


def monthly_series(
    records: Iterable[Any],
    date_field: str,
    amount_field: str,
) -> List[MonthlyTotal]:
    """
    Group amounts by short month name ("Nov") of each record's date.

    Months appear in the order they are first seen in the input, not in
    calendar order, and months of different years share one bucket.
    Records without a usable date are skipped.
    """
    totals: Dict[str, Decimal] = {}
    for record in records:
        day = parse_record_date(record_value(record, date_field))
        if day is None:
            continue
        label = month_label(day)
        totals[label] = totals.get(label, ZERO) + parse_amount(record_value(record, amount_field))

    return [MonthlyTotal(period_label=label, total=total) for label, total in totals.items()]


def member_summaries(
    records: Iterable[Any],
    date_field: str = "payment_date",
    amount_field: str = "amount",
    user_field: str = "user_id",
) -> List[MemberSummary]:
    """
    One summary per member: total, number of records and latest record date.

    Sorted by total descending; members with equal totals keep the order
    in which they were first encountered.
    """
    summaries: Dict[Any, MemberSummary] = {}
    for record in records:
        user_id = record_value(record, user_field)
        summary = summaries.get(user_id)
        if summary is None:
            summary = MemberSummary(
                user_id=user_id,
                total_amount=ZERO,
                transaction_count=0,
                last_record_date=None,
            )
            summaries[user_id] = summary

        summary.total_amount += parse_amount(record_value(record, amount_field))
        summary.transaction_count += 1

        day = parse_record_date(record_value(record, date_field))
        if day is not None and (summary.last_record_date is None or day > summary.last_record_date):
            summary.last_record_date = day

    return sorted(summaries.values(), key=lambda s: s.total_amount, reverse=True)


def _status_name(status: Any) -> str:
    if isinstance(status, LoanStatus):
        return status.value
    return str(status) if status else LoanStatus.PENDING.value


def distribution_by_status(loans: Iterable[Any]) -> List[StatusCount]:
    """Count loans per status in first-seen order; a missing status counts as "pending" """
    counts: Dict[str, int] = {}
    for loan in loans:
        status = _status_name(record_value(loan, "status"))
        counts[status] = counts.get(status, 0) + 1

    return [StatusCount(status=status, count=count) for status, count in counts.items()]


def ledger_totals(
    savings: List[SavingsRecord],
    shares: List[ShareRecord],
    loans: List[LoanRecord],
) -> LedgerTotals:
    total_savings = _sum(savings, "amount")
    total_shares = _sum(shares, "total_value")
    total_loans = _sum(loans, "loan_amount")

    return LedgerTotals(
        total_savings=total_savings,
        total_shares=total_shares,
        total_loans=total_loans,
        outstanding=total_savings + total_shares - total_loans,
    )


def admin_dashboard(
    savings: List[SavingsRecord],
    shares: List[ShareRecord],
    loans: List[LoanRecord],
    member_count: int = 0,
) -> AdminDashboard:
    """Association-wide totals plus the chart series shown on the admin dashboard"""
    return AdminDashboard(
        total_members=member_count,
        totals=ledger_totals(savings, shares, loans),
        monthly_savings=monthly_series(savings, "payment_date", "amount"),
        share_growth=monthly_series(shares, "purchase_date", "total_value"),
        loan_distribution=distribution_by_status(loans),
    )


def savings_by_payment_month(savings: Iterable[SavingsRecord]) -> List[MonthlyTotal]:
    """Group by the declared payment month ("November" -> "Nov"), "Unknown" when missing"""
    totals: Dict[str, Decimal] = {}
    for record in savings:
        month = record_value(record, "payment_month") or "Unknown"
        totals[month] = totals.get(month, ZERO) + parse_amount(record_value(record, "amount"))

    return [MonthlyTotal(period_label=month[:3], total=total) for month, total in totals.items()]


def member_dashboard(
    savings: List[SavingsRecord],
    shares: List[ShareRecord],
    loans: List[LoanRecord],
) -> MemberDashboard:
    """A member's own totals and loan repayment progress across all their loans"""
    amount_paid = _sum(loans, "amount_paid")
    total_repayable = _sum(loans, "total_repayable")

    return MemberDashboard(
        total_savings=_sum(savings, "amount"),
        total_shares=_sum(shares, "total_value"),
        loan_balance=_sum(loans, "balance"),
        loan_paid_percentage=paid_percentage_of(amount_paid, total_repayable),
        savings_by_month=savings_by_payment_month(savings),
    )


def loan_portfolio(loans: List[LoanRecord]) -> LoanPortfolio:
    return LoanPortfolio(
        pending_count=sum(1 for loan in loans if _status_name(record_value(loan, "status")) == LoanStatus.PENDING.value),
        total_disbursed=_sum(loans, "loan_amount"),
        total_interest=sum(
            (
                parse_amount(record_value(loan, "total_repayable")) - parse_amount(record_value(loan, "loan_amount"))
                for loan in loans
            ),
            ZERO,
        ),
    )


def share_holdings(shares: List[ShareRecord]) -> ShareHoldings:
    return ShareHoldings(
        total_shares=sum(int(record_value(s, "shares_count") or 0) for s in shares),
        total_value=_sum(shares, "total_value"),
        shareholder_count=len({record_value(s, "user_id") for s in shares}),
    )
