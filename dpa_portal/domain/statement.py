"""Statement builder - one filtered, date-ordered transaction list from the three ledgers"""

from typing import Iterable, List, Optional

from dpa_portal.domain.currency import ZERO, format_amount
from dpa_portal.domain.models import (
    FinancialYear,
    LoanRecord,
    SavingsRecord,
    ShareRecord,
    Statement,
    StatementCategory,
    Transaction,
    TransactionType,
)
from dpa_portal.domain.periods import in_period

CATEGORY_ALIASES = {"All Transactions": StatementCategory.ALL}

_CATEGORY_TYPES = {
    StatementCategory.SAVINGS: TransactionType.SAVINGS,
    StatementCategory.LOANS: TransactionType.LOAN,
    StatementCategory.SHARES: TransactionType.SHARE,
}


def parse_category(category: StatementCategory | str) -> StatementCategory:
    """Accepts enum members, their values and the "All Transactions" alias"""
    if isinstance(category, StatementCategory):
        return category
    if category in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[category]
    return StatementCategory(category)


def project_transactions(
    savings: Iterable[SavingsRecord],
    shares: Iterable[ShareRecord],
    loans: Iterable[LoanRecord],
) -> List[Transaction]:
    """
    Project the ledgers into statement lines, savings then shares then loans.

    Savings and share purchases are credits; each loan is one debit for the
    disbursed principal. Repayments are not itemized because loans only
    carry an aggregate amount_paid. Undated records are left out.
    """
    transactions: List[Transaction] = []

    for record in savings:
        if record.effective_date is None:
            continue
        transactions.append(
            Transaction(
                date=record.effective_date,
                description=f"Savings Contribution - {record.payment_month or record.type.value}",
                type=TransactionType.SAVINGS,
                amount=record.amount,
                is_credit=True,
            )
        )

    for record in shares:
        if record.effective_date is None:
            continue
        transactions.append(
            Transaction(
                date=record.effective_date,
                description=f"Share Purchase - {record.shares_count} Units",
                type=TransactionType.SHARE,
                amount=record.total_value,
                is_credit=True,
            )
        )

    for loan in loans:
        if loan.effective_date is None:
            continue
        transactions.append(
            Transaction(
                date=loan.effective_date,
                description=f"Loan Disbursement - #{loan.id}",
                type=TransactionType.LOAN,
                amount=loan.loan_amount,
                is_credit=False,
            )
        )

    return transactions


def build_statement(
    savings: Iterable[SavingsRecord],
    shares: Iterable[ShareRecord],
    loans: Iterable[LoanRecord],
    category: StatementCategory | str = StatementCategory.ALL,
    period_selection: str = "all",
    current_year: Optional[FinancialYear] = None,
) -> Statement:
    """
    Build a member statement.

    Lines are sorted newest first; equal dates keep the savings, shares,
    loans input order. A line is kept only if it matches both the
    category and the period.

    Raises:
        ValueError: unknown category
    """
    category = parse_category(category)
    wanted_type = _CATEGORY_TYPES.get(category)

    projected = project_transactions(savings, shares, loans)
    ordered = sorted(projected, key=lambda t: t.date, reverse=True)

    # sorted(reverse=True) keeps equal keys in input order
    transactions = [
        t
        for t in ordered
        if (wanted_type is None or t.type == wanted_type)
        and in_period(t.date, period_selection, current_year)
    ]

    return Statement(
        transactions=transactions,
        total_credit=max(ZERO, sum((t.amount for t in transactions if t.is_credit), ZERO)),
        total_debit=max(ZERO, sum((t.amount for t in transactions if not t.is_credit), ZERO)),
        total_savings=sum((t.amount for t in transactions if t.type == TransactionType.SAVINGS), ZERO),
    )


def statement_rows(statement: Statement) -> List[List[str]]:
    """Rows for the PDF/print export: date, description, type, debit, credit"""
    return [
        [
            t.date.isoformat(),
            t.description,
            t.type.value,
            "" if t.is_credit else format_amount(t.amount),
            format_amount(t.amount) if t.is_credit else "",
        ]
        for t in statement.transactions
    ]
