"""Domain models - pure Python dataclasses representing ledger records and derived reports"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from dpa_portal.domain.currency import ZERO, parse_amount
from dpa_portal.domain.exceptions import InvalidFinancialYearError
from dpa_portal.utils.date_utils import parse_record_date

ALL_YEARS = "all"


class SavingsType(str, Enum):
    MONTHLY_SAVINGS = "Monthly Savings"
    SHARE_PURCHASE = "Share Purchase"
    LOAN_REPAYMENT = "Loan Repayment"
    REGISTRATION_FEE = "Registration Fee"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: "SavingsType | str | None") -> "SavingsType":
        """Map backend strings onto the enum, unknown values become OTHER"""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        return cls.OTHER


class LoanStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"
    CLOSED = "closed"
    REJECTED = "rejected"


class TransactionType(str, Enum):
    SAVINGS = "Savings"
    SHARE = "Share"
    LOAN = "Loan"


class StatementCategory(str, Enum):
    ALL = "All"
    SAVINGS = "Savings"
    LOANS = "Loans"
    SHARES = "Shares"


@dataclass(frozen=True)
class FinancialYear:
    """A reporting cycle, e.g. 2024-2025 running Nov 1 to Oct 31"""

    label: str
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date <= self.start_date:
            raise InvalidFinancialYearError(
                f"Financial year {self.label!r} must end after it starts "
                f"({self.start_date.isoformat()} -> {self.end_date.isoformat()})"
            )

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass
class SavingsRecord:
    """Savings payment from the savings ledger"""

    id: int | str
    user_id: int | str
    amount: Decimal
    type: SavingsType = SavingsType.MONTHLY_SAVINGS
    payment_date: Optional[date] = None
    payment_month: str = ""
    description: Optional[str] = None
    created_at: Optional[date] = None

    def __post_init__(self) -> None:
        self.amount = parse_amount(self.amount)
        self.type = SavingsType.coerce(self.type)
        self.payment_date = parse_record_date(self.payment_date)
        self.created_at = parse_record_date(self.created_at)
        self.payment_month = self.payment_month or ""

    @property
    def effective_date(self) -> Optional[date]:
        return self.payment_date or self.created_at


@dataclass
class ShareRecord:
    """Share purchase from the shares ledger; total value is always count x unit value"""

    id: int | str
    user_id: int | str
    shares_count: int
    share_value: Decimal
    purchase_date: Optional[date] = None
    description: Optional[str] = None
    created_at: Optional[date] = None

    def __post_init__(self) -> None:
        self.share_value = parse_amount(self.share_value)
        self.purchase_date = parse_record_date(self.purchase_date)
        self.created_at = parse_record_date(self.created_at)

    @property
    def total_value(self) -> Decimal:
        return self.shares_count * self.share_value

    @property
    def effective_date(self) -> Optional[date]:
        return self.purchase_date or self.created_at


def revalue_share(
    record: ShareRecord,
    shares_count: Optional[int] = None,
    share_value: Decimal | str | None = None,
) -> ShareRecord:
    """Edited copy of a share purchase; total_value follows count and unit value"""
    count = record.shares_count if shares_count is None else shares_count
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise ValueError(f"shares_count must be a positive integer, got {count!r}")
    return replace(
        record,
        shares_count=count,
        share_value=record.share_value if share_value is None else share_value,
    )


@dataclass
class LoanRecord:
    """Loan from the loans ledger; balance is derived and never negative"""

    id: int | str
    user_id: int | str
    loan_amount: Decimal
    interest_rate: Decimal
    duration_months: int
    monthly_repayment: Decimal = ZERO
    total_repayable: Decimal = ZERO
    amount_paid: Decimal = ZERO
    status: LoanStatus = LoanStatus.PENDING
    application_date: Optional[date] = None
    created_at: Optional[date] = None

    def __post_init__(self) -> None:
        self.loan_amount = parse_amount(self.loan_amount)
        self.interest_rate = parse_amount(self.interest_rate)
        self.monthly_repayment = parse_amount(self.monthly_repayment)
        self.total_repayable = parse_amount(self.total_repayable)
        self.amount_paid = parse_amount(self.amount_paid)
        if not isinstance(self.status, LoanStatus):
            self.status = LoanStatus((self.status or LoanStatus.PENDING.value).lower())
        self.application_date = parse_record_date(self.application_date)
        self.created_at = parse_record_date(self.created_at)

    @property
    def balance(self) -> Decimal:
        return max(ZERO, self.total_repayable - self.amount_paid)

    @property
    def effective_date(self) -> Optional[date]:
        return self.application_date or self.created_at


@dataclass(frozen=True)
class Transaction:
    """One statement line projected from a ledger record"""

    date: date
    description: str
    type: TransactionType
    amount: Decimal
    is_credit: bool


@dataclass
class Statement:
    """Filtered statement with its totals"""

    transactions: List[Transaction]
    total_credit: Decimal
    total_debit: Decimal
    total_savings: Decimal


@dataclass(frozen=True)
class MonthlyTotal:
    period_label: str
    total: Decimal


@dataclass
class MemberSummary:
    user_id: int | str
    total_amount: Decimal
    transaction_count: int
    last_record_date: Optional[date]


@dataclass(frozen=True)
class StatusCount:
    status: str
    count: int


@dataclass(frozen=True)
class Amortization:
    """Repayment figures for a fixed-rate loan, in cents"""

    monthly_payment: Decimal
    total_repayable: Decimal
    total_interest: Decimal


@dataclass
class LedgerTotals:
    total_savings: Decimal
    total_shares: Decimal
    total_loans: Decimal
    outstanding: Decimal  # savings + shares - loans, may be negative


@dataclass
class AdminDashboard:
    total_members: int
    totals: LedgerTotals
    monthly_savings: List[MonthlyTotal] = field(default_factory=list)
    share_growth: List[MonthlyTotal] = field(default_factory=list)
    loan_distribution: List[StatusCount] = field(default_factory=list)


@dataclass
class MemberDashboard:
    total_savings: Decimal
    total_shares: Decimal
    loan_balance: Decimal
    loan_paid_percentage: Decimal
    savings_by_month: List[MonthlyTotal] = field(default_factory=list)


@dataclass
class LoanPortfolio:
    pending_count: int
    total_disbursed: Decimal
    total_interest: Decimal


@dataclass
class ShareHoldings:
    total_shares: int
    total_value: Decimal
    shareholder_count: int
