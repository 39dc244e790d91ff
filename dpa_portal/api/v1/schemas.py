"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class FinancialYearSchema(BaseModel):
    """A financial year with inclusive boundaries"""

    label: str
    start_date: date
    end_date: date


class FinancialYearResponse(BaseModel):
    """Response for GET/PUT /v1/financial-year"""

    current: FinancialYearSchema
    configured: bool = Field(..., description="True when an admin set the current year explicitly")
    available: List[str]


class FinancialYearUpdate(BaseModel):
    """Request body for PUT /v1/financial-year"""

    start_date: date
    end_date: date
    updated_by: Optional[str] = None


class TransactionSchema(BaseModel):
    """Single statement line"""

    date: date
    description: str
    type: str
    amount: Decimal
    is_credit: bool


class StatementResponse(BaseModel):
    """Response for GET /v1/statement"""

    period: str
    category: str
    transactions: List[TransactionSchema]
    total_credit: Decimal
    total_debit: Decimal
    total_savings: Decimal


class StatementExportResponse(BaseModel):
    """Response for GET /v1/statement/export - preformatted rows for PDF/print"""

    period: str
    category: str
    currency: str
    columns: List[str]
    rows: List[List[str]]
    total_debit: str
    total_credit: str
    total_savings: str


class MonthlyTotalSchema(BaseModel):
    period_label: str
    total: Decimal


class StatusCountSchema(BaseModel):
    status: str
    count: int


class MemberSummarySchema(BaseModel):
    user_id: int | str
    total_amount: Decimal
    transaction_count: int
    last_record_date: Optional[date] = None


class MemberSummariesResponse(BaseModel):
    """Response for GET /v1/savings/members"""

    period: str
    members: List[MemberSummarySchema]


class AdminDashboardResponse(BaseModel):
    """Response for GET /v1/dashboard/admin"""

    period: str
    total_members: int
    total_savings: Decimal
    total_shares: Decimal
    total_loans: Decimal
    outstanding_balances: Decimal
    monthly_savings: List[MonthlyTotalSchema]
    share_growth: List[MonthlyTotalSchema]
    loan_distribution: List[StatusCountSchema]
    pending_loans: int
    total_interest: Decimal
    total_share_units: int
    shareholder_count: int


class MemberDashboardResponse(BaseModel):
    """Response for GET /v1/dashboard/member"""

    period: str
    total_savings: Decimal
    total_shares: Decimal
    loan_balance: Decimal
    loan_paid_percentage: Decimal
    savings_by_month: List[MonthlyTotalSchema]


class LoanQuoteRequest(BaseModel):
    """Request body for POST /v1/loans/quote"""

    loan_amount: Decimal = Field(..., ge=0, description="Principal")
    interest_rate: Decimal = Field(..., ge=0, le=100, description="Annual rate in percent")
    duration_months: int = Field(..., ge=0, description="Repayment period in months")


class LoanQuoteResponse(BaseModel):
    """Response for POST /v1/loans/quote"""

    monthly_payment: Decimal
    total_repayable: Decimal
    total_interest: Decimal


class LoanPaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/payment"""

    amount: Decimal

    @model_validator(mode="after")
    def amount_is_finite(self) -> "LoanPaymentRequest":
        if not self.amount.is_finite():
            raise ValueError("amount must be a finite number")
        return self


class LoanSchema(BaseModel):
    """Loan as seen after an action"""

    id: int | str
    user_id: int | str
    loan_amount: Decimal
    interest_rate: Decimal
    duration_months: int
    monthly_repayment: Decimal
    total_repayable: Decimal
    amount_paid: Decimal
    balance: Decimal
    status: str
    paid_percentage: Decimal
