"""GET /v1/dashboard/* and /v1/savings/members - period-filtered aggregate views"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from dpa_portal.api.dependencies import get_current_year, get_ledger_client, get_request_id
from dpa_portal.api.v1.schemas import (
    AdminDashboardResponse,
    MemberDashboardResponse,
    MemberSummariesResponse,
    MemberSummarySchema,
    MonthlyTotalSchema,
    StatusCountSchema,
)
from dpa_portal.domain.aggregation import (
    admin_dashboard,
    loan_portfolio,
    member_dashboard,
    member_summaries,
    share_holdings,
)
from dpa_portal.domain.currency import to_cents
from dpa_portal.domain.exceptions import LedgerAPIError
from dpa_portal.domain.financial_year import default_selection
from dpa_portal.domain.models import FinancialYear, MonthlyTotal
from dpa_portal.domain.periods import filter_by_period
from dpa_portal.infrastructure.clients.ledger import LedgerClient
from dpa_portal.infrastructure.observability.metrics import dashboard_counter

router = APIRouter()


def _series(totals: list[MonthlyTotal]) -> list[MonthlyTotalSchema]:
    return [MonthlyTotalSchema(period_label=m.period_label, total=to_cents(m.total)) for m in totals]


def _ledger_unavailable(request_id: str, error: LedgerAPIError) -> HTTPException:
    logging.error(f"Ledger API error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=503, detail="Ledger service unavailable")


@router.get("/dashboard/admin", response_model=AdminDashboardResponse)
async def get_admin_dashboard(
    request: Request,
    period: Optional[str] = Query("all", description='"all" or a financial year label'),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    current_year: FinancialYear = Depends(get_current_year),
):
    """Association totals, monthly series and loan distribution for the selected period"""
    request_id = get_request_id(request)
    period = period or "all"

    try:
        savings, shares, loans = await ledger_client.get_all_ledgers()
        member_count = await ledger_client.count_members()
    except LedgerAPIError as e:
        raise _ledger_unavailable(request_id, e)

    savings = filter_by_period(savings, "effective_date", period, current_year)
    shares = filter_by_period(shares, "effective_date", period, current_year)
    loans = filter_by_period(loans, "effective_date", period, current_year)

    dashboard = admin_dashboard(savings, shares, loans, member_count)
    portfolio = loan_portfolio(loans)
    holdings = share_holdings(shares)
    dashboard_counter.labels(audience="admin").inc()

    return AdminDashboardResponse(
        period=period,
        total_members=dashboard.total_members,
        total_savings=to_cents(dashboard.totals.total_savings),
        total_shares=to_cents(dashboard.totals.total_shares),
        total_loans=to_cents(dashboard.totals.total_loans),
        outstanding_balances=to_cents(dashboard.totals.outstanding),
        monthly_savings=_series(dashboard.monthly_savings),
        share_growth=_series(dashboard.share_growth),
        loan_distribution=[
            StatusCountSchema(status=s.status, count=s.count) for s in dashboard.loan_distribution
        ],
        pending_loans=portfolio.pending_count,
        total_interest=to_cents(portfolio.total_interest),
        total_share_units=holdings.total_shares,
        shareholder_count=holdings.shareholder_count,
    )


@router.get("/dashboard/member", response_model=MemberDashboardResponse)
async def get_member_dashboard(
    request: Request,
    period: Optional[str] = Query(None, description="Defaults to the current financial year"),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    current_year: FinancialYear = Depends(get_current_year),
):
    """The caller's savings, shares, loan balance and repayment progress"""
    request_id = get_request_id(request)
    period = period or default_selection(current_year)

    try:
        savings, shares, loans = await ledger_client.get_member_ledgers()
    except LedgerAPIError as e:
        raise _ledger_unavailable(request_id, e)

    # Loans are not period-filtered: balance and progress cover every open loan
    dashboard = member_dashboard(
        filter_by_period(savings, "effective_date", period, current_year),
        filter_by_period(shares, "effective_date", period, current_year),
        loans,
    )
    dashboard_counter.labels(audience="member").inc()

    return MemberDashboardResponse(
        period=period,
        total_savings=to_cents(dashboard.total_savings),
        total_shares=to_cents(dashboard.total_shares),
        loan_balance=to_cents(dashboard.loan_balance),
        loan_paid_percentage=dashboard.loan_paid_percentage,
        savings_by_month=_series(dashboard.savings_by_month),
    )


@router.get("/savings/members", response_model=MemberSummariesResponse)
async def get_member_savings_summaries(
    request: Request,
    period: Optional[str] = Query(None, description="Defaults to the current financial year"),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    current_year: FinancialYear = Depends(get_current_year),
):
    """Per-member savings totals for the selected period, largest first (admin)"""
    request_id = get_request_id(request)
    period = period or default_selection(current_year)

    try:
        savings, _, _ = await ledger_client.get_all_ledgers()
    except LedgerAPIError as e:
        raise _ledger_unavailable(request_id, e)

    summaries = member_summaries(
        filter_by_period(savings, "effective_date", period, current_year),
        date_field="effective_date",
    )

    return MemberSummariesResponse(
        period=period,
        members=[
            MemberSummarySchema(
                user_id=s.user_id,
                total_amount=to_cents(s.total_amount),
                transaction_count=s.transaction_count,
                last_record_date=s.last_record_date,
            )
            for s in summaries
        ],
    )
