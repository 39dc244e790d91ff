"""GET /v1/statement - member statement of account"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from dpa_portal.api.dependencies import get_current_year, get_ledger_client, get_request_id
from dpa_portal.api.v1.schemas import StatementExportResponse, StatementResponse, TransactionSchema
from dpa_portal.config import settings
from dpa_portal.domain.currency import format_amount, to_cents
from dpa_portal.domain.exceptions import LedgerAPIError
from dpa_portal.domain.financial_year import default_selection
from dpa_portal.domain.models import FinancialYear, Statement, StatementCategory
from dpa_portal.domain.statement import build_statement, parse_category, statement_rows
from dpa_portal.infrastructure.clients.ledger import LedgerClient
from dpa_portal.infrastructure.observability.logging import log_statement
from dpa_portal.infrastructure.observability.metrics import statement_counter

router = APIRouter()

EXPORT_COLUMNS = ["Date", "Description", "Type", "Debit", "Credit"]


async def _statement(
    request: Request,
    ledger_client: LedgerClient,
    current_year: FinancialYear,
    period: Optional[str],
    category: str,
) -> tuple[str, StatementCategory, Statement]:
    start_time = time.time()
    request_id = get_request_id(request)
    period = period or default_selection(current_year)

    try:
        statement_category = parse_category(category)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown category {category!r}")

    try:
        savings, shares, loans = await ledger_client.get_member_ledgers()
    except LedgerAPIError as e:
        logging.error(f"Ledger API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    statement = build_statement(savings, shares, loans, statement_category, period, current_year)

    statement_counter.labels(category=statement_category.value).inc()
    log_statement(
        request_id,
        statement_category.value,
        period,
        len(statement.transactions),
        statement.total_credit,
        statement.total_debit,
        (time.time() - start_time) * 1000,
    )
    return period, statement_category, statement


@router.get("/statement", response_model=StatementResponse)
async def get_statement(
    request: Request,
    period: Optional[str] = Query(None, description='"all" or a financial year label; defaults to the current year'),
    category: str = Query("All", description="All | Savings | Loans | Shares"),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    current_year: FinancialYear = Depends(get_current_year),
):
    """
    Unified statement of the caller's savings, share purchases and loans.

    Flow:
    1. Fetch the three ledgers concurrently from the backend
    2. Project, sort newest first and filter by category and period
    3. Return the lines with credit/debit/savings totals
    """
    period, statement_category, statement = await _statement(
        request, ledger_client, current_year, period, category
    )

    return StatementResponse(
        period=period,
        category=statement_category.value,
        transactions=[
            TransactionSchema(
                date=t.date,
                description=t.description,
                type=t.type.value,
                amount=to_cents(t.amount),
                is_credit=t.is_credit,
            )
            for t in statement.transactions
        ],
        total_credit=to_cents(statement.total_credit),
        total_debit=to_cents(statement.total_debit),
        total_savings=to_cents(statement.total_savings),
    )


@router.get("/statement/export", response_model=StatementExportResponse)
async def export_statement(
    request: Request,
    period: Optional[str] = Query(None),
    category: str = Query("All"),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    current_year: FinancialYear = Depends(get_current_year),
):
    """Statement as preformatted table rows for the PDF and print views"""
    period, statement_category, statement = await _statement(
        request, ledger_client, current_year, period, category
    )

    return StatementExportResponse(
        period=period,
        category=statement_category.value,
        currency=settings.currency_symbol,
        columns=EXPORT_COLUMNS,
        rows=statement_rows(statement),
        total_debit=format_amount(statement.total_debit),
        total_credit=format_amount(statement.total_credit),
        total_savings=format_amount(statement.total_savings),
    )
