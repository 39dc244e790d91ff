"""POST /v1/loans/* - loan quotes and admin loan actions"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from dpa_portal.api.dependencies import get_ledger_client, get_request_id
from dpa_portal.api.v1.schemas import LoanPaymentRequest, LoanQuoteRequest, LoanQuoteResponse, LoanSchema
from dpa_portal.domain.exceptions import InvalidLoanTransitionError, InvalidPaymentError, LedgerAPIError
from dpa_portal.domain.loans import amortize, apply_partial_payment, close_loan, approve_loan, paid_percentage
from dpa_portal.domain.models import LoanRecord
from dpa_portal.infrastructure.clients.ledger import LedgerClient
from dpa_portal.infrastructure.observability.logging import log_payment
from dpa_portal.infrastructure.observability.metrics import loan_transition_counter, record_payment_outcome

router = APIRouter()


def _loan_schema(loan: LoanRecord) -> LoanSchema:
    return LoanSchema(
        id=loan.id,
        user_id=loan.user_id,
        loan_amount=loan.loan_amount,
        interest_rate=loan.interest_rate,
        duration_months=loan.duration_months,
        monthly_repayment=loan.monthly_repayment,
        total_repayable=loan.total_repayable,
        amount_paid=loan.amount_paid,
        balance=loan.balance,
        status=loan.status.value,
        paid_percentage=paid_percentage(loan),
    )


async def _load_loan(ledger_client: LedgerClient, loan_id: str, request_id: str) -> LoanRecord:
    try:
        loan = await ledger_client.get_loan(loan_id)
    except LedgerAPIError as e:
        logging.error(f"Ledger API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    if loan is None:
        raise HTTPException(status_code=404, detail="Loan not found")
    return loan


def _backend_rejected(request_id: str, error: LedgerAPIError) -> HTTPException:
    logging.error(f"Ledger API rejected loan action: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=502, detail=f"Backend rejected the request: {error}")


@router.post("/loans/quote", response_model=LoanQuoteResponse)
def quote_loan(request_body: LoanQuoteRequest):
    """
    Repayment figures for a prospective loan.

    Incomplete inputs (zero months or principal) return zeros rather than an error.
    """
    figures = amortize(request_body.loan_amount, request_body.interest_rate, request_body.duration_months)
    return LoanQuoteResponse(
        monthly_payment=figures.monthly_payment,
        total_repayable=figures.total_repayable,
        total_interest=figures.total_interest,
    )


@router.post("/loans/{loan_id}/payment", response_model=LoanSchema)
async def record_loan_payment(
    loan_id: str,
    request_body: LoanPaymentRequest,
    request: Request,
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """
    Record a partial payment (admin).

    Flow:
    1. Load the loan from the backend
    2. Check the amount against the balance and the loan status
    3. Relay the payment to the backend and return the updated loan
    """
    request_id = get_request_id(request)
    loan = await _load_loan(ledger_client, loan_id, request_id)

    try:
        apply_partial_payment(loan, request_body.amount)
    except InvalidPaymentError as e:
        record_payment_outcome(False)
        log_payment(request_id, loan_id, request_body.amount, recorded=False, reason=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    try:
        updated = await ledger_client.record_payment(loan_id, request_body.amount)
    except LedgerAPIError as e:
        record_payment_outcome(False)
        raise _backend_rejected(request_id, e)

    record_payment_outcome(True)
    log_payment(request_id, loan_id, request_body.amount, recorded=True)
    return _loan_schema(updated)


@router.post("/loans/{loan_id}/approve", response_model=LoanSchema)
async def approve(
    loan_id: str,
    request: Request,
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """Approve a pending loan (admin)"""
    request_id = get_request_id(request)
    loan = await _load_loan(ledger_client, loan_id, request_id)

    try:
        approve_loan(loan)
    except InvalidLoanTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    try:
        updated = await ledger_client.approve_loan(loan_id)
    except LedgerAPIError as e:
        raise _backend_rejected(request_id, e)

    loan_transition_counter.labels(action="approve").inc()
    return _loan_schema(updated)


@router.post("/loans/{loan_id}/close", response_model=LoanSchema)
async def close(
    loan_id: str,
    request: Request,
    ledger_client: LedgerClient = Depends(get_ledger_client),
):
    """Close a loan regardless of its remaining balance (admin override)"""
    request_id = get_request_id(request)
    loan = await _load_loan(ledger_client, loan_id, request_id)

    try:
        close_loan(loan)
    except InvalidLoanTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    try:
        updated = await ledger_client.close_loan(loan_id)
    except LedgerAPIError as e:
        raise _backend_rejected(request_id, e)

    loan_transition_counter.labels(action="close").inc()
    logging.info("Loan closed", extra={"request_id": request_id, "loan_id": loan_id, "balance": str(loan.balance)})
    return _loan_schema(updated)
