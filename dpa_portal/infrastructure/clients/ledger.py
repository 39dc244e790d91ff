"""Backend REST client for the savings, shares and loans ledgers"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Tuple

import httpx

from dpa_portal.config import settings
from dpa_portal.domain.currency import parse_amount
from dpa_portal.domain.exceptions import LedgerAPIError
from dpa_portal.domain.models import LoanRecord, LoanStatus, SavingsRecord, ShareRecord
from dpa_portal.infrastructure.observability.metrics import ledger_fetch_failures_counter

MEMBER_LEDGER_PATHS = ("/api/v1/savings/me", "/api/v1/shares/me", "/api/v1/loans/me")
ADMIN_LEDGER_PATHS = ("/api/v1/admin/savings", "/api/v1/admin/shares", "/api/v1/admin/loans")
ADMIN_USERS_PATH = "/api/v1/admin/users"

Ledgers = Tuple[List[SavingsRecord], List[ShareRecord], List[LoanRecord]]


def parse_savings(raw: Dict[str, Any]) -> SavingsRecord:
    """Build a savings record; bad amounts become 0 and bad dates None"""
    return SavingsRecord(
        id=raw.get("id"),
        user_id=raw.get("user_id"),
        amount=raw.get("amount"),
        type=raw.get("type"),
        payment_date=raw.get("payment_date") or raw.get("transaction_date"),
        payment_month=raw.get("payment_month") or "",
        description=raw.get("description"),
        created_at=raw.get("created_at"),
    )


def parse_share(raw: Dict[str, Any]) -> ShareRecord:
    """Build a share record, deriving the unit value from total_value when it is missing"""
    shares_count = int(parse_amount(raw.get("shares_count")))
    share_value = parse_amount(raw.get("share_value"))
    if share_value == 0 and shares_count > 0:
        share_value = parse_amount(raw.get("total_value")) / shares_count
    return ShareRecord(
        id=raw.get("id"),
        user_id=raw.get("user_id"),
        shares_count=shares_count,
        share_value=share_value,
        purchase_date=raw.get("purchase_date"),
        description=raw.get("description"),
        created_at=raw.get("created_at"),
    )


def parse_loan(raw: Dict[str, Any]) -> LoanRecord:
    """Build a loan record; unknown statuses fall back to pending"""
    status = raw.get("status") or LoanStatus.PENDING.value
    try:
        status = LoanStatus(str(status).lower())
    except ValueError:
        logging.warning(f"Unknown loan status {status!r} on loan {raw.get('id')}, treating as pending")
        status = LoanStatus.PENDING

    return LoanRecord(
        id=raw.get("id"),
        user_id=raw.get("user_id"),
        loan_amount=raw.get("loan_amount"),
        interest_rate=raw.get("interest_rate"),
        duration_months=int(parse_amount(raw.get("duration_months"))),
        monthly_repayment=raw.get("monthly_repayment"),
        total_repayable=raw.get("total_repayable"),
        amount_paid=raw.get("amount_paid"),
        status=status,
        application_date=raw.get("application_date"),
        created_at=raw.get("created_at"),
    )


class LedgerClient:
    """Client for the association's backend ledger API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.backend_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.token = token
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, client: httpx.AsyncClient, method: str, path: str, **kwargs) -> Any:
        """
        Call the backend and decode the JSON body.

        Raises:
            LedgerAPIError: On timeout, network failure, HTTP errors (404 included) or invalid JSON
        """
        try:
            response = await client.request(method, f"{self.base_url}{path}", headers=self._headers(), **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            ledger_fetch_failures_counter.labels(path=path).inc()
            raise LedgerAPIError(f"Ledger API timeout after {self.timeout}s on {path}") from e
        except httpx.HTTPStatusError as e:
            ledger_fetch_failures_counter.labels(path=path).inc()
            raise LedgerAPIError(
                f"Ledger API error {e.response.status_code} on {path}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            ledger_fetch_failures_counter.labels(path=path).inc()
            raise LedgerAPIError(f"Ledger API unreachable on {path}: {e}") from e
        except ValueError as e:
            ledger_fetch_failures_counter.labels(path=path).inc()
            raise LedgerAPIError(f"Invalid JSON from ledger API on {path}") from e

    async def _get_list(self, client: httpx.AsyncClient, path: str) -> List[Dict[str, Any]]:
        data = await self._request(client, "GET", path)
        if not isinstance(data, list):
            raise LedgerAPIError(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    async def _fetch_ledgers(self, paths: Tuple[str, str, str]) -> Ledgers:
        async with self._client() as client:
            raw_savings, raw_shares, raw_loans = await asyncio.gather(
                *(self._get_list(client, path) for path in paths)
            )

        return (
            _parse_each(raw_savings, parse_savings, "savings"),
            _parse_each(raw_shares, parse_share, "share"),
            _parse_each(raw_loans, parse_loan, "loan"),
        )

    async def get_member_ledgers(self) -> Ledgers:
        """Savings, shares and loans of the member owning the token, fetched concurrently"""
        return await self._fetch_ledgers(MEMBER_LEDGER_PATHS)

    async def get_all_ledgers(self) -> Ledgers:
        """Association-wide savings, shares and loans (admin token), fetched concurrently"""
        return await self._fetch_ledgers(ADMIN_LEDGER_PATHS)

    async def count_members(self) -> int:
        async with self._client() as client:
            return len(await self._get_list(client, ADMIN_USERS_PATH))

    async def get_loan(self, loan_id: int | str) -> LoanRecord | None:
        """Find one loan in the admin loans ledger"""
        async with self._client() as client:
            raw_loans = await self._get_list(client, ADMIN_LEDGER_PATHS[2])
        for raw in raw_loans:
            if str(raw.get("id")) == str(loan_id):
                return parse_loan(raw)
        return None

    async def record_payment(self, loan_id: int | str, amount: Decimal) -> LoanRecord:
        async with self._client() as client:
            data = await self._request(
                client,
                "POST",
                f"/api/v1/admin/loans/{loan_id}/payment",
                json={"amount": float(amount)},
            )
        return parse_loan(data)

    async def approve_loan(self, loan_id: int | str) -> LoanRecord:
        async with self._client() as client:
            data = await self._request(client, "POST", f"/api/v1/admin/loans/{loan_id}/approve")
        return parse_loan(data)

    async def close_loan(self, loan_id: int | str) -> LoanRecord:
        async with self._client() as client:
            data = await self._request(client, "POST", f"/api/v1/admin/loans/{loan_id}/close")
        return parse_loan(data)


def _parse_each(raw_records: List[Any], parser, kind: str) -> list:
    """Parse a batch; one unusable record is logged and skipped, never fatal to the batch"""
    records = []
    for raw in raw_records:
        if not isinstance(raw, dict):
            logging.warning(f"Skipping non-object {kind} record: {raw!r}")
            continue
        try:
            records.append(parser(raw))
        except (TypeError, ValueError, ArithmeticError) as e:
            logging.warning(f"Skipping malformed {kind} record {raw.get('id')}: {e}")
    return records
