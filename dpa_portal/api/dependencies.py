"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from dpa_portal.domain.financial_year import effective_current_year
from dpa_portal.domain.models import FinancialYear
from dpa_portal.infrastructure.clients.ledger import LedgerClient
from dpa_portal.infrastructure.database.repositories import FinancialYearRepository
from dpa_portal.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Reference day for financial year resolution"""
    return date.today()


def get_ledger_client(authorization: Optional[str] = Header(default=None)) -> LedgerClient:
    """Provide a backend ledger client acting with the caller's bearer token"""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    return LedgerClient(token=token)


def get_configured_year(db: Session = Depends(get_db)) -> Optional[FinancialYear]:
    """Admin-configured current financial year, if any"""
    return FinancialYearRepository(db).get_current()


def get_current_year(
    configured: Optional[FinancialYear] = Depends(get_configured_year),
    today: date = Depends(get_today),
) -> FinancialYear:
    """Configured current year, falling back to the Nov-Oct cycle containing today"""
    return effective_current_year(configured, today)
