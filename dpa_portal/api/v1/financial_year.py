"""GET/PUT /v1/financial-year - current financial year and selectable periods"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from dpa_portal.api.dependencies import get_configured_year, get_request_id, get_today
from dpa_portal.api.v1.schemas import FinancialYearResponse, FinancialYearSchema, FinancialYearUpdate
from dpa_portal.config import settings
from dpa_portal.domain.exceptions import InvalidFinancialYearError
from dpa_portal.domain.financial_year import available_years, effective_current_year
from dpa_portal.domain.models import FinancialYear
from dpa_portal.infrastructure.database.repositories import FinancialYearRepository
from dpa_portal.infrastructure.database.session import get_db
from dpa_portal.infrastructure.observability.metrics import financial_year_update_counter

router = APIRouter()


def _response(configured: Optional[FinancialYear], today: date) -> FinancialYearResponse:
    current = effective_current_year(configured, today)
    return FinancialYearResponse(
        current=FinancialYearSchema(
            label=current.label,
            start_date=current.start_date,
            end_date=current.end_date,
        ),
        configured=configured is not None,
        available=available_years(today, settings.financial_year_window),
    )


@router.get("/financial-year", response_model=FinancialYearResponse)
def get_financial_year(
    configured: Optional[FinancialYear] = Depends(get_configured_year),
    today: date = Depends(get_today),
):
    """
    Current financial year and the periods a user can select.

    Returns:
        The admin-configured year when one is set, otherwise the Nov-Oct
        cycle containing today, plus "all" and the last N cycles
    """
    return _response(configured, today)


@router.put("/financial-year", response_model=FinancialYearResponse)
def update_financial_year(
    request_body: FinancialYearUpdate,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Set the current financial year (admin).

    An end date on or before the start date is rejected and the previous
    configuration stays active.
    """
    request_id = get_request_id(request)
    repo = FinancialYearRepository(db)

    try:
        financial_year = repo.set_current(
            request_body.start_date,
            request_body.end_date,
            updated_by=request_body.updated_by,
        )
        db.commit()
    except InvalidFinancialYearError as e:
        db.rollback()
        financial_year_update_counter.labels(outcome="rejected").inc()
        logging.warning(f"Financial year rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    financial_year_update_counter.labels(outcome="saved").inc()
    logging.info(
        "Financial year updated",
        extra={
            "request_id": request_id,
            "label": financial_year.label,
            "start_date": financial_year.start_date.isoformat(),
            "end_date": financial_year.end_date.isoformat(),
        },
    )
    return _response(financial_year, today)
