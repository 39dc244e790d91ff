"""Data access layer for portal configuration"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from dpa_portal.domain.financial_year import financial_year_from_dates
from dpa_portal.domain.models import FinancialYear
from dpa_portal.infrastructure.database.models import FinancialYearSetting


class FinancialYearRepository:
    """Repository for the admin-configured current financial year"""

    def __init__(self, db: Session):
        self.db = db

    def get_current(self) -> Optional[FinancialYear]:
        """Latest configured financial year, or None if an admin never set one"""
        row = (
            self.db.query(FinancialYearSetting)
            .order_by(FinancialYearSetting.id.desc())
            .first()
        )
        if row is None:
            return None
        return FinancialYear(label=row.label, start_date=row.start_date, end_date=row.end_date)

    def set_current(
        self,
        start_date: date,
        end_date: date,
        updated_by: str | None = None,
    ) -> FinancialYear:
        """
        Validate and store a new current financial year.

        Raises:
            InvalidFinancialYearError: end_date is not after start_date; nothing is written
        """
        financial_year = financial_year_from_dates(start_date, end_date)

        self.db.add(
            FinancialYearSetting(
                label=financial_year.label,
                start_date=financial_year.start_date,
                end_date=financial_year.end_date,
                updated_by=updated_by,
            )
        )
        self.db.flush()
        return financial_year
