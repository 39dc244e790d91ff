"""Financial year resolution - which Nov 1 to Oct 31 cycle contains a given day"""

import re
from datetime import date
from typing import List, Optional, Tuple

from dpa_portal.domain.models import ALL_YEARS, FinancialYear

FY_START_MONTH = 11  # November
FY_END_MONTH = 10  # October
FY_END_DAY = 31

_LEADING_YEAR = re.compile(r"^\s*(\d{4})")


def start_year_for(today: date) -> int:
    """November and December belong to the cycle starting this year, other months to last year's"""
    return today.year if today.month >= FY_START_MONTH else today.year - 1


def financial_year_for_start(start_year: int) -> FinancialYear:
    return FinancialYear(
        label=f"{start_year}-{start_year + 1}",
        start_date=date(start_year, FY_START_MONTH, 1),
        end_date=date(start_year + 1, FY_END_MONTH, FY_END_DAY),
    )


def resolve_current_year(today: date) -> FinancialYear:
    """
    Default financial year containing `today`.

    Example:
        2024-03-15 -> "2023-2024" (2023-11-01 to 2024-10-31)
        2024-11-02 -> "2024-2025" (2024-11-01 to 2025-10-31)
    """
    return financial_year_for_start(start_year_for(today))


def available_years(today: date, count: int = 5) -> List[str]:
    """Selectable periods: the "all" sentinel followed by the last `count` cycles, newest first"""
    first = start_year_for(today)
    return [ALL_YEARS] + [f"{year}-{year + 1}" for year in range(first, first - count, -1)]


def year_bounds(label: str) -> Optional[Tuple[date, date]]:
    """
    Default Nov 1 / Oct 31 bounds for a label such as "2024-2025" or "2024".

    Only the leading year matters. Malformed labels return None.
    """
    match = _LEADING_YEAR.match(label or "")
    if not match:
        return None
    start_year = int(match.group(1))
    if start_year < 1 or start_year >= 9999:
        return None
    return date(start_year, FY_START_MONTH, 1), date(start_year + 1, FY_END_MONTH, FY_END_DAY)


def financial_year_from_dates(start_date: date, end_date: date) -> FinancialYear:
    """
    Build an admin-configured financial year.

    The label is "Y" when both dates fall in the same calendar year,
    "Y1-Y2" otherwise. Raises InvalidFinancialYearError if end <= start.
    """
    if start_date.year == end_date.year:
        label = f"{start_date.year}"
    else:
        label = f"{start_date.year}-{end_date.year}"
    return FinancialYear(label=label, start_date=start_date, end_date=end_date)


def effective_current_year(configured: Optional[FinancialYear], today: date) -> FinancialYear:
    """Admin-configured year takes precedence over the computed default"""
    return configured if configured is not None else resolve_current_year(today)


def default_selection(current_year: Optional[FinancialYear]) -> str:
    return current_year.label if current_year is not None else ALL_YEARS
