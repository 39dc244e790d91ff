"""Period filtering of dated ledger records"""

from datetime import date
from typing import Any, Iterable, List, Optional

from dpa_portal.domain.financial_year import year_bounds
from dpa_portal.domain.models import ALL_YEARS, FinancialYear
from dpa_portal.utils.date_utils import parse_record_date


def in_period(
    record_date: Optional[date],
    selection: str,
    current_year: Optional[FinancialYear] = None,
) -> bool:
    """
    Check whether a record date falls inside the selected period (inclusive).

    - "all" always matches, even undated records
    - the configured current year's label uses its stored boundaries
    - any other label uses Nov 1 / Oct 31 of its leading year
    - malformed labels and undated records never match
    """
    if selection == ALL_YEARS:
        return True
    record_date = parse_record_date(record_date)
    if record_date is None:
        return False

    if current_year is not None and selection == current_year.label:
        return current_year.contains(record_date)

    bounds = year_bounds(selection)
    if bounds is None:
        return False
    start, end = bounds
    return start <= record_date <= end


def record_value(record: Any, name: str) -> Any:
    """Read a field from a dataclass record or a raw mapping"""
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def filter_by_period(
    records: Iterable[Any],
    date_field: str,
    selection: str,
    current_year: Optional[FinancialYear] = None,
) -> List[Any]:
    """Keep the records whose `date_field` lies in the selected period, preserving order"""
    return [
        record
        for record in records
        if in_period(parse_record_date(record_value(record, date_field)), selection, current_year)
    ]
