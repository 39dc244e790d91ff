"""Unit tests for financial year resolution"""

import pytest
from datetime import date
from dpa_portal.domain.exceptions import InvalidFinancialYearError
from dpa_portal.domain.financial_year import (
    available_years,
    default_selection,
    effective_current_year,
    financial_year_from_dates,
    resolve_current_year,
    year_bounds,
)
from dpa_portal.domain.models import FinancialYear


def test_resolve_current_year_before_november():
    """March belongs to the cycle that started the previous November"""
    year = resolve_current_year(date(2024, 3, 15))

    assert year.label == "2023-2024"
    assert year.start_date == date(2023, 11, 1)
    assert year.end_date == date(2024, 10, 31)


def test_resolve_current_year_november_and_december():
    assert resolve_current_year(date(2024, 11, 1)).label == "2024-2025"
    assert resolve_current_year(date(2024, 12, 31)).label == "2024-2025"


def test_resolve_current_year_boundaries():
    assert resolve_current_year(date(2024, 10, 31)).label == "2023-2024"
    assert resolve_current_year(date(2024, 1, 1)).label == "2023-2024"


def test_available_years_newest_first_after_all():
    years = available_years(date(2024, 3, 15))

    assert years == ["all", "2023-2024", "2022-2023", "2021-2022", "2020-2021", "2019-2020"]


def test_available_years_custom_count():
    assert available_years(date(2024, 11, 20), count=2) == ["all", "2024-2025", "2023-2024"]


def test_year_bounds_from_label():
    assert year_bounds("2024-2025") == (date(2024, 11, 1), date(2025, 10, 31))
    assert year_bounds("2024") == (date(2024, 11, 1), date(2025, 10, 31))


def test_year_bounds_malformed_label():
    assert year_bounds("FY-2024") is None
    assert year_bounds("") is None
    assert year_bounds("abcd-efgh") is None


def test_financial_year_from_dates_labels():
    """Same calendar year gives a single-year label"""
    assert financial_year_from_dates(date(2024, 1, 1), date(2024, 12, 31)).label == "2024"
    assert financial_year_from_dates(date(2024, 11, 1), date(2025, 10, 31)).label == "2024-2025"


def test_financial_year_rejects_end_not_after_start():
    with pytest.raises(InvalidFinancialYearError):
        financial_year_from_dates(date(2024, 11, 1), date(2024, 11, 1))

    with pytest.raises(InvalidFinancialYearError):
        FinancialYear(label="bad", start_date=date(2025, 1, 1), end_date=date(2024, 1, 1))


def test_configured_year_takes_precedence():
    configured = financial_year_from_dates(date(2024, 1, 1), date(2024, 12, 31))

    assert effective_current_year(configured, date(2024, 3, 15)) == configured
    assert effective_current_year(None, date(2024, 3, 15)).label == "2023-2024"


def test_default_selection():
    assert default_selection(resolve_current_year(date(2024, 3, 15))) == "2023-2024"
    assert default_selection(None) == "all"
