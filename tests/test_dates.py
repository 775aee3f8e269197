from datetime import date

from statementextract.parsers_core.dates import normalize_date, re_anchor, resolve_date
from statementextract.parsers_core.models import StatementPeriod


def test_yearless_date_moves_back_across_new_year(year_end_period):
    """20 Dec parsed as 2025 belongs to December 2024 in a Dec-Jan statement."""
    corrected = normalize_date(
        date(2025, 12, 20), "20 Dec Groceries 25.00 1000.00", year_end_period
    )
    assert corrected == date(2024, 12, 20)


def test_yearless_january_date_keeps_end_year(year_end_period):
    corrected = normalize_date(
        date(2025, 1, 10), "10 Jan Coffee 4.50 995.50", year_end_period
    )
    assert corrected == date(2025, 1, 10)


def test_explicit_year_is_never_overridden(year_end_period):
    corrected = normalize_date(
        date(2025, 12, 20), "20 Dec 2025 Groceries 25.00 1000.00", year_end_period
    )
    assert corrected == date(2025, 12, 20)


def test_explicit_numeric_year_is_never_overridden(year_end_period):
    corrected = normalize_date(
        date(2023, 12, 20), "20/12/2023 Groceries 25.00 1000.00", year_end_period
    )
    assert corrected == date(2023, 12, 20)


def test_without_period_the_candidate_is_returned():
    assert normalize_date(date(2025, 3, 1), "01 Mar Rent 500.00", None) == date(2025, 3, 1)


def test_only_the_year_changes(year_end_period):
    candidate = date(2025, 12, 31)
    corrected = normalize_date(candidate, "31 Dec Fee 5.00", year_end_period)
    assert (corrected.month, corrected.day) == (candidate.month, candidate.day)


def test_closest_fit_when_no_year_fits(year_end_period):
    """20 Feb is 36 days after the 2025 end and 299 days before the 2024 start."""
    resolution = resolve_date(date(2025, 2, 20), "20 Feb Refund 10.00", year_end_period)
    assert resolution.unresolved
    assert resolution.value == date(2025, 2, 20)


def test_closest_fit_prefers_nearest_boundary(year_end_period):
    resolution = resolve_date(date(2025, 11, 1), "01 Nov Refund 10.00", year_end_period)
    assert resolution.unresolved
    assert resolution.value == date(2024, 11, 1)


def test_closest_fit_logs_a_warning(year_end_period, caplog):
    with caplog.at_level("WARNING", logger="statementextract"):
        resolve_date(date(2025, 6, 1), "01 Jun Refund 10.00", year_end_period)
    assert "outside statement period" in caplog.text


def test_leap_day_skips_years_without_one():
    period = StatementPeriod(start=date(2023, 12, 1), end=date(2024, 3, 31))
    value, in_period = re_anchor(date(2024, 2, 29), period)
    assert in_period
    assert value == date(2024, 2, 29)


def test_single_year_period_out_of_range():
    period = StatementPeriod(start=date(2024, 3, 1), end=date(2024, 3, 31))
    value, in_period = re_anchor(date(2024, 6, 15), period)
    assert not in_period
    assert value == date(2024, 6, 15)
