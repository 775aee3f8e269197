"""
Date normalizer.

Statement lines often print "20 Dec" with no year, and the line matcher fills
in a placeholder year. These helpers move such a date into the statement
period by changing its year only; month and day are never touched.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from statementextract.parsers_core.models import StatementPeriod
from statementextract.utils.parsing_utils import has_explicit_year

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateResolution:
    value: date
    # True when no candidate year put the date inside the statement period
    unresolved: bool = False


def _distance_to_period(day: date, period: StatementPeriod) -> int:
    if day < period.start:
        return (period.start - day).days
    if day > period.end:
        return (day - period.end).days
    return 0


def _year_candidates(candidate: date, period: StatementPeriod) -> List[date]:
    options = []
    for year in range(period.start.year, period.end.year + 1):
        try:
            options.append(candidate.replace(year=year))
        except ValueError:
            # 29 Feb in a non-leap year
            continue
    return options


def re_anchor(candidate: date, period: StatementPeriod) -> Tuple[date, bool]:
    """
    Move ``candidate`` to a year inside ``period``.

    Returns (date, in_period). When no year fits, the closest-fit year is
    used: the one with the smallest distance to the nearest period boundary,
    the earlier year winning a tie.
    """
    options = _year_candidates(candidate, period)
    if not options:
        return candidate, False

    inside = [d for d in options if period.contains(d)]
    if inside:
        same_year = [d for d in inside if d.year == candidate.year]
        return (same_year or inside)[0], True

    closest = min(options, key=lambda d: (_distance_to_period(d, period), d))
    return closest, False


def resolve_date(
    candidate: date,
    source_line: str,
    period: Optional[StatementPeriod],
    pivot: int = 50,
) -> DateResolution:
    """
    Like normalize_date, but also reports whether the date could be placed
    inside the period.
    """
    if period is None or has_explicit_year(source_line, pivot):
        return DateResolution(candidate)

    value, in_period = re_anchor(candidate, period)
    if not in_period:
        logger.warning(
            "Date %s on line %r falls outside statement period %s to %s; using %s",
            candidate.strftime("%d %b"),
            source_line,
            period.start,
            period.end,
            value,
        )
    return DateResolution(value, unresolved=not in_period)


def normalize_date(
    candidate: date, source_line: str, period: Optional[StatementPeriod]
) -> date:
    """
    Return ``candidate`` with its year corrected against the statement period.

    A line that prints its own year is trusted and returned unchanged, even if
    the date lies outside the period.
    """
    return resolve_date(candidate, source_line, period).value
