"""Visit analytics aggregation.

Pure functions over an explicit snapshot of one user's visits. Nothing
here performs I/O or mutates its inputs; the same visits, time range and
``today`` always produce the same report.
"""

import calendar
import logging
from collections import Counter
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Union

import numpy as np

from common.schemas.analytics import (
    AnalyticsReport,
    CategoryCount,
    Insights,
    MonthlyCount,
    SummaryStats,
    SymptomCategoryStat,
    SymptomStat,
    TimeRange,
)
from common.schemas.visit import Symptom, Visit

logger = logging.getLogger(__name__)

TOP_SYMPTOM_LIMIT = 10

NO_VISIT_PATTERN_DATA = "Not enough data to analyze visit patterns."
NO_HEALTH_ISSUE_DATA = "Not enough data to identify common health issues."
NO_SYMPTOM_DATA = "Not enough symptom data for analysis."


def round_one(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return round_one(np.mean(values))


def subtract_months(day: date, months: int) -> date:
    """Move back whole calendar months, clamping to the target month's last day."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _next_month(day: date) -> date:
    return date(day.year + day.month // 12, day.month % 12 + 1, 1)


def _named_symptoms(visits: Iterable[Visit]) -> Iterator[Symptom]:
    for visit in visits:
        for symptom in visit.symptoms:
            if not symptom.is_placeholder:
                yield symptom


def filter_visits(
    visits: Iterable[Visit],
    months: Union[TimeRange, int],
    today: date,
) -> List[Visit]:
    """Visits dated on or after ``today`` minus ``months`` months."""
    cutoff = subtract_months(today, int(months))
    return [visit for visit in visits if visit.visit_date >= cutoff]


def visits_by_month(visits: Sequence[Visit], today: date) -> List[MonthlyCount]:
    """Visit counts per calendar month, with zero-count months filled in.

    The series runs from the earliest visit's month through the current
    month, or through the latest visit's month if that is later.
    """
    if not visits:
        return []

    counts = Counter(_month_start(visit.visit_date) for visit in visits)
    end = max(_month_start(today), max(counts))

    series = []
    month = min(counts)
    while month <= end:
        series.append(MonthlyCount(
            month=month,
            label=month.strftime("%b %Y"),
            visits=counts.get(month, 0),
        ))
        month = _next_month(month)
    return series


def visits_by_category(visits: Iterable[Visit]) -> List[CategoryCount]:
    """Visit counts per category, largest first. Ties keep first-seen order."""
    counts = Counter(visit.category.value for visit in visits)
    return [CategoryCount(name=name, value=value) for name, value in counts.most_common()]


def symptoms_by_category(visits: Iterable[Visit]) -> List[SymptomCategoryStat]:
    """Occurrences and mean severity per symptom category, in first-seen order."""
    severities: Dict[str, List[int]] = {}
    for symptom in _named_symptoms(visits):
        severities.setdefault(symptom.category.value, []).append(symptom.severity)

    return [
        SymptomCategoryStat(category=category, count=len(values), average_severity=_mean(values))
        for category, values in severities.items()
    ]


def top_symptoms(visits: Iterable[Visit], limit: int = TOP_SYMPTOM_LIMIT) -> List[SymptomStat]:
    """Most frequently reported symptom names with their mean severity."""
    severities: Dict[str, List[int]] = {}
    for symptom in _named_symptoms(visits):
        severities.setdefault(symptom.name, []).append(symptom.severity)

    stats = [
        SymptomStat(name=name, count=len(values), average_severity=_mean(values))
        for name, values in severities.items()
    ]
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats[:limit]


def summary_stats(visits: Sequence[Visit]) -> SummaryStats:
    total = len(visits)
    severities = [symptom.severity for symptom in _named_symptoms(visits)]
    categories = visits_by_category(visits)

    return SummaryStats(
        total_visits=total,
        avg_symptoms_per_visit=round_one(len(severities) / total) if total else 0.0,
        avg_severity=_mean(severities),
        most_common_category=categories[0].name if categories else None,
    )


def build_insights(
    visit_count: int,
    months: Union[TimeRange, int],
    monthly_series: Sequence[MonthlyCount],
    categories: Sequence[CategoryCount],
    symptoms: Sequence[SymptomStat],
) -> Insights:
    """Narrative sentences for the report.

    The monthly average divides by the smaller of the selected window and
    the number of months in the series.
    """
    if monthly_series and any(m.visits > 0 for m in monthly_series):
        per_month = round_one(visit_count / min(int(months), len(monthly_series)))
        visit_patterns = (
            f"You had an average of {per_month:.1f} visits per month in the selected period."
        )
    else:
        visit_patterns = NO_VISIT_PATTERN_DATA

    if categories:
        top = categories[0]
        common_health_issues = (
            f'Your most common health issue was "{top.name}" with {top.value} occurrences.'
        )
    else:
        common_health_issues = NO_HEALTH_ISSUE_DATA

    if symptoms:
        top_symptom = symptoms[0]
        symptom_analysis = (
            f'Your most frequently reported symptom was "{top_symptom.name}" '
            f"with an average severity of {top_symptom.average_severity:.1f}/10."
        )
    else:
        symptom_analysis = NO_SYMPTOM_DATA

    return Insights(
        visit_patterns=visit_patterns,
        common_health_issues=common_health_issues,
        symptom_analysis=symptom_analysis,
    )


def build_report(
    visits: Iterable[Visit],
    months: Union[TimeRange, int] = TimeRange.SIX_MONTHS,
    today: Optional[date] = None,
) -> AnalyticsReport:
    """Compute every analytics output for one user's visits.

    Args:
        visits: Snapshot of the user's visits
        months: Lookback window; must be a TimeRange value
        today: Reference date, defaults to the current date

    Returns:
        AnalyticsReport with the filtered visits and all derived series
    """
    time_range = TimeRange(int(months))
    today = today or date.today()

    filtered = filter_visits(visits, time_range, today)
    monthly = visits_by_month(filtered, today)
    categories = visits_by_category(filtered)
    symptoms = top_symptoms(filtered)

    logger.debug(
        f"Analytics over {time_range.value} months: {len(filtered)} visits, "
        f"{len(monthly)} months, {len(symptoms)} top symptoms"
    )

    return AnalyticsReport(
        months=time_range.value,
        today=today,
        cutoff_date=subtract_months(today, time_range.value),
        filtered_visits=filtered,
        monthly_series=monthly,
        category_distribution=categories,
        symptom_categories=symptoms_by_category(filtered),
        top_symptoms=symptoms,
        summary=summary_stats(filtered),
        insights=build_insights(len(filtered), time_range, monthly, categories, symptoms),
    )
