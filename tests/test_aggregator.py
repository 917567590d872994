"""Tests for visit analytics aggregation."""

import random
from datetime import date, timedelta

import pytest

from analytics.aggregator import (
    NO_HEALTH_ISSUE_DATA,
    NO_SYMPTOM_DATA,
    NO_VISIT_PATTERN_DATA,
    build_report,
    filter_visits,
    round_one,
    subtract_months,
    symptoms_by_category,
    top_symptoms,
    visits_by_category,
    visits_by_month,
)
from common.schemas.analytics import TimeRange
from common.schemas.visit import SymptomCategory, VisitCategory


class TestRounding:
    """Test cases for one-decimal rounding."""

    def test_exact_half_kept(self):
        assert round_one((4 + 7) / 2) == 5.5

    def test_thirds(self):
        assert round_one((1 + 1 + 2) / 3) == 1.3

    def test_halves_round_away_from_zero(self):
        assert round_one(0.25) == 0.3
        assert round_one(1.05) == 1.1
        assert round_one(-0.25) == -0.3

    def test_integers_unchanged(self):
        assert round_one(6) == 6.0


class TestSubtractMonths:
    """Test cases for calendar month arithmetic."""

    def test_same_day(self):
        assert subtract_months(date(2024, 4, 1), 3) == date(2024, 1, 1)

    def test_crosses_year(self):
        assert subtract_months(date(2024, 1, 15), 1) == date(2023, 12, 15)
        assert subtract_months(date(2024, 3, 15), 60) == date(2019, 3, 15)

    def test_clamps_to_month_end(self):
        assert subtract_months(date(2024, 5, 31), 3) == date(2024, 2, 29)
        assert subtract_months(date(2023, 5, 31), 3) == date(2023, 2, 28)


class TestFilterVisits:
    """Test cases for the time-range filter."""

    def test_cutoff_is_inclusive(self, make_visit):
        visits = [
            make_visit(date(2024, 1, 14), id="before"),
            make_visit(date(2024, 1, 15), id="on"),
            make_visit(date(2024, 4, 1), id="after"),
        ]

        filtered = filter_visits(visits, TimeRange.THREE_MONTHS, date(2024, 4, 15))

        assert [v.id for v in filtered] == ["on", "after"]

    def test_wider_range_includes_more(self, sample_visits):
        today = date(2024, 6, 1)

        assert len(filter_visits(sample_visits, 3, today)) == 2
        assert len(filter_visits(sample_visits, 6, today)) == 3

    def test_keeps_input_order(self, sample_visits):
        filtered = filter_visits(list(reversed(sample_visits)), 12, date(2024, 4, 1))
        assert [v.id for v in filtered] == ["v3", "v2", "v1"]


class TestMonthlySeries:
    """Test cases for per-month visit counts."""

    def test_fills_empty_months_through_today(self, sample_visits):
        series = visits_by_month(sample_visits, date(2024, 4, 1))

        assert [m.month for m in series] == [
            date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1), date(2024, 4, 1),
        ]
        assert [m.visits for m in series] == [1, 0, 2, 0]
        assert series[0].label == "Jan 2024"

    def test_crosses_year_boundary(self, make_visit):
        visits = [make_visit(date(2023, 11, 20)), make_visit(date(2024, 2, 3))]

        series = visits_by_month(visits, date(2024, 2, 10))

        assert [m.label for m in series] == ["Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024"]
        assert [m.visits for m in series] == [1, 0, 0, 1]

    def test_extends_to_future_visit(self, make_visit):
        visits = [make_visit(date(2024, 3, 1)), make_visit(date(2024, 6, 10))]

        series = visits_by_month(visits, date(2024, 4, 1))

        assert [m.visits for m in series] == [1, 0, 0, 1]

    def test_empty(self):
        assert visits_by_month([], date(2024, 4, 1)) == []


class TestDistributions:
    """Test cases for category and symptom aggregation."""

    def test_category_distribution(self, sample_visits):
        categories = visits_by_category(sample_visits)

        assert [(c.name, c.value) for c in categories] == [("Checkup", 2), ("Flu/Cold", 1)]

    def test_category_ties_keep_first_seen_order(self, make_visit):
        visits = [
            make_visit(date(2024, 1, 1), VisitCategory.EMERGENCY),
            make_visit(date(2024, 1, 2), VisitCategory.VACCINATION),
            make_visit(date(2024, 1, 3), VisitCategory.VACCINATION),
            make_visit(date(2024, 1, 4), VisitCategory.EMERGENCY),
            make_visit(date(2024, 1, 5), VisitCategory.OTHER),
        ]

        names = [c.name for c in visits_by_category(visits)]

        assert names == ["Emergency", "Vaccination", "Other"]

    def test_placeholder_symptom_excluded_everywhere(self, make_visit):
        visit = make_visit(
            date(2024, 3, 1),
            symptoms=[
                ("Headache", 6, SymptomCategory.NEUROLOGICAL),
                ("", 9, SymptomCategory.PAIN),
            ],
        )

        report = build_report([visit], TimeRange.THREE_MONTHS, date(2024, 4, 1))

        assert [(s.name, s.count, s.average_severity) for s in report.top_symptoms] == [
            ("Headache", 1, 6.0)
        ]
        assert [(s.category, s.count) for s in report.symptom_categories] == [
            ("Neurological", 1)
        ]
        assert report.summary.avg_severity == 6.0
        assert report.summary.avg_symptoms_per_visit == 1.0

    def test_symptom_category_average(self, make_visit):
        visits = [
            make_visit(date(2024, 1, 1), symptoms=[("Back pain", 4, SymptomCategory.PAIN)]),
            make_visit(date(2024, 1, 2), symptoms=[("Knee pain", 7, SymptomCategory.PAIN)]),
            make_visit(date(2024, 1, 3), symptoms=[("Rash", 2, SymptomCategory.SKIN)]),
        ]

        stats = symptoms_by_category(visits)

        assert [(s.category, s.count, s.average_severity) for s in stats] == [
            ("Pain", 2, 5.5),
            ("Skin", 1, 2.0),
        ]

    def test_top_symptoms_truncated_and_sorted(self, make_visit):
        names = [f"S{i}" for i in range(12)]
        visits = [
            make_visit(date(2024, 1, 1), symptoms=[(n, 5, SymptomCategory.GENERAL) for n in names]),
            make_visit(date(2024, 1, 2), symptoms=[
                ("S11", 3, SymptomCategory.GENERAL),
                ("S5", 1, SymptomCategory.GENERAL),
            ]),
        ]

        stats = top_symptoms(visits)

        assert len(stats) == 10
        assert [s.name for s in stats] == ["S5", "S11", "S0", "S1", "S2", "S3", "S4", "S6", "S7", "S8"]
        assert stats[0].average_severity == 3.0
        assert stats[1].average_severity == 4.0

    def test_mean_severity_rounding(self, make_visit):
        visits = [
            make_visit(date(2024, 1, d), symptoms=[("Nausea", s, SymptomCategory.DIGESTIVE)])
            for d, s in ((1, 1), (2, 1), (3, 2))
        ]

        assert top_symptoms(visits)[0].average_severity == 1.3


class TestBuildReport:
    """Test cases for the full report."""

    def test_reference_example(self, sample_visits):
        report = build_report(sample_visits, TimeRange.THREE_MONTHS, date(2024, 4, 1))

        assert report.cutoff_date == date(2024, 1, 1)
        assert len(report.filtered_visits) == 3
        assert [(c.name, c.value) for c in report.category_distribution] == [
            ("Checkup", 2), ("Flu/Cold", 1),
        ]
        assert report.summary.total_visits == 3
        assert report.summary.most_common_category == "Checkup"
        assert report.summary.avg_symptoms_per_visit == 0.7
        assert report.summary.avg_severity == 5.5
        assert report.insights.visit_patterns == (
            "You had an average of 1.0 visits per month in the selected period."
        )
        assert report.insights.common_health_issues == (
            'Your most common health issue was "Checkup" with 2 occurrences.'
        )
        assert report.insights.symptom_analysis == (
            'Your most frequently reported symptom was "Cough" with an average severity of 4.0/10.'
        )

    def test_monthly_average_uses_populated_months(self, make_visit):
        visits = [
            make_visit(date(2024, 3, 2), id="a"),
            make_visit(date(2024, 3, 9), id="b"),
            make_visit(date(2024, 4, 3), id="c"),
        ]

        report = build_report(visits, TimeRange.TWO_YEARS, date(2024, 4, 20))

        assert len(report.monthly_series) == 2
        assert report.insights.visit_patterns == (
            "You had an average of 1.5 visits per month in the selected period."
        )

    def test_empty_visits(self):
        report = build_report([], TimeRange.SIX_MONTHS, date(2024, 4, 1))

        assert report.filtered_visits == []
        assert report.monthly_series == []
        assert report.category_distribution == []
        assert report.symptom_categories == []
        assert report.top_symptoms == []
        assert report.summary.total_visits == 0
        assert report.summary.avg_symptoms_per_visit == 0.0
        assert report.summary.avg_severity == 0.0
        assert report.summary.most_common_category is None
        assert report.insights.visit_patterns == NO_VISIT_PATTERN_DATA
        assert report.insights.common_health_issues == NO_HEALTH_ISSUE_DATA
        assert report.insights.symptom_analysis == NO_SYMPTOM_DATA

    def test_visits_outside_window_only(self, sample_visits):
        report = build_report(sample_visits, TimeRange.THREE_MONTHS, date(2025, 1, 1))

        assert report.summary.total_visits == 0
        assert report.insights.visit_patterns == NO_VISIT_PATTERN_DATA

    def test_visits_without_symptoms(self, make_visit):
        report = build_report([make_visit(date(2024, 3, 1))], 3, date(2024, 4, 1))

        assert report.top_symptoms == []
        assert report.summary.avg_severity == 0.0
        assert report.insights.symptom_analysis == NO_SYMPTOM_DATA

    def test_invalid_time_range(self, sample_visits):
        with pytest.raises(ValueError):
            build_report(sample_visits, 5, date(2024, 4, 1))

    def test_does_not_mutate_input(self, sample_visits):
        before = [v.model_dump() for v in sample_visits]

        build_report(sample_visits, TimeRange.TWELVE_MONTHS, date(2024, 4, 1))

        assert [v.model_dump() for v in sample_visits] == before


class TestReportInvariants:
    """Invariants over generated visit histories."""

    @pytest.fixture
    def generated_visits(self, make_visit):
        rng = random.Random(20240401)
        categories = list(VisitCategory)
        symptom_categories = list(SymptomCategory)
        names = ["Headache", "Cough", "Fever", "Rash", "Nausea", "Fatigue",
                 "Dizziness", "Back pain", "Sore throat", "Insomnia", "Chills", "Cramps", ""]
        visits = []
        for i in range(300):
            visits.append(make_visit(
                date(2024, 6, 30) - timedelta(days=rng.randint(0, 2000)),
                rng.choice(categories),
                symptoms=[
                    (rng.choice(names), rng.randint(1, 10), rng.choice(symptom_categories))
                    for _ in range(rng.randint(0, 4))
                ],
                id=f"g{i}",
            ))
        return visits

    @pytest.mark.parametrize("time_range", list(TimeRange))
    def test_invariants(self, generated_visits, time_range):
        today = date(2024, 6, 30)
        report = build_report(generated_visits, time_range, today)
        filtered_count = len(report.filtered_visits)

        assert sum(c.value for c in report.category_distribution) == filtered_count
        assert sum(m.visits for m in report.monthly_series) == filtered_count
        assert all(v.visit_date >= report.cutoff_date for v in report.filtered_visits)
        assert report.cutoff_date == subtract_months(today, time_range.value)

        months = [m.month for m in report.monthly_series]
        for previous, current in zip(months, months[1:]):
            assert (current.year * 12 + current.month) - (previous.year * 12 + previous.month) == 1

        assert len(report.top_symptoms) <= 10
        counts = [s.count for s in report.top_symptoms]
        assert counts == sorted(counts, reverse=True)
        assert all(s.name.strip() for s in report.top_symptoms)

    def test_deterministic(self, generated_visits):
        first = build_report(generated_visits, TimeRange.FIVE_YEARS, date(2024, 6, 30))
        second = build_report(generated_visits, TimeRange.FIVE_YEARS, date(2024, 6, 30))

        assert first == second
