"""Pytest configuration and fixtures."""

import pytest
from datetime import date, datetime, timezone
from typing import Callable

from common.schemas.visit import Symptom, SymptomCategory, Visit, VisitCategory


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


def _make_visit(
    visit_date: date,
    category: VisitCategory = VisitCategory.CHECKUP,
    symptoms=(),
    **overrides,
) -> Visit:
    fields = {
        "id": f"visit-{visit_date.isoformat()}-{category.name.lower()}",
        "user_id": "user-1",
        "doctor_name": "Dr. Smith",
        "reason": "Routine",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return Visit(
        visit_date=visit_date,
        category=category,
        symptoms=[
            Symptom(name=name, severity=severity, category=symptom_category)
            for name, severity, symptom_category in symptoms
        ],
        **fields,
    )


@pytest.fixture
def make_visit() -> Callable[..., Visit]:
    """Factory for stored visits.

    Symptoms are given as ``(name, severity, SymptomCategory)`` tuples.
    """
    return _make_visit


@pytest.fixture
def sample_visits(make_visit):
    """Three visits across January and March 2024."""
    return [
        make_visit(date(2024, 1, 10), VisitCategory.CHECKUP, id="v1"),
        make_visit(date(2024, 3, 5), VisitCategory.CHECKUP, id="v2"),
        make_visit(
            date(2024, 3, 20),
            VisitCategory.FLU_COLD,
            symptoms=[
                ("Cough", 4, SymptomCategory.RESPIRATORY),
                ("Fever", 7, SymptomCategory.GENERAL),
            ],
            id="v3",
        ),
    ]


@pytest.fixture
def visit_payload():
    """Visit submission body as sent by a client."""
    return {
        "doctor_name": "Dr. Jones",
        "visit_date": date.today().isoformat(),
        "reason": "Persistent headache",
        "diagnosis": "Tension headache",
        "category": "Specialist Consultation",
        "medications": ["Ibuprofen", ""],
        "test_results": ["  "],
        "symptoms": [
            {"name": "Headache", "severity": 6, "category": "Neurological"},
            {"name": "", "severity": 9, "category": "Pain"},
        ],
    }
