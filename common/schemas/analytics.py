"""Analytics and dashboard schemas."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from enum import Enum

from .visit import Visit


class TimeRange(int, Enum):
    """Lookback window in months."""
    THREE_MONTHS = 3
    SIX_MONTHS = 6
    TWELVE_MONTHS = 12
    TWO_YEARS = 24
    FIVE_YEARS = 60


class MonthlyCount(BaseModel):
    month: date = Field(description="First day of the calendar month")
    label: str = Field(description="Display label, e.g. 'Jan 2024'")
    visits: int = 0


class CategoryCount(BaseModel):
    name: str
    value: int


class SymptomCategoryStat(BaseModel):
    category: str
    count: int
    average_severity: float


class SymptomStat(BaseModel):
    name: str
    count: int
    average_severity: float


class SummaryStats(BaseModel):
    total_visits: int = 0
    avg_symptoms_per_visit: float = 0.0
    avg_severity: float = 0.0
    most_common_category: Optional[str] = None


class Insights(BaseModel):
    """Narrative sentences derived from the report."""
    visit_patterns: str
    common_health_issues: str
    symptom_analysis: str
    disclaimer: str = (
        "These insights are based on your self-reported data "
        "and should not replace professional medical advice."
    )


class AnalyticsReport(BaseModel):
    """Derived statistics for one user over a time range."""
    months: int
    today: date
    cutoff_date: date
    filtered_visits: list[Visit] = Field(default_factory=list)
    monthly_series: list[MonthlyCount] = Field(default_factory=list)
    category_distribution: list[CategoryCount] = Field(default_factory=list)
    symptom_categories: list[SymptomCategoryStat] = Field(default_factory=list)
    top_symptoms: list[SymptomStat] = Field(default_factory=list)
    summary: SummaryStats = Field(default_factory=SummaryStats)
    insights: Insights


class UpcomingFollowUp(BaseModel):
    visit: Visit
    follow_up_date: date
    is_soon: bool = Field(description="Due within the next seven days")


class DashboardSummary(BaseModel):
    total_visits: int = 0
    visits_this_month: int = 0
    top_categories: list[CategoryCount] = Field(default_factory=list)
    recent_visits: list[Visit] = Field(default_factory=list)
    upcoming_follow_ups: list[UpcomingFollowUp] = Field(default_factory=list)
