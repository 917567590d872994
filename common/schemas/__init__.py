from .visit import (
    VisitCategory,
    SymptomCategory,
    Symptom,
    VisitCreate,
    VisitUpdate,
    Visit,
)
from .analytics import (
    TimeRange,
    MonthlyCount,
    CategoryCount,
    SymptomCategoryStat,
    SymptomStat,
    SummaryStats,
    Insights,
    AnalyticsReport,
    UpcomingFollowUp,
    DashboardSummary,
)

__all__ = [
    "VisitCategory",
    "SymptomCategory",
    "Symptom",
    "VisitCreate",
    "VisitUpdate",
    "Visit",
    "TimeRange",
    "MonthlyCount",
    "CategoryCount",
    "SymptomCategoryStat",
    "SymptomStat",
    "SummaryStats",
    "Insights",
    "AnalyticsReport",
    "UpcomingFollowUp",
    "DashboardSummary",
]
