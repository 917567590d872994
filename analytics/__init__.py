"""Visit analytics.

Derives statistics, chart series and narrative insights from a user's
recorded medical visits.
"""

from .aggregator import build_report, filter_visits, round_one, subtract_months
from .dashboard import build_dashboard

__all__ = [
    "build_report",
    "filter_visits",
    "round_one",
    "subtract_months",
    "build_dashboard",
]
