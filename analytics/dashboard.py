"""Home-screen overview of a user's visits."""

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional

from common.schemas.analytics import CategoryCount, DashboardSummary, UpcomingFollowUp
from common.schemas.visit import Visit

RECENT_VISIT_LIMIT = 3
FOLLOW_UP_LIMIT = 3
TOP_CATEGORY_LIMIT = 3
SOON_WINDOW = timedelta(days=7)


def build_dashboard(visits: Iterable[Visit], today: Optional[date] = None) -> DashboardSummary:
    """Summarize one user's visits.

    Follow-ups are upcoming when dated strictly after ``today`` and
    flagged soon when due within the next seven days.
    """
    today = today or date.today()
    visits = list(visits)
    by_date = sorted(visits, key=lambda v: v.visit_date, reverse=True)

    upcoming = sorted(
        (v for v in by_date if v.follow_up_date and v.follow_up_date > today),
        key=lambda v: v.follow_up_date,
    )[:FOLLOW_UP_LIMIT]

    month_start = today.replace(day=1)
    categories = Counter(v.category.value for v in visits)

    return DashboardSummary(
        total_visits=len(by_date),
        visits_this_month=sum(1 for v in by_date if v.visit_date >= month_start),
        top_categories=[
            CategoryCount(name=name, value=value)
            for name, value in categories.most_common(TOP_CATEGORY_LIMIT)
        ],
        recent_visits=by_date[:RECENT_VISIT_LIMIT],
        upcoming_follow_ups=[
            UpcomingFollowUp(
                visit=v,
                follow_up_date=v.follow_up_date,
                is_soon=v.follow_up_date <= today + SOON_WINDOW,
            )
            for v in upcoming
        ],
    )
