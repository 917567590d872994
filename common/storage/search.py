"""Visit history search."""

from typing import Iterable, List, Optional

from common.schemas.visit import Visit, VisitCategory


def search_visits(
    visits: Iterable[Visit],
    term: str = "",
    category: Optional[VisitCategory] = None,
) -> List[Visit]:
    """Filter visits for the history view.

    Args:
        visits: One user's visits
        term: Case-insensitive substring matched against doctor name,
            reason and diagnosis; empty matches everything
        category: Exact category to keep, or None for all

    Returns:
        Matching visits, most recent visit date first
    """
    needle = term.strip().lower()

    def matches(visit: Visit) -> bool:
        if category is not None and visit.category != category:
            return False
        if not needle:
            return True
        return (
            needle in visit.doctor_name.lower()
            or needle in visit.reason.lower()
            or needle in visit.diagnosis.lower()
        )

    return sorted(
        (visit for visit in visits if matches(visit)),
        key=lambda v: v.visit_date,
        reverse=True,
    )


def distinct_categories(visits: Iterable[Visit]) -> List[str]:
    """Categories the user has recorded, in first-seen order."""
    seen = dict.fromkeys(visit.category.value for visit in visits)
    return list(seen)
