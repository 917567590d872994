"""Visit storage backends."""

from .base import VisitStore, StoreError
from .memory import InMemoryVisitStore
from .database import DatabaseVisitStore
from .search import search_visits, distinct_categories

__all__ = [
    "VisitStore",
    "StoreError",
    "InMemoryVisitStore",
    "DatabaseVisitStore",
    "search_visits",
    "distinct_categories",
]
