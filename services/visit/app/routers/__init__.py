from . import analytics, visits

__all__ = ["analytics", "visits"]
