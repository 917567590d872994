from .visit import VisitRecord, SymptomRecord

__all__ = [
    "VisitRecord",
    "SymptomRecord",
]
