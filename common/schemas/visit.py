"""Visit and symptom schemas."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from uuid import uuid4
from enum import Enum


class VisitCategory(str, Enum):
    CHECKUP = "Checkup"
    FLU_COLD = "Flu/Cold"
    CHRONIC_CONDITION = "Chronic Condition"
    SPECIALIST_CONSULTATION = "Specialist Consultation"
    EMERGENCY = "Emergency"
    FOLLOW_UP = "Follow-up"
    VACCINATION = "Vaccination"
    OTHER = "Other"


class SymptomCategory(str, Enum):
    PAIN = "Pain"
    RESPIRATORY = "Respiratory"
    DIGESTIVE = "Digestive"
    NEUROLOGICAL = "Neurological"
    SKIN = "Skin"
    CARDIOVASCULAR = "Cardiovascular"
    GENERAL = "General"


def new_id() -> str:
    return uuid4().hex


class Symptom(BaseModel):
    """Single symptom attached to a visit.

    An empty name marks an unfilled placeholder row.
    """
    id: str = Field(default_factory=new_id, description="Unique within the owning visit")
    name: str = Field(default="", max_length=200)
    severity: int = Field(default=5, ge=1, le=10, description="Severity 1-10")
    category: SymptomCategory = SymptomCategory.GENERAL

    @property
    def is_placeholder(self) -> bool:
        return not self.name.strip()


class VisitBase(BaseModel):
    """Fields shared by stored visits and visit payloads."""
    doctor_name: str = Field(..., max_length=200)
    visit_date: date
    reason: str
    diagnosis: str = ""
    notes: str = ""
    category: VisitCategory = VisitCategory.CHECKUP
    follow_up_date: Optional[date] = None
    medications: list[str] = Field(default_factory=list)
    test_results: list[str] = Field(default_factory=list)
    symptoms: list[Symptom] = Field(default_factory=list)


class VisitInput(BaseModel):
    """Submission rules applied to create and update payloads."""

    @field_validator("doctor_name", "reason", check_fields=False)
    @classmethod
    def require_text(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("medications", "test_results", mode="before", check_fields=False)
    @classmethod
    def drop_blank_entries(cls, v):
        if isinstance(v, list):
            return [item for item in v if not (isinstance(item, str) and not item.strip())]
        return v

    @field_validator("symptoms", check_fields=False)
    @classmethod
    def drop_placeholder_symptoms(cls, v):
        if v is None:
            return v
        named = [symptom for symptom in v if not symptom.is_placeholder]
        if not named:
            raise ValueError("At least one symptom must be provided")
        ids = [symptom.id for symptom in named]
        if len(set(ids)) != len(ids):
            raise ValueError("Symptom ids must be unique within a visit")
        return named


class VisitCreate(VisitInput, VisitBase):
    """Visit submission payload."""

    @field_validator("medications", "test_results", mode="before")
    @classmethod
    def missing_list_as_empty(cls, v):
        return [] if v is None else v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "doctor_name": "Dr. Smith",
                    "visit_date": "2024-03-05",
                    "reason": "Annual physical",
                    "diagnosis": "Healthy",
                    "category": "Checkup",
                    "follow_up_date": "2025-03-05",
                    "medications": ["Vitamin D"],
                    "symptoms": [
                        {"name": "Fatigue", "severity": 3, "category": "General"}
                    ]
                }
            ]
        }
    }


class VisitUpdate(VisitInput):
    """Partial visit update. Only fields present in the payload are changed."""
    doctor_name: Optional[str] = Field(None, max_length=200)
    visit_date: Optional[date] = None
    reason: Optional[str] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[VisitCategory] = None
    follow_up_date: Optional[date] = None
    medications: Optional[list[str]] = None
    test_results: Optional[list[str]] = None
    symptoms: Optional[list[Symptom]] = None

    def changes(self) -> dict:
        """Fields explicitly provided, as attribute values.

        ``follow_up_date`` may be cleared with an explicit null; other
        nulls are ignored.
        """
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name == "follow_up_date"
        }


class Visit(VisitBase):
    """Stored visit."""
    id: str
    user_id: str
    created_at: datetime

    class Config:
        from_attributes = True
