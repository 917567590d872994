"""Visit and symptom models."""

from datetime import date, datetime, timezone
from uuid import uuid4
from sqlalchemy import String, Integer, Text, Date, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from common.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VisitRecord(Base):
    """A recorded medical visit owned by one user."""

    __tablename__ = "visits"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)  # insertion order
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, default=lambda: uuid4().hex)
    user_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    visit_date: Mapped[date] = mapped_column(Date, nullable=False)
    doctor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(50), nullable=False)  # VisitCategory value
    follow_up_date: Mapped[date | None] = mapped_column(Date)
    medications: Mapped[list] = mapped_column(JSON, default=list)
    test_results: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    symptoms: Mapped[list["SymptomRecord"]] = relationship(
        back_populates="visit",
        cascade="all, delete-orphan",
        order_by="SymptomRecord.position",
        lazy="selectin",
    )


class SymptomRecord(Base):
    """A symptom reported during a visit."""

    __tablename__ = "symptoms"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    visit_id: Mapped[str] = mapped_column(ForeignKey("visits.id", ondelete="CASCADE"), nullable=False)
    symptom_id: Mapped[str] = mapped_column(String(36), nullable=False)  # unique within the visit
    position: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    severity: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)  # SymptomCategory value

    visit: Mapped[VisitRecord] = relationship(back_populates="symptoms")
