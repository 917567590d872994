"""SQLAlchemy-backed visit store."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from common.database import Base, create_engine, create_session_factory
from common.models.visit import VisitRecord, SymptomRecord
from common.schemas.visit import Symptom, Visit, VisitCreate, VisitUpdate, new_id
from .base import StoreError, VisitStore

logger = logging.getLogger(__name__)


def _symptom_records(symptoms: List[Symptom]) -> List[SymptomRecord]:
    return [
        SymptomRecord(
            symptom_id=symptom.id,
            position=position,
            name=symptom.name,
            severity=symptom.severity,
            category=symptom.category.value,
        )
        for position, symptom in enumerate(symptoms)
    ]


async def _load(session: AsyncSession, visit_id: str) -> Optional[VisitRecord]:
    result = await session.execute(select(VisitRecord).where(VisitRecord.id == visit_id))
    return result.scalar_one_or_none()


def _to_visit(record: VisitRecord) -> Visit:
    created_at = record.created_at
    if created_at.tzinfo is None:
        # SQLite drops the offset; values are stored in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)

    return Visit(
        id=record.id,
        user_id=record.user_id,
        visit_date=record.visit_date,
        doctor_name=record.doctor_name,
        reason=record.reason,
        diagnosis=record.diagnosis or "",
        notes=record.notes or "",
        category=record.category,
        follow_up_date=record.follow_up_date,
        medications=list(record.medications or []),
        test_results=list(record.test_results or []),
        symptoms=[
            Symptom(id=s.symptom_id, name=s.name, severity=s.severity, category=s.category)
            for s in record.symptoms
        ],
        created_at=created_at,
    )


class DatabaseVisitStore(VisitStore):
    """Visit store persisted through an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine):
        """Initialize the store.

        Args:
            engine: Async engine; the store disposes it on close
        """
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "DatabaseVisitStore":
        return cls(create_engine(database_url, echo=echo))

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error while trying to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    async def create_tables(self) -> None:
        """Create the visit tables if they do not exist."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError("Failed to create visit tables") from e

    async def add(self, user_id: str, data: VisitCreate) -> Visit:
        record = VisitRecord(
            id=new_id(),
            user_id=user_id,
            visit_date=data.visit_date,
            doctor_name=data.doctor_name,
            reason=data.reason,
            diagnosis=data.diagnosis,
            notes=data.notes,
            category=data.category.value,
            follow_up_date=data.follow_up_date,
            medications=list(data.medications),
            test_results=list(data.test_results),
            created_at=datetime.now(timezone.utc),
            symptoms=_symptom_records(data.symptoms),
        )
        async with self._session("save visit") as session:
            session.add(record)
            await session.commit()

        logger.debug(f"Added visit {record.id} for user {user_id}")
        return _to_visit(record)

    async def get(self, visit_id: str) -> Optional[Visit]:
        async with self._session("load visit") as session:
            record = await _load(session, visit_id)
            return _to_visit(record) if record else None

    async def update(self, visit_id: str, changes: VisitUpdate) -> Optional[Visit]:
        async with self._session("update visit") as session:
            record = await _load(session, visit_id)
            if record is None:
                return None

            for field_name, value in changes.changes().items():
                if field_name == "symptoms":
                    record.symptoms = _symptom_records(value)
                elif field_name == "category":
                    record.category = value.value
                elif field_name in ("medications", "test_results"):
                    setattr(record, field_name, list(value))
                else:
                    setattr(record, field_name, value)

            await session.commit()
            logger.debug(f"Updated visit {visit_id}")
            return _to_visit(record)

    async def delete(self, visit_id: str) -> bool:
        async with self._session("delete visit") as session:
            record = await _load(session, visit_id)
            if record is None:
                return False

            await session.delete(record)
            await session.commit()

        logger.debug(f"Deleted visit {visit_id}")
        return True

    async def list_for_user(self, user_id: str) -> List[Visit]:
        async with self._session("list visits") as session:
            result = await session.execute(
                select(VisitRecord)
                .where(VisitRecord.user_id == user_id)
                .order_by(VisitRecord.pk)
            )
            return [_to_visit(record) for record in result.scalars().all()]

    async def close(self) -> None:
        await self.engine.dispose()
