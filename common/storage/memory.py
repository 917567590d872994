"""In-memory visit store."""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from common.schemas.visit import Visit, VisitCreate, VisitUpdate, new_id
from .base import VisitStore

logger = logging.getLogger(__name__)


class InMemoryVisitStore(VisitStore):
    """Visit store kept in process memory (demo mode).

    Contents are lost when the process exits.
    """

    def __init__(self):
        self._visits: Dict[str, Visit] = {}

    async def add(self, user_id: str, data: VisitCreate) -> Visit:
        visit = Visit(
            id=new_id(),
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        self._visits[visit.id] = visit
        logger.debug(f"Added visit {visit.id} for user {user_id}")
        return visit.model_copy(deep=True)

    async def get(self, visit_id: str) -> Optional[Visit]:
        visit = self._visits.get(visit_id)
        return visit.model_copy(deep=True) if visit else None

    async def update(self, visit_id: str, changes: VisitUpdate) -> Optional[Visit]:
        visit = self._visits.get(visit_id)
        if visit is None:
            return None

        updated = visit.model_copy(update=changes.changes(), deep=True)
        self._visits[visit_id] = updated
        logger.debug(f"Updated visit {visit_id}: {sorted(changes.changes())}")
        return updated.model_copy(deep=True)

    async def delete(self, visit_id: str) -> bool:
        if self._visits.pop(visit_id, None) is None:
            return False
        logger.debug(f"Deleted visit {visit_id}")
        return True

    async def list_for_user(self, user_id: str) -> List[Visit]:
        return [
            visit.model_copy(deep=True)
            for visit in self._visits.values()
            if visit.user_id == user_id
        ]
