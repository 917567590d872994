"""Visit store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from common.schemas.visit import Visit, VisitCreate, VisitUpdate


class StoreError(Exception):
    """Raised when the backing store fails to read or write."""


class VisitStore(ABC):
    """Ordered collection of visits, keyed by visit id.

    Every read returns a snapshot: callers may freely mutate what they
    get back without affecting stored state.
    """

    @abstractmethod
    async def add(self, user_id: str, data: VisitCreate) -> Visit:
        """Store a new visit.

        Args:
            user_id: Owning user identifier
            data: Validated submission payload

        Returns:
            The stored visit with its id and creation timestamp
        """

    @abstractmethod
    async def get(self, visit_id: str) -> Optional[Visit]:
        """Get a visit by id, or None if it does not exist."""

    @abstractmethod
    async def update(self, visit_id: str, changes: VisitUpdate) -> Optional[Visit]:
        """Apply a partial update.

        Args:
            visit_id: Visit to update
            changes: Fields to replace

        Returns:
            The updated visit or None if not found
        """

    @abstractmethod
    async def delete(self, visit_id: str) -> bool:
        """Delete a visit and its symptoms. Returns False if not found."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[Visit]:
        """All visits owned by a user, in insertion order."""

    async def close(self) -> None:
        """Release backend resources."""
