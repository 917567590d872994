"""Visit records router."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from app.dependencies import CurrentUser, Store
from common.schemas.visit import Visit, VisitCategory, VisitCreate, VisitUpdate
from common.storage import VisitStore, distinct_categories, search_visits

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/visits", tags=["Visits"])


async def _get_owned_visit(store: VisitStore, visit_id: str, user_id: str) -> Visit:
    """Load a visit, hiding visits owned by other users."""
    visit = await store.get(visit_id)
    if visit is None or visit.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Visit not found",
        )
    return visit


@router.post("", response_model=Visit, status_code=status.HTTP_201_CREATED)
async def create_visit(data: VisitCreate, user_id: CurrentUser, store: Store):
    """Record a new visit."""
    visit = await store.add(user_id, data)
    logger.info(f"Visit {visit.id} recorded for user {user_id}")
    return visit


@router.get("", response_model=List[Visit])
async def list_visits(
    user_id: CurrentUser,
    store: Store,
    search: str = Query("", max_length=200, description="Doctor, reason or diagnosis"),
    category: Optional[VisitCategory] = Query(None, description="Only this category"),
):
    """Visit history, most recent first."""
    visits = await store.list_for_user(user_id)
    return search_visits(visits, search, category)


@router.get("/categories", response_model=List[str])
async def list_categories(user_id: CurrentUser, store: Store):
    """Categories the user has recorded visits under."""
    return distinct_categories(await store.list_for_user(user_id))


@router.get("/{visit_id}", response_model=Visit)
async def get_visit(visit_id: str, user_id: CurrentUser, store: Store):
    return await _get_owned_visit(store, visit_id, user_id)


@router.patch("/{visit_id}", response_model=Visit)
async def update_visit(visit_id: str, changes: VisitUpdate, user_id: CurrentUser, store: Store):
    """Replace the provided fields of a visit."""
    await _get_owned_visit(store, visit_id, user_id)
    visit = await store.update(visit_id, changes)
    if visit is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Visit not found",
        )
    return visit


@router.delete("/{visit_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_visit(visit_id: str, user_id: CurrentUser, store: Store):
    await _get_owned_visit(store, visit_id, user_id)
    await store.delete(visit_id)
    logger.info(f"Visit {visit_id} deleted by user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
